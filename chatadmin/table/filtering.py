"""Global substring search across whole records."""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel


def record_text(record: Any) -> str:
    """Serialize a record to compact JSON text for searching.

    Records JSON cannot encode (non-string keys, for one) fall back to
    their ``str()`` form.
    """
    if isinstance(record, BaseModel):
        payload: Any = record.model_dump(mode="json")
    elif dataclasses.is_dataclass(record) and not isinstance(record, type):
        payload = dataclasses.asdict(record)
    elif not isinstance(record, Mapping) and hasattr(record, "__dict__"):
        payload = vars(record)
    else:
        payload = record
    try:
        return json.dumps(payload, default=str, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError):
        return str(payload)


def matches(record: Any, query: str) -> bool:
    """Return True when ``query`` appears anywhere in the serialized record.

    An empty or whitespace-only query matches every record.
    """
    if not query.strip():
        return True
    return query.lower() in record_text(record).lower()


def filter_records(records: Sequence[Any], query: str) -> Sequence[Any]:
    """Keep the records matching ``query``; returns the input when the query is blank."""
    if not query.strip():
        return records
    return [record for record in records if matches(record, query)]
