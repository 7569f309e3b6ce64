"""Record source abstraction.

Factory function to get the appropriate source for the configured mode.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chatadmin.core.config import ConsoleConfig

    from .base import RecordSource


def get_record_source(cfg: ConsoleConfig) -> RecordSource:
    """Return the record source for ``cfg.mode``."""
    from chatadmin.core.config import LocalConfig, RemoteConfig

    if cfg.mode == "local":
        from .fixtures import FixtureRecordSource

        if not isinstance(cfg, LocalConfig):
            raise TypeError(f"fixture source requires LocalConfig, got {type(cfg)}")
        return FixtureRecordSource(cfg.fixtures_dir)
    if cfg.mode == "remote":
        from .remote import RemoteRecordSource

        if not isinstance(cfg, RemoteConfig):
            raise TypeError(f"remote source requires RemoteConfig, got {type(cfg)}")
        return RemoteRecordSource(cfg)
    raise ValueError(f"Unsupported record source: {cfg.mode!r}")
