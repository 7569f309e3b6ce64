"""Centralized configuration for the admin console.

Configuration is resolved from two sources:

1. **YAML config**: loaded via Hydra from ``chatadmin/core/configs/``
2. **Environment variables**: used only for secrets and the config selector

The YAML profile is selected by ``CHATADMIN_CONFIG_NAME`` (default: ``"local"``).

Usage::

    from chatadmin.core.config import get_config

    cfg = get_config()  # LocalConfig or RemoteConfig depending on the profile
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

_CONFIG_DIR = str(Path(__file__).parent / "configs")

DEFAULT_PAGE_SIZE_OPTIONS = (10, 20, 30)

# ---------------------------------------------------------------------------
# YAML loading via Hydra Compose API
# ---------------------------------------------------------------------------

def _load_yaml_config(config_name: str) -> dict[str, object]:
    """Load a YAML config via Hydra Compose API.

    Returns an empty dict if the config file is missing or cannot be composed.
    """
    from hydra import compose, initialize_config_dir
    from hydra.errors import HydraException
    from omegaconf import OmegaConf

    abs_dir = os.path.abspath(_CONFIG_DIR)
    try:
        with initialize_config_dir(version_base=None, config_dir=abs_dir):
            cfg = compose(config_name=config_name)
    except HydraException:
        logger.debug("Failed to load YAML config %r, falling back to defaults", config_name)
        return {}
    container = OmegaConf.to_container(cfg, resolve=True)
    if isinstance(container, dict):
        return container  # type: ignore[return-value]
    return {}


# ---------------------------------------------------------------------------
# YAML value helpers
# ---------------------------------------------------------------------------

def _yaml_str(yaml: dict[str, object], key: str, default: str = "") -> str:
    val = yaml.get(key)
    return str(val) if val is not None else default


def _yaml_int(yaml: dict[str, object], key: str, default: int = 0) -> int:
    val = yaml.get(key)
    return int(str(val)) if val is not None else default


def _yaml_float(yaml: dict[str, object], key: str, default: float = 0.0) -> float:
    val = yaml.get(key)
    return float(str(val)) if val is not None else default


def _yaml_int_tuple(
    yaml: dict[str, object], key: str, default: tuple[int, ...] = (),
) -> tuple[int, ...]:
    val = yaml.get(key)
    if val is None:
        return default
    if isinstance(val, (list, tuple)):
        items = [str(item).strip() for item in val]
    else:
        items = [item.strip() for item in str(val).split(",")]
    return tuple(int(item) for item in items if item)


def _secret(name: str, default: str = "") -> str:
    """Read a secret from an environment variable."""
    raw = os.environ.get(name)
    return raw.strip() if raw is not None else default


# ---------------------------------------------------------------------------
# Config hierarchy
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConsoleConfig:
    """Base configuration shared by all record-source modes."""

    mode: str = ""
    default_page_size: int = 10
    page_size_options: tuple[int, ...] = field(default=DEFAULT_PAGE_SIZE_OPTIONS)
    max_page_size: int = 100


@dataclass(frozen=True)
class LocalConfig(ConsoleConfig):
    """Records are read from JSON fixture files on disk."""

    fixtures_dir: str = "./data/fixtures"


@dataclass(frozen=True)
class RemoteConfig(ConsoleConfig):
    """Records are fetched from the messaging product's admin API."""

    api_base_url: str = ""
    api_token: str = ""
    request_timeout_s: float = 30.0
    max_retries: int = 2


# ---------------------------------------------------------------------------
# Factory functions
# ---------------------------------------------------------------------------

def _build_base_fields(yaml: dict[str, object]) -> dict[str, object]:
    return {
        "default_page_size": _yaml_int(yaml, "default_page_size", 10),
        "page_size_options": _yaml_int_tuple(
            yaml, "page_size_options", DEFAULT_PAGE_SIZE_OPTIONS,
        ),
        "max_page_size": _yaml_int(yaml, "max_page_size", 100),
    }


def build_config(yaml: dict[str, object], config_name: str = "local") -> ConsoleConfig:
    """Build the typed config for already-loaded YAML values."""
    mode = _yaml_str(yaml, "mode", config_name)
    base = _build_base_fields(yaml)

    if mode == "local":
        return LocalConfig(
            mode=mode,
            **base,  # type: ignore[arg-type]
            fixtures_dir=_yaml_str(yaml, "fixtures_dir", "./data/fixtures"),
        )

    if mode == "remote":
        return RemoteConfig(
            mode=mode,
            **base,  # type: ignore[arg-type]
            api_base_url=_yaml_str(yaml, "api_base_url", "http://127.0.0.1:3000/api"),
            api_token=_secret("CHATADMIN_API_TOKEN"),
            request_timeout_s=_yaml_float(yaml, "request_timeout_s", 30.0),
            max_retries=_yaml_int(yaml, "max_retries", 2),
        )

    raise ValueError(f"Unsupported CHATADMIN_CONFIG_NAME: {mode!r}")


def load_core_config(config_name: str) -> ConsoleConfig:
    """Build the config for a named YAML profile (uncached)."""
    return build_config(_load_yaml_config(config_name), config_name)


@lru_cache(maxsize=1)
def get_config() -> ConsoleConfig:
    """Return the application config for the selected profile.

    The profile is determined by ``CHATADMIN_CONFIG_NAME`` (default:
    ``"local"``).  The result is cached; call ``get_config.cache_clear()``
    to re-read (useful in tests).
    """
    config_name = os.environ.get("CHATADMIN_CONFIG_NAME", "local").strip().lower()
    return load_core_config(config_name)
