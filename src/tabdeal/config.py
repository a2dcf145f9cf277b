"""Load client settings from a YAML file and ``TABDEAL_*`` environment variables.

File lookup: the ``config_path`` argument, then ``TABDEAL_CONFIG``, then
``tabdeal.yml`` in the working directory. A missing file means defaults.

Environment overrides use ``__`` to step into nested sections and win over
the file::

    TABDEAL_ENV=prod
    TABDEAL_BASE_URL=https://api1.tabdeal.org
    TABDEAL_VERSION=v1
    TABDEAL_TIMEOUT=5
    TABDEAL_CREDENTIALS__API_KEY=...
    TABDEAL_CREDENTIALS__API_SECRET=...
    TABDEAL_PROXY__ENABLED=true
    TABDEAL_PROXY__URL=http://127.0.0.1:8080
    TABDEAL_PROXY__USERNAME=...
    TABDEAL_PROXY__PASSWORD=...

``TABDEAL_LOG_LEVEL`` is read by :mod:`tabdeal.logging`, not here.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .settings import Settings

ENV_PREFIX = "TABDEAL_"
DEFAULT_CONFIG_FILE = "tabdeal.yml"

# Variables under the prefix that are not settings keys
_RESERVED = frozenset({"CONFIG", "LOG_LEVEL"})


def _env_path(name: str, prefix: str) -> list[str]:
    return [part.lower() for part in name[len(prefix):].split("__") if part]


def _parse_env_value(raw: str) -> Any:
    """Turn an environment string into a settings value.

    Only YAML mappings and lists are expanded. Scalars stay as the raw text
    and pydantic coerces them to the field type, so secrets such as ``yes``,
    ``null`` or ``0123`` are never reinterpreted.
    """
    try:
        value = yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw
    if isinstance(value, (dict, list)):
        return value
    return raw


def _merge_into(data: dict[str, Any], path: list[str], value: Any) -> None:
    section = data
    for key in path[:-1]:
        child = section.get(key)
        if not isinstance(child, dict):
            child = section[key] = {}
        section = child
    section[path[-1]] = value


def _apply_env_overrides(data: dict[str, Any], *, prefix: str = ENV_PREFIX) -> dict[str, Any]:
    merged = dict(data)
    for name, raw in os.environ.items():
        if not name.startswith(prefix) or name[len(prefix):] in _RESERVED:
            continue
        path = _env_path(name, prefix)
        if path:
            _merge_into(merged, path, _parse_env_value(raw))
    return merged


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config root must be a mapping, got: {type(loaded)!r}")
    return loaded


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Read, merge and validate settings.

    Raises:
        ValueError: If the file root is not a mapping or validation fails
    """
    if config_path is None:
        config_path = os.environ.get(f"{ENV_PREFIX}CONFIG", DEFAULT_CONFIG_FILE)

    data = _apply_env_overrides(_read_config_file(Path(config_path)))

    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc
