"""Configuration helpers for the list distributor."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml

from .ingestion.loaders import DEFAULT_MAX_UPLOAD_BYTES
from .models import Agent

LOGGER = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Raised when configuration files are missing or malformed."""


_SUPPORTED_EXTENSIONS = {".json", ".yaml", ".yml"}


def load_configuration(path: str | Path) -> Dict[str, Any]:
    """Load configuration data from a JSON or YAML file."""

    file_path = Path(path)
    if not file_path.exists():
        raise ConfigurationError(f"Configuration file '{file_path}' was not found")

    if file_path.suffix.lower() not in _SUPPORTED_EXTENSIONS:
        raise ConfigurationError(
            f"Unsupported configuration format '{file_path.suffix}'. Supported extensions: {sorted(_SUPPORTED_EXTENSIONS)}"
        )

    text = file_path.read_text(encoding="utf-8")
    try:
        if file_path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Configuration file '{file_path}' is malformed: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file '{file_path}' must contain a mapping")
    return data


@dataclass
class DistributorSettings:
    """Typed view of the options read from a configuration file."""

    agents: List[Agent] = field(default_factory=list)
    store_path: Optional[Path] = None
    max_upload_bytes: Optional[int] = DEFAULT_MAX_UPLOAD_BYTES

    @classmethod
    def from_mapping(cls, config: Dict[str, Any], *, base_dir: str | Path | None = None) -> "DistributorSettings":
        base = Path(base_dir) if base_dir is not None else Path.cwd()

        entries: Iterable[Any] = config.get("agents") or []
        roster_file = config.get("roster_file")
        if roster_file:
            roster_path = _resolve(base, roster_file)
            roster_config = load_configuration(roster_path)
            entries = list(entries) + list(roster_config.get("agents") or [])
            LOGGER.debug("Loaded roster entries from %s", roster_path)

        store_path = config.get("store_path")
        max_upload_bytes = config.get("max_upload_bytes", DEFAULT_MAX_UPLOAD_BYTES)
        if max_upload_bytes is not None:
            try:
                max_upload_bytes = int(max_upload_bytes)
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(f"Invalid max_upload_bytes value {max_upload_bytes!r}") from exc

        return cls(
            agents=[_parse_agent(entry) for entry in entries],
            store_path=_resolve(base, store_path) if store_path else None,
            max_upload_bytes=max_upload_bytes,
        )


def load_settings(path: str | Path) -> DistributorSettings:
    """Load :class:`DistributorSettings`, resolving paths against the file's directory."""

    file_path = Path(path)
    return DistributorSettings.from_mapping(load_configuration(file_path), base_dir=file_path.parent)


def _resolve(base: Path, value: str | Path) -> Path:
    candidate = Path(value).expanduser()
    return candidate if candidate.is_absolute() else base / candidate


def _parse_agent(entry: Any) -> Agent:
    if not isinstance(entry, dict):
        raise ConfigurationError(f"Agent entries must be mappings, got {entry!r}")
    agent_id = entry.get("id")
    name = entry.get("name")
    if agent_id is None or not str(agent_id).strip():
        raise ConfigurationError(f"Agent entry missing required 'id' field: {entry!r}")
    if not name or not str(name).strip():
        raise ConfigurationError(f"Agent '{agent_id}' is missing a name")
    is_active = _parse_flag(entry.get("is_active", entry.get("isActive", True)), agent_id)
    return Agent(id=str(agent_id).strip(), name=str(name).strip(), is_active=is_active)


_TRUE_STRINGS = {"true", "yes", "1"}
_FALSE_STRINGS = {"false", "no", "0"}


def _parse_flag(value: Any, agent_id: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ConfigurationError(f"Agent '{agent_id}' has an invalid is_active value {value!r}")
