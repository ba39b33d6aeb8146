"""Engine configuration (YAML or JSON)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict

import pytz
import yaml

from appraisal_scheduler.domain.entities import MAX_DAYS, MAX_REMINDERS


@dataclass
class DefaultTiming:
    days_to_initiate: int = 0
    days_to_close: int = 30
    number_of_reminders: int = 3


@dataclass
class EngineConfig:
    """Settings shared by the services, the orchestrator and the CLI."""

    timezone: str = "UTC"
    db_url: str = "sqlite:///appraisal.db"
    default_timing: DefaultTiming = field(default_factory=DefaultTiming)

    @property
    def tz(self):
        return pytz.timezone(self.timezone)


def _read_raw(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a mapping: {path}")
    return data


def _check_keys(section: str, data: Dict[str, Any], allowed: set) -> None:
    unknown = set(data) - allowed
    if unknown:
        raise ValueError(f"Unknown keys in {section}: {sorted(unknown)}")


def config_from_dict(data: Dict[str, Any]) -> EngineConfig:
    """Build an EngineConfig from a plain mapping, validating every key."""
    _check_keys("config", data, {f.name for f in fields(EngineConfig)})

    timing_data = dict(data.get("default_timing") or {})
    _check_keys("default_timing", timing_data, {f.name for f in fields(DefaultTiming)})
    timing = DefaultTiming(**{k: int(v) for k, v in timing_data.items()})

    cfg = EngineConfig(
        timezone=str(data.get("timezone", "UTC")),
        db_url=str(data.get("db_url", "sqlite:///appraisal.db")),
        default_timing=timing,
    )

    if cfg.timezone not in pytz.all_timezones_set:
        raise ValueError(f"Unknown timezone: {cfg.timezone}")
    if not 0 <= timing.days_to_initiate <= MAX_DAYS:
        raise ValueError(f"default_timing.days_to_initiate must be within 0..{MAX_DAYS}")
    if not 1 <= timing.days_to_close <= MAX_DAYS:
        raise ValueError(f"default_timing.days_to_close must be within 1..{MAX_DAYS}")
    if not 1 <= timing.number_of_reminders <= MAX_REMINDERS:
        raise ValueError(f"default_timing.number_of_reminders must be within 1..{MAX_REMINDERS}")
    return cfg


def load_config(path: str | Path | None = None) -> EngineConfig:
    """
    Load configuration from a YAML or JSON file.

    Args:
        path: Config file path. ``None`` returns the built-in defaults.

    Returns:
        EngineConfig
    """
    if path is None:
        return EngineConfig()
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    return config_from_dict(_read_raw(path))
