"""Per-period timing configuration that follows the period selection."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from appraisal_scheduler.domain.entities import TimingConfig
from appraisal_scheduler.errors import INCOMPLETE_TIMING, ValidationError


class TimingResolver:
    """
    Holds ``period_id -> TimingConfig`` for the selected periods.

    ``apply_selection`` patches the map rather than rebuilding it: new ids get
    the defaults, retained ids keep their values and deselected ids leave the
    map. A deselected entry is kept aside so that selecting the id again brings
    its edits back.
    """

    def __init__(self, default: TimingConfig | None = None):
        default = default or TimingConfig()
        self._default = replace(default, period_id=None)
        self._timings: Dict[str, TimingConfig] = {}
        self._shelved: Dict[str, TimingConfig] = {}
        self._order: List[str] = []
        self._global = self._default

    @classmethod
    def from_config(cls, cfg) -> "TimingResolver":
        t = cfg.default_timing
        return cls(TimingConfig(None, t.days_to_initiate, t.days_to_close, t.number_of_reminders))

    @property
    def selected_ids(self) -> List[str]:
        return list(self._order)

    @property
    def timings(self) -> Dict[str, TimingConfig]:
        return dict(self._timings)

    def apply_selection(self, new_selected_ids: Iterable[str]) -> Dict[str, TimingConfig]:
        """Patch the timing map to match ``new_selected_ids``. Returns the new map."""
        order = list(dict.fromkeys(new_selected_ids))
        wanted = set(order)
        current = set(self._timings)

        for period_id in current - wanted:
            self._shelved[period_id] = self._timings.pop(period_id)

        for period_id in wanted - current:
            restored = self._shelved.pop(period_id, None)
            self._timings[period_id] = restored or replace(self._default, period_id=period_id)

        self._order = order
        return self.timings

    def get(self, period_id: str) -> TimingConfig:
        try:
            return self._timings[period_id]
        except KeyError:
            raise ValidationError(INCOMPLETE_TIMING, f"Period {period_id} is not selected") from None

    def update(self, period_id: str, **changes) -> TimingConfig:
        """Edit the timing of one selected period (validated on construction)."""
        changes.pop("period_id", None)
        updated = replace(self.get(period_id), **changes)
        self._timings[period_id] = updated
        return updated

    def resolve_global(self) -> TimingConfig:
        """The fallback timing used only when no calendar period is selected."""
        return self._global

    def set_global(self, **changes) -> TimingConfig:
        changes.pop("period_id", None)
        self._global = replace(self._global, **changes)
        return self._global

    def reset(self) -> None:
        """Forget every period entry (used when switching calendars)."""
        self._timings.clear()
        self._shelved.clear()
        self._order = []

    def snapshot(self) -> Dict[Optional[str], TimingConfig]:
        """Timing map for a request: the selected periods, or ``{None: global}``."""
        if not self._order:
            return {None: self._global}
        return {period_id: self._timings[period_id] for period_id in self._order}
