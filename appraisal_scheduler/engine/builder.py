"""Mutable working state for configuring one appraisal cycle."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional

from appraisal_scheduler.config import EngineConfig
from appraisal_scheduler.dates import optional_calendar_date
from appraisal_scheduler.domain.entities import (
    AppraisalInitiationRequest,
    CalendarPeriod,
    EligibilityRule,
    KpiBased,
    MboBased,
    OkrBased,
    PublishPolicy,
    QuestionnaireBased,
    TimingConfig,
)
from appraisal_scheduler.errors import (
    UNKNOWN_PERIOD,
    ExternalFetchError,
    NotFoundError,
    ValidationError,
)
from appraisal_scheduler.services.timing import TimingResolver


@dataclass(frozen=True)
class PeriodFetch:
    """Ticket for a period fetch started by a calendar selection."""

    calendar_id: str


class AppraisalCycleBuilder:
    """
    In-progress initiation request owned by one caller.

    Holds the calendar selection, the loaded periods, the timing map and the
    exclusion rule while they are being edited. ``build()`` collapses them
    into an immutable AppraisalInitiationRequest.

    Period fetches may complete out of order. A result is only applied if it
    was started for the calendar that is selected when it arrives.
    """

    def __init__(self, group_id: str, cfg: EngineConfig | None = None):
        self.group_id = group_id
        self.cfg = cfg or EngineConfig()
        self.appraisal_type = QuestionnaireBased()
        self.publish_policy = PublishPolicy.IMMEDIATE
        self.make_public = False
        self.accept_global_fallback = False
        self.rule = EligibilityRule()
        self.timing = TimingResolver.from_config(self.cfg)
        self.calendar_id: Optional[str] = None
        self.periods: List[CalendarPeriod] = []
        self.periods_loaded = False

    # Content

    def use_questionnaires(self, template_ids: Iterable[str]) -> None:
        self.appraisal_type = QuestionnaireBased(template_ids=frozenset(template_ids))

    def use_kpi_document(self, document: str | None) -> None:
        self.appraisal_type = KpiBased(document=document)

    def use_mbo_document(self, document: str | None) -> None:
        self.appraisal_type = MboBased(document=document)

    def use_okr(self) -> None:
        self.appraisal_type = OkrBased()

    # Calendar and periods

    def select_calendar(self, calendar_id: str | None) -> PeriodFetch | None:
        """
        Switch calendars. Clears the period selection and its timings.

        Returns a fetch ticket to hand to ``complete_fetch`` once the periods
        arrive, or None when the calendar is cleared.
        """
        self.calendar_id = calendar_id
        self.periods = []
        self.periods_loaded = False
        self.timing.reset()
        if calendar_id is None:
            return None
        return PeriodFetch(calendar_id=calendar_id)

    def is_current(self, fetch: PeriodFetch) -> bool:
        return fetch.calendar_id == self.calendar_id

    def complete_fetch(self, fetch: PeriodFetch, periods: Iterable[CalendarPeriod]) -> bool:
        """Apply fetched periods. Returns False (and changes nothing) for a stale fetch."""
        if not self.is_current(fetch):
            return False
        self.periods = sorted(periods, key=lambda p: (p.start_date, p.id))
        self.periods_loaded = True
        return True

    def load_periods(self, catalog, fetch: PeriodFetch | None = None) -> List[CalendarPeriod]:
        """
        Fetch the selected calendar's periods from ``catalog`` and apply them.

        Raises:
            NotFoundError: Unknown calendar id
            ExternalFetchError: Any other failure of the fetch
        """
        if fetch is None:
            if self.calendar_id is None:
                return []
            fetch = PeriodFetch(calendar_id=self.calendar_id)
        try:
            periods = catalog.get_periods(fetch.calendar_id)
        except Exception as e:
            if not self.is_current(fetch):
                return list(self.periods)
            if isinstance(e, (NotFoundError, ExternalFetchError)):
                raise
            raise ExternalFetchError(f"Failed to fetch periods for calendar {fetch.calendar_id}: {e}") from e
        self.complete_fetch(fetch, periods)
        return list(self.periods)

    def select_periods(self, period_ids: Iterable[str]) -> None:
        """Replace the period selection; timings of retained periods are kept."""
        ids = list(dict.fromkeys(period_ids))
        known = {p.id for p in self.periods}
        unknown = [pid for pid in ids if pid not in known]
        if unknown:
            raise ValidationError(UNKNOWN_PERIOD, f"Periods not in calendar {self.calendar_id}: {unknown}")
        wanted = set(ids)
        # Keep catalog order in the selection
        self.timing.apply_selection([p.id for p in self.periods if p.id in wanted])

    def toggle_period(self, period_id: str) -> bool:
        """Select or deselect one period. Returns True if it is now selected."""
        selected = self.timing.selected_ids
        if period_id in selected:
            selected.remove(period_id)
            now_selected = False
        else:
            selected.append(period_id)
            now_selected = True
        self.select_periods(selected)
        return now_selected

    @property
    def selected_period_ids(self) -> List[str]:
        return self.timing.selected_ids

    def update_timing(self, period_id: str, **changes) -> TimingConfig:
        return self.timing.update(period_id, **changes)

    def update_global_timing(self, **changes) -> TimingConfig:
        return self.timing.set_global(**changes)

    # Eligibility rule

    def exclude_tenure_less_than_one_year(self, enabled: bool = True) -> None:
        self.rule = replace(self.rule, exclude_tenure_less_than_one_year=bool(enabled))

    def set_doj_window(self, from_date=None, till_date=None) -> None:
        self.rule = replace(
            self.rule,
            doj_from_date=optional_calendar_date(from_date),
            doj_till_date=optional_calendar_date(till_date),
        )

    def exclude_employee(self, employee_id: str) -> None:
        self.rule = replace(self.rule, explicit_excluded_ids=self.rule.explicit_excluded_ids | {employee_id})

    def include_employee(self, employee_id: str) -> None:
        self.rule = replace(self.rule, explicit_excluded_ids=self.rule.explicit_excluded_ids - {employee_id})

    # Publishing

    def set_publish_policy(self, policy) -> None:
        self.publish_policy = PublishPolicy(policy)

    def build(self) -> AppraisalInitiationRequest:
        """Snapshot the working state into an immutable request."""
        return AppraisalInitiationRequest(
            group_id=self.group_id,
            appraisal_type=self.appraisal_type,
            publish_policy=self.publish_policy,
            eligibility_rule=self.rule,
            calendar_id=self.calendar_id,
            selected_period_ids=tuple(self.timing.selected_ids),
            timing_configs=self.timing.snapshot(),
            accept_global_fallback=self.accept_global_fallback,
            make_public=self.make_public,
        )
