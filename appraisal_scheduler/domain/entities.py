"""Value objects exchanged between the engine services.

Everything here is a plain dataclass over calendar dates (no time-of-day).
Working state that changes while a cycle is being configured lives in
``engine.builder``; the objects below are what it collapses into.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Tuple

from appraisal_scheduler.errors import INVALID_TIMING, ValidationError


MAX_DAYS = 365
MAX_REMINDERS = 10

REASON_EXPLICIT = "explicit"
REASON_TENURE = "tenure"
REASON_DOJ_RANGE = "doj_range"


@dataclass(frozen=True)
class CalendarPeriod:
    """One dated interval ("detail") of a frequency calendar, e.g. a quarter."""

    id: str
    display_name: str
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise ValueError(
                f"Period {self.id} starts after it ends: {self.start_date} > {self.end_date}"
            )


@dataclass(frozen=True)
class TimingConfig:
    """
    Initiation timing for one period, or the global fallback when ``period_id`` is None.

    Attributes:
        period_id: Calendar period id, None for the global fallback
        days_to_initiate: Days after the period end before the evaluation opens
        days_to_close: Days the evaluation stays open
        number_of_reminders: Reminders sent while open (1-10)
    """

    period_id: Optional[str] = None
    days_to_initiate: int = 0
    days_to_close: int = 30
    number_of_reminders: int = 3

    def __post_init__(self):
        for name in ("days_to_initiate", "days_to_close", "number_of_reminders"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(INVALID_TIMING, f"{name} must be a whole number, got {value!r}")
        if not 0 <= self.days_to_initiate <= MAX_DAYS:
            raise ValidationError(
                INVALID_TIMING, f"days_to_initiate must be within 0..{MAX_DAYS}, got {self.days_to_initiate}"
            )
        if not 1 <= self.days_to_close <= MAX_DAYS:
            raise ValidationError(
                INVALID_TIMING, f"days_to_close must be within 1..{MAX_DAYS}, got {self.days_to_close}"
            )
        if not 1 <= self.number_of_reminders <= MAX_REMINDERS:
            raise ValidationError(
                INVALID_TIMING,
                f"number_of_reminders must be within 1..{MAX_REMINDERS}, got {self.number_of_reminders}",
            )


@dataclass(frozen=True)
class EligibilityRule:
    exclude_tenure_less_than_one_year: bool = False
    doj_from_date: Optional[date] = None
    doj_till_date: Optional[date] = None
    explicit_excluded_ids: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class EmployeeRecord:
    """A group member as seen by the engine."""

    id: str
    date_of_joining: Optional[date] = None
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    status: str = "active"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class PublishPolicy(str, Enum):
    IMMEDIATE = "now"
    PER_CALENDAR_SCHEDULE = "as_per_calendar"


# Appraisal types: one class per variant, each knows its own code.

@dataclass(frozen=True)
class QuestionnaireBased:
    template_ids: FrozenSet[str] = frozenset()
    code = "questionnaire_based"

    @property
    def content_reference(self) -> Tuple[str, ...]:
        return tuple(sorted(self.template_ids))


@dataclass(frozen=True)
class KpiBased:
    document: Optional[str] = None
    code = "kpi_based"

    @property
    def content_reference(self) -> Optional[str]:
        return self.document


@dataclass(frozen=True)
class MboBased:
    document: Optional[str] = None
    code = "mbo_based"

    @property
    def content_reference(self) -> Optional[str]:
        return self.document


@dataclass(frozen=True)
class OkrBased:
    code = "okr_based"

    @property
    def content_reference(self) -> None:
        return None


APPRAISAL_TYPES = {cls.code: cls for cls in (QuestionnaireBased, KpiBased, MboBased, OkrBased)}


def appraisal_type_from_code(code: str, template_ids=(), document: str | None = None):
    """Build the appraisal type variant for ``code`` (e.g. ``"kpi_based"``)."""
    cls = APPRAISAL_TYPES.get(code)
    if cls is None:
        raise ValueError(f"Unknown appraisal type: {code}")
    if cls is QuestionnaireBased:
        return QuestionnaireBased(template_ids=frozenset(template_ids or ()))
    if cls in (KpiBased, MboBased):
        return cls(document=document or None)
    return OkrBased()


def _freeze_mapping(value) -> Mapping:
    return MappingProxyType(dict(value or {}))


@dataclass(frozen=True)
class AppraisalInitiationRequest:
    """
    Everything needed to initiate one appraisal cycle for a group.

    ``timing_configs`` is keyed by period id. With no period selected it holds
    a single entry under the key ``None`` (the global fallback).
    """

    group_id: str
    appraisal_type: object
    publish_policy: PublishPolicy = PublishPolicy.IMMEDIATE
    eligibility_rule: EligibilityRule = field(default_factory=EligibilityRule)
    calendar_id: Optional[str] = None
    selected_period_ids: Tuple[str, ...] = ()
    timing_configs: Mapping[Optional[str], TimingConfig] = field(default_factory=dict)
    accept_global_fallback: bool = False
    make_public: bool = False

    def __post_init__(self):
        object.__setattr__(self, "selected_period_ids", tuple(self.selected_period_ids))
        object.__setattr__(self, "timing_configs", _freeze_mapping(self.timing_configs))
        object.__setattr__(self, "publish_policy", PublishPolicy(self.publish_policy))

    @property
    def uses_global_fallback(self) -> bool:
        return not self.selected_period_ids


@dataclass(frozen=True)
class ScheduleEntry:
    period_id: Optional[str]
    initiate_date: date
    close_date: date
    reminder_dates: Tuple[date, ...]

    def to_dict(self) -> dict:
        return {
            "period_id": self.period_id,
            "initiate_date": self.initiate_date.isoformat(),
            "close_date": self.close_date.isoformat(),
            "reminder_dates": [d.isoformat() for d in self.reminder_dates],
        }


@dataclass(frozen=True)
class EligibilityResult:
    included: FrozenSet[str]
    excluded: Mapping[str, str]

    def __post_init__(self):
        object.__setattr__(self, "included", frozenset(self.included))
        object.__setattr__(self, "excluded", _freeze_mapping(self.excluded))


@dataclass(frozen=True)
class FinalizedSubmission:
    """The validated, immutable output handed to persistence and dispatch."""

    appraisal_type: str
    content_reference: object
    group_id: str
    schedule: Tuple[ScheduleEntry, ...]
    eligible_employee_ids: FrozenSet[str]
    excluded_employees: Mapping[str, str]
    publish_policy: PublishPolicy
    submission_date: date
    calendar_id: Optional[str] = None
    make_public: bool = False

    def __post_init__(self):
        object.__setattr__(self, "schedule", tuple(self.schedule))
        object.__setattr__(self, "eligible_employee_ids", frozenset(self.eligible_employee_ids))
        object.__setattr__(self, "excluded_employees", _freeze_mapping(self.excluded_employees))

    def to_dict(self) -> dict:
        content = self.content_reference
        if isinstance(content, tuple):
            content = list(content)
        return {
            "appraisal_type": self.appraisal_type,
            "content_reference": content,
            "group_id": self.group_id,
            "calendar_id": self.calendar_id,
            "publish_policy": self.publish_policy.value,
            "make_public": self.make_public,
            "submission_date": self.submission_date.isoformat(),
            "schedule": [entry.to_dict() for entry in self.schedule],
            "eligible_employee_ids": sorted(self.eligible_employee_ids),
            "excluded_employees": dict(sorted(self.excluded_employees.items())),
        }
