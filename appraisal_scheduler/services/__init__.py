"""Services for appraisal scheduling logic."""

from .catalog import CalendarPeriodCatalog
from .content import check_content
from .eligibility import EligibilityFilter, exclusion_reason
from .schedule import ScheduleComputer, reminder_dates
from .timing import TimingResolver

__all__ = [
    "CalendarPeriodCatalog",
    "check_content",
    "EligibilityFilter",
    "exclusion_reason",
    "ScheduleComputer",
    "reminder_dates",
    "TimingResolver",
]
