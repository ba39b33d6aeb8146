"""Domain value objects, SQLAlchemy models and data access layer."""

from .entities import (
    AppraisalInitiationRequest,
    CalendarPeriod,
    EligibilityResult,
    EligibilityRule,
    EmployeeRecord,
    FinalizedSubmission,
    KpiBased,
    MboBased,
    OkrBased,
    PublishPolicy,
    QuestionnaireBased,
    ScheduleEntry,
    TimingConfig,
)
from .models import (
    AppraisalGroup,
    AppraisalGroupMember,
    Base,
    Employee,
    FrequencyCalendar,
    FrequencyCalendarDetail,
    InitiatedAppraisal,
    InitiatedAppraisalTiming,
    QuestionnaireTemplate,
    ScheduledAppraisalTask,
)
from .repositories import (
    AppraisalGroupRepository,
    CalendarRepository,
    EmployeeRepository,
    InitiatedAppraisalRepository,
    ScheduledTaskRepository,
    TemplateRepository,
)

__all__ = [
    "AppraisalInitiationRequest",
    "CalendarPeriod",
    "EligibilityResult",
    "EligibilityRule",
    "EmployeeRecord",
    "FinalizedSubmission",
    "KpiBased",
    "MboBased",
    "OkrBased",
    "PublishPolicy",
    "QuestionnaireBased",
    "ScheduleEntry",
    "TimingConfig",
    "AppraisalGroup",
    "AppraisalGroupMember",
    "Base",
    "Employee",
    "FrequencyCalendar",
    "FrequencyCalendarDetail",
    "InitiatedAppraisal",
    "InitiatedAppraisalTiming",
    "QuestionnaireTemplate",
    "ScheduledAppraisalTask",
    "AppraisalGroupRepository",
    "CalendarRepository",
    "EmployeeRepository",
    "InitiatedAppraisalRepository",
    "ScheduledTaskRepository",
    "TemplateRepository",
]
