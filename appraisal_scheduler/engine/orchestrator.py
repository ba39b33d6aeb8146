"""Orchestrator - validates an initiation request and turns it into a finalized submission."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Sequence

from sqlalchemy.orm import Session

from appraisal_scheduler.config import EngineConfig
from appraisal_scheduler.dates import local_today
from appraisal_scheduler.domain.entities import (
    AppraisalInitiationRequest,
    CalendarPeriod,
    EligibilityResult,
    EmployeeRecord,
    FinalizedSubmission,
    PublishPolicy,
    QuestionnaireBased,
)
from appraisal_scheduler.domain.models import (
    Employee,
    InitiatedAppraisal,
    InitiatedAppraisalTiming,
    ScheduledAppraisalTask,
)
from appraisal_scheduler.domain.repositories import (
    AppraisalGroupRepository,
    InitiatedAppraisalRepository,
    TemplateRepository,
)
from appraisal_scheduler.errors import (
    INCOMPLETE_TIMING,
    MISSING_PERIOD_SELECTION,
    NO_ELIGIBLE_EMPLOYEES,
    UNKNOWN_PERIOD,
    NotFoundError,
    ValidationError,
)
from appraisal_scheduler.services.catalog import CalendarPeriodCatalog
from appraisal_scheduler.services.content import check_content
from appraisal_scheduler.services.eligibility import EligibilityFilter
from appraisal_scheduler.services.schedule import ScheduleComputer


class AppraisalCycleOrchestrator:
    """
    Single entry point that validates a request and finalizes it.

    Validation fails fast on the first problem, in this order: content,
    period selection, timing map, eligible employees. Nothing is built
    until every check has passed, and nothing is written anywhere.
    """

    def __init__(
        self,
        eligibility: EligibilityFilter | None = None,
        computer: ScheduleComputer | None = None,
    ):
        self.eligibility = eligibility or EligibilityFilter()
        self.computer = computer or ScheduleComputer()

    def validate(
        self,
        request: AppraisalInitiationRequest,
        periods: Sequence[CalendarPeriod],
        employees: Sequence[EmployeeRecord],
        today: date,
    ) -> EligibilityResult:
        """
        Validate ``request`` against the calendar's periods and the group population.

        Args:
            request: The initiation request
            periods: All periods of the request's calendar (empty without a calendar)
            employees: Active members of the request's group
            today: Reference date for tenure checks

        Returns:
            The eligibility result the submission will carry

        Raises:
            ValidationError: On the first violated check
        """
        check_content(request.appraisal_type)

        selected = request.selected_period_ids
        if request.uses_global_fallback:
            if not request.accept_global_fallback:
                raise ValidationError(
                    MISSING_PERIOD_SELECTION,
                    "Select at least one calendar period or accept the global timing",
                )
        else:
            known = {p.id for p in periods}
            unknown = [pid for pid in selected if pid not in known]
            if request.calendar_id is None or unknown:
                raise ValidationError(
                    UNKNOWN_PERIOD,
                    f"Periods not in calendar {request.calendar_id}: {unknown or list(selected)}",
                )

        expected_keys = set(selected) if selected else {None}
        actual_keys = set(request.timing_configs)
        if actual_keys != expected_keys:
            missing = sorted(str(k) for k in expected_keys - actual_keys)
            orphaned = sorted(str(k) for k in actual_keys - expected_keys)
            raise ValidationError(
                INCOMPLETE_TIMING,
                f"Timing map does not match selection (missing: {missing}, orphaned: {orphaned})",
            )
        for key, timing in request.timing_configs.items():
            if timing.period_id != key:
                raise ValidationError(
                    INCOMPLETE_TIMING, f"Timing stored under {key} belongs to {timing.period_id}"
                )

        result = self.eligibility.evaluate(employees, request.eligibility_rule, today)
        if not result.included:
            raise ValidationError(NO_ELIGIBLE_EMPLOYEES, "No employees remain after exclusions")
        return result

    def finalize(
        self,
        request: AppraisalInitiationRequest,
        periods: Sequence[CalendarPeriod],
        employees: Sequence[EmployeeRecord],
        submission_date: date,
    ) -> FinalizedSubmission:
        """Validate, then build the immutable submission."""
        eligibility = self.validate(request, periods, employees, submission_date)

        selected_ids = set(request.selected_period_ids)
        selected_periods = [p for p in periods if p.id in selected_ids]
        schedule = self.computer.compute(
            selected_periods, request.timing_configs, request.publish_policy, submission_date
        )

        return FinalizedSubmission(
            appraisal_type=request.appraisal_type.code,
            content_reference=request.appraisal_type.content_reference,
            group_id=request.group_id,
            schedule=schedule,
            eligible_employee_ids=eligibility.included,
            excluded_employees=eligibility.excluded,
            publish_policy=request.publish_policy,
            submission_date=submission_date,
            calendar_id=request.calendar_id,
            make_public=request.make_public,
        )


def employee_record(employee: Employee) -> EmployeeRecord:
    return EmployeeRecord(
        id=str(employee.id),
        date_of_joining=employee.date_of_joining,
        first_name=employee.first_name,
        last_name=employee.last_name,
        email=employee.email or "",
        status=employee.status,
    )


def load_population(session: Session, group_id: str) -> List[EmployeeRecord]:
    """Active members of a group as engine records."""
    if AppraisalGroupRepository.get_by_id(session, group_id) is None:
        raise NotFoundError(f"Appraisal group {group_id} not found")
    return [employee_record(e) for e in AppraisalGroupRepository.get_members(session, group_id)]


def _check_templates_exist(session: Session, request: AppraisalInitiationRequest) -> None:
    appraisal_type = request.appraisal_type
    if not isinstance(appraisal_type, QuestionnaireBased):
        return
    found = {t.id for t in TemplateRepository.get_by_ids(session, appraisal_type.template_ids)}
    missing = sorted(set(appraisal_type.template_ids) - found)
    if missing:
        raise NotFoundError(f"Questionnaire templates not found: {missing}")


def persist_submission(
    session: Session,
    submission: FinalizedSubmission,
    request: AppraisalInitiationRequest,
) -> InitiatedAppraisal:
    """Store a finalized submission with its timings and, when deferred, its scheduled tasks."""
    appraisal_type = request.appraisal_type
    template_ids = getattr(appraisal_type, "template_ids", frozenset())
    deferred = submission.publish_policy == PublishPolicy.PER_CALENDAR_SCHEDULE

    appraisal = InitiatedAppraisal(
        appraisal_group_id=submission.group_id,
        appraisal_type=submission.appraisal_type,
        questionnaire_template_ids=";".join(sorted(template_ids)) or None,
        document_url=getattr(appraisal_type, "document", None),
        frequency_calendar_id=submission.calendar_id,
        exclude_tenure_less_than_year=request.eligibility_rule.exclude_tenure_less_than_one_year,
        excluded_employee_ids=";".join(sorted(submission.excluded_employees)) or None,
        publish_type=submission.publish_policy.value,
        make_public=submission.make_public,
        status="draft" if deferred else "active",
        submission_date=submission.submission_date,
    )

    timings = []
    tasks = []
    for entry in submission.schedule:
        timing = request.timing_configs[entry.period_id]
        timings.append(
            InitiatedAppraisalTiming(
                frequency_calendar_detail_id=entry.period_id,
                days_to_initiate=timing.days_to_initiate,
                days_to_close=timing.days_to_close,
                number_of_reminders=timing.number_of_reminders,
                initiate_date=entry.initiate_date,
                close_date=entry.close_date,
                reminder_dates=";".join(d.isoformat() for d in entry.reminder_dates),
            )
        )
        if deferred:
            tasks.append(
                ScheduledAppraisalTask(
                    frequency_calendar_detail_id=entry.period_id,
                    scheduled_date=entry.initiate_date,
                    status="pending",
                )
            )

    return InitiatedAppraisalRepository.create(session, appraisal, timings, tasks)


def initiate_appraisal(
    session: Session,
    request: AppraisalInitiationRequest,
    cfg: EngineConfig,
    persist: bool = True,
    submitted_at: datetime | None = None,
) -> FinalizedSubmission:
    """
    Convenience function to finalize (and optionally store) an initiation request.

    Args:
        session: Database session
        request: Initiation request built by the caller
        cfg: EngineConfig (timezone for the submission date)
        persist: If True, save the submission to the database
        submitted_at: Submission instant (defaults to now)

    Returns:
        The finalized submission
    """
    print(f"[INFO] Initiating {request.appraisal_type.code} appraisal for group {request.group_id}")

    periods: List[CalendarPeriod] = []
    if request.calendar_id is not None:
        periods = CalendarPeriodCatalog(session).get_periods(request.calendar_id)
    employees = load_population(session, request.group_id)
    submission_date = local_today(cfg.tz, submitted_at)

    submission = AppraisalCycleOrchestrator().finalize(request, periods, employees, submission_date)
    _check_templates_exist(session, request)
    print(
        f"[OK] {len(submission.eligible_employee_ids)} eligible, "
        f"{len(submission.excluded_employees)} excluded, {len(submission.schedule)} schedule entries"
    )

    if persist:
        appraisal = persist_submission(session, submission, request)
        print(f"[INFO] Persisted initiated appraisal {appraisal.id} (status={appraisal.status})")
        if appraisal.tasks:
            print(f"[INFO] Created {len(appraisal.tasks)} scheduled tasks")

    return submission
