"""Repository classes for data access."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from .models import (
    AppraisalGroup,
    AppraisalGroupMember,
    Employee,
    FrequencyCalendar,
    FrequencyCalendarDetail,
    InitiatedAppraisal,
    InitiatedAppraisalTiming,
    QuestionnaireTemplate,
    ScheduledAppraisalTask,
)

TASK_STATUSES = {"pending", "completed", "failed"}


class CalendarRepository:
    """Repository for frequency calendars and their periods."""

    @staticmethod
    def get_all(session: Session) -> List[FrequencyCalendar]:
        return session.query(FrequencyCalendar).order_by(FrequencyCalendar.code).all()

    @staticmethod
    def get_by_id(session: Session, calendar_id: str) -> Optional[FrequencyCalendar]:
        return session.query(FrequencyCalendar).filter(FrequencyCalendar.id == calendar_id).first()

    @staticmethod
    def get_by_code(session: Session, code: str) -> Optional[FrequencyCalendar]:
        return session.query(FrequencyCalendar).filter(FrequencyCalendar.code == code).first()

    @staticmethod
    def get_details(session: Session, calendar_id: str, active_only: bool = True) -> List[FrequencyCalendarDetail]:
        """Get the periods of a calendar ordered by start date."""
        query = session.query(FrequencyCalendarDetail).filter(
            FrequencyCalendarDetail.frequency_calendar_id == calendar_id
        )
        if active_only:
            query = query.filter(FrequencyCalendarDetail.status == "active")
        return query.order_by(FrequencyCalendarDetail.start_date, FrequencyCalendarDetail.id).all()

    @staticmethod
    def create(
        session: Session,
        calendar: FrequencyCalendar,
        details: List[FrequencyCalendarDetail],
    ) -> FrequencyCalendar:
        """Insert a calendar with its periods in one transaction."""
        try:
            session.add(calendar)
            session.flush()
            for detail in details:
                detail.frequency_calendar_id = calendar.id
            session.add_all(details)
            session.commit()
        except Exception:
            session.rollback()
            raise
        session.refresh(calendar)
        return calendar


class EmployeeRepository:
    """Repository for employee data access."""

    @staticmethod
    def get_by_id(session: Session, employee_id: str) -> Optional[Employee]:
        return session.query(Employee).filter(Employee.id == employee_id).first()

    @staticmethod
    def bulk_create(session: Session, employees: List[Employee]) -> None:
        session.add_all(employees)
        session.commit()


class AppraisalGroupRepository:
    """Repository for appraisal groups and their members."""

    @staticmethod
    def get_by_id(session: Session, group_id: str) -> Optional[AppraisalGroup]:
        return session.query(AppraisalGroup).filter(AppraisalGroup.id == group_id).first()

    @staticmethod
    def get_members(session: Session, group_id: str, active_only: bool = True) -> List[Employee]:
        """Get the employees in a group; inactive employees are skipped by default."""
        query = (
            session.query(Employee)
            .join(AppraisalGroupMember, AppraisalGroupMember.employee_id == Employee.id)
            .filter(AppraisalGroupMember.appraisal_group_id == group_id)
        )
        if active_only:
            query = query.filter(Employee.status == "active")
        return query.order_by(Employee.last_name, Employee.first_name, Employee.id).all()

    @staticmethod
    def create(session: Session, group: AppraisalGroup, employee_ids: Iterable[str] = ()) -> AppraisalGroup:
        """Insert a group with its members in one transaction (duplicate ids are ignored)."""
        try:
            session.add(group)
            session.flush()
            session.add_all(
                AppraisalGroupMember(appraisal_group_id=group.id, employee_id=emp_id)
                for emp_id in dict.fromkeys(employee_ids)
            )
            session.commit()
        except Exception:
            session.rollback()
            raise
        session.refresh(group)
        return group


class TemplateRepository:
    """Repository for questionnaire templates."""

    @staticmethod
    def get_by_ids(session: Session, template_ids: Iterable[str]) -> List[QuestionnaireTemplate]:
        ids = list(template_ids)
        if not ids:
            return []
        return session.query(QuestionnaireTemplate).filter(QuestionnaireTemplate.id.in_(ids)).all()

    @staticmethod
    def bulk_create(session: Session, templates: List[QuestionnaireTemplate]) -> None:
        session.add_all(templates)
        session.commit()


class InitiatedAppraisalRepository:
    """Repository for finalized appraisal submissions."""

    @staticmethod
    def get_by_id(session: Session, appraisal_id: str) -> Optional[InitiatedAppraisal]:
        return session.query(InitiatedAppraisal).filter(InitiatedAppraisal.id == appraisal_id).first()

    @staticmethod
    def get_by_group(session: Session, group_id: str) -> List[InitiatedAppraisal]:
        return (
            session.query(InitiatedAppraisal)
            .filter(InitiatedAppraisal.appraisal_group_id == group_id)
            .order_by(InitiatedAppraisal.created_at)
            .all()
        )

    @staticmethod
    def create(
        session: Session,
        appraisal: InitiatedAppraisal,
        timings: List[InitiatedAppraisalTiming],
        tasks: List[ScheduledAppraisalTask],
    ) -> InitiatedAppraisal:
        """Insert an appraisal with its timings and tasks in one transaction."""
        try:
            session.add(appraisal)
            session.flush()
            for row in timings:
                row.initiated_appraisal_id = appraisal.id
            for row in tasks:
                row.initiated_appraisal_id = appraisal.id
            session.add_all(timings)
            session.add_all(tasks)
            session.commit()
        except Exception:
            session.rollback()
            raise
        session.refresh(appraisal)
        return appraisal


class ScheduledTaskRepository:
    """Repository for deferred (calendar-driven) initiation tasks."""

    @staticmethod
    def get_by_appraisal(session: Session, appraisal_id: str) -> List[ScheduledAppraisalTask]:
        return (
            session.query(ScheduledAppraisalTask)
            .filter(ScheduledAppraisalTask.initiated_appraisal_id == appraisal_id)
            .order_by(ScheduledAppraisalTask.scheduled_date, ScheduledAppraisalTask.id)
            .all()
        )

    @staticmethod
    def get_due(session: Session, as_of: date) -> List[ScheduledAppraisalTask]:
        """Get pending tasks scheduled on or before ``as_of``."""
        return (
            session.query(ScheduledAppraisalTask)
            .filter(ScheduledAppraisalTask.status == "pending")
            .filter(ScheduledAppraisalTask.scheduled_date <= as_of)
            .order_by(ScheduledAppraisalTask.scheduled_date, ScheduledAppraisalTask.id)
            .all()
        )

    @staticmethod
    def update_status(
        session: Session,
        task: ScheduledAppraisalTask,
        status: str,
        error: str | None = None,
    ) -> ScheduledAppraisalTask:
        if status not in TASK_STATUSES:
            raise ValueError(f"Unknown task status: {status}")
        task.status = status
        task.error = error
        task.executed_at = datetime.utcnow() if status != "pending" else None
        session.commit()
        return task
