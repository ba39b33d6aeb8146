"""SQLAlchemy models for the appraisal scheduling store."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class FrequencyCalendar(Base):
    """A recurring calendar (e.g. "FY25 quarterly") made of dated periods."""

    __tablename__ = "frequency_calendars"

    id = Column(String(36), primary_key=True, default=_new_id)
    code = Column(String(50), nullable=False, unique=True)
    description = Column(Text, nullable=False, default="")
    status = Column(String(20), nullable=False, default="active")

    details = relationship(
        "FrequencyCalendarDetail",
        back_populates="calendar",
        order_by="FrequencyCalendarDetail.start_date",
    )

    def __repr__(self) -> str:
        return f"<FrequencyCalendar(id={self.id}, code='{self.code}')>"


class FrequencyCalendarDetail(Base):
    """One period of a frequency calendar."""

    __tablename__ = "frequency_calendar_details"
    __table_args__ = (
        CheckConstraint("start_date <= end_date", name="frequency_calendar_details_date_check"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    frequency_calendar_id = Column(String(36), ForeignKey("frequency_calendars.id"), nullable=False)
    display_name = Column(String(100), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default="active")

    calendar = relationship("FrequencyCalendar", back_populates="details")

    def __repr__(self) -> str:
        return f"<FrequencyCalendarDetail(id={self.id}, name='{self.display_name}', {self.start_date}..{self.end_date})>"


class Employee(Base):
    """Employee record (only the fields the engine reads)."""

    __tablename__ = "employees"

    id = Column(String(36), primary_key=True, default=_new_id)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(200), nullable=False, default="")
    date_of_joining = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default="active")  # active, inactive

    memberships = relationship("AppraisalGroupMember", back_populates="employee")

    def __repr__(self) -> str:
        return f"<Employee(id={self.id}, name='{self.first_name} {self.last_name}', doj={self.date_of_joining})>"


class AppraisalGroup(Base):
    __tablename__ = "appraisal_groups"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="active")

    members = relationship("AppraisalGroupMember", back_populates="group")

    def __repr__(self) -> str:
        return f"<AppraisalGroup(id={self.id}, name='{self.name}')>"


class AppraisalGroupMember(Base):
    __tablename__ = "appraisal_group_members"
    __table_args__ = (
        UniqueConstraint("appraisal_group_id", "employee_id", name="appraisal_group_members_unique"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    appraisal_group_id = Column(String(36), ForeignKey("appraisal_groups.id"), nullable=False)
    employee_id = Column(String(36), ForeignKey("employees.id"), nullable=False)

    group = relationship("AppraisalGroup", back_populates="members")
    employee = relationship("Employee", back_populates="memberships")


class QuestionnaireTemplate(Base):
    __tablename__ = "questionnaire_templates"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(200), nullable=False)
    status = Column(String(20), nullable=False, default="active")

    def __repr__(self) -> str:
        return f"<QuestionnaireTemplate(id={self.id}, name='{self.name}')>"


class InitiatedAppraisal(Base):
    """A finalized appraisal cycle submission."""

    __tablename__ = "initiated_appraisals"

    id = Column(String(36), primary_key=True, default=_new_id)
    appraisal_group_id = Column(String(36), ForeignKey("appraisal_groups.id"), nullable=False)
    appraisal_type = Column(String(30), nullable=False)
    questionnaire_template_ids = Column(Text, nullable=True)  # Semicolon-separated
    document_url = Column(String(500), nullable=True)
    frequency_calendar_id = Column(String(36), ForeignKey("frequency_calendars.id"), nullable=True)
    exclude_tenure_less_than_year = Column(Boolean, nullable=False, default=False)
    excluded_employee_ids = Column(Text, nullable=True)  # Semicolon-separated
    publish_type = Column(String(20), nullable=False, default="now")  # now, as_per_calendar
    make_public = Column(Boolean, nullable=False, default=False)
    status = Column(String(20), nullable=False, default="draft")  # draft, active
    submission_date = Column(Date, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    timings = relationship("InitiatedAppraisalTiming", back_populates="appraisal")
    tasks = relationship("ScheduledAppraisalTask", back_populates="appraisal")

    def __repr__(self) -> str:
        return f"<InitiatedAppraisal(id={self.id}, group={self.appraisal_group_id}, type='{self.appraisal_type}', status='{self.status}')>"


class InitiatedAppraisalTiming(Base):
    """Timing and computed dates of one schedule entry of an initiated appraisal."""

    __tablename__ = "initiated_appraisal_timings"
    __table_args__ = (
        UniqueConstraint("initiated_appraisal_id", "frequency_calendar_detail_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    initiated_appraisal_id = Column(String(36), ForeignKey("initiated_appraisals.id"), nullable=False)
    frequency_calendar_detail_id = Column(String(36), ForeignKey("frequency_calendar_details.id"), nullable=True)
    days_to_initiate = Column(Integer, nullable=False, default=0)
    days_to_close = Column(Integer, nullable=False, default=30)
    number_of_reminders = Column(Integer, nullable=False, default=3)
    initiate_date = Column(Date, nullable=False)
    close_date = Column(Date, nullable=False)
    reminder_dates = Column(Text, nullable=False, default="")  # Semicolon-separated ISO dates

    appraisal = relationship("InitiatedAppraisal", back_populates="timings")


class ScheduledAppraisalTask(Base):
    """Deferred initiation of one period, picked up by an external trigger."""

    __tablename__ = "scheduled_appraisal_tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    initiated_appraisal_id = Column(String(36), ForeignKey("initiated_appraisals.id"), nullable=False)
    frequency_calendar_detail_id = Column(String(36), ForeignKey("frequency_calendar_details.id"), nullable=True)
    scheduled_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default="pending")  # pending, completed, failed
    executed_at = Column(DateTime, nullable=True)
    error = Column(Text, nullable=True)

    appraisal = relationship("InitiatedAppraisal", back_populates="tasks")

    def __repr__(self) -> str:
        return f"<ScheduledAppraisalTask(id={self.id}, appraisal={self.initiated_appraisal_id}, date={self.scheduled_date}, status='{self.status}')>"
