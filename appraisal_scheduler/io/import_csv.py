"""CSV import utilities to load calendars, employees, groups and templates into the database."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
from sqlalchemy.orm import Session

from appraisal_scheduler.dates import optional_calendar_date, to_calendar_date
from appraisal_scheduler.domain.models import (
    AppraisalGroup,
    Employee,
    FrequencyCalendar,
    FrequencyCalendarDetail,
    QuestionnaireTemplate,
)
from appraisal_scheduler.domain.repositories import (
    AppraisalGroupRepository,
    CalendarRepository,
    EmployeeRepository,
    TemplateRepository,
)


def _read(csv_path: str | Path, required: set) -> pd.DataFrame:
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    df.columns = df.columns.str.lower().str.strip()
    missing = required - set(df.columns)
    if missing:
        raise ValueError(f"{csv_path} is missing columns: {sorted(missing)}")
    return df


def _text(row, column: str, default: str = "") -> str:
    value = row.get(column, default)
    return str(value).strip() if value is not None else default


def import_employees_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import employees from CSV into database.

    Columns: id, first_name, last_name, email, date_of_joining (optional), status (optional)

    Returns:
        Number of employees imported
    """
    df = _read(csv_path, {"id", "first_name", "last_name"})

    employees = []
    for _, row in df.iterrows():
        employees.append(
            Employee(
                id=_text(row, "id"),
                first_name=_text(row, "first_name"),
                last_name=_text(row, "last_name"),
                email=_text(row, "email"),
                date_of_joining=optional_calendar_date(_text(row, "date_of_joining")),
                status=(_text(row, "status") or "active").lower(),
            )
        )

    EmployeeRepository.bulk_create(session, employees)

    print(f"[INFO] Imported {len(employees)} employees from {csv_path}")
    return len(employees)


def import_calendar_csv(session: Session, csv_path: str | Path, code: str, description: str = "") -> str:
    """
    Import a frequency calendar and its periods.

    Columns: id (optional), display_name, start_date, end_date

    Returns:
        Id of the created calendar
    """
    df = _read(csv_path, {"display_name", "start_date", "end_date"})

    details = []
    for _, row in df.iterrows():
        detail = FrequencyCalendarDetail(
            display_name=_text(row, "display_name"),
            start_date=to_calendar_date(_text(row, "start_date")),
            end_date=to_calendar_date(_text(row, "end_date")),
        )
        if _text(row, "id"):
            detail.id = _text(row, "id")
        if detail.start_date > detail.end_date:
            raise ValueError(f"Period '{detail.display_name}' starts after it ends")
        details.append(detail)

    calendar = CalendarRepository.create(session, FrequencyCalendar(code=code, description=description), details)
    print(f"[INFO] Imported calendar {code} with {len(details)} periods from {csv_path}")
    return calendar.id


def import_group_csv(session: Session, csv_path: str | Path, name: str, group_id: str | None = None) -> str:
    """
    Create an appraisal group and add the employees listed in the CSV.

    Columns: employee_id

    Returns:
        Id of the created group
    """
    df = _read(csv_path, {"employee_id"})

    group = AppraisalGroup(name=name)
    if group_id:
        group.id = group_id
    employee_ids = list(dict.fromkeys(_text(r, "employee_id") for _, r in df.iterrows()))
    group = AppraisalGroupRepository.create(session, group, employee_ids)
    added = len(employee_ids)

    print(f"[INFO] Created group '{name}' with {added} members from {csv_path}")
    return group.id


def import_templates_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import questionnaire templates.

    Columns: id, name
    """
    df = _read(csv_path, {"id", "name"})
    templates = [QuestionnaireTemplate(id=_text(r, "id"), name=_text(r, "name")) for _, r in df.iterrows()]
    TemplateRepository.bulk_create(session, templates)

    print(f"[INFO] Imported {len(templates)} questionnaire templates from {csv_path}")
    return len(templates)
