"""CSV export of finalized submissions."""

from __future__ import annotations

from pathlib import Path
from typing import Dict

import pandas as pd

from appraisal_scheduler.domain.entities import EmployeeRecord, FinalizedSubmission


def schedule_frame(submission: FinalizedSubmission) -> pd.DataFrame:
    """One row per schedule entry; reminders joined with ';'."""
    rows = [
        {
            "period_id": entry.period_id or "",
            "initiate_date": entry.initiate_date.isoformat(),
            "close_date": entry.close_date.isoformat(),
            "number_of_reminders": len(entry.reminder_dates),
            "reminder_dates": ";".join(d.isoformat() for d in entry.reminder_dates),
        }
        for entry in submission.schedule
    ]
    return pd.DataFrame(
        rows,
        columns=["period_id", "initiate_date", "close_date", "number_of_reminders", "reminder_dates"],
    )


def eligibility_frame(
    submission: FinalizedSubmission,
    employees: Dict[str, EmployeeRecord] | None = None,
) -> pd.DataFrame:
    """One row per evaluated employee with eligibility and exclusion reason."""
    employees = employees or {}
    rows = []
    for emp_id in sorted(set(submission.eligible_employee_ids) | set(submission.excluded_employees)):
        emp = employees.get(emp_id)
        rows.append(
            {
                "employee_id": emp_id,
                "name": emp.full_name if emp else "",
                "email": emp.email if emp else "",
                "eligible": emp_id in submission.eligible_employee_ids,
                "reason": submission.excluded_employees.get(emp_id, ""),
            }
        )
    return pd.DataFrame(rows, columns=["employee_id", "name", "email", "eligible", "reason"])


def export_schedule_csv(submission: FinalizedSubmission, csv_path: str | Path) -> int:
    df = schedule_frame(submission)
    df.to_csv(csv_path, index=False)
    print(f"[INFO] Exported {len(df)} schedule entries to {csv_path}")
    return len(df)


def export_eligibility_csv(
    submission: FinalizedSubmission,
    csv_path: str | Path,
    employees: Dict[str, EmployeeRecord] | None = None,
) -> int:
    df = eligibility_frame(submission, employees)
    df.to_csv(csv_path, index=False)
    print(f"[INFO] Exported {len(df)} employees to {csv_path}")
    return len(df)


def summarize_submission(submission: FinalizedSubmission) -> str:
    """Human-readable summary of a finalized submission."""
    lines = [
        f"Appraisal: {submission.appraisal_type} for group {submission.group_id} "
        f"(publish={submission.publish_policy.value}, submitted {submission.submission_date})",
        "",
        "Schedule:",
        schedule_frame(submission).to_string(index=False),
        "",
        f"Eligible employees: {len(submission.eligible_employee_ids)}",
    ]
    if submission.excluded_employees:
        reasons = pd.Series(dict(submission.excluded_employees)).value_counts().sort_index()
        lines.append("Excluded by reason:")
        lines.append(reasons.to_string())
    else:
        lines.append("Excluded employees: 0")
    return "\n".join(lines)
