"""Employee eligibility for an appraisal cycle."""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Optional, Set

from appraisal_scheduler.dates import first_anniversary
from appraisal_scheduler.domain.entities import (
    REASON_DOJ_RANGE,
    REASON_EXPLICIT,
    REASON_TENURE,
    EligibilityResult,
    EligibilityRule,
    EmployeeRecord,
)


def _outside_doj_window(doj: Optional[date], rule: EligibilityRule) -> bool:
    # Both bounds are inclusive whole days; a missing DOJ never fits a window.
    if rule.doj_from_date is not None and (doj is None or doj < rule.doj_from_date):
        return True
    if rule.doj_till_date is not None and (doj is None or doj > rule.doj_till_date):
        return True
    return False


def exclusion_reason(employee: EmployeeRecord, rule: EligibilityRule, today: date) -> Optional[str]:
    """
    Return why ``employee`` is excluded by ``rule``, or None if included.

    Checks apply in order and the first match wins:
    explicit id, tenure under one year, DOJ before the from-date,
    DOJ after the till-date.
    """
    if employee.id in rule.explicit_excluded_ids:
        return REASON_EXPLICIT

    doj = employee.date_of_joining
    if rule.exclude_tenure_less_than_one_year and doj is not None:
        if first_anniversary(doj) > today:
            return REASON_TENURE

    if _outside_doj_window(doj, rule):
        return REASON_DOJ_RANGE
    return None


class EligibilityFilter:
    """Splits a population into included ids and excluded ids with a reason."""

    def evaluate(
        self,
        employees: Iterable[EmployeeRecord],
        rule: EligibilityRule,
        today: date,
    ) -> EligibilityResult:
        included: Set[str] = set()
        excluded: Dict[str, str] = {}
        for employee in employees:
            reason = exclusion_reason(employee, rule, today)
            if reason is None:
                included.add(employee.id)
            else:
                excluded[employee.id] = reason
        return EligibilityResult(included=included, excluded=excluded)

    def visible_for_manual_exclusion(
        self,
        employees: Iterable[EmployeeRecord],
        rule: EligibilityRule,
    ) -> List[EmployeeRecord]:
        """Members offered for individual exclusion: those inside the DOJ window."""
        return [e for e in employees if not _outside_doj_window(e.date_of_joining, rule)]
