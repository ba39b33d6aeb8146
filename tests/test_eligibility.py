"""Tests for the eligibility filter."""

from datetime import date, timedelta

from appraisal_scheduler.domain.entities import EligibilityRule, EmployeeRecord
from appraisal_scheduler.services.eligibility import EligibilityFilter, exclusion_reason


TODAY = date(2025, 6, 1)


def _employees():
    return [
        EmployeeRecord(id="e1", date_of_joining=date(2019, 3, 4), first_name="Ava", last_name="Reid"),
        EmployeeRecord(id="e2", date_of_joining=date(2021, 7, 19), first_name="Ben", last_name="Cole"),
        EmployeeRecord(id="e3", date_of_joining=date(2023, 1, 9), first_name="Cara", last_name="Lim"),
        EmployeeRecord(id="e4", date_of_joining=date(2025, 2, 10), first_name="Dev", last_name="Shah"),
    ]


def test_explicit_and_till_date_exclusions():
    """Four employees, one explicitly excluded, one joined after the till-date."""
    rule = EligibilityRule(
        doj_till_date=date(2024, 12, 31),
        explicit_excluded_ids=frozenset({"e2"}),
    )
    result = EligibilityFilter().evaluate(_employees(), rule, TODAY)

    assert len(result.included) == 2
    assert result.included == {"e1", "e3"}
    assert dict(result.excluded) == {"e2": "explicit", "e4": "doj_range"}


def test_no_rules_includes_everyone():
    result = EligibilityFilter().evaluate(_employees(), EligibilityRule(), TODAY)
    assert result.included == {"e1", "e2", "e3", "e4"}
    assert not result.excluded


def test_doj_from_date_is_inclusive():
    from_date = date(2023, 1, 9)
    rule = EligibilityRule(doj_from_date=from_date)
    on_boundary = EmployeeRecord(id="a", date_of_joining=from_date)
    day_before = EmployeeRecord(id="b", date_of_joining=from_date - timedelta(days=1))

    result = EligibilityFilter().evaluate([on_boundary, day_before], rule, TODAY)

    assert "a" in result.included
    assert result.excluded["b"] == "doj_range"


def test_doj_till_date_is_inclusive_through_the_day():
    till = date(2024, 12, 31)
    rule = EligibilityRule(doj_till_date=till)

    assert exclusion_reason(EmployeeRecord("a", till), rule, TODAY) is None
    assert exclusion_reason(EmployeeRecord("b", till + timedelta(days=1)), rule, TODAY) == "doj_range"


def test_missing_doj_excluded_by_any_window():
    no_doj = EmployeeRecord(id="x")
    assert exclusion_reason(no_doj, EligibilityRule(doj_from_date=date(2020, 1, 1)), TODAY) == "doj_range"
    assert exclusion_reason(no_doj, EligibilityRule(doj_till_date=date(2020, 1, 1)), TODAY) == "doj_range"
    assert exclusion_reason(no_doj, EligibilityRule(exclude_tenure_less_than_one_year=True), TODAY) is None


def test_tenure_boundary():
    rule = EligibilityRule(exclude_tenure_less_than_one_year=True)

    # Exactly one year today: included
    assert exclusion_reason(EmployeeRecord("a", date(2024, 6, 1)), rule, TODAY) is None
    # One day short of a year: excluded
    assert exclusion_reason(EmployeeRecord("b", date(2024, 6, 2)), rule, TODAY) == "tenure"


def test_tenure_for_leap_day_joiner():
    rule = EligibilityRule(exclude_tenure_less_than_one_year=True)
    joiner = EmployeeRecord("leap", date(2024, 2, 29))

    assert exclusion_reason(joiner, rule, date(2025, 2, 27)) == "tenure"
    assert exclusion_reason(joiner, rule, date(2025, 2, 28)) is None


def test_precedence_first_match_wins():
    recent = EmployeeRecord("r", date(2025, 5, 1))
    rule = EligibilityRule(
        exclude_tenure_less_than_one_year=True,
        doj_till_date=date(2024, 12, 31),
        explicit_excluded_ids=frozenset({"r"}),
    )
    assert exclusion_reason(recent, rule, TODAY) == "explicit"

    rule_without_explicit = EligibilityRule(
        exclude_tenure_less_than_one_year=True,
        doj_till_date=date(2024, 12, 31),
    )
    assert exclusion_reason(recent, rule_without_explicit, TODAY) == "tenure"


def test_visible_for_manual_exclusion_applies_doj_window_only():
    rule = EligibilityRule(
        exclude_tenure_less_than_one_year=True,
        doj_from_date=date(2021, 1, 1),
        explicit_excluded_ids=frozenset({"e3"}),
    )
    visible = EligibilityFilter().visible_for_manual_exclusion(_employees(), rule)

    # e1 joined before the window; e3 stays visible so it can be un-excluded
    assert [e.id for e in visible] == ["e2", "e3", "e4"]
