"""Tests for the calendar period catalog."""

from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from appraisal_scheduler.domain.models import Base, FrequencyCalendar, FrequencyCalendarDetail
from appraisal_scheduler.errors import ExternalFetchError, NotFoundError
from appraisal_scheduler.services.catalog import CalendarPeriodCatalog


@pytest.fixture
def db_session():
    """Create in-memory database session for testing."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def quarterly_calendar(db_session):
    calendar = FrequencyCalendar(id="fy25", code="FY25-Q", description="FY25 quarters")
    db_session.add(calendar)
    # Inserted out of order on purpose
    db_session.add_all(
        [
            FrequencyCalendarDetail(id="q3", frequency_calendar_id="fy25", display_name="Q3",
                                    start_date=date(2025, 7, 1), end_date=date(2025, 9, 30)),
            FrequencyCalendarDetail(id="q1", frequency_calendar_id="fy25", display_name="Q1",
                                    start_date=date(2025, 1, 1), end_date=date(2025, 3, 31)),
            FrequencyCalendarDetail(id="q2", frequency_calendar_id="fy25", display_name="Q2",
                                    start_date=date(2025, 4, 1), end_date=date(2025, 6, 30)),
            FrequencyCalendarDetail(id="q4", frequency_calendar_id="fy25", display_name="Q4",
                                    start_date=date(2025, 10, 1), end_date=date(2025, 12, 31),
                                    status="inactive"),
        ]
    )
    db_session.commit()
    return calendar


def test_get_periods_ordered_by_start(db_session, quarterly_calendar):
    periods = CalendarPeriodCatalog(db_session).get_periods("fy25")

    assert [p.id for p in periods] == ["q1", "q2", "q3"]
    assert periods[0].display_name == "Q1"
    assert periods[0].end_date == date(2025, 3, 31)


def test_get_periods_is_idempotent(db_session, quarterly_calendar):
    catalog = CalendarPeriodCatalog(db_session)
    assert catalog.get_periods("fy25") == catalog.get_periods("fy25")


def test_unknown_calendar_raises_not_found(db_session, quarterly_calendar):
    with pytest.raises(NotFoundError):
        CalendarPeriodCatalog(db_session).get_periods("nope")


def test_get_period(db_session, quarterly_calendar):
    catalog = CalendarPeriodCatalog(db_session)
    assert catalog.get_period("fy25", "q2").start_date == date(2025, 4, 1)
    with pytest.raises(NotFoundError):
        catalog.get_period("fy25", "q4")


def test_store_failure_raises_external_fetch_error():
    # No tables created: the query itself fails
    engine = create_engine("sqlite:///:memory:")
    session = sessionmaker(bind=engine)()
    try:
        with pytest.raises(ExternalFetchError):
            CalendarPeriodCatalog(session).get_periods("fy25")
    finally:
        session.close()


def test_overlapping_periods_rejected(db_session):
    db_session.add(FrequencyCalendar(id="bad", code="BAD"))
    db_session.add_all(
        [
            FrequencyCalendarDetail(id="a", frequency_calendar_id="bad", display_name="A",
                                    start_date=date(2025, 1, 1), end_date=date(2025, 2, 15)),
            FrequencyCalendarDetail(id="b", frequency_calendar_id="bad", display_name="B",
                                    start_date=date(2025, 2, 1), end_date=date(2025, 3, 31)),
        ]
    )
    db_session.commit()

    with pytest.raises(ExternalFetchError):
        CalendarPeriodCatalog(db_session).get_periods("bad")
