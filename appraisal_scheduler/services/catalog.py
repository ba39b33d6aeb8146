"""Read-only access to the periods of a frequency calendar."""

from __future__ import annotations

from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from appraisal_scheduler.dates import to_calendar_date
from appraisal_scheduler.domain.entities import CalendarPeriod
from appraisal_scheduler.domain.models import FrequencyCalendarDetail
from appraisal_scheduler.domain.repositories import CalendarRepository
from appraisal_scheduler.errors import ExternalFetchError, NotFoundError


def period_from_detail(detail: FrequencyCalendarDetail) -> CalendarPeriod:
    return CalendarPeriod(
        id=str(detail.id),
        display_name=detail.display_name,
        start_date=to_calendar_date(detail.start_date),
        end_date=to_calendar_date(detail.end_date),
    )


class CalendarPeriodCatalog:
    """
    Catalog of calendar periods backed by the calendar store.

    Lookups are read-only and idempotent. Periods come back ordered by start
    date; only active periods are listed.
    """

    def __init__(self, session: Session):
        self.session = session

    def get_periods(self, calendar_id: str) -> List[CalendarPeriod]:
        """
        Get the ordered periods of a calendar.

        Raises:
            NotFoundError: If the calendar id is unknown
            ExternalFetchError: If reading from the store fails
        """
        try:
            calendar = CalendarRepository.get_by_id(self.session, calendar_id)
            if calendar is None:
                raise NotFoundError(f"Calendar {calendar_id} not found")
            details = CalendarRepository.get_details(self.session, calendar_id)
        except SQLAlchemyError as e:
            raise ExternalFetchError(f"Failed to fetch periods for calendar {calendar_id}: {e}") from e

        periods = [period_from_detail(d) for d in details]
        _check_non_overlapping(calendar_id, periods)
        return periods

    def get_period(self, calendar_id: str, period_id: str) -> CalendarPeriod:
        for period in self.get_periods(calendar_id):
            if period.id == period_id:
                return period
        raise NotFoundError(f"Period {period_id} not found in calendar {calendar_id}")


def _check_non_overlapping(calendar_id: str, periods: List[CalendarPeriod]) -> None:
    for prev, cur in zip(periods, periods[1:]):
        if cur.start_date <= prev.end_date:
            raise ExternalFetchError(
                f"Calendar {calendar_id} has overlapping periods: "
                f"{prev.display_name} ({prev.end_date}) and {cur.display_name} ({cur.start_date})"
            )
