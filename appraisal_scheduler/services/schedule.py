"""Initiate, close and reminder dates for each appraisal period."""

from __future__ import annotations

from datetime import date
from typing import List, Mapping, Optional, Sequence, Tuple

from appraisal_scheduler.dates import add_days
from appraisal_scheduler.domain.entities import (
    CalendarPeriod,
    PublishPolicy,
    ScheduleEntry,
    TimingConfig,
)
from appraisal_scheduler.errors import INCOMPLETE_TIMING, ValidationError


def reminder_dates(initiate_date: date, days_to_close: int, number_of_reminders: int) -> Tuple[date, ...]:
    """
    Spread reminders over the open window.

    The k-th reminder (k = 1..n) falls ``(k * days_to_close) // (n + 1)`` days
    after initiation, so every reminder lies in [initiate, close] and the
    sequence never goes backwards.
    """
    n = number_of_reminders
    return tuple(add_days(initiate_date, (k * days_to_close) // (n + 1)) for k in range(1, n + 1))


class ScheduleComputer:
    """Turns periods and their timing into concrete dates under a publish policy."""

    def entry_for(
        self,
        period: Optional[CalendarPeriod],
        timing: TimingConfig,
        policy: PublishPolicy,
        submission_date: date,
    ) -> ScheduleEntry:
        """
        Compute one schedule entry.

        Args:
            period: Calendar period, or None for the global fallback
            timing: Timing for that period
            policy: Publish policy
            submission_date: Date of submission (already reduced to a calendar date)
        """
        if policy == PublishPolicy.IMMEDIATE:
            initiate = submission_date
        else:
            anchor = period.end_date if period is not None else submission_date
            initiate = add_days(anchor, timing.days_to_initiate)

        close = add_days(initiate, timing.days_to_close)
        return ScheduleEntry(
            period_id=period.id if period is not None else None,
            initiate_date=initiate,
            close_date=close,
            reminder_dates=reminder_dates(initiate, timing.days_to_close, timing.number_of_reminders),
        )

    def compute(
        self,
        periods: Sequence[CalendarPeriod],
        timings: Mapping[Optional[str], TimingConfig],
        policy: PublishPolicy,
        submission_date: date,
    ) -> List[ScheduleEntry]:
        """
        Build the schedule for the selected periods in catalog order.

        ``periods`` must be exactly the selected periods. With no periods the
        single global timing (key None) is used.
        """
        if not periods:
            if None not in timings:
                raise ValidationError(INCOMPLETE_TIMING, "No global timing configured")
            return [self.entry_for(None, timings[None], policy, submission_date)]

        entries = []
        for period in sorted(periods, key=lambda p: (p.start_date, p.id)):
            timing = timings.get(period.id)
            if timing is None:
                raise ValidationError(INCOMPLETE_TIMING, f"No timing configured for period {period.id}")
            entries.append(self.entry_for(period, timing, policy, submission_date))
        return entries
