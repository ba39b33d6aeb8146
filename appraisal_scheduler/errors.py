"""Exceptions raised by the appraisal scheduling engine."""

from __future__ import annotations


MISSING_CONTENT = "missing_content"
MISSING_PERIOD_SELECTION = "missing_period_selection"
UNKNOWN_PERIOD = "unknown_period"
INCOMPLETE_TIMING = "incomplete_timing"
NO_ELIGIBLE_EMPLOYEES = "no_eligible_employees"
INVALID_TIMING = "invalid_timing"

VALIDATION_KINDS = {
    MISSING_CONTENT,
    MISSING_PERIOD_SELECTION,
    UNKNOWN_PERIOD,
    INCOMPLETE_TIMING,
    NO_ELIGIBLE_EMPLOYEES,
    INVALID_TIMING,
}


class ValidationError(ValueError):
    """A caller-correctable problem with an appraisal initiation request."""

    def __init__(self, kind: str, message: str | None = None):
        if kind not in VALIDATION_KINDS:
            raise ValueError(f"Unknown validation kind: {kind}")
        self.kind = kind
        super().__init__(message or kind)

    def __repr__(self) -> str:
        return f"<ValidationError(kind='{self.kind}', message='{self}')>"


class NotFoundError(LookupError):
    """An id (calendar, period, group, template) does not exist in its store."""


class ExternalFetchError(RuntimeError):
    """Reading calendar periods from the store failed."""
