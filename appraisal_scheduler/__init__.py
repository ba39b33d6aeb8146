"""Appraisal cycle scheduling and eligibility engine.

Modules:
- config: load and validate configuration (YAML or JSON)
- dates: calendar-date helpers (no time-of-day arithmetic)
- errors: ValidationError, NotFoundError, ExternalFetchError
- domain: value objects, SQLAlchemy models and repositories
- services: period catalog, eligibility filter, timing resolver, schedule computer
- engine: cycle builder (working state) and orchestrator (validation, finalization)
- io: CSV import/export and request files
- cli: command-line interface entrypoints
"""

__all__ = [
    "config",
    "dates",
    "errors",
    "domain",
    "services",
    "engine",
    "io",
    "cli",
]
