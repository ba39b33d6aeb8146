"""I/O utilities for CSV import/export and request files."""

from .export_csv import export_eligibility_csv, export_schedule_csv, summarize_submission
from .import_csv import import_calendar_csv, import_employees_csv, import_group_csv, import_templates_csv
from .request_file import load_request, request_from_dict

__all__ = [
    "import_calendar_csv",
    "import_employees_csv",
    "import_group_csv",
    "import_templates_csv",
    "export_eligibility_csv",
    "export_schedule_csv",
    "summarize_submission",
    "load_request",
    "request_from_dict",
]
