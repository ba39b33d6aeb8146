"""Appraisal cycle construction and finalization."""

from .builder import AppraisalCycleBuilder, PeriodFetch
from .orchestrator import AppraisalCycleOrchestrator, initiate_appraisal, load_population

__all__ = [
    "AppraisalCycleBuilder",
    "PeriodFetch",
    "AppraisalCycleOrchestrator",
    "initiate_appraisal",
    "load_population",
]
