"""Content requirement of each appraisal type."""

from __future__ import annotations

from appraisal_scheduler.domain.entities import KpiBased, MboBased, OkrBased, QuestionnaireBased
from appraisal_scheduler.errors import MISSING_CONTENT, ValidationError


def _check_questionnaire(appraisal_type: QuestionnaireBased) -> None:
    if not appraisal_type.template_ids:
        raise ValidationError(
            MISSING_CONTENT,
            "At least one questionnaire template is required for questionnaire-based appraisals",
        )


def _check_document(appraisal_type) -> None:
    if not (appraisal_type.document or "").strip():
        raise ValidationError(MISSING_CONTENT, "Document is required for KPI/MBO-based appraisals")


def _check_nothing(appraisal_type: OkrBased) -> None:
    return None


_CHECKS = {
    QuestionnaireBased: _check_questionnaire,
    KpiBased: _check_document,
    MboBased: _check_document,
    OkrBased: _check_nothing,
}


def check_content(appraisal_type) -> None:
    """Raise ValidationError(missing_content) if the type's content is missing."""
    check = _CHECKS.get(type(appraisal_type))
    if check is None:
        raise ValueError(f"Unsupported appraisal type: {appraisal_type!r}")
    check(appraisal_type)
