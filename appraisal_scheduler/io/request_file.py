"""Load an appraisal initiation request from a YAML or JSON file.

Example::

    group_id: engineering
    appraisal_type: questionnaire_based
    template_ids: [tpl-annual]
    calendar_id: fy25-quarters
    publish_policy: as_per_calendar
    periods:
      - id: q1
        days_to_initiate: 5
      - id: q2
    eligibility:
      exclude_tenure_less_than_one_year: true
      doj_till_date: 2025-06-30
      excluded_employee_ids: [e-104]

Periods without timing values get the configured defaults. Without
``periods`` the request uses ``global_timing`` (or the defaults) and
``accept_global_fallback`` must be true for it to validate.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import yaml

from appraisal_scheduler.config import EngineConfig
from appraisal_scheduler.dates import optional_calendar_date
from appraisal_scheduler.domain.entities import (
    AppraisalInitiationRequest,
    EligibilityRule,
    PublishPolicy,
    TimingConfig,
    appraisal_type_from_code,
)

TIMING_FIELDS = ("days_to_initiate", "days_to_close", "number_of_reminders")


def _timing(period_id, data: Dict[str, Any], cfg: EngineConfig) -> TimingConfig:
    defaults = cfg.default_timing
    values = {name: int(data.get(name, getattr(defaults, name))) for name in TIMING_FIELDS}
    return TimingConfig(period_id=period_id, **values)


def request_from_dict(data: Dict[str, Any], cfg: EngineConfig | None = None) -> AppraisalInitiationRequest:
    cfg = cfg or EngineConfig()
    if not data.get("group_id"):
        raise ValueError("group_id is required")

    appraisal_type = appraisal_type_from_code(
        str(data.get("appraisal_type", "questionnaire_based")),
        template_ids=[str(t) for t in data.get("template_ids") or []],
        document=data.get("document"),
    )

    timing_configs = {}
    selected = []
    for item in data.get("periods") or []:
        if isinstance(item, str):
            item = {"id": item}
        period_id = str(item["id"])
        selected.append(period_id)
        timing_configs[period_id] = _timing(period_id, item, cfg)
    if not selected:
        timing_configs[None] = _timing(None, data.get("global_timing") or {}, cfg)

    elig = data.get("eligibility") or {}
    rule = EligibilityRule(
        exclude_tenure_less_than_one_year=bool(elig.get("exclude_tenure_less_than_one_year", False)),
        doj_from_date=optional_calendar_date(elig.get("doj_from_date")),
        doj_till_date=optional_calendar_date(elig.get("doj_till_date")),
        explicit_excluded_ids=frozenset(str(e) for e in elig.get("excluded_employee_ids") or []),
    )

    calendar_id = data.get("calendar_id")
    return AppraisalInitiationRequest(
        group_id=str(data["group_id"]),
        appraisal_type=appraisal_type,
        publish_policy=PublishPolicy(data.get("publish_policy", "now")),
        eligibility_rule=rule,
        calendar_id=str(calendar_id) if calendar_id else None,
        selected_period_ids=tuple(selected),
        timing_configs=timing_configs,
        accept_global_fallback=bool(data.get("accept_global_fallback", False)),
        make_public=bool(data.get("make_public", False)),
    )


def load_request(path: str | Path, cfg: EngineConfig | None = None) -> AppraisalInitiationRequest:
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    data = json.loads(text) if path.suffix.lower() == ".json" else yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError(f"Request file must contain a mapping: {path}")
    return request_from_dict(data, cfg)
