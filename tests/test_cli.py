"""End-to-end tests for the command-line interface."""

import json

import pytest

from appraisal_scheduler.cli import main
from appraisal_scheduler.domain.db import session_scope
from appraisal_scheduler.domain.repositories import InitiatedAppraisalRepository


@pytest.fixture
def workspace(tmp_path):
    (tmp_path / "employees.csv").write_text(
        "id,first_name,last_name,email,date_of_joining\n"
        "e1,Ava,Reid,ava@example.com,2019-03-04\n"
        "e2,Ben,Cole,ben@example.com,2021-07-19\n"
        "e3,Cara,Lim,cara@example.com,2023-01-09\n"
        "e4,Dev,Shah,dev@example.com,2025-02-10\n"
    )
    (tmp_path / "calendar.csv").write_text(
        "id,display_name,start_date,end_date\n"
        "q1,Q1,2025-01-01,2025-03-31\n"
        "q2,Q2,2025-04-01,2025-06-30\n"
    )
    (tmp_path / "group.csv").write_text("employee_id\ne1\ne2\ne3\ne4\n")
    (tmp_path / "templates.csv").write_text("id,name\ntpl-1,Annual review\n")
    db_url = f"sqlite:///{tmp_path / 'appraisal.db'}"

    main(["--db", db_url, "init-db"])
    main(
        [
            "--db", db_url, "import-csv",
            "--employees", str(tmp_path / "employees.csv"),
            "--templates", str(tmp_path / "templates.csv"),
            "--group", str(tmp_path / "group.csv"), "--group-name", "Engineering", "--group-id", "grp-1",
        ]
    )
    return tmp_path, db_url


def _import_calendar(tmp_path, db_url, capsys):
    main(["--db", db_url, "import-csv", "--calendar", str(tmp_path / "calendar.csv"), "--calendar-code", "FY25-Q"])
    out = capsys.readouterr().out
    return next(line.split(": ", 1)[1] for line in out.splitlines() if line.startswith("[OK] Calendar id"))


@pytest.mark.integration
def test_periods_command(workspace, capsys):
    tmp_path, db_url = workspace
    calendar_id = _import_calendar(tmp_path, db_url, capsys)

    main(["--db", db_url, "periods", "--calendar", calendar_id])
    lines = capsys.readouterr().out.strip().splitlines()

    assert [line.split("\t")[0] for line in lines] == ["q1", "q2"]


@pytest.mark.integration
def test_initiate_dry_run_prints_json(workspace, capsys):
    tmp_path, db_url = workspace
    calendar_id = _import_calendar(tmp_path, db_url, capsys)
    request = tmp_path / "request.json"
    request.write_text(
        json.dumps(
            {
                "group_id": "grp-1",
                "appraisal_type": "questionnaire_based",
                "template_ids": ["tpl-1"],
                "calendar_id": calendar_id,
                "publish_policy": "as_per_calendar",
                "periods": [{"id": "q1", "days_to_initiate": 5}],
                "eligibility": {"doj_till_date": "2024-12-31", "excluded_employee_ids": ["e2"]},
            }
        )
    )

    main(["--db", db_url, "initiate", "--request", str(request), "--dry-run", "--json",
          "--schedule-out", str(tmp_path / "schedule.csv"),
          "--eligibility-out", str(tmp_path / "eligibility.csv")])
    out = capsys.readouterr().out
    payload = json.loads(out[out.index("{"):])

    assert payload["eligible_employee_ids"] == ["e1", "e3"]
    assert payload["excluded_employees"] == {"e2": "explicit", "e4": "doj_range"}
    assert payload["schedule"][0]["initiate_date"] == "2025-04-05"
    assert (tmp_path / "schedule.csv").exists()
    assert "Ava Reid" in (tmp_path / "eligibility.csv").read_text()

    with session_scope(db_url) as session:
        assert InitiatedAppraisalRepository.get_by_group(session, "grp-1") == []


@pytest.mark.integration
def test_initiate_stores_and_lists_due_tasks(workspace, capsys):
    tmp_path, db_url = workspace
    calendar_id = _import_calendar(tmp_path, db_url, capsys)
    request = tmp_path / "request.yaml"
    request.write_text(
        "group_id: grp-1\n"
        "appraisal_type: okr_based\n"
        f"calendar_id: \"{calendar_id}\"\n"
        "publish_policy: as_per_calendar\n"
        "periods: [q1, q2]\n"
    )

    main(["--db", db_url, "initiate", "--request", str(request)])
    assert "Eligible employees: 4" in capsys.readouterr().out

    main(["--db", db_url, "due-tasks", "--as-of", "2025-04-30"])
    out = capsys.readouterr().out
    assert "[OK] 1 task(s) due as of 2025-04-30" in out
    assert "\tq1\t2025-03-31" in out


@pytest.mark.integration
def test_initiate_validation_error_propagates(workspace, capsys):
    tmp_path, db_url = workspace
    request = tmp_path / "request.yaml"
    request.write_text("group_id: grp-1\nappraisal_type: kpi_based\naccept_global_fallback: true\n")

    with pytest.raises(Exception) as exc:
        main(["--db", db_url, "initiate", "--request", str(request)])
    assert getattr(exc.value, "kind", None) == "missing_content"
    assert "[ERROR] Initiation failed" in capsys.readouterr().out


@pytest.mark.integration
def test_calendars_and_reset(workspace, capsys):
    tmp_path, db_url = workspace
    calendar_id = _import_calendar(tmp_path, db_url, capsys)

    main(["--db", db_url, "calendars"])
    out = capsys.readouterr().out
    assert f"{calendar_id}\tFY25-Q" in out
    assert "[OK] 1 calendar(s)" in out

    main(["--db", db_url, "init-db", "--reset"])
    main(["--db", db_url, "calendars"])
    assert "[OK] 0 calendar(s)" in capsys.readouterr().out
