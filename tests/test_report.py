"""Report envelope tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from depguard import __version__, ids
from depguard.config import preset
from depguard.engine import evaluate
from depguard.report import (
    SCHEMA_ID,
    ReportError,
    build_report,
    empty_report,
    read_report,
    report_findings,
    runtime_error_report,
    utc_timestamp,
    write_report,
)
from tests._fixtures.models import workspace_model

STARTED = "2026-01-01T00:00:00Z"
FINISHED = "2026-01-01T00:00:01Z"


def _wildcard_report() -> dict:
    model = workspace_model({"Cargo.toml": '[package]\nname = "x"\n[dependencies]\nserde = "*"\n'})
    result = evaluate(model, preset("strict"))
    return build_report(result, started_at=STARTED, finished_at=FINISHED)


def test_build_report_envelope() -> None:
    report = _wildcard_report()
    assert report["schema"] == SCHEMA_ID
    assert report["tool"] == {"name": "depguard", "version": __version__}
    assert report["started_at"] == STARTED
    assert report["finished_at"] == FINISHED
    assert report["verdict"] == {"status": "fail", "counts": {"info": 0, "warn": 0, "error": 1}}
    assert report["data"]["findings_total"] == 1
    finding = report["findings"][0]
    assert finding["check_id"] == ids.CHECK_DEPS_NO_WILDCARDS
    assert finding["location"] == {"path": "Cargo.toml", "line": 4}
    assert finding["data"]["fix_action"] == ids.FIX_ACTION_PIN_VERSION


def test_write_and_read_report(tmp_path: Path) -> None:
    report = _wildcard_report()
    path = write_report(report, tmp_path / "out" / "nested" / "report.json")
    text = path.read_text(encoding="utf-8")
    assert text.endswith("}\n")
    assert json.loads(text) == report
    assert read_report(path) == report
    assert [f.to_dict() for f in report_findings(report)] == report["findings"]


def test_read_report_rejects_missing_and_foreign_files(tmp_path: Path) -> None:
    with pytest.raises(ReportError, match="not found"):
        read_report(tmp_path / "missing.json")

    foreign = tmp_path / "foreign.json"
    foreign.write_text(json.dumps({"schema": "other"}), encoding="utf-8")
    with pytest.raises(ReportError):
        read_report(foreign)

    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf-8")
    with pytest.raises(ReportError):
        read_report(broken)


def test_empty_report_passes() -> None:
    report = empty_report(preset("warn"), started_at=STARTED, finished_at=FINISHED)
    assert report["verdict"]["status"] == "pass"
    assert report["findings"] == []
    assert report["data"]["profile"] == "warn"
    assert report["data"]["manifests_scanned"] == 0


def test_runtime_error_report() -> None:
    report = runtime_error_report("boom", scope="diff", profile="strict", started_at=STARTED)
    assert report["verdict"] == {"status": "fail", "counts": {"info": 0, "warn": 0, "error": 1}}
    [finding] = report["findings"]
    assert finding["check_id"] == ids.CHECK_TOOL_RUNTIME
    assert finding["code"] == ids.CODE_RUNTIME_ERROR
    assert finding["message"] == "boom"
    assert "location" not in finding
    assert report["data"]["scope"] == "diff"
    assert report["finished_at"].endswith("Z")


def test_utc_timestamp_format() -> None:
    stamp = utc_timestamp()
    assert stamp.endswith("Z")
    assert "+00:00" not in stamp
