"""Structured logging — JSON lines carry the farm/population context fields."""

import json
import logging

from farmdata.infrastructure.observability import JSONFormatter


def _record(**extra):
    record = logging.LogRecord("farmdata.test", logging.WARNING, __file__, 1, "farm %s skipped", (7,), None)
    record.__dict__.update(extra)
    return record


def test_json_line_includes_context():
    line = json.loads(JSONFormatter().format(_record(farm_id=7, year=2021, attempt=2)))
    assert line["message"] == "farm 7 skipped"
    assert line["level"] == "WARNING"
    assert line["farm_id"] == 7
    assert line["year"] == 2021
    assert "attempt" not in line


def test_missing_context_is_omitted():
    line = json.loads(JSONFormatter().format(_record()))
    assert "population_id" not in line
