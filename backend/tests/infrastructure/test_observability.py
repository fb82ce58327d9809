"""Structured Logging - JSON lines carry the known extra fields."""

import json
import logging

import pytest

from octopus.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "octopus.pushd", logging.WARNING, __file__, 1, "block %s failed", (42,), None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_base_fields(self):
        line = json.loads(JSONFormatter().format(_record()))
        assert line["level"] == "WARNING"
        assert line["logger"] == "octopus.pushd"
        assert line["message"] == "block 42 failed"
        assert "timestamp" in line

    def test_known_extra_fields_are_surfaced(self):
        line = json.loads(JSONFormatter().format(_record(height=42, address="cosmos1abc")))
        assert line["height"] == 42
        assert line["address"] == "cosmos1abc"

    def test_unknown_extra_fields_are_dropped(self):
        line = json.loads(JSONFormatter().format(_record(secret="x")))
        assert "secret" not in line


@pytest.fixture
def clean_root():
    handlers = list(logging.root.handlers)
    level = logging.root.level
    yield
    logging.root.handlers = handlers
    logging.root.setLevel(level)


def test_setup_logging_installs_json_handler(clean_root):
    setup_logging("debug", "json")
    assert isinstance(logging.root.handlers[-1].formatter, JSONFormatter)
    assert logging.root.level == logging.DEBUG


def test_setup_logging_text_format(clean_root):
    setup_logging("warning", "text")
    assert not isinstance(logging.root.handlers[-1].formatter, JSONFormatter)
    assert logging.root.level == logging.WARNING
