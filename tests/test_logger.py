import io
import json
import logging

import pytest

from structured_forms import (
    Blob,
    StructuredFormatter,
    configure_logging,
    create_form,
    get_logger,
    log_with_context,
)
from structured_forms.logger import ROOT_LOGGER_NAME


@pytest.fixture
def package_logger():
    root = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


def test_get_logger_is_namespaced():
    assert get_logger("serializer").name == "structured_forms.serializer"
    assert get_logger("structured_forms.attachments").name == "structured_forms.attachments"


def test_structured_formatter_lifts_context():
    record = logging.LogRecord(
        name="structured_forms.test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg="Serialized form",
        args=(),
        exc_info=None,
    )
    record.ctx_field_count = 3

    entry = json.loads(StructuredFormatter().format(record))
    assert entry["level"] == "INFO"
    assert entry["logger"] == "structured_forms.test"
    assert entry["message"] == "Serialized form"
    assert entry["field_count"] == 3
    assert entry["timestamp"].endswith("Z")


def test_formatter_without_timestamp():
    record = logging.LogRecord("x", logging.INFO, "", 0, "msg", (), None)
    entry = json.loads(StructuredFormatter(include_timestamp=False).format(record))
    assert "timestamp" not in entry


def test_configure_logging_writes_json_lines(package_logger):
    stream = io.StringIO()
    configure_logging("INFO", stream=stream)
    configure_logging("INFO", stream=stream)

    log_with_context(get_logger("test"), "info", "hello", user="ann", skipped=None)

    lines = stream.getvalue().strip().splitlines()
    assert len(lines) == 1
    entry = json.loads(lines[0])
    assert entry["message"] == "hello"
    assert entry["user"] == "ann"
    assert "skipped" not in entry


def test_configure_logging_level_from_env(monkeypatch, package_logger):
    monkeypatch.setenv("STRUCTURED_FORMS_LOG_LEVEL", "debug")
    root = configure_logging(stream=io.StringIO())
    assert root.level == logging.DEBUG


@pytest.mark.asyncio
async def test_serializer_logs_form_summary(caplog):
    caplog.set_level(logging.DEBUG, logger=ROOT_LOGGER_NAME)

    await create_form({"file": Blob(b"abc", name="a.txt"), "tags": ["x", "y"]})

    summary = [r for r in caplog.records if r.getMessage() == "Serialized form"]
    assert len(summary) == 1
    assert summary[0].ctx_field_count == 3
    assert summary[0].ctx_attachment_count == 1
    assert summary[0].ctx_array_strategy == "bracket-empty"

    drained = [r for r in caplog.records if r.getMessage() == "Materialized attachment"]
    assert drained[0].ctx_filename == "a.txt"
    assert drained[0].ctx_size == 3
