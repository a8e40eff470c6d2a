from __future__ import annotations

import io
import json
import logging
import sys

import pytest


def test_json_formatter_includes_extra_fields() -> None:
    from tile_system.observability import JsonFormatter

    record = logging.LogRecord(
        name="tile_system.cli",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="tile_system_input_rejected",
        args=(),
        exc_info=None,
    )
    record.command = "quadkey-to-tile"

    payload = json.loads(JsonFormatter().format(record))
    assert payload["level"] == "warning"
    assert payload["logger"] == "tile_system.cli"
    assert payload["event"] == "tile_system_input_rejected"
    assert payload["fields"] == {"command": "quadkey-to-tile"}
    assert payload["timestamp"].endswith("Z")


def test_json_formatter_renders_exceptions() -> None:
    from tile_system.observability import JsonFormatter

    try:
        raise ValueError("boom")
    except ValueError:
        exc_info = sys.exc_info()

    record = logging.LogRecord(
        name="x",
        level=logging.ERROR,
        pathname=__file__,
        lineno=1,
        msg="failed %s",
        args=("once",),
        exc_info=exc_info,
    )
    payload = json.loads(JsonFormatter().format(record))
    assert payload["event"] == "failed once"
    assert "ValueError: boom" in payload["fields"]["exception"]


@pytest.mark.usefixtures("restore_root_logger")
def test_configure_logging_json() -> None:
    from tile_system.observability import configure_logging

    stream = io.StringIO()
    configure_logging(log_level="debug", log_format="json", stream=stream)

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1

    logging.getLogger("tile_system.test").debug("converted", extra={"tile_x": 3})
    line = stream.getvalue().strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["event"] == "converted"
    assert payload["fields"]["tile_x"] == 3


@pytest.mark.usefixtures("restore_root_logger")
def test_configure_logging_text_replaces_handler() -> None:
    from tile_system.observability import configure_logging

    first = io.StringIO()
    second = io.StringIO()
    configure_logging(log_format="json", stream=first)
    configure_logging(log_level="INFO", log_format="text", stream=second)

    logging.getLogger("tile_system.test").info("hello")
    assert first.getvalue() == ""
    assert "INFO tile_system.test: hello" in second.getvalue()


@pytest.fixture
def preinstalled_handler():
    root = logging.getLogger()
    handler = logging.NullHandler()
    root.addHandler(handler)
    yield handler
    # Runs after restore_root_logger has torn down.
    assert handler in root.handlers
    root.removeHandler(handler)


def test_root_handlers_are_restored_after_configure_logging(
    preinstalled_handler: logging.Handler, restore_root_logger: logging.Logger
) -> None:
    from tile_system.observability import configure_logging

    configure_logging(log_format="text", stream=io.StringIO())
    assert preinstalled_handler not in restore_root_logger.handlers
