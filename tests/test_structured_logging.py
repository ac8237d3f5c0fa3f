# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for :mod:`datacode.logging`."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from io import StringIO

import pytest

from datacode.logging import (
    StructuredLogger,
    _coerce_level,
    configure_logging,
    get_logger,
)


pytestmark = pytest.mark.usefixtures("reset_logging_state")


class _CaptureHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@contextmanager
def _capture(logger: logging.Logger) -> Iterator[list[logging.LogRecord]]:
    handler = _CaptureHandler()
    logger.addHandler(handler)
    try:
        yield handler.records
    finally:
        logger.removeHandler(handler)
        handler.close()


def test_structured_logger_emits_event_and_context() -> None:
    logger = get_logger("tests.datacode.logging").bind(output="data.py")
    base_logger = logger.logger
    base_logger.setLevel(logging.INFO)

    with _capture(base_logger) as records:
        logger.info("written", event="tests.written", context={"functions": 2})

    assert len(records) == 1
    record = records[0]
    assert record.event == "tests.written"
    assert record.context == {"output": "data.py", "functions": 2}
    assert record.getMessage() == "written"


def test_event_is_required() -> None:
    logger = get_logger("tests.datacode.missing")
    logger.logger.setLevel(logging.INFO)

    with pytest.raises(TypeError, match="'event'"):
        logger.info("missing-event", context={"detail": True})


def test_context_must_be_mapping() -> None:
    logger = get_logger("tests.datacode.context")
    logger.logger.setLevel(logging.INFO)

    with pytest.raises(TypeError, match="context must be a mapping"):
        logger.info("bad", event="tests.bad", context=["not", "a", "mapping"])


def test_get_logger_preserves_override_context() -> None:
    override = logging.getLogger("tests.datacode.override")
    adapter = StructuredLogger(override, context={"existing": True})

    logger = get_logger("ignored", logger_override=adapter, context={"bound": 1})

    assert logger.logger is override
    assert logger.extra == {"existing": True, "bound": 1}
    assert adapter.extra == {"existing": True}


def test_get_logger_without_override_uses_named_logger() -> None:
    logger = get_logger("tests.datacode.named", context={"run": 1})

    assert logger.logger is logging.getLogger("tests.datacode.named")
    assert logger.extra == {"run": 1}


def test_configure_logging_respects_existing_handlers() -> None:
    root = logging.getLogger()
    root_handler = logging.NullHandler()
    root.handlers = [root_handler]

    configure_logging(level="DEBUG", json_mode=True)

    assert root.handlers == [root_handler]
    assert root.level == logging.DEBUG


def test_configure_logging_honors_env_toggles() -> None:
    configure_logging(
        force=True,
        env={"DATACODE_LOG_FORMAT": "json", "DATACODE_LOG_LEVEL": "warning"},
    )

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert root.handlers[0].formatter.__class__.__name__ == "_JsonFormatter"
    assert root.level == logging.WARNING


def test_configure_logging_defaults_to_text_formatter() -> None:
    configure_logging(force=True, env={})

    root = logging.getLogger()
    assert root.handlers[0].formatter.__class__.__name__ != "_JsonFormatter"
    assert root.level == logging.INFO


def test_json_mode_emits_structured_output(monkeypatch: pytest.MonkeyPatch) -> None:
    stream = StringIO()
    monkeypatch.setattr(sys, "stderr", stream)

    configure_logging(json_mode=True, force=True)
    logger = get_logger("tests.datacode.json").bind(component="json-test")
    logger.logger.setLevel(logging.INFO)

    logger.info("payload", event="tests.json", context={"key": "value"})
    logging.getLogger().handlers[0].flush()

    payload = json.loads(stream.getvalue().strip())
    assert payload["event"] == "tests.json"
    assert payload["context"] == {"component": "json-test", "key": "value"}
    assert payload["message"] == "payload"
    assert payload["logger"] == "tests.datacode.json"


def test_coerce_level() -> None:
    assert _coerce_level(None) == logging.INFO
    assert _coerce_level(logging.ERROR) == logging.ERROR
    assert _coerce_level("debug") == logging.DEBUG
    with pytest.raises(TypeError, match="Unknown log level"):
        _ = _coerce_level("LOUD")
