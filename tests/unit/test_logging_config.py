"""Tests for smart_scheduler/logging_config.py"""

import io
import json
import threading

import pytest

from smart_scheduler.logging_config import add_thread_name, get_logger, setup_logging


@pytest.fixture
def log_stream():
    stream = io.StringIO()
    yield stream
    setup_logging(level="WARNING")


def read_events(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


class TestAddThreadName:
    def test_adds_current_thread(self):
        event = add_thread_name(None, "info", {"event": "x"})
        assert event["thread"] == threading.current_thread().name

    def test_keeps_explicit_value(self):
        event = add_thread_name(None, "info", {"event": "x", "thread": "custom"})
        assert event["thread"] == "custom"


class TestSetupLogging:
    def test_json_output_carries_context(self, log_stream):
        setup_logging(level="INFO", json_output=True, stream=log_stream)

        get_logger("tests.logging.json").info("slot_chosen", start="2024-09-01T11:00:00Z")

        [event] = read_events(log_stream)
        assert event["event"] == "slot_chosen"
        assert event["start"] == "2024-09-01T11:00:00Z"
        assert event["level"] == "info"
        assert event["logger"] == "tests.logging.json"
        assert event["thread"] == threading.current_thread().name
        assert event["timestamp"].endswith("Z")

    def test_level_filters_debug(self, log_stream):
        setup_logging(level="INFO", json_output=True, stream=log_stream)

        get_logger("tests.logging.level").debug("candidate_scored")

        assert read_events(log_stream) == []

    def test_worker_thread_name_recorded(self, log_stream):
        setup_logging(level="INFO", json_output=True, stream=log_stream)
        logger = get_logger("tests.logging.thread")

        worker = threading.Thread(target=lambda: logger.info("booked"), name="SchedulerThread_0")
        worker.start()
        worker.join()

        [event] = read_events(log_stream)
        assert event["thread"] == "SchedulerThread_0"

    def test_level_from_environment(self, log_stream, monkeypatch):
        monkeypatch.setenv("SMART_SCHEDULER_LOG_LEVEL", "ERROR")
        setup_logging(json_output=True, stream=log_stream)

        get_logger("tests.logging.env").warning("ignored")

        assert read_events(log_stream) == []
