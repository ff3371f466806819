"""
Tests for structured logging setup and the reorder operation context.
"""
import logging

import pytest
import structlog
from structlog.testing import CapturingLogger

from reorder.logging_config import configure_logging, get_logger, ReorderContext


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
    logging.getLogger("reorder").handlers.clear()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_sets_level_on_package_logger(self):
        configure_logging(log_level="DEBUG")
        assert logging.getLogger("reorder").level == logging.DEBUG

    def test_level_defaults_to_environment(self, monkeypatch):
        monkeypatch.setenv("REORDER_LOG_LEVEL", "warning")
        monkeypatch.delenv("REORDER_LOG_FILE", raising=False)
        configure_logging()
        assert logging.getLogger("reorder").level == logging.WARNING

    def test_writes_to_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "reorder.log"
        logger = configure_logging(log_level="INFO", log_file=str(log_file))
        logger.info("hello", collection_id="c1")

        for handler in logging.getLogger("reorder").handlers:
            handler.flush()

        assert log_file.exists()
        assert "hello" in log_file.read_text()


class TestReorderContext:
    """Tests for ReorderContext."""

    def test_generates_operation_id(self):
        with ReorderContext("course-1", move_id="A") as ctx:
            assert len(ctx.operation_id) == 8
            assert ctx.start_time is not None

    def test_keeps_given_operation_id(self):
        with ReorderContext("course-1", operation_id="op-1") as ctx:
            assert ctx.operation_id == "op-1"

    def test_does_not_suppress_exceptions(self):
        with pytest.raises(RuntimeError):
            with ReorderContext("course-1"):
                raise RuntimeError("boom")

    def test_logs_failure(self):
        ctx = ReorderContext("course-1", move_id="A")
        ctx.logger = CapturingLogger()
        ctx.__enter__()
        ctx.__exit__(ValueError, ValueError("bad index"), None)

        failure = ctx.logger.calls[-1]
        assert failure.method_name == "error"
        assert failure.kwargs["error_type"] == "ValueError"
        assert failure.kwargs["status"] == "error"


def test_get_logger_returns_bindable_logger():
    logger = get_logger("reorder.test")
    assert hasattr(logger, "bind")
