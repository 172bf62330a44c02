"""Unit tests for logging, metrics and error reporting setup."""

import json
import logging

import pytest
import structlog
from bugsnag.handlers import BugsnagHandler

from react_gateway.platform.observability.errors import initialize_bugsnag
from react_gateway.platform.observability.logging import configure_logging, correlation_id_ctx
from react_gateway.platform.observability.metrics import http_status_nxx


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_output_includes_context(self, restore_root_logger, capsys):
        configure_logging("INFO", json_output=True)
        token = correlation_id_ctx.set("req-1")
        try:
            with structlog.contextvars.bound_contextvars(task_id="task-1"):
                logging.getLogger("react_gateway.test").info("hello %s", "world")
        finally:
            correlation_id_ctx.reset(token)

        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["event"] == "hello world"
        assert record["correlation_id"] == "req-1"
        assert record["task_id"] == "task-1"
        assert record["level"] == "info"

    def test_sets_level_and_quiets_noisy_loggers(self, restore_root_logger):
        configure_logging("DEBUG", json_output=False)

        assert restore_root_logger.level == logging.DEBUG
        assert logging.getLogger("LiteLLM").level == logging.WARNING


class TestInitializeBugsnag:
    """Tests for initialize_bugsnag."""

    def test_local_is_noop(self, restore_root_logger):
        before = list(restore_root_logger.handlers)

        assert initialize_bugsnag("key", "local") is None
        assert restore_root_logger.handlers == before

    def test_attaches_error_handler(self, restore_root_logger):
        handler = initialize_bugsnag("0" * 32, "development")

        assert isinstance(handler, BugsnagHandler)
        assert handler.level == logging.ERROR
        assert handler in restore_root_logger.handlers


class TestHttpStatusNxx:
    @pytest.mark.parametrize("status, expected", [(200, "2XX"), (404, "4XX"), (503, "5XX")])
    def test_coarse_status(self, status, expected):
        assert http_status_nxx(status) == expected
