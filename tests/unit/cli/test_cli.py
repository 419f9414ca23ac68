"""
Unit tests for the post-dispatch CLI.

`dispatch` is patched out; these tests check option parsing, defaults and
exit codes only.
"""

import logging
from unittest.mock import patch

import pytest
import structlog
from typer.testing import CliRunner

from post_dispatch.cli import app
from post_dispatch.dispatch.exceptions import ConfigurationError
from post_dispatch.models.outcome_models import DispatchReport, FailedPermanently, Succeeded


runner = CliRunner()


@pytest.fixture
def mock_dispatch():
    report = DispatchReport(
        results=[
            Succeeded(index=0, attempts=1, status_code=201),
            FailedPermanently(index=1, attempts=1, status_code=404),
        ],
        elapsed_ms=12,
        peak_in_flight=2,
    )
    with patch("post_dispatch.cli.dispatch", return_value=report) as mock:
        yield mock


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("TARGET_URL", "POST_TITLE", "POST_BODY", "CONCURRENCY_LIMIT", "MAX_ATTEMPTS", "REQUEST_COUNT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PROMETHEUS_ENABLED", "false")
    yield
    # configure_logging points the root handler at the runner's stdout
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()


def test_default_options(mock_dispatch):
    result = runner.invoke(app, [])

    assert result.exit_code == 0
    args, kwargs = mock_dispatch.call_args
    assert args[0] == "https://atomic.incfile.com/fakepost"
    assert args[1].title == "POST Request"
    assert args[1].body == "This is a POST request"
    assert kwargs["concurrency_limit"] == 10
    assert kwargs["max_attempts"] == 5
    assert kwargs["request_count"] == 5
    assert list(kwargs["retryable_status_codes"]) == [429, 503, 504]
    assert kwargs["base_delay_ms"] == 1000


def test_short_options(mock_dispatch):
    result = runner.invoke(
        app,
        ["http://localhost:9000/posts", "-t", "Hi", "-b", "There", "-c", "3", "-a", "2", "-n", "7"],
    )

    assert result.exit_code == 0
    args, kwargs = mock_dispatch.call_args
    assert args[0] == "http://localhost:9000/posts"
    assert args[1].title == "Hi"
    assert args[1].body == "There"
    assert kwargs["concurrency_limit"] == 3
    assert kwargs["max_attempts"] == 2
    assert kwargs["request_count"] == 7


def test_repeatable_retry_status(mock_dispatch):
    result = runner.invoke(app, ["--retry-status", "500", "--retry-status", "502", "--base-delay-ms", "10"])

    assert result.exit_code == 0
    kwargs = mock_dispatch.call_args.kwargs
    assert list(kwargs["retryable_status_codes"]) == [500, 502]
    assert kwargs["base_delay_ms"] == 10


def test_environment_defaults(mock_dispatch, monkeypatch):
    monkeypatch.setenv("CONCURRENCY_LIMIT", "4")
    monkeypatch.setenv("TARGET_URL", "http://env.example/posts")

    result = runner.invoke(app, [])

    assert result.exit_code == 0
    assert mock_dispatch.call_args.args[0] == "http://env.example/posts"
    assert mock_dispatch.call_args.kwargs["concurrency_limit"] == 4


def test_summary_line(mock_dispatch):
    result = runner.invoke(app, [])

    assert "1 succeeded, 1 failed (2 attempts, 12 ms)" in result.output


def test_failures_still_exit_zero(mock_dispatch):
    result = runner.invoke(app, [])

    assert result.exit_code == 0


def test_configuration_error_exits_two():
    error = ConfigurationError(
        "Invalid dispatch configuration: 1 error(s)",
        details={"errors": [{"loc": ("concurrency_limit",), "msg": "Input should be greater than or equal to 1"}]},
    )
    with patch("post_dispatch.cli.dispatch", side_effect=error):
        result = runner.invoke(app, ["-c", "0"])

    assert result.exit_code == 2
    assert "concurrency_limit" in result.output


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert "post-dispatch version 0.1.0" in result.output
