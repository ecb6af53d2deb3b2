"""
Tests for the Sentry event filters.
"""

from tasklist.core.errors import ConfigError, NotFoundError
from tasklist.integrations.sentry import _filter_events, _filter_transactions, init_sentry


def test_disabled_without_dsn(settings):
    assert init_sentry(settings) is False


def test_expected_client_errors_are_dropped():
    exc = NotFoundError("Task not found")
    assert _filter_events({}, {"exc_info": (type(exc), exc, None)}) is None


def test_server_errors_are_kept_and_scrubbed():
    exc = ConfigError("JWT secret key is not configured")
    event = {"request": {"headers": {"Authorization": "Bearer abc", "Accept": "application/json"}}}

    kept = _filter_events(event, {"exc_info": (type(exc), exc, None)})

    assert kept["request"]["headers"]["Authorization"] == "[Filtered]"
    assert kept["request"]["headers"]["Accept"] == "application/json"


def test_health_checks_are_not_traced():
    assert _filter_transactions({"transaction": "/health"}, {}) is None
    assert _filter_transactions({"transaction": "list_tasks"}, {}) is not None
