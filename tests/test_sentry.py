"""
Tests for the Sentry integration: configuration and event filtering.
"""

import logging

import pytest

from taskboard.config import Settings
from taskboard.core.errors import InternalError, NotFoundError
from taskboard.integrations import sentry


# =============================================================================
# Setup
# =============================================================================


class TestInit:
    def test_disabled_without_dsn(self, monkeypatch):
        monkeypatch.setattr(sentry, "get_settings", lambda: Settings(sentry_dsn=""))
        assert sentry.init_sentry() is False

    def test_logs_are_breadcrumbs_only(self, monkeypatch):
        options = {}
        monkeypatch.setattr(
            sentry, "get_settings",
            lambda: Settings(sentry_dsn="https://key@o0.ingest.sentry.io/0"),
        )
        monkeypatch.setattr(sentry.sentry_sdk, "init", lambda **kw: options.update(kw))
        monkeypatch.setattr(sentry, "LoggingIntegration", lambda **kw: ("logging", kw))
        
        assert sentry.init_sentry() is True
        logging_options = [i[1] for i in options["integrations"] if isinstance(i, tuple)]
        # Server errors come from the web integrations; a log record must not add a second event
        assert logging_options == [{"level": logging.INFO, "event_level": None}]


# =============================================================================
# Filters
# =============================================================================


def _hint(error):
    return {"exc_info": (type(error), error, None)}


class TestFilters:
    @pytest.mark.parametrize("endpoint", [
        "taskboard.api.app.root",
        "taskboard.api.app.health_check",
    ])
    def test_health_transactions_dropped(self, endpoint):
        assert sentry._filter_transactions({"transaction": endpoint}, {}) is None

    def test_other_transactions_kept(self):
        event = {"transaction": "taskboard.api.projects.list_projects"}
        assert sentry._filter_transactions(event, {}) is event

    def test_client_errors_dropped(self):
        assert sentry._filter_events({}, _hint(NotFoundError())) is None

    def test_server_errors_scrubbed(self):
        event = {
            "request": {
                "headers": {"Authorization": "Bearer secret", "Accept": "*/*"},
                "data": {"password": "hunter2"},
            },
        }
        kept = sentry._filter_events(event, _hint(InternalError()))
        assert kept["request"]["headers"] == {"Authorization": "[Filtered]", "Accept": "*/*"}
        assert kept["request"]["data"] == "[Filtered]"
