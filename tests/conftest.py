"""
Shared fixtures and fake collaborators for the moderation test suite.
"""

import uuid

import pytest
from fastapi.testclient import TestClient

from main import app
from app.core.config import Settings
from app.core.exceptions import ReportStoreException
from app.routers.moderation import get_moderation_handler
from app.schemas.moderation import ClassificationResult, Report
from app.services.decision import build_report_row
from app.services.moderation_service import ContentModerationHandler


class FakeClassifier:
    """Returns a fixed classification or raises a fixed error."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def classify(self, content):
        self.calls.append(content)
        if self.error is not None:
            raise self.error
        return self.result


class InMemoryReportStore:
    """Keeps created reports in a list instead of a database."""

    def __init__(self, error=None):
        self.error = error
        self.reports = []

    def create_report(self, community_id, accused_id, entity_id, entity_type, reason, description, priority):
        if self.error is not None:
            raise self.error
        row = build_report_row(community_id, accused_id, entity_id, entity_type, reason, description, priority)
        report = Report(id=str(uuid.uuid4()), **row)
        self.reports.append(report)
        return report


def make_settings(**overrides):
    values = {
        "openai_api_key": "sk-test",
        "supabase_url": "https://example.supabase.co",
        "supabase_service_role_key": "service-role-test",
        "report_store_backend": "supabase",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def clean_result():
    return ClassificationResult(
        flagged=False,
        categories={"hate": False, "violence": False},
        category_scores={"hate": 0.01, "violence": 0.02},
    )


def flagged_result(categories):
    return ClassificationResult(
        flagged=True,
        categories=categories,
        category_scores={name: 0.9 if value else 0.01 for name, value in categories.items()},
    )


@pytest.fixture
def valid_payload():
    return {
        "content": "Some user generated text",
        "author_id": "user-123",
        "entity_id": "post-456",
        "entity_type": "post",
        "community_id": "community-789",
    }


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def report_store():
    return InMemoryReportStore()


@pytest.fixture
def client():
    """Test client; tests install their handler with ``use_handler``."""
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def use_handler():
    """Route requests to a handler built around fake collaborators."""

    def install(classifier, report_store, settings=None):
        handler = ContentModerationHandler(
            settings or make_settings(),
            classifier=classifier,
            report_store=report_store,
        )
        app.dependency_overrides[get_moderation_handler] = lambda: handler
        return handler

    yield install
    app.dependency_overrides.clear()


@pytest.fixture
def failing_store():
    return InMemoryReportStore(error=ReportStoreException("Database error: connection refused", backend="memory"))
