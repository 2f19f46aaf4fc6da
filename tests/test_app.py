"""Tests for the application factory."""

from jobwise.app import create_app, get_service
from jobwise.matching import KeywordMatchingEngine, RandomMatchingEngine
from jobwise.service import JobService


def test_defaults(monkeypatch):
    monkeypatch.delenv("JOBWISE_ENFORCE_TRANSITIONS", raising=False)
    monkeypatch.delenv("JOBWISE_MATCHER", raising=False)
    app = create_app({"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite://"})
    service = get_service(app)
    assert isinstance(service, JobService)
    assert service.enforce_transitions is True
    assert isinstance(service._matcher, RandomMatchingEngine)
    assert app.config["SESSION_COOKIE_HTTPONLY"] is True


def test_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db/jobs")
    monkeypatch.setenv("JOBWISE_ENFORCE_TRANSITIONS", "false")
    monkeypatch.setenv("JOBWISE_MATCHER", "keyword")
    monkeypatch.setenv("RENDER", "true")
    # The test override keeps the database local
    app = create_app({"SQLALCHEMY_DATABASE_URI": "sqlite://"})
    assert get_service(app).enforce_transitions is False
    assert isinstance(get_service(app)._matcher, KeywordMatchingEngine)
    assert app.config["SESSION_COOKIE_SECURE"] is True


def test_postgres_url_rewritten(monkeypatch):
    from jobwise.app import _database_url

    monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db/jobs")
    assert _database_url() == "postgresql://u:p@db/jobs"
    monkeypatch.delenv("DATABASE_URL")
    assert _database_url() == "sqlite:///jobwise.db"


def test_get_service_uses_current_app(app):
    assert get_service() is app.extensions["jobwise"]["service"]
