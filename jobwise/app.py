import os
import random

from flask import Flask, current_app

from jobwise.feedback import RandomFeedbackEngine
from jobwise.identity import SessionIdentityProvider
from jobwise.log import configure_logging
from jobwise.matching import create_matching_engine
from jobwise.models import db
from jobwise.service import JobService
from jobwise.store import DomainStore

EXTENSION_KEY = "jobwise"


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _database_url():
    url = os.environ.get("DATABASE_URL")

    # Local fallback
    if not url:
        url = "sqlite:///jobwise.db"

    # Fix postgres:// issue
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


def create_app(test_config=None):
    app = Flask(__name__)

    # ================= CONFIG =================
    app.config.update(
        SECRET_KEY=os.environ.get("SECRET_KEY", "dev-secret-key"),
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
        SESSION_COOKIE_SECURE=os.environ.get("RENDER") == "true",
        SQLALCHEMY_DATABASE_URI=_database_url(),
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        JOBWISE_ENFORCE_TRANSITIONS=_env_flag("JOBWISE_ENFORCE_TRANSITIONS", True),
        JOBWISE_MATCHER=os.environ.get("JOBWISE_MATCHER", "random"),
        JOBWISE_SEED=os.environ.get("JOBWISE_SEED"),
        LOG_LEVEL=os.environ.get("LOG_LEVEL", "INFO"),
    )
    if test_config:
        app.config.update(test_config)

    configure_logging(app.config["LOG_LEVEL"])

    # ================= DATABASE =================
    db.init_app(app)
    with app.app_context():
        db.create_all()

    # ================= SERVICES =================
    seed = app.config["JOBWISE_SEED"]
    rng = random.Random(int(seed)) if seed not in (None, "") else random.Random()

    store = DomainStore(db)
    service = JobService(
        store,
        create_matching_engine(app.config["JOBWISE_MATCHER"], rng),
        RandomFeedbackEngine(rng),
        enforce_transitions=app.config["JOBWISE_ENFORCE_TRANSITIONS"],
    )
    app.extensions[EXTENSION_KEY] = {
        "service": service,
        "identity": SessionIdentityProvider(store),
    }
    app.logger.info("JobWise ready (matcher=%s)", app.config["JOBWISE_MATCHER"])
    return app


def get_service(app=None):
    """The JobService built for ``app`` (defaults to the current app)."""
    app = app or current_app
    return app.extensions[EXTENSION_KEY]["service"]


def get_identity(app=None):
    app = app or current_app
    return app.extensions[EXTENSION_KEY]["identity"]
