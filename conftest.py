# conftest.py

import json
import os

import pytest
from werkzeug.security import generate_password_hash

# Set testing environment BEFORE importing app so app.py picks TestingConfig
os.environ["FLASK_ENV"] = "testing"

# Now import app and other modules after environment is set
from app import app as flask_app
from cleanops.models import Company, User, UserRole, db
from cleanops.restore import init_restore
from cleanops.routes.admin_restore import register_restore_admin_routes

TARGET_PAYLOAD = [
    {
        "id": "client-x",
        "name": "Xavier Stone",
        "email": "xavier@example.com",
        "phone": "5551234567",
        "createdAt": "2026-01-16 00:55:59.824",
    },
    {
        "id": "client-y",
        "name": "Yolanda Park",
        "email": "yolanda@example.com",
        "phone": "",
        "createdAt": "2026-01-16T01:10:00Z",
    },
    {
        "id": "client-z",
        "name": "Zed Quinn",
        "email": "",
        "phone": "4085550000",
        "createdAt": "2026-01-17 09:00:00",
    },
]


@pytest.fixture(scope="function")
def app():
    """Configure the shared Flask application with a clean database per test"""
    flask_app.config.update(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret-key-for-testing-only",
            "ENABLE_FILE_LOGGING": False,
            "ENABLE_CONSOLE_LOGGING": False,
            "LOG_LEVEL": "DEBUG",
            "RESTORE_ENABLED": True,
            "RESTORE_BOOKINGS_CSV": None,
            "RESTORE_CUSTOMERS_CSV": None,
            "RESTORE_TARGETS_FILE": None,
            "RESTORE_ERROR_SAMPLE_LIMIT": 10,
            "RESTORE_DEDUP_WINDOW_MINUTES": 120,
            "RESTORE_DEFAULT_BOOKING_STATUS": "SCHEDULED",
        }
    )

    # Re-initialize logging with updated config to pick up LOG_LEVEL=DEBUG
    from cleanops.utils.logging_config import setup_logging

    setup_logging(flask_app)
    init_restore(flask_app)
    register_restore_admin_routes(flask_app)

    with flask_app.app_context():
        db.drop_all()
        db.create_all()
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture(autouse=True)
def app_context(app):
    """Automatically provide app context for all tests"""
    with app.app_context():
        yield


@pytest.fixture
def client(app):
    """Create a test client for the Flask application"""
    return app.test_client()


@pytest.fixture
def runner(app):
    """Create a test CLI runner for the Flask application"""
    return app.test_cli_runner()


@pytest.fixture
def company(app):
    company = Company(name="Sparkle Cleaning Co")
    db.session.add(company)
    db.session.commit()
    return company


def _make_user(company, *, email, role):
    user = User(
        email=email,
        name=email.split("@")[0].title(),
        password_hash=generate_password_hash("testpass123"),
        role=role,
        company_id=company.id,
        is_active=True,
    )
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def owner_user(company):
    return _make_user(company, email="owner@sparkle.test", role=UserRole.OWNER)


@pytest.fixture
def cleaner_user(company):
    return _make_user(company, email="cleaner@sparkle.test", role=UserRole.CLEANER)


@pytest.fixture
def login_as(client):
    """Return a helper that authenticates ``client`` as the given user"""

    def _login(user):
        with client.session_transaction() as session:
            session["_user_id"] = user.id
            session["_fresh"] = True
        return client

    return _login


@pytest.fixture
def target_payload():
    return [dict(item) for item in TARGET_PAYLOAD]


@pytest.fixture
def targets_file(app, tmp_path):
    """Write the default target list and point RESTORE_TARGETS_FILE at it"""
    path = tmp_path / "targets.json"
    path.write_text(json.dumps(TARGET_PAYLOAD), encoding="utf-8")
    app.config["RESTORE_TARGETS_FILE"] = str(path)
    return path
