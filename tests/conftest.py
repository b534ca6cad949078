import os

import pytest
from fastapi.testclient import TestClient

# Settings are read at import time, so the environment has to be in place first
os.environ['STORE_URL'] = 'sqlite://'
os.environ['RATE_LIMIT_MAX'] = '100000'
os.environ['MAIL_FROM'] = 'tickets@example.com'
os.environ['ADMIN_EMAIL'] = 'admin@example.com'
os.environ.pop('ADMIN_TOKEN', None)
os.environ.pop('SMTP_HOST', None)
os.environ.pop('API_PREFIX', None)
os.environ.pop('STATIC_DIR', None)

from src.database import Base, SessionLocal, engine  # noqa: E402
from src.main import app  # noqa: E402
from src.tickets.dependencies import get_notifier  # noqa: E402


VALID_SUBMISSION = {
    'firstName': 'Ada',
    'lastName': 'Lovelace',
    'email': 'ada@example.com',
    'ticketType': 'VIP Pass',
    'quantity': 2,
    'notes': 'Front row please',
}


class RecordingNotifier:
    """Stands in for EmailNotifier and remembers what it was asked to send."""

    def __init__(self):
        self.notified = []

    def notify(self, record):
        self.notified.append(record)


@pytest.fixture
def valid_submission():
    return dict(VALID_SUBMISSION)


@pytest.fixture(autouse=True)
def reset_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(notifier):
    app.dependency_overrides[get_notifier] = lambda: notifier
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
