"""
Portfolio Backend: Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    ├── settings: fully populated Settings (no .env file, no real relay)
    ├── spy_gateway: AsyncMock standing in for PersistenceGateway
    ├── recording_mailer: MailTransport that records every send()
    ├── app / test_client: create_app() wired to the two fakes above,
    │   driven through httpx ASGITransport (lifespan does not run; test_main enters it directly)
    └── sqlite_gateway: real PersistenceGateway on a throwaway SQLite file
"""

import os
from typing import List, Optional
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set BEFORE any app imports: portfolio_api.main builds a module-level app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"

from portfolio_api.config import Settings  # noqa: E402
from portfolio_api.database import build_engine, create_tables  # noqa: E402
from portfolio_api.exceptions import TransportError  # noqa: E402
from portfolio_api.main import create_app  # noqa: E402
from portfolio_api.schemas.project import ProjectOut  # noqa: E402
from portfolio_api.schemas.review import ReviewOut  # noqa: E402
from portfolio_api.services.gateway import PersistenceGateway  # noqa: E402
from portfolio_api.services.mail_base import MailTransport  # noqa: E402


REVIEW_KEY = "review-secret"
ADMIN_EMAIL = "admin@example.com"
ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct-horse"


class RecordingMailer(MailTransport):
    """
    Fake transport: records each send() call as a dict.

    Set `error` to make every send raise it instead.
    """

    name = "recording"

    def __init__(self, error: Optional[Exception] = None):
        self.sent: List[dict] = []
        self.error = error

    async def send(
        self,
        from_display_name: str,
        submitter_email: str,
        recipient_email: str,
        subject: str,
        plain_body: str,
        html_body: str,
    ) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append(
            {
                "from_display_name": from_display_name,
                "submitter_email": submitter_email,
                "recipient_email": recipient_email,
                "subject": subject,
                "plain_body": plain_body,
                "html_body": html_body,
            }
        )


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def settings() -> Settings:
    """
    Complete configuration for the SMTP transport.

    _env_file=None keeps a developer's local .env out of the tests.
    """
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///./test.db",
        mail_transport="smtp",
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_username="mailer@example.com",
        smtp_password="smtp-password",
        sendgrid_api_key="",
        mail_from_address="",
        review_form_key=REVIEW_KEY,
        contact_form_key="",
        admin_email=ADMIN_EMAIL,
        jwt_secret="test-jwt-secret",
        admin_username=ADMIN_USERNAME,
        admin_password=ADMIN_PASSWORD,
        cors_origins="*",
        log_level="WARNING",
    )


@pytest.fixture
def sample_reviews() -> List[ReviewOut]:
    return [
        ReviewOut(id=1, company="Acme", name="Grace", review="Shipped on time."),
        ReviewOut(id=2, company="Initech", name="Linus", review="Clean code."),
    ]


@pytest.fixture
def sample_projects() -> List[ProjectOut]:
    return [
        ProjectOut(
            id=1,
            title="Notes",
            description="Handwriting parser",
            url="https://github.com/me/notes",
            action_label="Show Code",
        ),
        ProjectOut(
            id=2,
            title="Shop",
            description="Storefront",
            url="https://shop.example.com",
            action_label="Show Website",
        ),
    ]


@pytest.fixture
def spy_gateway(sample_reviews, sample_projects):
    """
    Spy persistence gateway.

    What:  AsyncMock with PersistenceGateway's interface; every method is awaitable.
    Why:   Lets route tests assert exactly how many store calls were made
           (zero for preflights and rejected submissions).
    """
    gateway = AsyncMock(spec=PersistenceGateway)
    gateway.list_reviews.return_value = sample_reviews
    gateway.list_projects.return_value = sample_projects
    gateway.insert_review.return_value = None
    gateway.ping.return_value = None
    return gateway


@pytest.fixture
def recording_mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def failing_mailer() -> RecordingMailer:
    """Transport that fails every send at the DATA stage."""
    return RecordingMailer(error=TransportError(stage="data", context={"host": "smtp.example.com"}))


@pytest.fixture
def app(settings, spy_gateway, recording_mailer):
    return create_app(settings=settings, gateway=spy_gateway, mailer=recording_mailer)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def sqlite_engine(tmp_path):
    """Async engine on an empty SQLite file (no tables)."""
    db_settings = Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'portfolio.db'}",
        log_level="WARNING",
    )
    engine = build_engine(db_settings)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def sqlite_gateway(sqlite_engine):
    """Real PersistenceGateway with the reviews and projects tables created."""
    await create_tables(sqlite_engine)
    return PersistenceGateway(sqlite_engine, query_timeout=5.0)
