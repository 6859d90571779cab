"""Pytest configuration and shared fixtures."""

import json
from itertools import count

import pytest
from fastapi.testclient import TestClient

from jurnext.config import Settings
from jurnext.database import Database
from jurnext.main import create_app
from jurnext.middleware.security import limiter
from jurnext.services.gateway import CheckoutGatewayError, CheckoutSession
from jurnext.services.identity import IdentityVerifier


class FakeCheckoutGateway:
    """In-memory stand-in for the hosted checkout provider."""

    def __init__(self):
        self.sessions = {}
        self.created = []
        self._ids = count(1)

    def create_session(self, line_item, metadata, success_url, cancel_url):
        session_id = f"cs_test_{next(self._ids)}"
        session = CheckoutSession(
            id=session_id,
            url=f"https://checkout.test/pay/{session_id}",
            status="open",
            amount_total=line_item.unit_amount * line_item.quantity,
            metadata={k: str(v) for k, v in metadata.items()}
        )
        self.sessions[session_id] = session
        self.created.append({
            "line_item": line_item,
            "metadata": metadata,
            "success_url": success_url,
            "cancel_url": cancel_url
        })
        return session

    def complete(self, session_id, payment_intent, amount_total=None, status="complete", **metadata):
        session = self.sessions[session_id]
        session.status = status
        session.payment_intent = payment_intent
        if amount_total is not None:
            session.amount_total = amount_total
        session.metadata.update({k: str(v) for k, v in metadata.items()})
        return session

    def add_session(self, session):
        self.sessions[session.id] = session
        return session

    def retrieve_session(self, session_id):
        if session_id not in self.sessions:
            raise CheckoutGatewayError(f"No such checkout session: {session_id}")
        session = self.sessions[session_id]
        return CheckoutSession(
            id=session.id,
            url=session.url,
            status=session.status,
            payment_intent=session.payment_intent,
            amount_total=session.amount_total,
            metadata=dict(session.metadata)
        )

    def verify_webhook(self, payload, signature):
        if signature != "t=1,v1=valid":
            raise ValueError("Invalid signature")
        return json.loads(payload)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        token_secret="test-secret",
        client_domain="http://client.test",
        stripe_secret_key="sk_test_dummy",
        smtp_user="",
        smtp_password=""
    )


@pytest.fixture
def gateway() -> FakeCheckoutGateway:
    return FakeCheckoutGateway()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def client(settings, gateway):
    app = create_app(settings=settings, checkout_gateway=gateway)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def database(client) -> Database:
    return client.app.state.database


@pytest.fixture
def database_only(settings):
    """A database without the web application, for service tests."""
    database = Database(settings.database_url)
    database.open()
    yield database
    database.close()


@pytest.fixture
def db(database_only):
    session = database_only.session()
    yield session
    session.close()


@pytest.fixture
def auth_headers(settings):
    verifier = IdentityVerifier(settings)

    def _headers(email: str) -> dict:
        return {"Authorization": f"Bearer {verifier.issue(email)}"}

    return _headers
