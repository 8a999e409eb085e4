"""
Shared pytest fixtures for the Sprout API test suite.

Every test runs the real FastAPI application against a fresh in-memory SQLite
database. Stripe, Shippo, Mailjet and Supabase Storage are swapped for
in-process fakes through ``app.dependency_overrides``.

Fixture overview
----------------
client          - httpx AsyncClient bound to the app (no lifespan, no network)
session_factory - sessionmaker on the test engine, for service-level tests
make_user       - creates a profile through POST /users/me, returns the uid
make_listing    - creates a listing through POST /plants, returns the JSON
stripe_gateway, shippo_client, mailjet_client, storage_bucket - the fakes
override_settings - swaps settings for one test
"""

import os

os.environ.update(
    {
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "WARNING",
        "LOG_FORMAT": "text",
        "DATABASE_URL": "sqlite+aiosqlite://",
        "SUPABASE_JWT_SECRET": "test-jwt-secret",
        "RATE_LIMIT_ENABLED": "false",
        "CONTACT_RATE_LIMIT": "3/minute",
        "STRIPE_SECRET_KEY": "sk_test_sprout",
        "STRIPE_CHECKOUT_WEBHOOK_SECRET": "whsec_checkout",
        "STRIPE_CONNECT_WEBHOOK_SECRET": "whsec_connect",
        "STRIPE_PRO_PRICE_ID": "price_pro_monthly",
        "STRIPE_CONNECT_REFRESH_URL": "https://sprout.test/seller/refresh",
        "STRIPE_CONNECT_RETURN_URL": "https://sprout.test/seller/return",
        "MAILJET_API_KEY": "mj-key",
        "MAILJET_SECRET_KEY": "mj-secret",
        "CONTACT_FORM_RECEIVER_EMAIL": "team@sprout.test",
        "SHIPPO_API_KEY": "shippo_test_key",
        "SUPABASE_URL": "https://project.supabase.co",
        "SUPABASE_SERVICE_ROLE_KEY": "service-role-key",
    }
)

import hashlib  # noqa: E402
import hmac  # noqa: E402
import json  # noqa: E402
import time  # noqa: E402
from typing import Any, Dict, List, Optional  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from jose import jwt  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from sprout.main import app  # noqa: E402
from sprout.modules.commerce.infrastructure.external.stripe_gateway import (  # noqa: E402
    StripeGateway,
    get_stripe_gateway,
)
from sprout.modules.contact.infrastructure.external.mailjet_client import get_mailjet_client  # noqa: E402
from sprout.modules.shipping.infrastructure.external.shippo_client import get_shippo_client  # noqa: E402
from sprout.shared.config.settings import Settings, get_settings  # noqa: E402
from sprout.shared.infrastructure.database.connection import Base  # noqa: E402
from sprout.shared.infrastructure.database.session import get_db_session  # noqa: E402
from sprout.shared.infrastructure.storage.supabase_storage import (  # noqa: E402
    SupabaseStorageClient,
    get_storage_client,
)

# Register every table on Base.metadata
from sprout.modules.commerce.infrastructure.database import models as _commerce  # noqa: E402,F401
from sprout.modules.community.infrastructure.database import models as _community  # noqa: E402,F401
from sprout.modules.messaging.infrastructure.database import models as _messaging  # noqa: E402,F401
from sprout.modules.notifications.infrastructure.database import models as _notifications  # noqa: E402,F401
from sprout.modules.plant_listings.infrastructure.database import models as _listings  # noqa: E402,F401
from sprout.modules.rewards.infrastructure.database import models as _rewards  # noqa: E402,F401
from sprout.modules.user_management.infrastructure.database import models as _users  # noqa: E402,F401

JWT_SECRET = os.environ["SUPABASE_JWT_SECRET"]


# ── Auth ─────────────────────────────────────────────────────────────────────


def make_token(
    user_id: str,
    email: Optional[str] = None,
    expires_in: int = 3600,
    secret: str = JWT_SECRET,
    audience: str = "authenticated",
) -> str:
    """Sign a Supabase-style access token."""
    now = int(time.time())
    claims: Dict[str, Any] = {
        "sub": user_id,
        "aud": audience,
        "role": "authenticated",
        "iat": now,
        "exp": now + expires_in,
    }
    if email:
        claims["email"] = email
    return jwt.encode(claims, secret, algorithm="HS256")


def auth_headers(user_id: str, email: Optional[str] = None) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, email or f'{user_id}@sprout.test')}"}


def stripe_signature(payload: bytes, secret: str, timestamp: Optional[int] = None) -> str:
    """Build a valid `stripe-signature` header for `payload`."""
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.{payload.decode('utf-8')}".encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def stripe_event(event_type: str, data_object: Dict[str, Any], event_id: str = "evt_test") -> bytes:
    return json.dumps(
        {"id": event_id, "object": "event", "type": event_type, "data": {"object": data_object}}
    ).encode("utf-8")


# ── Fakes ────────────────────────────────────────────────────────────────────


class FakeStripeGateway(StripeGateway):
    """Records Stripe calls instead of sending them; signature checks stay real."""

    def __init__(self, settings: Settings):
        super().__init__(settings)
        self.checkout_sessions: List[Dict[str, Any]] = []
        self.accounts: List[Dict[str, Any]] = []
        self.account_links: List[Dict[str, Any]] = []
        self.live_customers: List[str] = []

    async def create_checkout_session(self, **params: Any) -> Dict[str, Any]:
        self.require_configured()
        self.checkout_sessions.append(params)
        number = len(self.checkout_sessions)
        return {"id": f"cs_test_{number}", "url": f"https://checkout.stripe.test/pay/cs_test_{number}"}

    async def has_live_subscription(self, customer_id: str) -> bool:
        return customer_id in self.live_customers

    async def create_account(self, email: Optional[str], user_id: str) -> str:
        self.accounts.append({"email": email, "user_id": user_id})
        return f"acct_test_{len(self.accounts)}"

    async def create_account_link(self, account_id: str, refresh_url: str, return_url: str) -> str:
        self.account_links.append(
            {"account_id": account_id, "refresh_url": refresh_url, "return_url": return_url}
        )
        return f"https://connect.stripe.test/setup/{account_id}"


class FakeShippoClient:
    def __init__(self):
        self.rates: List[Dict[str, Any]] = [
            {
                "object_id": "rate_ups",
                "provider": "UPS",
                "servicelevel": {"token": "ups_ground"},
                "amount": "7.10",
                "currency": "USD",
            },
            {
                "object_id": "rate_usps_priority",
                "provider": "USPS",
                "servicelevel": {"token": "usps_priority"},
                "amount": "9.45",
                "currency": "USD",
            },
        ]
        self.transaction: Dict[str, Any] = {
            "status": "SUCCESS",
            "label_url": "https://shippo.test/labels/label_1.pdf",
            "tracking_number": "9400100000000000000000",
            "messages": [],
        }
        self.shipments: List[Dict[str, Any]] = []
        self.purchased: List[str] = []

    async def create_shipment(self, address_from, address_to, parcel) -> Dict[str, Any]:
        self.shipments.append({"address_from": address_from, "address_to": address_to, "parcel": parcel})
        return {"object_id": "shipment_1", "status": "SUCCESS", "rates": self.rates}

    async def create_transaction(self, rate_id: str, label_file_type: str = "PDF") -> Dict[str, Any]:
        self.purchased.append(rate_id)
        return dict(self.transaction)


class FakeMailjetClient:
    def __init__(self):
        self.sent: List[Dict[str, Any]] = []
        self.response: Dict[str, Any] = {"Messages": [{"Status": "success"}]}
        self.error: Optional[Exception] = None

    async def send_messages(self, messages: List[Dict[str, Any]]) -> Dict[str, Any]:
        if self.error is not None:
            raise self.error
        self.sent.extend(messages)
        return self.response


class FakeBucket:
    """The subset of the Supabase storage bucket API the storage client calls."""

    def __init__(self, name: str):
        self.name = name
        self.objects: Dict[str, bytes] = {}
        self.removed: List[str] = []

    def upload(self, path: str, data: bytes, file_options: Dict[str, str]) -> None:
        self.objects[path] = data

    def get_public_url(self, path: str) -> str:
        return f"https://project.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths: List[str]) -> None:
        for path in paths:
            self.removed.append(path)
            self.objects.pop(path, None)


class FakeSupabase:
    def __init__(self, bucket: FakeBucket):
        self.storage = self
        self._bucket = bucket

    def from_(self, name: str) -> FakeBucket:
        return self._bucket


# ── Database ─────────────────────────────────────────────────────────────────


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # SQLite needs an explicit BEGIN for savepoints to nest inside the transaction
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=True)


# ── Application ──────────────────────────────────────────────────────────────


@pytest.fixture
def stripe_gateway() -> FakeStripeGateway:
    return FakeStripeGateway(get_settings())


@pytest.fixture
def shippo_client() -> FakeShippoClient:
    return FakeShippoClient()


@pytest.fixture
def mailjet_client() -> FakeMailjetClient:
    return FakeMailjetClient()


@pytest.fixture
def storage_bucket() -> FakeBucket:
    return FakeBucket(get_settings().SUPABASE_STORAGE_BUCKET)


@pytest.fixture
async def client(session_factory, stripe_gateway, shippo_client, mailjet_client, storage_bucket):
    """An API client whose requests share the test database."""

    async def _get_test_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    storage = SupabaseStorageClient(client=FakeSupabase(storage_bucket))
    original_overrides = dict(app.dependency_overrides)

    app.dependency_overrides.update(
        {
            get_db_session: _get_test_session,
            get_stripe_gateway: lambda: stripe_gateway,
            get_shippo_client: lambda: shippo_client,
            get_mailjet_client: lambda: mailjet_client,
            get_storage_client: lambda: storage,
        }
    )

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    app.dependency_overrides.update(original_overrides)


@pytest.fixture
def override_settings():
    """Serve a modified copy of the settings to every request in this test."""

    def _apply(**changes: Any) -> Settings:
        settings = get_settings().model_copy(update=changes)
        app.dependency_overrides[get_settings] = lambda: settings
        return settings

    return _apply


# ── Builders ─────────────────────────────────────────────────────────────────


@pytest.fixture
def make_user(client):
    async def _make_user(user_id: str, username: Optional[str] = None) -> str:
        response = await client.post(
            "/api/v1/users/me",
            json={"username": username or user_id},
            headers=auth_headers(user_id),
        )
        assert response.status_code == 201, response.text
        return user_id

    return _make_user


@pytest.fixture
def make_listing(client):
    async def _make_listing(owner_id: str, **fields: Any) -> Dict[str, Any]:
        body = {
            "name": "Monstera deliciosa",
            "description": "Healthy cutting with two leaves",
            "price": 25.0,
            "listing_type": "sale",
            "quantity": 3,
            "tags": ["aroid"],
        }
        body.update(fields)
        response = await client.post("/api/v1/plants", json=body, headers=auth_headers(owner_id))
        assert response.status_code == 201, response.text
        return response.json()

    return _make_listing
