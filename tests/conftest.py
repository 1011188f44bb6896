import os

# Settings are read at import time; point them at an in-memory database
os.environ["SUPABASE_URL"] = "https://project.supabase.test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"

import uuid  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from jose import jwt  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from orderdesk.core.payments import get_payment_processor  # noqa: E402
from orderdesk.core.storage_utils import get_storage  # noqa: E402
from orderdesk.database import get_session  # noqa: E402
from orderdesk.main import app  # noqa: E402
from orderdesk.models.user import User  # noqa: E402
from orderdesk.services.notification_service import OrderNotifier, get_notifier  # noqa: E402

API = "/api/v1"

ESTIMATE_PAYLOAD = {
    "request_type": "Estimate",
    "customer_email": "Pat@Example.com",
    "customer_name": "Pat Rivera",
    "company": "Rivera Signs",
    "customer_phone": "(212) 555-0100",
    "offering": "Laser Cutting",
    "material": "Aluminum 5052",
    "thickness": "1/8 in",
    "quantity": "25",
    "addons": ["Deburring", "Powder Coat"],
    "notes": "Brackets for a storefront sign",
}


class FakeStorage:
    """In-memory stand-in for the uploads bucket."""

    def __init__(self):
        self.blobs: dict[str, tuple[bytes, str]] = {}
        self.removed: list[str] = []
        self.fail_upload = False
        self.fail_remove = False
        self.fail_sign = False

    def upload(self, path: str, file_bytes: bytes, content_type: str) -> None:
        if self.fail_upload:
            raise RuntimeError("storage unavailable")
        if path in self.blobs:
            raise RuntimeError("The resource already exists")
        self.blobs[path] = (file_bytes, content_type)

    def remove(self, path: str) -> None:
        self.removed.append(path)
        if self.fail_remove:
            raise RuntimeError("storage unavailable")
        self.blobs.pop(path, None)

    def create_signed_url(self, path: str, expires_in: int) -> str:
        if self.fail_sign:
            raise RuntimeError("storage unavailable")
        return f"https://storage.test/signed/{path}?expires={expires_in}"


class Outbox:
    """Email sender that records messages instead of sending them."""

    def __init__(self):
        self.sent: list[dict] = []

    def __call__(self, **message):
        self.sent.append(message)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def outbox():
    return Outbox()


@pytest.fixture
def client(session, storage, outbox):
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_notifier] = lambda: OrderNotifier(
        sender=outbox, shop_name="NYC Metal Maker"
    )

    yield TestClient(app)

    app.dependency_overrides.clear()


def make_token(user_id: uuid.UUID, email: str) -> str:
    claims = {
        "sub": str(user_id),
        "email": email,
        "aud": "authenticated",
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    return jwt.encode(claims, os.environ["SUPABASE_JWT_SECRET"], algorithm="HS256")


def bearer(user_id: uuid.UUID, email: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, email)}"}


@pytest.fixture
def customer_headers():
    # Mixed case on purpose: portal emails compare case-insensitively
    return bearer(uuid.uuid4(), "PAT@example.com")


@pytest.fixture
def other_headers():
    return bearer(uuid.uuid4(), "sam@example.com")


@pytest.fixture
def admin_headers(session):
    admin_id = uuid.uuid4()
    session.add(
        User(
            id=admin_id,
            email="estimating@nycmetalmaker.test",
            name="estimating",
            role="admin",
        )
    )
    session.commit()
    return bearer(admin_id, "estimating@nycmetalmaker.test")


@pytest.fixture
def submit(client):
    """Submit an order through the public endpoint and return its JSON."""

    def _submit(**overrides):
        payload = {**ESTIMATE_PAYLOAD, **overrides}
        response = client.post(f"{API}/orders", json=payload)
        assert response.status_code == 200, response.text
        return response.json()

    return _submit


@pytest.fixture
def decline_payments():
    from orderdesk.core.payments import PaymentResult

    class DecliningProcessor:
        def charge(self, order, quote):
            return PaymentResult(succeeded=False, failure_reason="card_declined")

    app.dependency_overrides[get_payment_processor] = lambda: DecliningProcessor()
    yield
    app.dependency_overrides.pop(get_payment_processor, None)
