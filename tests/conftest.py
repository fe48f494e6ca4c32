import os
import uuid
from datetime import datetime, timedelta, timezone

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from app.core.config import get_settings
from app.database import get_session
from app.main import app
from app.models.catalog import Brand, Category
from app.models.product import Product
from app.models.user import User
from app.schemas.order import OrderCreate

API = "/api/v1"


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session):
    app.dependency_overrides[get_session] = lambda: session
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="sent_emails", autouse=True)
def sent_emails_fixture(monkeypatch):
    """Capture outgoing mail instead of talking to SMTP."""
    sent: list[dict] = []

    def fake_send_email(to_email, subject, text_body, html_body=None):
        sent.append({"to": to_email, "subject": subject, "body": text_body})

    monkeypatch.setattr(
        "app.services.notification_service.send_email", fake_send_email
    )
    return sent


@pytest.fixture
def make_user(session):
    def _make(role: str = "user", account_status: str = "approved", email: str | None = None) -> User:
        tag = uuid.uuid4().hex[:8]
        user = User(
            id=uuid.uuid4(),
            email=email or f"{tag}@example.com",
            name=f"user-{tag}",
            role=role,
            account_status=account_status,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def customer(make_user) -> User:
    return make_user()


@pytest.fixture
def other_customer(make_user) -> User:
    return make_user()


@pytest.fixture
def admin(make_user) -> User:
    return make_user(role="admin")


@pytest.fixture
def make_product(session):
    def _make(
        name: str = "Rose Serum",
        price: float = 100.0,
        stock: int = 5,
        discount_price: float | None = None,
        is_active: bool = True,
        category: Category | None = None,
        brand: Brand | None = None,
    ) -> Product:
        product = Product(
            name=name,
            slug=f"{name.lower().replace(' ', '-')}-{uuid.uuid4().hex[:6]}",
            price=price,
            discount_price=discount_price,
            stock_quantity=stock,
            is_active=is_active,
            category_id=category.id if category else None,
            brand_id=brand.id if brand else None,
        )
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


def auth_headers(user: User) -> dict[str, str]:
    settings = get_settings()
    token = jwt.encode(
        {
            "sub": str(user.id),
            "email": user.email,
            "exp": int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp()),
        },
        settings.SUPABASE_JWT_SECRET,
        algorithm=settings.SUPABASE_JWT_ALG,
    )
    return {"Authorization": f"Bearer {token}"}


def order_body(items: list[tuple[Product, int]], payment_method: str = "card") -> dict:
    return {
        "items": [{"product_id": str(p.id), "quantity": q} for p, q in items],
        "payment_method": payment_method,
        "shipping_address": "12 Orchard Road",
        "shipping_city": "Springfield",
        "shipping_state": "IL",
        "shipping_zip_code": "62701",
        "shipping_country": "USA",
        "customer_name": "Jane Doe",
        "customer_phone": "555-0100",
        "customer_email": "jane@example.com",
        "notes": "Leave at the door",
    }


def order_payload(items: list[tuple[Product, int]], payment_method: str = "card") -> OrderCreate:
    return OrderCreate(**order_body(items, payment_method))
