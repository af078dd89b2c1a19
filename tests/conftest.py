import os

os.environ.setdefault("DATABASE_URI", "sqlite://")
os.environ.setdefault("ENV", "test")

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.database import get_session
from app.main import app
from app.models.customer_profile import CustomerProfile
from app.models.service_order import ServiceOrder
from app.models.user import User
from app.services.service_orders import ServiceOrderService
from app.utils.token import get_current_user

T0 = datetime(2026, 3, 2, 8, 0, 0)


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
def customer(session):
    user = User(email="ana@example.com", role="user")
    session.add(user)
    session.commit()
    session.refresh(user)

    profile = CustomerProfile(
        user_id=user.user_id,
        first_name="Ana",
        last_name="Reyes",
        name="Ana Reyes",
        contact="09171234567",
        email="ana@example.com",
        address="12 Mabini St",
    )
    session.add(profile)
    session.commit()
    session.refresh(profile)
    return profile


@pytest.fixture
def admin_user(session):
    admin = User(email="admin@example.com", role="admin")
    session.add(admin)
    session.commit()
    session.refresh(admin)
    return admin


@pytest.fixture
def make_order(session, customer):
    def _make(payment_method="cash", **fields):
        data = {
            "customer_id": customer.customer_id,
            "service_type": "wash_dry_fold",
            "pickup_date": "2026-03-02",
            "pickup_time": "09:00",
            "load_count": 2,
            "total_price": 240.0,
        }
        data.update(fields)
        return ServiceOrderService(session).create_order(data, payment_method)

    return _make


@pytest.fixture
def reload(session):
    def _reload(order_id):
        return session.get(ServiceOrder, order_id, populate_existing=True)

    return _reload


@pytest.fixture
def current_user():
    return {"user": None}


@pytest.fixture
def client(session, current_user):
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_current_user] = lambda: current_user["user"]
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client, current_user, admin_user):
    current_user["user"] = admin_user
    return client


@pytest.fixture
def customer_client(client, current_user, session, customer):
    current_user["user"] = session.get(User, customer.user_id)
    return client
