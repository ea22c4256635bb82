"""
Shared fixtures: in-memory database, API client, seeded restaurant data
"""

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from foodorder.database import Base, get_db
from foodorder.auth.auth_handler import auth_handler
from foodorder.models.customer import Customer
from foodorder.models.restaurant import Restaurant, MenuCategory, MenuItem
from foodorder.utils.rate_limit import limiter
from main import app

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

limiter.enabled = False

@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)

@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()

def make_headers(user_id: str, role: str = "customer") -> dict:
    token = auth_handler.create_access_token({"sub": user_id, "role": role})
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture
def seed(db_session):
    """Two customers, an open restaurant with a small menu, and a few
    restaurants and items that must be refused"""
    alice = Customer(name="Alice Martin", email="alice@example.com", phone="555-0100")
    bob = Customer(name="Bob Stone", email="bob@example.com", phone="555-0101")

    restaurant = Restaurant(
        name="Burger Barn",
        email="hello@burgerbarn.test",
        phone="555-0200",
        address={"street": "1 Main St", "city": "Springfield"},
        rating=4.5,
        is_active=True,
        is_verified=True,
        delivery_fee=50,
        delivery_time_min=20,
        delivery_time_max=30,
    )
    closed = Restaurant(name="Closed Diner", is_active=False, is_verified=True, delivery_fee=10)
    unverified = Restaurant(name="New Place", is_active=True, is_verified=False, delivery_fee=10)
    rival = Restaurant(name="Taco Town", is_active=True, is_verified=True, delivery_fee=20)
    db_session.add_all([alice, bob, restaurant, closed, unverified, rival])
    db_session.flush()

    mains = MenuCategory(restaurant_id=restaurant.id, name="Mains")
    db_session.add(mains)
    db_session.flush()

    burger = MenuItem(
        restaurant_id=restaurant.id,
        category_id=mains.id,
        name="Classic Burger",
        description="Beef patty, cheddar, pickles",
        price=100,
        images=["burger-1.jpg", "burger-2.jpg"],
    )
    fries = MenuItem(restaurant_id=restaurant.id, name="Fries", price=35)
    sold_out = MenuItem(restaurant_id=restaurant.id, name="Milkshake", price=60, is_available=False)
    retired = MenuItem(restaurant_id=restaurant.id, name="Old Wrap", price=80, is_active=False)
    taco = MenuItem(restaurant_id=rival.id, name="Taco", price=40)
    db_session.add_all([burger, fries, sold_out, retired, taco])
    db_session.commit()

    return SimpleNamespace(
        alice=alice,
        bob=bob,
        restaurant=restaurant,
        closed=closed,
        unverified=unverified,
        rival=rival,
        burger=burger,
        fries=fries,
        sold_out=sold_out,
        retired=retired,
        taco=taco,
    )

@pytest.fixture
def alice_headers(seed):
    return make_headers(seed.alice.id)

@pytest.fixture
def bob_headers(seed):
    return make_headers(seed.bob.id)

@pytest.fixture
def restaurant_headers(seed):
    return make_headers(seed.restaurant.id, role="restaurant")

@pytest.fixture
def place_order(client, seed):
    """POST an order, defaulting to two burgers for Alice"""
    def _place(headers=None, **overrides):
        body = {
            "restaurantId": seed.restaurant.id,
            "items": [{"itemId": seed.burger.id, "quantity": 2}],
            "deliveryAddress": "42 Elm Street",
        }
        body.update(overrides)
        return client.post("/api/v1/orders/", json=body, headers=headers or make_headers(seed.alice.id))
    return _place

@pytest.fixture
def headers_for():
    return make_headers
