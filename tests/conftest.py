"""Pytest fixtures for storefront tests."""

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.data.database import Base
from storefront.data.models import KVEntryModel  # noqa: F401
from storefront.domain.schemas import Address, PaymentMethodRef, Product
from storefront.repos.kv_store import SqlStore
from storefront.services.cart_service import CartService
from storefront.services.checkout_service import CheckoutSession
from storefront.services.coupon_service import CouponService
from storefront.services.identity import StaticIdentity


class FakeCatalog:
    """In-memory product catalog."""

    def __init__(self, products):
        self.products = {p.id: p for p in products}

    def get_by_id(self, product_id):
        return self.products.get(product_id)

    def set_stock(self, product_id, stock):
        self.products[product_id] = self.products[product_id].model_copy(update={"stock": stock})


@pytest.fixture
def db_session():
    """Fresh in-memory sqlite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def store(db_session):
    return SqlStore(db_session)


@pytest.fixture
def charizard():
    return Product(
        id="1",
        title="Charizard - Base Set",
        price=Decimal("5999.99"),
        stock=5,
        vendor="Elite Pokemon Cards",
        image="https://example.com/charizard.jpg",
    )


@pytest.fixture
def pikachu():
    return Product(id="2", title="Pikachu - Base Set", price=Decimal("299.99"), stock=10, vendor="Elite Pokemon Cards")


@pytest.fixture
def booster():
    return Product(id="4", title="Booster Pack - Jungle", price=Decimal("49.50"), stock=40, vendor="Card Corner")


@pytest.fixture
def catalog(charizard, pikachu, booster):
    return FakeCatalog([charizard, pikachu, booster])


@pytest.fixture
def identity():
    return StaticIdentity()


@pytest.fixture
def cart_service(store, identity, catalog):
    return CartService(store=store, identity=identity, catalog=catalog)


@pytest.fixture
def coupon_service(store, identity, cart_service):
    return CouponService(store=store, identity=identity, cart_service=cart_service)


@pytest.fixture
def address():
    return Address(
        first_name="Ash",
        last_name="Ketchum",
        email="ash@example.com",
        phone="555-0100",
        address="1 Route Street",
        city="Pallet Town",
        state="KT",
        postal_code="00001",
        country="JP",
    )


@pytest.fixture
def other_address():
    return Address(
        first_name="Misty",
        last_name="Waterflower",
        email="misty@example.com",
        phone="555-0199",
        address="2 Gym Road",
        city="Cerulean City",
        state="KT",
        postal_code="00002",
        country="JP",
        company="Cerulean Gym",
    )


@pytest.fixture
def ready_session(address):
    """Checkout session at the review step with everything filled in."""
    session = CheckoutSession("guest")
    session.update_shipping_address(address)
    session.update_payment_method(PaymentMethodRef(id="pm_1", type="card", label="Visa 4242"))
    session.set_accept_terms(True)
    session.set_current_step("review")
    return session
