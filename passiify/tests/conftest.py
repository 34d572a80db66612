"""
Shared fixtures: in-memory database, API test client and seeded settlement data.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import passiify.models  # noqa: F401
from passiify.main import app
from passiify.db.base import Base
from passiify.db.session import get_db
from passiify.core.security import get_password_hash, create_access_token, ADMIN_TOKEN, USER_TOKEN
from passiify.models import (
    Admin, User, UserRole, Gym, Event, Booking, EventBooking, PaymentStatus, PayoutStatus
)

ADMIN_EMAIL = "admin@passiify.in"
ADMIN_PASSWORD = "admin-secret"
PARTNER_EMAIL = "owner@irongym.in"
PARTNER_PASSWORD = "partner-secret"


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def override_db(session_factory):
    """Point the app's get_db dependency at the test database."""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client(override_db):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin(db):
    admin = Admin(email=ADMIN_EMAIL, hashed_password=get_password_hash(ADMIN_PASSWORD))
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": f"Bearer {create_access_token(admin.id, ADMIN_TOKEN)}"}


@pytest.fixture
def partner(db):
    user = User(
        name="Ravi Iron",
        email=PARTNER_EMAIL,
        hashed_password=get_password_hash(PARTNER_PASSWORD),
        role=UserRole.PARTNER
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def partner_headers(partner):
    return {"Authorization": f"Bearer {create_access_token(partner.id, USER_TOKEN)}"}


@pytest.fixture
def seeded(db, partner):
    """
    Two gyms and one event with a mix of settled and unsettled bookings.

    Pending totals:
      Iron Gym (Mumbai, partner)  3 bookings, gross 2500, fees 250 + 50, net 2200
      Peak Gym (Delhi)            1 booking,  gross 800,  fees 80 + 20, net 700 (no snapshot)
      Sunburn Night (Goa)         1 booking,  2 tickets, gross 2000, fees 200 + 40, net 1760
    """
    iron = Gym(name="Iron Gym", city="Mumbai", owner_id=partner.id)
    peak = Gym(name="Peak Gym", city="Delhi")
    sunburn = Event(name="Sunburn Night", organizer="Percept", location="Goa", host_id=partner.id)
    db.add_all([iron, peak, sunburn])
    db.commit()

    db.add_all([
        Booking(gym_id=iron.id, price=1000, platform_fee=100, razorpay_fee=20),
        Booking(gym_id=iron.id, price=1000, platform_fee=100, razorpay_fee=20),
        Booking(gym_id=iron.id, price=500, platform_fee=50, razorpay_fee=10),
        # Excluded: already paid out, and a failed payment.
        Booking(gym_id=iron.id, price=9000, platform_fee=900, payout_status=PayoutStatus.PAID),
        Booking(gym_id=iron.id, price=7000, payment_status=PaymentStatus.FAILED),
        Booking(gym_id=peak.id, price=800, platform_fee=80, razorpay_fee=20),
        EventBooking(event_id=sunburn.id, tickets=2, total_price=2000, platform_fee=200, razorpay_fee=40),
    ])
    db.commit()

    # Legacy row written before payouts were tracked.
    legacy = db.query(Booking).filter(Booking.gym_id == iron.id, Booking.price == 500).one()
    db.query(Booking).filter(Booking.id == legacy.id).update({Booking.payout_status: None})
    # Peak Gym's snapshot missing: net falls back to gross minus fees.
    db.query(Booking).filter(Booking.gym_id == peak.id).update({Booking.gym_payout: 0})
    db.commit()

    return {"iron": iron, "peak": peak, "sunburn": sunburn}
