import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date
from decimal import Decimal
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from models import Customer, DocumentType, Rental, RentalStatus, Vehicle, VehicleStatus
from rental_manager import RentalManager

TODAY = date(2026, 10, 19)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def manager(db):
    return RentalManager(db, clock=lambda: TODAY)


@pytest.fixture
def make_vehicle(db):
    counter = {"n": 0}

    def _make(daily_price=Decimal("50.00"), status=VehicleStatus.AVAILABLE):
        counter["n"] += 1
        vehicle = Vehicle(
            vehicle_uid=uuid.uuid4(),
            plate=f"ABC{counter['n']:03d}",
            brand="Toyota",
            model="Corolla",
            year=2022,
            status=status,
            daily_price=daily_price,
        )
        db.add(vehicle)
        db.commit()
        return vehicle

    return _make


@pytest.fixture
def make_customer(db):
    counter = {"n": 0}

    def _make():
        counter["n"] += 1
        customer = Customer(
            customer_uid=uuid.uuid4(),
            first_name="Ana",
            last_name="Perez",
            document_type=DocumentType.CC,
            document_number=f"100{counter['n']:04d}",
            email=f"ana{counter['n']}@example.com",
            phone="555-0101",
        )
        db.add(customer)
        db.commit()
        return customer

    return _make


@pytest.fixture
def make_rental(db):
    """Store a rental as-is, bypassing the lifecycle rules."""

    def _make(vehicle, customer, start, end, status=RentalStatus.RESERVED, **fields):
        rental = Rental(
            rental_uid=uuid.uuid4(),
            vehicle=vehicle,
            customer=customer,
            start_date=start,
            estimated_end_date=end,
            reserved_daily_price=Decimal("50.00"),
            estimated_total=Decimal("50.00") * (end - start).days,
            status=status,
            **fields,
        )
        db.add(rental)
        db.commit()
        return rental

    return _make


@pytest.fixture
def vehicle(make_vehicle):
    return make_vehicle()


@pytest.fixture
def customer(make_customer):
    return make_customer()


@pytest.fixture
def client(db):
    from main import app, get_rental_manager

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rental_manager] = lambda: RentalManager(db, clock=lambda: TODAY)
    yield TestClient(app)
    app.dependency_overrides.clear()
