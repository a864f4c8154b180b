from sqlalchemy import (
    Column, Integer, String, Date, DateTime, Numeric, ForeignKey, Enum, Uuid, func
)
from sqlalchemy.orm import relationship
import enum
import uuid
from database import Base


class VehicleStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"
    IN_MAINTENANCE = "IN_MAINTENANCE"
    DECOMMISSIONED = "DECOMMISSIONED"


class FuelType(str, enum.Enum):
    GASOLINE = "GASOLINE"
    DIESEL = "DIESEL"
    HYBRID = "HYBRID"
    ELECTRIC = "ELECTRIC"


class DocumentType(str, enum.Enum):
    CC = "CC"
    TI = "TI"
    PASSPORT = "PASSPORT"
    FOREIGN_ID = "FOREIGN_ID"


class RentalStatus(str, enum.Enum):
    RESERVED = "RESERVED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_uid = Column(Uuid, default=uuid.uuid4, unique=True, nullable=False)
    plate = Column(String(10), unique=True, nullable=False)
    brand = Column(String(80), nullable=False)
    model = Column(String(80), nullable=False)
    year = Column(Integer, nullable=False)
    vin = Column(String(17), unique=True, nullable=True)
    fuel_type = Column(Enum(FuelType, name="fuel_type", native_enum=False, create_constraint=True))
    status = Column(
        Enum(VehicleStatus, name="vehicle_status", native_enum=False, create_constraint=True),
        nullable=False,
        default=VehicleStatus.AVAILABLE,
        index=True,
    )
    # Nullable so that legacy rows without a price can be represented.
    daily_price = Column(Numeric(10, 2), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    rentals = relationship("Rental", back_populates="vehicle")


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    customer_uid = Column(Uuid, default=uuid.uuid4, unique=True, nullable=False)
    first_name = Column(String(120), nullable=False)
    last_name = Column(String(120), nullable=False)
    document_type = Column(
        Enum(DocumentType, name="document_type", native_enum=False, create_constraint=True),
        nullable=False,
    )
    document_number = Column(String(30), unique=True, nullable=False)
    email = Column(String(160), unique=True, nullable=False)
    phone = Column(String(30), nullable=False)
    address = Column(String(200), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    rentals = relationship("Rental", back_populates="customer")


class Rental(Base):
    __tablename__ = "rentals"

    id = Column(Integer, primary_key=True, index=True)
    rental_uid = Column(Uuid, default=uuid.uuid4, unique=True, nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    estimated_end_date = Column(Date, nullable=False)
    actual_end_date = Column(Date, nullable=True)
    cancellation_date = Column(Date, nullable=True)
    cancellation_reason = Column(String(250), nullable=True)
    reserved_daily_price = Column(Numeric(10, 2), nullable=False)
    estimated_total = Column(Numeric(12, 2), nullable=False)
    final_total = Column(Numeric(12, 2), nullable=True)
    status = Column(
        Enum(RentalStatus, name="rental_status", native_enum=False, create_constraint=True),
        nullable=False,
        default=RentalStatus.RESERVED,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    customer = relationship("Customer", back_populates="rentals")
    vehicle = relationship("Vehicle", back_populates="rentals")

    def __repr__(self):
        return f"<Rental(rental_uid={self.rental_uid}, vehicle_id={self.vehicle_id}, status={self.status})>"
