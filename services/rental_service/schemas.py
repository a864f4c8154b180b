from pydantic import BaseModel, Field
from uuid import UUID
from datetime import date, datetime
from typing import Literal, Optional

RentalStatusLiteral = Literal["RESERVED", "IN_PROGRESS", "COMPLETED", "CANCELLED"]
VehicleStatusLiteral = Literal["AVAILABLE", "UNAVAILABLE", "IN_MAINTENANCE", "DECOMMISSIONED"]


class RentalCreate(BaseModel):
    customer_uid: UUID = Field(validation_alias="customerUid")
    vehicle_uid: UUID = Field(validation_alias="vehicleUid")
    start_date: str = Field(validation_alias="startDate")
    estimated_end_date: str = Field(validation_alias="estimatedEndDate")

    class Config:
        populate_by_name = True


class RentalFinalize(BaseModel):
    actual_end_date: str = Field(validation_alias="actualEndDate")

    class Config:
        populate_by_name = True


class RentalCancel(BaseModel):
    reason: Optional[str] = Field(None, max_length=250)
    cancellation_date: Optional[str] = Field(None, validation_alias="cancellationDate")

    class Config:
        populate_by_name = True


class RentalResponse(BaseModel):
    rental_uid: UUID = Field(validation_alias="rentalUid", serialization_alias="rentalUid")
    customer_uid: UUID = Field(validation_alias="customerUid", serialization_alias="customerUid")
    vehicle_uid: UUID = Field(validation_alias="vehicleUid", serialization_alias="vehicleUid")
    status: RentalStatusLiteral
    start_date: date = Field(validation_alias="startDate", serialization_alias="startDate")
    estimated_end_date: date = Field(validation_alias="estimatedEndDate", serialization_alias="estimatedEndDate")
    actual_end_date: Optional[date] = Field(None, validation_alias="actualEndDate", serialization_alias="actualEndDate")
    reserved_daily_price: float = Field(validation_alias="reservedDailyPrice", serialization_alias="reservedDailyPrice")
    estimated_total: float = Field(validation_alias="estimatedTotal", serialization_alias="estimatedTotal")
    final_total: Optional[float] = Field(None, validation_alias="finalTotal", serialization_alias="finalTotal")
    cancellation_date: Optional[date] = Field(None, validation_alias="cancellationDate", serialization_alias="cancellationDate")
    cancellation_reason: Optional[str] = Field(None, validation_alias="cancellationReason", serialization_alias="cancellationReason")
    created_at: Optional[datetime] = Field(None, validation_alias="createdAt", serialization_alias="createdAt")
    updated_at: Optional[datetime] = Field(None, validation_alias="updatedAt", serialization_alias="updatedAt")

    class Config:
        populate_by_name = True


class CustomerSummary(BaseModel):
    customer_uid: UUID = Field(validation_alias="customerUid", serialization_alias="customerUid")
    first_name: str = Field(validation_alias="firstName", serialization_alias="firstName")
    last_name: str = Field(validation_alias="lastName", serialization_alias="lastName")
    document_number: str = Field(validation_alias="documentNumber", serialization_alias="documentNumber")
    email: str

    class Config:
        populate_by_name = True


class CancellationInfo(BaseModel):
    cancelled_on: Optional[date] = Field(None, validation_alias="date", serialization_alias="date")
    reason: Optional[str] = None

    class Config:
        populate_by_name = True


class VehicleHistoryItem(BaseModel):
    rental_uid: UUID = Field(validation_alias="rentalUid", serialization_alias="rentalUid")
    status: RentalStatusLiteral
    start_date: date = Field(validation_alias="startDate", serialization_alias="startDate")
    estimated_end_date: date = Field(validation_alias="estimatedEndDate", serialization_alias="estimatedEndDate")
    actual_end_date: Optional[date] = Field(None, validation_alias="actualEndDate", serialization_alias="actualEndDate")
    estimated_total: float = Field(validation_alias="estimatedTotal", serialization_alias="estimatedTotal")
    final_total: Optional[float] = Field(None, validation_alias="finalTotal", serialization_alias="finalTotal")
    customer: CustomerSummary
    cancellation: Optional[CancellationInfo] = None

    class Config:
        populate_by_name = True


class VehicleCreate(BaseModel):
    plate: str = Field(min_length=1, max_length=10)
    brand: str = Field(min_length=1, max_length=80)
    model: str = Field(min_length=1, max_length=80)
    year: int = Field(ge=1900, le=2100)
    vin: Optional[str] = Field(None, max_length=17)
    fuel_type: Optional[Literal["GASOLINE", "DIESEL", "HYBRID", "ELECTRIC"]] = Field(
        None, validation_alias="fuelType"
    )
    daily_price: float = Field(gt=0, validation_alias="dailyPrice")

    class Config:
        populate_by_name = True


class VehicleStatusUpdate(BaseModel):
    status: VehicleStatusLiteral


class VehicleResponse(BaseModel):
    vehicle_uid: UUID = Field(validation_alias="vehicleUid", serialization_alias="vehicleUid")
    plate: str
    brand: str
    model: str
    year: int
    vin: Optional[str] = None
    fuel_type: Optional[str] = Field(None, validation_alias="fuelType", serialization_alias="fuelType")
    status: VehicleStatusLiteral
    daily_price: Optional[float] = Field(None, validation_alias="dailyPrice", serialization_alias="dailyPrice")

    class Config:
        populate_by_name = True


class CustomerCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=120, validation_alias="firstName")
    last_name: str = Field(min_length=1, max_length=120, validation_alias="lastName")
    document_type: Literal["CC", "TI", "PASSPORT", "FOREIGN_ID"] = Field(validation_alias="documentType")
    document_number: str = Field(min_length=1, max_length=30, validation_alias="documentNumber")
    email: str = Field(min_length=3, max_length=160)
    phone: str = Field(min_length=1, max_length=30)
    address: Optional[str] = Field(None, max_length=200)

    class Config:
        populate_by_name = True


class CustomerResponse(BaseModel):
    customer_uid: UUID = Field(validation_alias="customerUid", serialization_alias="customerUid")
    first_name: str = Field(validation_alias="firstName", serialization_alias="firstName")
    last_name: str = Field(validation_alias="lastName", serialization_alias="lastName")
    document_type: str = Field(validation_alias="documentType", serialization_alias="documentType")
    document_number: str = Field(validation_alias="documentNumber", serialization_alias="documentNumber")
    email: str
    phone: str
    address: Optional[str] = None

    class Config:
        populate_by_name = True


class ErrorResponse(BaseModel):
    message: str
