from fastapi import FastAPI, Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional
import logging
import uvicorn
import uuid

from config import CORS_ORIGINS, LOG_LEVEL, PORT
from database import engine, get_db, Base, transaction
from errors import RentalError, ConflictError, NotFoundError
from models import Customer, DocumentType, FuelType, Rental, Vehicle, VehicleStatus
from pricing import round_currency
from rental_manager import RentalManager
from schemas import (
    RentalCreate, RentalFinalize, RentalCancel, RentalResponse, RentalStatusLiteral,
    VehicleHistoryItem, VehicleCreate, VehicleStatusUpdate, VehicleResponse,
    CustomerCreate, CustomerResponse, ErrorResponse
)

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Rental Service")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RentalError)
async def rental_error_handler(request: Request, exc: RentalError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(message=exc.message).model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    # Malformed requests are input errors like any other, answered as 400.
    message = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
        for error in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(message=message or "Invalid request").model_dump(),
    )


def get_rental_manager(db: Session = Depends(get_db)) -> RentalManager:
    return RentalManager(db)


def to_rental_response(rental: Rental) -> RentalResponse:
    return RentalResponse(
        rental_uid=rental.rental_uid,
        customer_uid=rental.customer.customer_uid,
        vehicle_uid=rental.vehicle.vehicle_uid,
        status=rental.status.value,
        start_date=rental.start_date,
        estimated_end_date=rental.estimated_end_date,
        actual_end_date=rental.actual_end_date,
        reserved_daily_price=float(rental.reserved_daily_price),
        estimated_total=float(rental.estimated_total),
        final_total=float(rental.final_total) if rental.final_total is not None else None,
        cancellation_date=rental.cancellation_date,
        cancellation_reason=rental.cancellation_reason,
        created_at=rental.created_at,
        updated_at=rental.updated_at
    )


def to_vehicle_response(vehicle: Vehicle) -> VehicleResponse:
    return VehicleResponse(
        vehicle_uid=vehicle.vehicle_uid,
        plate=vehicle.plate,
        brand=vehicle.brand,
        model=vehicle.model,
        year=vehicle.year,
        vin=vehicle.vin,
        fuel_type=vehicle.fuel_type.value if vehicle.fuel_type else None,
        status=vehicle.status.value,
        daily_price=float(vehicle.daily_price) if vehicle.daily_price is not None else None
    )


def to_customer_response(customer: Customer) -> CustomerResponse:
    return CustomerResponse(
        customer_uid=customer.customer_uid,
        first_name=customer.first_name,
        last_name=customer.last_name,
        document_type=customer.document_type.value,
        document_number=customer.document_number,
        email=customer.email,
        phone=customer.phone,
        address=customer.address
    )


@app.get("/manage/health")
def health_check():
    return {"status": "ok"}


# Rentals

@app.get("/api/v1/rental", response_model=List[RentalResponse])
def get_rentals(manager: RentalManager = Depends(get_rental_manager)):
    return [to_rental_response(rental) for rental in manager.find_all()]


@app.get("/api/v1/rental/{rental_uid}", response_model=RentalResponse)
def get_rental(rental_uid: uuid.UUID, manager: RentalManager = Depends(get_rental_manager)):
    return to_rental_response(manager.find_one(rental_uid))


@app.post("/api/v1/rental", response_model=RentalResponse, status_code=201)
def create_rental(rental: RentalCreate, manager: RentalManager = Depends(get_rental_manager)):
    created = manager.create(
        customer_uid=rental.customer_uid,
        vehicle_uid=rental.vehicle_uid,
        start_date=rental.start_date,
        estimated_end_date=rental.estimated_end_date
    )
    return to_rental_response(created)


@app.post("/api/v1/rental/{rental_uid}/finalize", response_model=RentalResponse)
def finalize_rental(
    rental_uid: uuid.UUID,
    body: RentalFinalize,
    manager: RentalManager = Depends(get_rental_manager)
):
    return to_rental_response(manager.finalize(rental_uid, body.actual_end_date))


@app.post("/api/v1/rental/{rental_uid}/cancel", response_model=RentalResponse)
def cancel_rental(
    rental_uid: uuid.UUID,
    body: RentalCancel,
    manager: RentalManager = Depends(get_rental_manager)
):
    return to_rental_response(
        manager.cancel(rental_uid, reason=body.reason, cancellation_date=body.cancellation_date)
    )


@app.get("/api/v1/vehicles/{vehicle_uid}/history", response_model=List[VehicleHistoryItem])
def get_vehicle_history(
    vehicle_uid: uuid.UUID,
    status: Optional[RentalStatusLiteral] = Query(None),
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    manager: RentalManager = Depends(get_rental_manager)
):
    return manager.history_for_vehicle(vehicle_uid, status=status, date_from=date_from, date_to=date_to)


# Vehicles

def find_vehicle(db: Session, vehicle_uid: uuid.UUID) -> Vehicle:
    vehicle = db.query(Vehicle).filter(Vehicle.vehicle_uid == vehicle_uid).first()
    if not vehicle:
        raise NotFoundError(f"Vehicle {vehicle_uid} not found")
    return vehicle


@app.get("/api/v1/vehicles", response_model=List[VehicleResponse])
def get_vehicles(db: Session = Depends(get_db)):
    vehicles = db.query(Vehicle).order_by(Vehicle.created_at.desc(), Vehicle.id.desc()).all()
    return [to_vehicle_response(vehicle) for vehicle in vehicles]


@app.get("/api/v1/vehicles/{vehicle_uid}", response_model=VehicleResponse)
def get_vehicle(vehicle_uid: uuid.UUID, db: Session = Depends(get_db)):
    return to_vehicle_response(find_vehicle(db, vehicle_uid))


@app.post("/api/v1/vehicles", response_model=VehicleResponse, status_code=201)
def create_vehicle(vehicle: VehicleCreate, db: Session = Depends(get_db)):
    if db.query(Vehicle).filter(Vehicle.plate == vehicle.plate).first():
        raise ConflictError(f"Plate already exists ({vehicle.plate})")
    if vehicle.vin and db.query(Vehicle).filter(Vehicle.vin == vehicle.vin).first():
        raise ConflictError(f"VIN already exists ({vehicle.vin})")

    db_vehicle = Vehicle(
        vehicle_uid=uuid.uuid4(),
        plate=vehicle.plate,
        brand=vehicle.brand,
        model=vehicle.model,
        year=vehicle.year,
        vin=vehicle.vin,
        fuel_type=FuelType(vehicle.fuel_type) if vehicle.fuel_type else None,
        status=VehicleStatus.AVAILABLE,
        daily_price=round_currency(vehicle.daily_price)
    )
    try:
        with transaction(db):
            db.add(db_vehicle)
    except IntegrityError:
        raise ConflictError("Plate or VIN already exists")

    db.refresh(db_vehicle)
    return to_vehicle_response(db_vehicle)


@app.patch("/api/v1/vehicles/{vehicle_uid}/status", response_model=VehicleResponse)
def update_vehicle_status(
    vehicle_uid: uuid.UUID,
    body: VehicleStatusUpdate,
    db: Session = Depends(get_db)
):
    with transaction(db):
        vehicle = find_vehicle(db, vehicle_uid)
        vehicle.status = VehicleStatus(body.status)

    logger.info(f"Vehicle {vehicle_uid} set to {body.status}")
    return to_vehicle_response(vehicle)


# Customers

@app.get("/api/v1/customers", response_model=List[CustomerResponse])
def get_customers(db: Session = Depends(get_db)):
    customers = db.query(Customer).order_by(Customer.created_at.desc(), Customer.id.desc()).all()
    return [to_customer_response(customer) for customer in customers]


@app.get("/api/v1/customers/{customer_uid}", response_model=CustomerResponse)
def get_customer(customer_uid: uuid.UUID, db: Session = Depends(get_db)):
    customer = db.query(Customer).filter(Customer.customer_uid == customer_uid).first()
    if not customer:
        raise NotFoundError(f"Customer {customer_uid} not found")
    return to_customer_response(customer)


@app.post("/api/v1/customers", response_model=CustomerResponse, status_code=201)
def create_customer(customer: CustomerCreate, db: Session = Depends(get_db)):
    if db.query(Customer).filter(Customer.document_number == customer.document_number).first():
        raise ConflictError(f"Document number already exists ({customer.document_number})")
    if db.query(Customer).filter(Customer.email == customer.email).first():
        raise ConflictError(f"Email already exists ({customer.email})")

    db_customer = Customer(
        customer_uid=uuid.uuid4(),
        first_name=customer.first_name,
        last_name=customer.last_name,
        document_type=DocumentType(customer.document_type),
        document_number=customer.document_number,
        email=customer.email,
        phone=customer.phone,
        address=customer.address
    )
    try:
        with transaction(db):
            db.add(db_customer)
    except IntegrityError:
        raise ConflictError("Document number or email already exists")

    db.refresh(db_customer)
    return to_customer_response(db_customer)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=PORT)
