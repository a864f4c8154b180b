from datetime import date
from decimal import Decimal
from typing import List, Optional, Union
import logging
import uuid

from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

import lifecycle
from availability import ensure_available
from database import transaction
from errors import ConflictError, DataIntegrityError, NotFoundError, ValidationError
from models import Customer, Rental, RentalStatus, Vehicle, VehicleStatus
from pricing import Clock, days_between, parse_iso_date, round_currency, today
from schemas import CancellationInfo, CustomerSummary, VehicleHistoryItem

logger = logging.getLogger(__name__)

DateInput = Union[str, date]


class RentalManager:
    """Creates, finalizes and cancels rentals and serves normalized reads.

    Every state change, including the status corrections made while reading,
    commits the rental and its vehicle together in one transaction. Reads may
    therefore write: a rental whose stored status no longer matches today's
    date is corrected and persisted before it is returned.
    """

    def __init__(self, db: Session, clock: Optional[Clock] = None):
        self.db = db
        self.clock = clock

    def today(self) -> date:
        return today(self.clock)

    # Lookups

    def _get_rental(self, rental_uid: uuid.UUID) -> Rental:
        rental = self.db.query(Rental).filter(Rental.rental_uid == rental_uid).first()
        if not rental:
            raise NotFoundError(f"Rental {rental_uid} not found")
        return rental

    def _get_vehicle(self, vehicle_uid: uuid.UUID, lock: bool = False) -> Vehicle:
        query = self.db.query(Vehicle).filter(Vehicle.vehicle_uid == vehicle_uid)
        if lock:
            query = query.with_for_update()
        vehicle = query.first()
        if not vehicle:
            raise NotFoundError(f"Vehicle {vehicle_uid} not found")
        return vehicle

    def _lock_vehicle(self, vehicle_id: int) -> Optional[Vehicle]:
        """Row-lock the vehicle a rental points at before changing its status."""
        return self.db.query(Vehicle).filter(Vehicle.id == vehicle_id).with_for_update().first()

    def _get_customer(self, customer_uid: uuid.UUID) -> Customer:
        customer = self.db.query(Customer).filter(Customer.customer_uid == customer_uid).first()
        if not customer:
            raise NotFoundError(f"Customer {customer_uid} not found")
        return customer

    # Write operations

    def create(
        self,
        customer_uid: uuid.UUID,
        vehicle_uid: uuid.UUID,
        start_date: DateInput,
        estimated_end_date: DateInput,
    ) -> Rental:
        start = parse_iso_date(start_date, "startDate")
        end = parse_iso_date(estimated_end_date, "estimatedEndDate")
        if end <= start:
            raise ValidationError("Estimated end date must be after the start date")

        with transaction(self.db):
            # The row lock keeps the availability check and the insert below
            # atomic against other bookings of the same vehicle.
            vehicle = self._get_vehicle(vehicle_uid, lock=True)
            if vehicle.status == VehicleStatus.DECOMMISSIONED:
                raise ConflictError("Vehicle is decommissioned")
            if vehicle.status == VehicleStatus.IN_MAINTENANCE:
                raise ConflictError("Vehicle is in maintenance")
            if vehicle.daily_price is None:
                raise DataIntegrityError("Vehicle has no daily price configured")

            customer = self._get_customer(customer_uid)

            ensure_available(self.db, vehicle.id, start, end)

            daily_price = Decimal(vehicle.daily_price)
            days = days_between(start, end)
            status = lifecycle.open_rental(vehicle, start, self.today())

            rental = Rental(
                customer=customer,
                vehicle=vehicle,
                start_date=start,
                estimated_end_date=end,
                reserved_daily_price=round_currency(daily_price),
                estimated_total=round_currency(daily_price * days),
                status=status,
            )
            self.db.add(rental)

        logger.info(f"Created rental {rental.rental_uid} for vehicle {vehicle_uid} as {status.value}")
        return rental

    def finalize(self, rental_uid: uuid.UUID, actual_end_date: DateInput) -> Rental:
        with transaction(self.db):
            rental = self._get_rental(rental_uid)
            actual_end = parse_iso_date(actual_end_date, "actualEndDate")
            vehicle = self._lock_vehicle(rental.vehicle_id)
            lifecycle.finalize(rental, vehicle, actual_end)

        logger.info(f"Finalized rental {rental_uid}, final total {rental.final_total}")
        return rental

    def cancel(
        self,
        rental_uid: uuid.UUID,
        reason: Optional[str],
        cancellation_date: Optional[DateInput] = None,
    ) -> Rental:
        with transaction(self.db):
            rental = self._get_rental(rental_uid)
            if cancellation_date:
                cancelled_on = parse_iso_date(cancellation_date, "cancellationDate")
            else:
                cancelled_on = self.today()
            lifecycle.cancel(rental, cancelled_on, reason)

        logger.info(f"Cancelled rental {rental_uid} on {cancelled_on}")
        return rental

    # Normalized reads

    def _normalize_one(self, rental: Rental) -> Rental:
        status = lifecycle.pending_correction(rental, self.today())
        if status is None:
            return rental

        rental_uid = rental.rental_uid
        try:
            with transaction(self.db):
                vehicle = self._lock_vehicle(rental.vehicle_id)
                lifecycle.apply_correction(rental, vehicle, status)
        except SQLAlchemyError:
            # The rollback expired the instance; it reloads its stored state.
            logger.exception(f"Could not persist status correction for rental {rental_uid}")
            return rental

        logger.info(f"Corrected rental {rental_uid} to {status.value}")
        return rental

    def _normalize_many(self, rentals: List[Rental]) -> List[Rental]:
        return [self._normalize_one(rental) for rental in rentals]

    def find_all(self) -> List[Rental]:
        rentals = self.db.query(Rental).order_by(Rental.created_at.desc(), Rental.id.desc()).all()
        return self._normalize_many(rentals)

    def find_one(self, rental_uid: uuid.UUID) -> Rental:
        return self._normalize_one(self._get_rental(rental_uid))

    def history_for_vehicle(
        self,
        vehicle_uid: uuid.UUID,
        status: Optional[Union[str, RentalStatus]] = None,
        date_from: Optional[DateInput] = None,
        date_to: Optional[DateInput] = None,
    ) -> List[VehicleHistoryItem]:
        vehicle = self._get_vehicle(vehicle_uid)

        query = (
            self.db.query(Rental)
            .options(joinedload(Rental.customer))
            .filter(Rental.vehicle_id == vehicle.id)
        )

        if status:
            try:
                query = query.filter(Rental.status == RentalStatus(status))
            except ValueError:
                raise ValidationError(f"Unknown rental status: {status}")

        if date_from:
            query = query.filter(Rental.start_date >= parse_iso_date(date_from, "from"))

        if date_to:
            upper = parse_iso_date(date_to, "to")
            query = query.filter(
                or_(
                    Rental.actual_end_date <= upper,
                    and_(Rental.actual_end_date.is_(None), Rental.estimated_end_date <= upper),
                )
            )

        rentals = self._normalize_many(query.order_by(Rental.start_date.desc()).all())
        return [self._history_item(rental) for rental in rentals]

    @staticmethod
    def _history_item(rental: Rental) -> VehicleHistoryItem:
        customer = rental.customer
        item = VehicleHistoryItem(
            rental_uid=rental.rental_uid,
            status=rental.status.value,
            start_date=rental.start_date,
            estimated_end_date=rental.estimated_end_date,
            actual_end_date=rental.actual_end_date,
            estimated_total=float(rental.estimated_total),
            final_total=float(rental.final_total) if rental.final_total is not None else None,
            customer=CustomerSummary(
                customer_uid=customer.customer_uid,
                first_name=customer.first_name,
                last_name=customer.last_name,
                document_number=customer.document_number,
                email=customer.email,
            ),
        )

        if rental.cancellation_date is not None or rental.cancellation_reason is not None:
            item.cancellation = CancellationInfo(
                cancelled_on=rental.cancellation_date,
                reason=rental.cancellation_reason,
            )

        return item
