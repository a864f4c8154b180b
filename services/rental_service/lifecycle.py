"""
Rental state machine.

    RESERVED ──(start date reached)──> IN_PROGRESS ──finalize──> COMPLETED
        │
        └──cancel (before start date)──> CANCELLED

COMPLETED and CANCELLED are terminal. Every transition validates first and
only then touches the rental or its vehicle, so a rejected transition leaves
both objects exactly as they were.
"""
from datetime import date
from typing import Optional

from errors import ConflictError, ValidationError
from models import Rental, RentalStatus, Vehicle, VehicleStatus
from pricing import days_between, round_currency

TERMINAL_STATUSES = frozenset({RentalStatus.COMPLETED, RentalStatus.CANCELLED})

# Vehicle states owned by fleet management; rentals never overwrite them.
PROTECTED_VEHICLE_STATUSES = frozenset({VehicleStatus.DECOMMISSIONED, VehicleStatus.IN_MAINTENANCE})


def initial_status(start: date, today: date) -> RentalStatus:
    return RentalStatus.RESERVED if start > today else RentalStatus.IN_PROGRESS


def _set_vehicle_status(vehicle: Optional[Vehicle], status: VehicleStatus) -> None:
    if vehicle is None or vehicle.status in PROTECTED_VEHICLE_STATUSES:
        return
    vehicle.status = status


def open_rental(vehicle: Vehicle, start: date, today: date) -> RentalStatus:
    status = initial_status(start, today)
    if status == RentalStatus.IN_PROGRESS:
        _set_vehicle_status(vehicle, VehicleStatus.UNAVAILABLE)
    return status


def finalize(rental: Rental, vehicle: Optional[Vehicle], actual_end: date) -> None:
    if rental.status != RentalStatus.IN_PROGRESS:
        raise ConflictError(f"Only an IN_PROGRESS rental can be finalized (current: {rental.status.value})")
    if actual_end <= rental.start_date:
        raise ConflictError("Actual end date must be after the start date")

    days = days_between(rental.start_date, actual_end)

    rental.status = RentalStatus.COMPLETED
    rental.actual_end_date = actual_end
    rental.final_total = round_currency(rental.reserved_daily_price * days)
    rental.cancellation_date = None
    rental.cancellation_reason = None

    # The rental held the vehicle, so hand it back regardless of its status.
    if vehicle is not None:
        vehicle.status = VehicleStatus.AVAILABLE


def cancel(rental: Rental, cancellation_date: date, reason: Optional[str]) -> None:
    if rental.status != RentalStatus.RESERVED:
        raise ConflictError(f"Only a RESERVED rental can be cancelled (current: {rental.status.value})")
    if cancellation_date >= rental.start_date:
        raise ConflictError("A rental can only be cancelled before its start date")

    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("A cancellation reason is required")

    rental.status = RentalStatus.CANCELLED
    rental.cancellation_date = cancellation_date
    rental.cancellation_reason = reason
    rental.actual_end_date = None
    rental.final_total = None


def pending_correction(rental: Rental, today: date) -> Optional[RentalStatus]:
    """Status a stored rental should have today, or None if it is already right."""
    if rental.status in TERMINAL_STATUSES:
        return None

    expected = initial_status(rental.start_date, today)
    if rental.status == expected:
        return None
    return expected


def apply_correction(rental: Rental, vehicle: Optional[Vehicle], status: RentalStatus) -> None:
    rental.status = status
    if status == RentalStatus.RESERVED:
        _set_vehicle_status(vehicle, VehicleStatus.AVAILABLE)
    else:
        _set_vehicle_status(vehicle, VehicleStatus.UNAVAILABLE)
