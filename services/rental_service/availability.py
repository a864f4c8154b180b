from datetime import date
from typing import Iterable, Optional
import logging

from sqlalchemy.orm import Session

from errors import ConflictError
from models import Rental, RentalStatus
from pricing import add_days, start_of_day

logger = logging.getLogger(__name__)

# Turnaround days kept free before and after every booking of a vehicle.
BUFFER_DAYS = 3


def effective_end(rental: Rental) -> date:
    return rental.actual_end_date or rental.estimated_end_date


def find_conflict(rentals: Iterable[Rental], start: date, end: date) -> Optional[Rental]:
    """Return the first non-cancelled rental whose buffered range overlaps [start, end].

    Only the existing rental is widened by the buffer; the candidate range is
    compared as given.
    """
    start = start_of_day(start)
    end = start_of_day(end)

    for rental in sorted(rentals, key=lambda r: r.start_date):
        if rental.status == RentalStatus.CANCELLED:
            continue

        buffered_start = add_days(start_of_day(rental.start_date), -BUFFER_DAYS)
        buffered_end = add_days(start_of_day(effective_end(rental)), BUFFER_DAYS)

        if start <= buffered_end and end >= buffered_start:
            return rental

    return None


def ensure_available(db: Session, vehicle_id: int, start: date, end: date) -> None:
    rentals = db.query(Rental).filter(Rental.vehicle_id == vehicle_id).all()

    conflict = find_conflict(rentals, start, end)
    if conflict is not None:
        logger.info(
            f"Rejected range {start} -> {end} for vehicle {vehicle_id}: "
            f"overlaps rental {conflict.rental_uid}"
        )
        raise ConflictError(
            f"Dates overlap or do not keep {BUFFER_DAYS} days of separation from an existing rental "
            f"({conflict.start_date.isoformat()} -> {effective_end(conflict).isoformat()})"
        )
