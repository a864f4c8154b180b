from datetime import date, timedelta
import uuid

import pytest

from availability import BUFFER_DAYS, effective_end, ensure_available, find_conflict
from errors import ConflictError
from models import Rental, RentalStatus

EXISTING_START = date(2030, 11, 10)
EXISTING_END = date(2030, 11, 15)


def booking(start=EXISTING_START, end=EXISTING_END, status=RentalStatus.RESERVED, actual_end=None):
    return Rental(
        rental_uid=uuid.uuid4(),
        start_date=start,
        estimated_end_date=end,
        actual_end_date=actual_end,
        status=status,
    )


def test_effective_end_prefers_actual_end():
    assert effective_end(booking()) == EXISTING_END
    assert effective_end(booking(actual_end=date(2030, 11, 12))) == date(2030, 11, 12)


def test_buffer_is_three_days():
    assert BUFFER_DAYS == 3


@pytest.mark.parametrize("gap, conflicts", [(1, True), (3, True), (4, False), (10, False)])
def test_candidate_after_existing_respects_buffer(gap, conflicts):
    start = EXISTING_END + timedelta(days=gap)
    found = find_conflict([booking()], start, start + timedelta(days=2))
    assert (found is not None) == conflicts


@pytest.mark.parametrize("gap, conflicts", [(1, True), (3, True), (4, False)])
def test_candidate_before_existing_respects_buffer(gap, conflicts):
    end = EXISTING_START - timedelta(days=gap)
    found = find_conflict([booking()], end - timedelta(days=2), end)
    assert (found is not None) == conflicts


def test_overlap_detection_is_symmetric():
    first = (date(2030, 1, 1), date(2030, 1, 5))
    second = (date(2030, 1, 8), date(2030, 1, 9))

    assert find_conflict([booking(*first)], *second) is not None
    assert find_conflict([booking(*second)], *first) is not None


def test_cancelled_rentals_are_ignored():
    assert find_conflict([booking(status=RentalStatus.CANCELLED)], EXISTING_START, EXISTING_END) is None


def test_completed_rental_uses_actual_end():
    returned_early = booking(status=RentalStatus.COMPLETED, actual_end=date(2030, 11, 11))
    start = date(2030, 11, 15)

    assert find_conflict([returned_early], start, start + timedelta(days=1)) is None
    assert find_conflict([booking(status=RentalStatus.COMPLETED)], start, start + timedelta(days=1)) is not None


def test_first_conflict_by_start_date_is_reported():
    later = booking(start=date(2030, 12, 1), end=date(2030, 12, 5))
    earlier = booking()

    found = find_conflict([later, earlier], date(2030, 11, 1), date(2030, 12, 31))
    assert found is earlier


def test_ensure_available_raises_with_offending_range(db, vehicle, customer, make_rental):
    make_rental(vehicle, customer, EXISTING_START, EXISTING_END)

    with pytest.raises(ConflictError, match="2030-11-10 -> 2030-11-15"):
        ensure_available(db, vehicle.id, date(2030, 11, 17), date(2030, 11, 20))


def test_ensure_available_only_checks_the_given_vehicle(db, make_vehicle, customer, make_rental):
    booked, other = make_vehicle(), make_vehicle()
    make_rental(booked, customer, EXISTING_START, EXISTING_END)

    ensure_available(db, other.id, EXISTING_START, EXISTING_END)
