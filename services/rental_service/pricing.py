from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Optional, Union
import re

from errors import ValidationError

CENT = Decimal("0.01")
ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

Clock = Callable[[], date]


def start_of_day(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def today(clock: Optional[Clock] = None) -> date:
    if clock is not None:
        return start_of_day(clock())
    return date.today()


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def days_between(start: Union[date, datetime], end: Union[date, datetime]) -> int:
    """Whole days from start to end, rounded up and never less than one."""
    delta = end - start
    days = delta.days
    if delta.seconds or delta.microseconds:
        days += 1
    return max(days, 1)


def round_currency(amount: Union[Decimal, int, float]) -> Decimal:
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_iso_date(value: Union[str, date], field: str = "date") -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    # fromisoformat alone also takes compact and week dates on newer interpreters.
    if not ISO_DATE.fullmatch(text):
        raise ValidationError(f"{field} must be a valid ISO date (YYYY-MM-DD)")
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"{field} must be a valid ISO date (YYYY-MM-DD)")
