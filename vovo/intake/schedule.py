"""Pickup days and half-hour slots.

Every open day offers the same slots. Availability is a lookup table filled in
elsewhere; a day missing from it is open unless it is a Sunday.
"""
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Union

SLOT_START = "08:00"
SLOT_END = "17:00"  # exclusive
SLOT_MINUTES = 30

CLOSED = "closed"
SOLD_OUT = "sold_out"
AVAILABLE = "available"


def _build_slots(start: str, end: str, step: int) -> List[str]:
    cur = datetime.strptime(start, "%H:%M")
    stop = datetime.strptime(end, "%H:%M")
    slots = []
    while cur < stop:
        slots.append(cur.strftime("%H:%M"))
        cur += timedelta(minutes=step)
    return slots


TIME_SLOTS: List[str] = _build_slots(SLOT_START, SLOT_END, SLOT_MINUTES)


def parse_day(value: Union[str, date, None]) -> Optional[date]:
    """Accept a date or an ISO string; anything unparsable becomes None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        return None


def is_sunday(day: date) -> bool:
    return day.weekday() == 6


def day_status(day: date, availability: Dict[str, str]) -> str:
    if is_sunday(day):
        return CLOSED
    if (availability or {}).get(day.isoformat()) == SOLD_OUT:
        return SOLD_OUT
    return AVAILABLE


def is_selectable(day: date, availability: Dict[str, str]) -> bool:
    return day_status(day, availability) == AVAILABLE


def is_valid_slot(slot: str) -> bool:
    return slot in TIME_SLOTS


def booking_window(today: date, days: int) -> List[date]:
    return [today + timedelta(days=i) for i in range(max(days, 0))]


def in_window(day: date, today: date, days: int) -> bool:
    """Whether `day` falls inside the booking window that starts today."""
    return today <= day < today + timedelta(days=max(days, 0))


def bookable_dates(availability: Dict[str, str], today: date, days: int = 30) -> List[date]:
    """Dates from today on, for `days` days, that a customer may pick."""
    return [d for d in booking_window(today, days) if is_selectable(d, availability)]


def parse_capacity(value: Optional[str]) -> Optional[int]:
    """`capacity_limit` setting as orders per day; empty, zero or junk means unlimited."""
    if value is None:
        return None
    value = str(value).strip()
    if not value.isdigit():
        return None
    return int(value) or None
