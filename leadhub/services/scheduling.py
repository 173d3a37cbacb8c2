"""Appointment slot computation: hourly slots inside working hours (UTC)."""

from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable

from leadhub.services.clock import as_utc

WORKING_HOURS = range(9, 17)  # last slot starts at 16:00
INACTIVE_APPOINTMENT_STATUSES = ("cancelled", "no_show")


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Half-open [start, end) UTC range covering ``day``."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def format_hour(hour: int) -> str:
    """9 -> "9:00 AM", 12 -> "12:00 PM", 13 -> "1:00 PM"."""
    display_hour = hour - 12 if hour > 12 else hour
    suffix = "PM" if hour >= 12 else "AM"
    return f"{display_hour}:00 {suffix}"


def available_slots(day: date, booked: Iterable[datetime]) -> list[dict]:
    """Return the working-hour slots of ``day`` whose hour is not already booked."""
    taken_hours = {as_utc(when).hour for when in booked}
    start, _ = day_bounds(day)
    return [
        {
            "time": (start + timedelta(hours=hour)).isoformat(),
            "display": format_hour(hour),
        }
        for hour in WORKING_HOURS
        if hour not in taken_hours
    ]
