"""
Field validation shared by booking intake and reschedule.

Each field set is an ordered sequence of ``(key, check)`` pairs. ``validate_fields``
runs the checks in order and stops at the first failure, so callers always get
the message for the earliest bad field. Checks return the normalized value.
"""
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from app.core.errors import ValidationError

NAME_PATTERN = re.compile(r"^[a-zA-ZÀ-ỹ\s]+$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[0-9+\-()\s]+$")
# HH:MM, optionally followed by :SS, .mmm and a Z suffix
TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9](:[0-5][0-9](\.[0-9]{3})?Z?)?$")
# YYYY-MM-DD, optionally followed by a time part and zone
DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?:[T ][0-9:.]+(?:Z|[+-]\d{2}:?\d{2})?)?$")
# Browser Date.toString(), e.g. "Tue Oct 20 2026 00:00:00 GMT+0200 (Central European Summer Time)"
GMT_DATE_FORMAT = "%a %b %d %Y %H:%M:%S GMT%z"


@dataclass
class ValidationContext:
    time_slots: Optional[List[str]] = None
    same_day_cutoff: Optional[str] = None
    now: datetime = field(default_factory=datetime.now)


def parse_calendar_date(value: str) -> date:
    """
    Calendar day of a ``YYYY-MM-DD``, ISO-8601 or browser ``GMT`` date string.
    The day is taken as written; any time or zone suffix is ignored.
    """
    value = value.strip()
    match = DATE_PATTERN.match(value)
    if not match:
        if "GMT" in value:
            return _parse_gmt_date(value)
        raise ValidationError("Invalid date format")
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        raise ValidationError("Invalid date format")


def _parse_gmt_date(value: str) -> date:
    try:
        return datetime.strptime(value.split(" (")[0], GMT_DATE_FORMAT).date()
    except ValueError:
        raise ValidationError("Invalid date format")


def normalize_time(value: str) -> str:
    """'9:30:00.000Z' -> '09:30'. Assumes TIME_PATTERN already matched."""
    hours, minutes = value.split(":")[:2]
    return f"{int(hours):02d}:{minutes}"


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def check_name(value: Any, ctx: ValidationContext, label: str) -> str:
    if _blank(value):
        raise ValidationError(f"{label} is required")
    value = value.strip()
    if not NAME_PATTERN.match(value):
        raise ValidationError(f"{label} can only contain letters and spaces")
    return value


def check_email(value: Any, ctx: ValidationContext) -> str:
    if _blank(value):
        raise ValidationError("Email is required")
    value = value.strip()
    if not EMAIL_PATTERN.match(value):
        raise ValidationError("Invalid email format")
    return value


def check_phone(value: Any, ctx: ValidationContext) -> str:
    if _blank(value):
        raise ValidationError("Phone number is required")
    value = value.strip()
    if not PHONE_PATTERN.match(value):
        raise ValidationError("Phone number can only contain numbers and special characters")
    return value


def check_date(value: Any, ctx: ValidationContext, label: str = "Date") -> date:
    if _blank(value):
        raise ValidationError(f"{label} is required")

    day = parse_calendar_date(value)
    today = ctx.now.date()

    if day < today:
        raise ValidationError(f"{label} must be in the present or future")
    if day.weekday() >= 5:
        raise ValidationError("No bookings on Saturday or Sunday")
    if day == today and ctx.same_day_cutoff and ctx.now.strftime("%H:%M") >= ctx.same_day_cutoff:
        raise ValidationError(f"Bookings for today close at {ctx.same_day_cutoff}")
    return day


def check_time(value: Any, ctx: ValidationContext, required_message: str = "Please select a time slot") -> str:
    if _blank(value):
        raise ValidationError(required_message)

    value = value.strip()
    if not TIME_PATTERN.match(value):
        raise ValidationError("Invalid time format")

    slot = normalize_time(value)
    if ctx.time_slots is not None and slot not in ctx.time_slots:
        raise ValidationError("Time is not one of the offered slots")
    return slot


def check_message(value: Any, ctx: ValidationContext) -> Optional[str]:
    if _blank(value):
        return None
    return value


FieldSet = Sequence[Tuple[str, Callable[[Any, ValidationContext], Any]]]

INTAKE_FIELDS: FieldSet = (
    ("firstName", partial(check_name, label="First name")),
    ("lastName", partial(check_name, label="Last name")),
    ("email", check_email),
    ("phone", check_phone),
    ("date", check_date),
    ("time", check_time),
    ("message", check_message),
)

RESCHEDULE_FIELDS: FieldSet = (
    ("newDate", partial(check_date, label="New date")),
    ("newTime", partial(check_time, required_message="New time is required")),
)

INTAKE_SLOT = ("date", "time")
RESCHEDULE_SLOT = ("newDate", "newTime")


def check_slot_not_passed(day: date, slot: str, ctx: ValidationContext) -> None:
    """A slot on today's date must still lie ahead of the clock."""
    if day == ctx.now.date() and slot <= ctx.now.strftime("%H:%M"):
        raise ValidationError("This time slot has already passed")


def validate_fields(data: Dict[str, Any], fields: FieldSet, ctx: ValidationContext,
                    slot_keys: Optional[Tuple[str, str]] = None) -> Dict[str, Any]:
    """
    Runs ``fields`` against ``data`` in order; raises on the first failure.
    ``slot_keys`` names the (date, time) pair checked together once both are valid.
    """
    cleaned = {}
    for key, check in fields:
        cleaned[key] = check(data.get(key), ctx)
        if slot_keys and key == slot_keys[1]:
            check_slot_not_passed(cleaned[slot_keys[0]], cleaned[key], ctx)
    return cleaned
