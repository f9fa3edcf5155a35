"""Datetime helpers"""
from datetime import datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo


PARIS_TZ = ZoneInfo("Europe/Paris")

MONTHS_FR = [
    "janv.", "févr.", "mars", "avr.", "mai", "juin",
    "juil.", "août", "sept.", "oct.", "nov.", "déc.",
]


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime"""
    return datetime.now(timezone.utc)


def format_datetime_fr(dt: Optional[datetime], tz: tzinfo = PARIS_TZ) -> str:
    """
    Convert a datetime to the short French format used on the board

    Args:
        dt: datetime to format (naive values are treated as UTC)
        tz: display timezone, Europe/Paris (summer time aware) by default

    Returns:
        str: "19 oct. 14:05" style string, or "" when dt is None
    """
    if dt is None:
        return ""

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    local = dt.astimezone(tz)

    return f"{local.day:02d} {MONTHS_FR[local.month - 1]} {local.hour:02d}:{local.minute:02d}"
