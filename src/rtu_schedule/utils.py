"""Parsing and date helpers shared by discovery, resolution and assembly."""

from __future__ import annotations

import re
from datetime import date, timedelta

# Latvian day names, 1=Monday .. 7=Sunday
DAY_NAMES: dict[int, str] = {
    1: "Pirmdiena",
    2: "Otrdiena",
    3: "Trešdiena",
    4: "Ceturtdiena",
    5: "Piektdiena",
    6: "Sestdiena",
    7: "Svētdiena",
}
UNKNOWN_DAY = "Nezināma"

_TRAILING_PARENS = re.compile(r"\(([^)]+)\)$")
_TRAILING_PARENS_WITH_SPACE = re.compile(r"\s*\([^)]+\)$")
_ACADEMIC_YEAR = re.compile(r"^(\d{4}/\d{4})")
_FIRST_INT = re.compile(r"\d+")
# "Zunda krastmala 10 - 101", "A-101", "Āzenes 12 k1 402B"
_LOCATION = re.compile(r"^(.+?)[-\s](\d+[A-Za-z]?)$")
_LECTURER_SEPARATORS = re.compile(r"[,;]")


# ---------------------------------------------------------------------------
# Catalog names
# ---------------------------------------------------------------------------


def parse_period_code(name: str) -> str:
    """"2025/2026 Rudens semestris (25/26-R)" -> "25/26-R"."""
    match = _TRAILING_PARENS.search(name.strip())
    return match.group(1) if match else ""


def parse_academic_year(name: str) -> str:
    """"2025/2026 Rudens semestris" -> "2025/2026"."""
    match = _ACADEMIC_YEAR.match(name.strip())
    return match.group(1) if match else ""


def parse_program_name(full_name: str) -> str:
    """"Datorsistēmas (RDBD0)" -> "Datorsistēmas"."""
    return _TRAILING_PARENS_WITH_SPACE.sub("", full_name.strip()).strip()


def parse_first_number(name: str | None) -> int:
    """First integer in a course or group name, 0 if there is none.

    "1. kurss" -> 1, "13. grupa" -> 13, "DBI-13" -> 13
    """
    if not name:
        return 0
    match = _FIRST_INT.search(name)
    return int(match.group(0)) if match else 0


parse_course_number = parse_first_number
parse_group_number = parse_first_number


# ---------------------------------------------------------------------------
# Entry fields
# ---------------------------------------------------------------------------


def parse_location(location: str) -> tuple[str | None, str | None]:
    """Split a location into (building, room).

    The room is the trailing run of digits (plus an optional letter)
    preceded by a space or hyphen; without one the whole string is the
    building.
    """
    if not location:
        return None, None
    match = _LOCATION.match(location.strip())
    if match:
        building = match.group(1).strip().rstrip("-").strip()
        return building or None, match.group(2)
    return location, None


def parse_lecturers(lecturer: str) -> list[str]:
    if not lecturer:
        return []
    return [part.strip() for part in _LECTURER_SEPARATORS.split(lecturer) if part.strip()]


def format_time(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"


def time_to_minutes(value: str) -> int:
    hours, _, minutes = value.partition(":")
    return int(hours or 0) * 60 + int(minutes or 0)


def calculate_duration(start_time: str, end_time: str) -> int:
    """Minutes between two "HH:MM" times; negative if end precedes start."""
    return time_to_minutes(end_time) - time_to_minutes(start_time)


def week_number(day: date) -> int:
    """ISO-8601 week number."""
    return day.isocalendar()[1]


def day_of_week(day: date) -> int:
    """1=Monday .. 7=Sunday."""
    return day.isoweekday()


def day_name(weekday: int) -> str:
    return DAY_NAMES.get(weekday, UNKNOWN_DAY)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def months_between(start: date, end: date) -> list[tuple[int, int]]:
    """Ordered (year, month) pairs overlapping [start, end]; empty if end < start."""
    months: list[tuple[int, int]] = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        months.append((year, month))
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    return months


def week_start(day: date) -> date:
    """Monday of the week containing day."""
    return day - timedelta(days=day.weekday())


def week_end(day: date) -> date:
    """Sunday of the week containing day."""
    return week_start(day) + timedelta(days=6)
