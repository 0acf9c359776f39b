"""Raw event -> ScheduleEntry transformation.

``eventTempName`` packs the entry type and subject into one string:

    "Lekc. Algoritmi, J. Kalns"          -> type "Lekc", subject "Algoritmi"
    "Lab.d. Fizika, A. Liepa"            -> type "Lab.d", subject "Fizika"
    "Lekc. Pr.d. Matemātika, B. Ozols"   -> type "Lekc. Pr.d", subject "Matemātika"

Every leading dotted abbreviation is stripped; the stripped text (minus its
final dot) is the raw type, looked up as a whole in TYPE_ALIASES.
"""

from __future__ import annotations

import re
from datetime import datetime, time
from zoneinfo import ZoneInfo

from rtu_schedule.models import (
    ScheduleEntry,
    ScheduleEntryType,
    ScheduleSubject,
    SemesterEvent,
)
from rtu_schedule.utils import (
    calculate_duration,
    day_name,
    day_of_week,
    format_time,
    parse_lecturers,
    parse_location,
    week_number,
)

DEFAULT_TIMEZONE = "Europe/Riga"

TYPE_ALIASES: dict[str, ScheduleEntryType] = {
    # Full names (lv)
    "lekcija": "lecture",
    "lekcijas": "lecture",
    "praktiskais darbs": "practical",
    "praktiskā nodarbība": "practical",
    "praktiskas nodarbibas": "practical",
    "praktiskie": "practical",
    "laboratorijas darbs": "lab",
    "laboratorija": "lab",
    "laboratorijas darbi": "lab",
    "seminārs": "seminar",
    "seminars": "seminar",
    "konsultācija": "consultation",
    "konsultacija": "consultation",
    "konsultācijas": "consultation",
    "eksāmens": "exam",
    "eksamens": "exam",
    "ieskaite": "test",
    "pārbaudījums": "test",
    # Full names (en)
    "lecture": "lecture",
    "practical": "practical",
    "practical work": "practical",
    "lab": "lab",
    "laboratory": "lab",
    "laboratory work": "lab",
    "seminar": "seminar",
    "consultation": "consultation",
    "exam": "exam",
    "test": "test",
    # Abbreviations from eventTempName
    "lekc.": "lecture",
    "lekc": "lecture",
    "pr.d.": "practical",
    "pr.d": "practical",
    "lab.d.": "lab",
    "lab.d": "lab",
    "lab.": "lab",
    "sem.": "seminar",
    "sem": "seminar",
    "kons.": "consultation",
    "kons": "consultation",
    "eksām.": "exam",
    "eksam.": "exam",
    "eksam": "exam",
    "eksām": "exam",
}

# One or more "Abbr." tokens (up to 10 chars, no spaces or commas), then the subject
_PREFIXED_NAME = re.compile(r"^((?:[^,\s]{1,10}\.\s+)+)([^,]+)")


def parse_entry_type(type_raw: str) -> ScheduleEntryType:
    if not type_raw:
        return "other"
    return TYPE_ALIASES.get(type_raw.lower().strip(), "other")


def parse_event_name(name: str) -> tuple[str, str]:
    """Split "Lekc. Subject, Lecturer" into (type_raw, subject_name).

    Without a dotted prefix the type is empty and the whole name is the
    subject.
    """
    text = name.strip()
    match = _PREFIXED_NAME.match(text)
    if match:
        prefixes = " ".join(match.group(1).split())
        return prefixes.removesuffix("."), match.group(2).strip()
    return "", text


def _wall_clock(value) -> time:
    return time(value.hour, value.minute, value.second)


def transform_event(event: SemesterEvent, tz: ZoneInfo | None = None) -> ScheduleEntry:
    """Build a ScheduleEntry from a raw API event.

    ``eventDate`` is epoch milliseconds; it is read in ``tz`` (Europe/Riga
    by default) and truncated to that day's midnight.
    """
    zone = tz or ZoneInfo(DEFAULT_TIMEZONE)
    day = datetime.fromtimestamp(event.event_date / 1000, tz=zone).date()

    start = event.custom_start
    end = event.custom_end
    start_time = format_time(start.hour, start.minute)
    end_time = format_time(end.hour, end.minute)

    type_raw, subject_name = parse_event_name(event.event_temp_name)
    building, room = parse_location(event.room_info_text)
    weekday = day_of_week(day)

    return ScheduleEntry(
        id=event.event_date_id,
        subject=ScheduleSubject(name=subject_name, code=""),
        date=day,
        start_time=start_time,
        end_time=end_time,
        start_datetime=datetime.combine(day, _wall_clock(start), tzinfo=zone),
        end_datetime=datetime.combine(day, _wall_clock(end), tzinfo=zone),
        duration_minutes=calculate_duration(start_time, end_time),
        location=event.room_info_text,
        building=building,
        room=room,
        lecturer=event.lecturer_info_text,
        lecturers=tuple(parse_lecturers(event.lecturer_info_text)),
        type=parse_entry_type(type_raw),
        type_raw=type_raw,
        group="",
        groups=(),
        week_number=week_number(day),
        day_of_week=weekday,
        day_name=day_name(weekday),
        raw=event,
    )
