"""Schedule - immutable result of RTUSchedule.get_schedule.

Holds a tuple of ScheduleEntry plus the resolved period/program/course/group.
Every filter, window and sort returns a new Schedule sharing the same
metadata; the original entries are never modified.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Iterator
from datetime import date, datetime, timedelta
from typing import Literal, TypeVar

from rtu_schedule.matching import fuzzy_match
from rtu_schedule.models import (
    ScheduleEntry,
    ScheduleEntryType,
    ScheduleMetadata,
    ScheduleSubject,
    StudyCourse,
    StudyGroup,
    StudyPeriod,
    StudyProgram,
)
from rtu_schedule.utils import week_end, week_number, week_start

K = TypeVar("K", bound=Hashable)


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


class Schedule:
    """Sorted, deduplicated timetable entries with their selection context."""

    __slots__ = ("_entries", "_metadata")

    def __init__(self, entries: Iterable[ScheduleEntry], metadata: ScheduleMetadata) -> None:
        self._entries: tuple[ScheduleEntry, ...] = tuple(entries)
        self._metadata = metadata

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    @property
    def entries(self) -> tuple[ScheduleEntry, ...]:
        return self._entries

    @property
    def metadata(self) -> ScheduleMetadata:
        return self._metadata

    @property
    def period(self) -> StudyPeriod:
        return self._metadata.period

    @property
    def program(self) -> StudyProgram:
        return self._metadata.program

    @property
    def course(self) -> StudyCourse:
        return self._metadata.course

    @property
    def group(self) -> StudyGroup | None:
        return self._metadata.group

    @property
    def fetched_at(self) -> datetime:
        return self._metadata.fetched_at

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def _derive(self, entries: Iterable[ScheduleEntry]) -> Schedule:
        return Schedule(entries, self._metadata)

    def filter(self, predicate: Callable[[ScheduleEntry], bool]) -> Schedule:
        return self._derive(e for e in self._entries if predicate(e))

    def filter_by_type(self, type: ScheduleEntryType | Iterable[ScheduleEntryType]) -> Schedule:
        types = {type} if isinstance(type, str) else set(type)
        return self.filter(lambda e: e.type in types)

    def filter_by_date_range(self, start: date | datetime, end: date | datetime) -> Schedule:
        """Entries whose date lies in [start, end], inclusive."""
        first, last = _as_date(start), _as_date(end)
        return self.filter(lambda e: first <= e.date <= last)

    def filter_by_date(self, day: date | datetime) -> Schedule:
        target = _as_date(day)
        return self.filter(lambda e: e.date == target)

    def filter_by_lecturer(self, name: str) -> Schedule:
        return self.filter(
            lambda e: fuzzy_match(name, e.lecturer)
            or any(fuzzy_match(name, lecturer) for lecturer in e.lecturers)
        )

    def filter_by_subject(self, name_or_code: str) -> Schedule:
        return self.filter(
            lambda e: fuzzy_match(name_or_code, e.subject.name)
            or bool(e.subject.code and fuzzy_match(name_or_code, e.subject.code))
        )

    def filter_by_location(self, location: str) -> Schedule:
        return self.filter(
            lambda e: fuzzy_match(location, e.location)
            or (e.building is not None and fuzzy_match(location, e.building))
            or (e.room is not None and fuzzy_match(location, e.room))
        )

    def filter_by_group(self, group: str) -> Schedule:
        return self.filter(
            lambda e: bool(e.group and fuzzy_match(group, e.group))
            or any(fuzzy_match(group, g) for g in e.groups)
        )

    def filter_by_day_of_week(self, day: int | Iterable[int]) -> Schedule:
        """1=Monday .. 7=Sunday."""
        days = {day} if isinstance(day, int) else set(day)
        return self.filter(lambda e: e.day_of_week in days)

    # ------------------------------------------------------------------
    # Grouping
    # ------------------------------------------------------------------

    def _group_by(self, key: Callable[[ScheduleEntry], K]) -> dict[K, list[ScheduleEntry]]:
        groups: dict[K, list[ScheduleEntry]] = {}
        for entry in self._entries:
            groups.setdefault(key(entry), []).append(entry)
        return groups

    def group_by_week(self) -> dict[int, list[ScheduleEntry]]:
        return self._group_by(lambda e: e.week_number)

    def group_by_date(self) -> dict[str, list[ScheduleEntry]]:
        return self._group_by(lambda e: e.date.isoformat())

    def group_by_day_of_week(self) -> dict[int, list[ScheduleEntry]]:
        return self._group_by(lambda e: e.day_of_week)

    def group_by_subject(self) -> dict[str, list[ScheduleEntry]]:
        return self._group_by(lambda e: e.subject.code or e.subject.name)

    def group_by_lecturer(self) -> dict[str, list[ScheduleEntry]]:
        return self._group_by(lambda e: e.lecturer)

    def group_by_type(self) -> dict[ScheduleEntryType, list[ScheduleEntry]]:
        return self._group_by(lambda e: e.type)

    # ------------------------------------------------------------------
    # Windows relative to a reference day (default: today)
    # ------------------------------------------------------------------

    def today(self, reference: date | None = None) -> Schedule:
        return self.filter_by_date(reference or date.today())

    def tomorrow(self, reference: date | None = None) -> Schedule:
        return self.filter_by_date((reference or date.today()) + timedelta(days=1))

    def this_week(self, reference: date | None = None) -> Schedule:
        day = reference or date.today()
        return self.filter_by_date_range(week_start(day), week_end(day))

    def next_week(self, reference: date | None = None) -> Schedule:
        day = (reference or date.today()) + timedelta(days=7)
        return self.filter_by_date_range(week_start(day), week_end(day))

    def upcoming(self, days: int = 7, reference: date | None = None) -> Schedule:
        start = reference or date.today()
        return self.filter_by_date_range(start, start + timedelta(days=days))

    def week(self, number: int) -> Schedule:
        """Entries in ISO week ``number`` (any year)."""
        return self.filter(lambda e: e.week_number == number)

    def current_week(self, reference: date | None = None) -> Schedule:
        return self.week(week_number(reference or date.today()))

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    def lecturers(self) -> list[str]:
        """Sorted unique lecturer names, splitting multi-lecturer entries."""
        names: set[str] = set()
        for entry in self._entries:
            names.update(entry.lecturers or ([entry.lecturer] if entry.lecturer else []))
        return sorted(names)

    def subjects(self) -> list[ScheduleSubject]:
        unique: dict[str, ScheduleSubject] = {}
        for entry in self._entries:
            unique.setdefault(entry.subject.code or entry.subject.name, entry.subject)
        return sorted(unique.values(), key=lambda s: s.name)

    def locations(self) -> list[str]:
        return sorted({e.location for e in self._entries if e.location})

    def types(self) -> list[ScheduleEntryType]:
        return list(dict.fromkeys(e.type for e in self._entries))

    def date_range(self) -> tuple[date, date] | None:
        if not self._entries:
            return None
        days = [e.date for e in self._entries]
        return min(days), max(days)

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    @property
    def count(self) -> int:
        return len(self._entries)

    @property
    def is_empty(self) -> bool:
        return not self._entries

    @property
    def first(self) -> ScheduleEntry | None:
        return self._entries[0] if self._entries else None

    @property
    def last(self) -> ScheduleEntry | None:
        return self._entries[-1] if self._entries else None

    def sorted(self, direction: Literal["asc", "desc"] = "asc") -> Schedule:
        return self._derive(
            sorted(
                self._entries,
                key=lambda e: e.start_datetime,
                reverse=direction == "desc",
            )
        )

    def to_list(self) -> list[ScheduleEntry]:
        return list(self._entries)

    def __iter__(self) -> Iterator[ScheduleEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        group = f" group={self.group.number}" if self.group else ""
        return (
            f"<Schedule {self.count} entries period={self.period.code!r} "
            f"program={self.program.code!r} course={self.course.number}{group}>"
        )
