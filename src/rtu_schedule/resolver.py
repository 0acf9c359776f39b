"""Resolver - maps human-friendly identifiers to catalog records.

Each resolve_* method builds an ordered list of (name, predicate) strategies
and returns the first record accepted by the first strategy that accepts
any record. Later strategies are never consulted once one matches.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Protocol, TypeVar

from rtu_schedule.errors import (
    CourseNotFoundError,
    GroupNotFoundError,
    PeriodNotFoundError,
    ProgramNotFoundError,
)
from rtu_schedule.logging import get_logger
from rtu_schedule.matching import exact_match, fuzzy_match, parse_period_query
from rtu_schedule.models import (
    CourseRecord,
    GroupRecord,
    StudyCourse,
    StudyGroup,
    StudyPeriod,
    StudyProgram,
)
from rtu_schedule.utils import parse_course_number, parse_group_number

log = get_logger(__name__)

T = TypeVar("T")
Strategy = tuple[str, Callable[[T], bool]]


class CatalogDiscovery(Protocol):
    async def discover_periods(self) -> list[StudyPeriod]: ...

    async def discover_programs(self, period_id: int) -> list[StudyProgram]: ...


class CourseGroupSource(Protocol):
    async def find_courses_by_program(
        self, semester_id: int, program_id: int
    ) -> list[CourseRecord]: ...

    async def find_groups_by_course(
        self, course_id: int, semester_id: int, program_id: int
    ) -> list[GroupRecord]: ...


def first_match(items: Sequence[T], strategies: Iterable[Strategy[T]], *, kind: str) -> T | None:
    """Try strategies in order; return the first item the first matching one accepts."""
    for name, predicate in strategies:
        for item in items:
            if predicate(item):
                log.debug("resolved", kind=kind, strategy=name)
                return item
    return None


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# ---------------------------------------------------------------------------
# Strategy lists
# ---------------------------------------------------------------------------


def period_strategies(query: int | str) -> list[Strategy[StudyPeriod]]:
    if _is_int(query):
        return [("id", lambda p: p.id == query)]

    text = str(query)
    if not text.strip():
        return []
    strategies: list[Strategy[StudyPeriod]] = [("code", lambda p: exact_match(text, p.code))]

    parsed = parse_period_query(text)
    if not parsed.is_empty:

        def by_components(p: StudyPeriod) -> bool:
            if parsed.year is not None and parsed.year not in p.academic_year:
                return False
            if parsed.season is not None and p.season != parsed.season:
                return False
            return True

        strategies.append(("season_year", by_components))

    strategies.append(("name", lambda p: fuzzy_match(text, p.name)))
    return strategies


def program_strategies(query: int | str) -> list[Strategy[StudyProgram]]:
    if _is_int(query):
        return [("id", lambda p: p.id == query)]

    text = str(query)
    if not text.strip():
        return []
    return [
        ("code", lambda p: exact_match(text, p.code)),
        ("full_name", lambda p: exact_match(text, p.name) or exact_match(text, p.full_name)),
        ("name", lambda p: fuzzy_match(text, p.name) or fuzzy_match(text, p.full_name)),
        ("tokens", lambda p: fuzzy_match(text, p.tokens)),
    ]


def course_strategies(number: int) -> list[Strategy[CourseRecord]]:
    return [
        ("number", lambda c: parse_course_number(c.name) == number),
        ("semester", lambda c: c.semester == number),
        ("name", lambda c: str(number) in c.name),
    ]


def group_strategies(number: int) -> list[Strategy[GroupRecord]]:
    return [
        ("number", lambda g: parse_group_number(g.name) == number),
        ("name", lambda g: str(number) in g.name),
    ]


# ---------------------------------------------------------------------------
# Record transforms
# ---------------------------------------------------------------------------


def to_study_course(record: CourseRecord, fallback_number: int = 0) -> StudyCourse:
    return StudyCourse(
        id=record.id,
        number=parse_course_number(record.name) or record.semester or fallback_number,
        name=record.name,
    )


def to_study_group(record: GroupRecord, fallback_number: int = 0) -> StudyGroup:
    # The source keys events by the group's own id
    return StudyGroup(
        id=record.id,
        number=parse_group_number(record.name) or fallback_number,
        name=record.name,
        student_count=record.student_count,
        semester_program_id=record.id,
    )


class Resolver:
    """Translates ids, codes and names into StudyPeriod/Program/Course/Group."""

    def __init__(self, discovery: CatalogDiscovery, api: CourseGroupSource) -> None:
        self.discovery = discovery
        self.api = api

    async def resolve_period(self, query: int | str) -> StudyPeriod:
        """Resolve by id, then code, then season/year, then partial name."""
        periods = await self.discovery.discover_periods()
        period = first_match(periods, period_strategies(query), kind="period")
        if period is None:
            raise PeriodNotFoundError(query)
        return period

    async def resolve_program(self, query: int | str, period_id: int) -> StudyProgram:
        """Resolve by id, then code, then full name, then partial name, then tokens."""
        programs = await self.discovery.discover_programs(period_id)
        program = first_match(programs, program_strategies(query), kind="program")
        if program is None:
            raise ProgramNotFoundError(query)
        return program

    async def resolve_course(self, number: int, period_id: int, program_id: int) -> StudyCourse:
        courses = await self.api.find_courses_by_program(period_id, program_id)
        course = first_match(courses, course_strategies(number), kind="course")
        if course is None:
            raise CourseNotFoundError(number)
        return to_study_course(course, number)

    async def resolve_group(
        self, number: int, period_id: int, program_id: int, course_id: int
    ) -> StudyGroup:
        groups = await self.api.find_groups_by_course(course_id, period_id, program_id)
        group = first_match(groups, group_strategies(number), kind="group")
        if group is None:
            raise GroupNotFoundError(number)
        return to_study_group(group, number)

    async def get_courses(self, period_id: int, program_id: int) -> list[StudyCourse]:
        courses = await self.api.find_courses_by_program(period_id, program_id)
        return [to_study_course(c) for c in courses]

    async def get_groups(self, period_id: int, program_id: int, course_id: int) -> list[StudyGroup]:
        groups = await self.api.find_groups_by_course(course_id, period_id, program_id)
        return [to_study_group(g) for g in groups]
