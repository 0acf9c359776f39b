"""RTUSchedule - user-facing facade for timetable access.

Example:

    async with RTUSchedule() as rtu:
        schedule = await rtu.get_schedule(
            period="25/26-R", program="RDBD0", course=1, group=13
        )
        lectures = schedule.filter_by_type("lecture")
        this_week = schedule.this_week()
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from rtu_schedule.client import RTUApiClient
from rtu_schedule.config import ScheduleConfig, get_config
from rtu_schedule.discovery import DiscoveryService
from rtu_schedule.errors import InvalidOptionsError, PeriodNotFoundError
from rtu_schedule.logging import get_logger
from rtu_schedule.models import (
    GetScheduleOptions,
    ScheduleEntry,
    ScheduleMetadata,
    SemesterEvent,
    StudyCourse,
    StudyGroup,
    StudyPeriod,
    StudyProgram,
)
from rtu_schedule.resolver import Resolver
from rtu_schedule.schedule import Schedule
from rtu_schedule.transform import transform_event
from rtu_schedule.utils import months_between

log = get_logger(__name__)


@dataclass
class MonthFetch:
    """Outcome of fetching one (year, month) slice of events."""

    year: int
    month: int
    events: list[SemesterEvent] = field(default_factory=list)
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def merge_events(fetches: list[MonthFetch]) -> list[SemesterEvent]:
    """Flatten successful months, keeping the first occurrence of each event id."""
    unique: dict[int, SemesterEvent] = {}
    for fetch in fetches:
        if not fetch.ok:
            continue
        for event in fetch.events:
            unique.setdefault(event.event_date_id, event)
    return list(unique.values())


def filter_entries_by_window(
    entries: list[ScheduleEntry], start: date, end: date
) -> list[ScheduleEntry]:
    """Entries dated within [start 00:00:00, end 23:59:59]."""
    return [e for e in entries if start <= e.date <= end]


def _is_blank(value: object) -> bool:
    return isinstance(value, str) and not value.strip()


def validate_options(options: GetScheduleOptions) -> None:
    if options.course is None or options.course < 1:
        raise InvalidOptionsError("course is required and must be >= 1")
    # A blank name would fuzzy-match the first record
    program_missing = options.program is None or _is_blank(options.program)
    if options.program_id is None and program_missing:
        raise InvalidOptionsError("Either program or programId is required")
    if options.period_id is None and _is_blank(options.period):
        raise InvalidOptionsError("period must not be blank")


class RTUSchedule:
    """Timetable access by human-friendly identifiers.

    Args:
        config: Configuration; defaults to the environment singleton, or to
            a fresh ScheduleConfig built from ``overrides`` when given.
        api_client: Pre-built RTUApiClient (shared session, tests).
        discovery: Pre-built DiscoveryService.
        **overrides: ScheduleConfig fields (``base_url=...``, ``timeout=...``).
    """

    def __init__(
        self,
        config: ScheduleConfig | None = None,
        *,
        api_client: RTUApiClient | None = None,
        discovery: DiscoveryService | None = None,
        **overrides: Any,
    ) -> None:
        if config is None:
            config = ScheduleConfig(**overrides) if overrides else get_config()
        elif overrides:
            config = config.model_copy(update=overrides)
        self.config = config
        self._tz = ZoneInfo(config.timezone)

        self.api_client = api_client or RTUApiClient(config)
        self.discovery = discovery or DiscoveryService(
            self.api_client, config.discovery_cache_timeout / 1000
        )
        self.resolver = Resolver(self.discovery, self.api_client)

    async def aclose(self) -> None:
        await self.api_client.aclose()

    async def __aenter__(self) -> RTUSchedule:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    async def get_periods(self) -> list[StudyPeriod]:
        return await self.discovery.discover_periods()

    async def get_current_period(self) -> StudyPeriod:
        current = await self.discovery.discover_current_period()
        if current is None:
            raise PeriodNotFoundError("current")
        return current

    async def _period(self, period: int | str | None) -> StudyPeriod:
        if period is None:
            return await self.get_current_period()
        return await self.resolver.resolve_period(period)

    async def get_programs(self, period: int | str | None = None) -> list[StudyProgram]:
        """Programs of a period (id, code or name); the current period by default."""
        period_obj = await self._period(period)
        return await self.discovery.discover_programs(period_obj.id)

    async def get_courses(self, period: int | str, program: int | str) -> list[StudyCourse]:
        period_obj = await self.resolver.resolve_period(period)
        program_obj = await self.resolver.resolve_program(program, period_obj.id)
        return await self.resolver.get_courses(period_obj.id, program_obj.id)

    async def get_groups(
        self, period: int | str, program: int | str, course: int
    ) -> list[StudyGroup]:
        period_obj = await self.resolver.resolve_period(period)
        program_obj = await self.resolver.resolve_program(program, period_obj.id)
        course_obj = await self.resolver.resolve_course(course, period_obj.id, program_obj.id)
        return await self.resolver.get_groups(period_obj.id, program_obj.id, course_obj.id)

    # ------------------------------------------------------------------
    # Schedule
    # ------------------------------------------------------------------

    async def get_schedule(
        self,
        options: GetScheduleOptions | Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> Schedule:
        """Resolve a selection and assemble its schedule.

        Accepts a GetScheduleOptions, a mapping or keyword arguments
        (``period``, ``period_id``, ``program``, ``program_id``, ``course``,
        ``group``, ``start_date``, ``end_date``).

        Raises:
            InvalidOptionsError: Before any request, for malformed options.
            PeriodNotFoundError, ProgramNotFoundError, CourseNotFoundError,
            GroupNotFoundError: When a part of the selection does not resolve.
        """
        opts = self._coerce_options(options, kwargs)
        validate_options(opts)

        period_input = opts.period_id if opts.period_id is not None else opts.period
        period = await self._period(period_input)

        program_input = opts.program_id if opts.program_id is not None else opts.program
        program = await self.resolver.resolve_program(program_input, period.id)

        course = await self.resolver.resolve_course(opts.course, period.id, program.id)

        group: StudyGroup | None = None
        if opts.group is not None:
            group = await self.resolver.resolve_group(opts.group, period.id, program.id, course.id)
        fetch_key = group.semester_program_id if group is not None else course.id

        start = opts.start_date or period.start_date
        end = opts.end_date or period.end_date

        fetches = await self._fetch_months(fetch_key, start, end)
        events = merge_events(fetches)
        entries = [transform_event(event, self._tz) for event in events]
        entries = filter_entries_by_window(entries, start, end)
        entries.sort(key=lambda e: e.start_datetime)

        failed = sum(1 for f in fetches if not f.ok)
        log.info(
            "schedule_assembled",
            period=period.code,
            program=program.code,
            course=course.number,
            group=group.number if group else None,
            months=len(fetches),
            failed_months=failed,
            entries=len(entries),
        )

        return Schedule(
            entries,
            ScheduleMetadata(
                period=period,
                program=program,
                course=course,
                group=group,
                fetched_at=datetime.now(timezone.utc),
            ),
        )

    @staticmethod
    def _coerce_options(
        options: GetScheduleOptions | Mapping[str, Any] | None, extra: Mapping[str, Any]
    ) -> GetScheduleOptions:
        if isinstance(options, GetScheduleOptions):
            if not extra:
                return options
            options = options.model_dump(exclude_unset=True)
        try:
            return GetScheduleOptions(**{**(options or {}), **extra})
        except ValidationError as e:
            raise InvalidOptionsError(str(e)) from e

    async def _fetch_months(self, fetch_key: int, start: date, end: date) -> list[MonthFetch]:
        """Fetch each month sequentially; a failing month is logged and skipped."""
        fetches: list[MonthFetch] = []
        for year, month in months_between(start, end):
            try:
                events = await self.api_client.fetch_semester_program_events(fetch_key, year, month)
            except Exception as e:
                log.warning(
                    "month_fetch_failed",
                    semester_program_id=fetch_key,
                    year=year,
                    month=month,
                    error=str(e),
                    type=type(e).__name__,
                )
                fetches.append(MonthFetch(year, month, error=e))
                continue
            fetches.append(MonthFetch(year, month, events=events))
        return fetches

    # ------------------------------------------------------------------
    # Utilities
    # ------------------------------------------------------------------

    async def is_schedule_published(
        self,
        period: int | str,
        program: int | str,
        course: int,
        group: int | None = None,
    ) -> bool:
        period_obj = await self.resolver.resolve_period(period)
        program_obj = await self.resolver.resolve_program(program, period_obj.id)
        course_obj = await self.resolver.resolve_course(course, period_obj.id, program_obj.id)

        fetch_key = course_obj.id
        if group is not None:
            group_obj = await self.resolver.resolve_group(
                group, period_obj.id, program_obj.id, course_obj.id
            )
            fetch_key = group_obj.semester_program_id

        return await self.api_client.check_semester_program_published(fetch_key)

    def refresh(self) -> None:
        """Force fresh catalog and API data on the next call."""
        self.clear_cache()

    def clear_cache(self) -> None:
        self.discovery.clear_cache()
        self.api_client.clear_cache()
