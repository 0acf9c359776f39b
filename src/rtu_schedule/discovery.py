"""DiscoveryService - caches and transforms the period/program catalog.

The catalog lives on the RTU landing page: a semester selector, hidden
inputs with the selected semester's bounds and a program selector grouped
by faculty. Passing ``semesterId`` selects another semester, whose page
carries that semester's own bounds and program list. Pages are cached
per semester, so period and program discovery share one fetch.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import Protocol

from rtu_schedule import html_parser
from rtu_schedule.cache import TTLCache
from rtu_schedule.errors import DiscoveryError
from rtu_schedule.logging import get_logger
from rtu_schedule.matching import detect_season
from rtu_schedule.models import (
    Semester,
    SemesterMetadata,
    StudyFaculty,
    StudyPeriod,
    StudyProgram,
)
from rtu_schedule.utils import parse_academic_year, parse_period_code, parse_program_name

log = get_logger(__name__)

DEFAULT_DISCOVERY_TTL = 60 * 60.0

PERIODS_KEY = ("periods",)


class CatalogSource(Protocol):
    async def fetch_catalog_page(self, semester_id: int | None = None) -> str: ...


def _metadata_date(value: str, fallback: date) -> date:
    if not value:
        return fallback
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        log.warning("semester_date_unparsable", value=value)
        return fallback


def transform_period(
    semester: Semester, metadata: SemesterMetadata, today: date | None = None
) -> StudyPeriod:
    """Build a StudyPeriod from a parsed semester option and page metadata.

    Season comes from keywords in the name and code, defaulting to autumn.
    Missing metadata dates fall back to today.
    """
    today = today or date.today()
    code = parse_period_code(semester.name)
    start_date = _metadata_date(metadata.start_date, today)
    end_date = _metadata_date(metadata.end_date, today)
    if end_date < start_date:
        end_date = start_date

    return StudyPeriod(
        id=semester.id,
        name=semester.name,
        code=code,
        academic_year=parse_academic_year(semester.name),
        season=detect_season(f"{semester.name} {code}") or "autumn",
        start_date=start_date,
        end_date=end_date,
        is_selected=semester.is_selected,
    )


class DiscoveryService:
    """Discovers study periods and programs from the catalog page.

    Args:
        source: Anything with ``fetch_catalog_page`` (normally RTUApiClient).
        cache_timeout: Catalog TTL in seconds.
        clock: Monotonic clock for the cache, injectable for tests.
    """

    def __init__(
        self,
        source: CatalogSource,
        cache_timeout: float = DEFAULT_DISCOVERY_TTL,
        *,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.source = source
        cache_kwargs = {"clock": clock} if clock is not None else {}
        self._cache = TTLCache(cache_timeout, name="discovery", **cache_kwargs)

    async def discover_periods(self) -> list[StudyPeriod]:
        """All study periods listed on the catalog page."""
        periods = await self._cache.get_or_fetch(PERIODS_KEY, self._fetch_periods)
        return list(periods)

    async def _catalog_page(self, semester_id: int | None = None) -> str:
        """Raw catalog page, shared by period and program discovery."""
        return await self._cache.get_or_fetch(
            ("page", semester_id), lambda: self.source.fetch_catalog_page(semester_id)
        )

    async def _fetch_periods(self) -> tuple[StudyPeriod, ...]:
        try:
            html = await self._catalog_page()
            semesters = html_parser.parse_semesters(html)
            landing = html_parser.parse_semester_metadata(html)
            periods: list[StudyPeriod] = []
            for semester in semesters:
                # The hidden date inputs describe only the selected semester
                if semester.is_selected:
                    metadata = landing
                else:
                    page = await self._catalog_page(semester.id)
                    metadata = html_parser.parse_semester_metadata(page)
                periods.append(transform_period(semester, metadata))
        except Exception as e:
            log.error("period_discovery_failed", error=str(e), type=type(e).__name__)
            raise DiscoveryError(f"could not load study periods ({e})", e) from e

        log.info("periods_discovered", count=len(periods))
        return tuple(periods)

    async def discover_programs(self, period_id: int) -> list[StudyProgram]:
        """All study programs offered in a period, flattened across faculties."""
        programs = await self._cache.get_or_fetch(
            ("programs", period_id), lambda: self._fetch_programs(period_id)
        )
        return list(programs)

    async def _fetch_programs(self, period_id: int) -> tuple[StudyProgram, ...]:
        try:
            html = await self._catalog_page(period_id)
            faculties = html_parser.parse_programs(html)
        except Exception as e:
            log.error(
                "program_discovery_failed",
                period_id=period_id,
                error=str(e),
                type=type(e).__name__,
            )
            raise DiscoveryError(
                f"could not load study programs for period {period_id} ({e})", e
            ) from e

        programs = tuple(
            StudyProgram(
                id=option.id,
                name=parse_program_name(option.name),
                code=option.code,
                full_name=option.name,
                faculty=StudyFaculty(name=faculty.faculty_name, code=faculty.faculty_code),
                tokens=option.tokens,
            )
            for faculty in faculties
            for option in faculty.programs
        )
        log.info("programs_discovered", period_id=period_id, count=len(programs))
        return programs

    async def discover_current_period(self) -> StudyPeriod | None:
        """The selected period, else the first one, else None."""
        periods = await self.discover_periods()
        for period in periods:
            if period.is_selected:
                return period
        return periods[0] if periods else None

    def clear_cache(self) -> None:
        self._cache.clear()
