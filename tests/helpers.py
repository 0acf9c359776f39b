"""Shared fixtures for the test suite: sample catalog records and fakes."""

from __future__ import annotations

import asyncio
from datetime import date, datetime
from zoneinfo import ZoneInfo

from rtu_schedule.models import (
    CourseRecord,
    GroupRecord,
    SemesterEvent,
    StudyFaculty,
    StudyPeriod,
    StudyProgram,
)

RIGA = ZoneInfo("Europe/Riga")

PERIODS = [
    StudyPeriod(
        id=1,
        name="2025/2026 Rudens semestris (25/26-R)",
        code="25/26-R",
        academic_year="2025/2026",
        season="autumn",
        start_date=date(2025, 9, 1),
        end_date=date(2025, 12, 31),
        is_selected=True,
    ),
    StudyPeriod(
        id=2,
        name="2025/2026 Pavasara semestris (25/26-P)",
        code="25/26-P",
        academic_year="2025/2026",
        season="spring",
        start_date=date(2026, 2, 1),
        end_date=date(2026, 6, 30),
    ),
    StudyPeriod(
        id=3,
        name="2024/2025 Vasaras semestris (24/25-V)",
        code="24/25-V",
        academic_year="2024/2025",
        season="summer",
        start_date=date(2025, 7, 1),
        end_date=date(2025, 8, 31),
    ),
]

DITF = StudyFaculty(name="DITF", code="33000")

PROGRAMS = [
    StudyProgram(
        id=100,
        name="Datorsistēmas",
        code="RDBD0",
        full_name="Datorsistēmas (RDBD0)",
        faculty=DITF,
        tokens="datorsistemas computer systems",
    ),
    StudyProgram(
        id=101,
        name="Informācijas tehnoloģija",
        code="RITI0",
        full_name="Informācijas tehnoloģija (RITI0)",
        faculty=DITF,
        tokens="informacijas tehnologija it",
    ),
    StudyProgram(
        id=102,
        name="Elektronika",
        code="RELE0",
        full_name="Elektronika (RELE0)",
        faculty=StudyFaculty(name="ETF", code="34000"),
        tokens="elektronika electronics",
    ),
]

COURSES = [
    CourseRecord(id=1001, name="1. kurss", code="K1", semester=1),
    CourseRecord(id=1002, name="2. kurss", code="K2", semester=2),
    CourseRecord(id=1003, name="3. kurss", code="K3", semester=3),
]

GROUPS = [
    GroupRecord(id=2001, name="1. grupa", student_count=25),
    GroupRecord(id=2002, name="2. grupa", student_count=30),
    GroupRecord(id=2003, name="DBI-13", student_count=28),
]


def epoch_ms(day: date, tz: ZoneInfo = RIGA) -> int:
    """Midnight of day in tz as epoch milliseconds, like the API's eventDate."""
    return int(datetime(day.year, day.month, day.day, tzinfo=tz).timestamp() * 1000)


def make_event(
    event_id: int,
    day: date,
    start: tuple[int, int] = (9, 0),
    end: tuple[int, int] = (10, 30),
    name: str = "Lekc. Algoritmi, J. Kalns",
    room: str = "A-101",
    lecturer: str = "J. Kalns",
) -> SemesterEvent:
    return SemesterEvent.model_validate(
        {
            "eventDateId": event_id,
            "eventId": event_id * 10,
            "statusId": 1,
            "eventTempName": name,
            "roomInfoText": room,
            "lecturerInfoText": lecturer,
            "eventDate": epoch_ms(day),
            "customStart": {"hour": start[0], "minute": start[1], "second": 0, "nano": 0},
            "customEnd": {"hour": end[0], "minute": end[1], "second": 0, "nano": 0},
        }
    )


class FakeDiscovery:
    """Stands in for DiscoveryService with fixed catalogs."""

    def __init__(self, periods=None, programs=None) -> None:
        self.periods = list(PERIODS if periods is None else periods)
        self.programs = list(PROGRAMS if programs is None else programs)
        self.period_calls = 0
        self.program_calls: list[int] = []
        self.cleared = 0

    async def discover_periods(self) -> list[StudyPeriod]:
        self.period_calls += 1
        return list(self.periods)

    async def discover_programs(self, period_id: int) -> list[StudyProgram]:
        self.program_calls.append(period_id)
        return list(self.programs)

    async def discover_current_period(self) -> StudyPeriod | None:
        for period in self.periods:
            if period.is_selected:
                return period
        return self.periods[0] if self.periods else None

    def clear_cache(self) -> None:
        self.cleared += 1


class FakeApi:
    """Stands in for RTUApiClient.

    ``events`` maps (year, month) to a list of events; a month mapped to an
    exception raises it.
    """

    def __init__(self, courses=None, groups=None, events=None, published=True) -> None:
        self.courses = list(COURSES if courses is None else courses)
        self.groups = list(GROUPS if groups is None else groups)
        self.events = dict(events or {})
        self.published = published
        self.event_calls: list[tuple[int, int, int]] = []
        self.course_calls: list[tuple[int, int]] = []
        self.group_calls: list[tuple[int, int, int]] = []
        self.published_calls: list[int] = []
        self.cleared = 0
        self.closed = False

    async def find_courses_by_program(self, semester_id: int, program_id: int):
        self.course_calls.append((semester_id, program_id))
        return list(self.courses)

    async def find_groups_by_course(self, course_id: int, semester_id: int, program_id: int):
        self.group_calls.append((course_id, semester_id, program_id))
        return list(self.groups)

    async def fetch_semester_program_events(self, semester_program_id: int, year: int, month: int):
        self.event_calls.append((semester_program_id, year, month))
        result = self.events.get((year, month), [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    async def check_semester_program_published(self, semester_program_id: int) -> bool:
        self.published_calls.append(semester_program_id)
        return self.published

    def clear_cache(self) -> None:
        self.cleared += 1

    async def aclose(self) -> None:
        self.closed = True


class FakeCatalog:
    """Stands in for the catalog source; ``pages`` maps semester id to HTML.

    ``None`` is the landing page and answers for any semester not listed.
    """

    def __init__(self, pages: dict, error: Exception | None = None) -> None:
        self.pages = dict(pages)
        self.error = error
        self.calls: list[int | None] = []

    async def fetch_catalog_page(self, semester_id: int | None = None) -> str:
        self.calls.append(semester_id)
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.pages.get(semester_id, self.pages[None])


CATALOG_SEMESTERS = (
    (27, "2025/2026 Rudens semestris (25/26-R)"),
    (26, "2024/2025 Pavasara semestris (24/25-P)"),
)

CATALOG_PROGRAMS = """
<select id="program-id">
  <optgroup label="Datorzinātnes un informācijas tehnoloģijas fakultāte (33000)">
    <option value="1001" data-tokens="datorsistemas">Datorsistēmas (RDBD0)</option>
  </optgroup>
  <optgroup label="Elektronikas un telekomunikāciju fakultāte (34000)">
    <option value="2001" data-tokens="elektronika">Elektronika (RELE0)</option>
    <option value="2002">Telekomunikācijas (RETT0)</option>
  </optgroup>
</select>
"""


def catalog_page(selected: int, start: str, end: str) -> str:
    """Catalog page HTML with ``selected`` chosen and its bounds in the hidden inputs."""
    options = "\n".join(
        f'<option value="{sid}"{" selected" if sid == selected else ""}>{name}</option>'
        for sid, name in CATALOG_SEMESTERS
    )
    return (
        f'<select id="semester-id">\n{options}\n</select>\n'
        f'<input type="hidden" id="semester-start-date" value="{start}">\n'
        f'<input type="hidden" id="semester-end-date" value="{end}">\n'
        f"{CATALOG_PROGRAMS}"
    )
