"""Pydantic models for catalog, API and schedule data.

Three layers live here:

* raw records exactly as the RTU endpoints return them (camelCase on the
  wire, snake_case in Python),
* records parsed from the catalog HTML page,
* the resolved, immutable domain records handed to callers.

All data structures use Pydantic v2 for validation, serialization, and type safety.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

Season = Literal["autumn", "spring", "summer"]

ScheduleEntryType = Literal[
    "lecture",
    "practical",
    "lab",
    "seminar",
    "consultation",
    "exam",
    "test",
    "other",
]


# ---------------------------------------------------------------------------
# Raw API records
# ---------------------------------------------------------------------------


class _ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class EventTime(_ApiModel):
    """Wall-clock time as sent by the API (``customStart``/``customEnd``)."""

    hour: int = 0
    minute: int = 0
    second: int = 0
    nano: int = 0


class EventRoom(_ApiModel):
    room_id: int | None = None
    room_number: str | None = None
    room_name: str | None = None
    room_name_en: str | None = Field(default=None, alias="roomNameEN")


class SemesterEvent(_ApiModel):
    """One occurrence of a timetable event from ``getSemesterProgEventList``."""

    event_date_id: int
    event_id: int | None = None
    status_id: int | None = None
    event_temp_name: str = ""  # "Lekc. Algoritmi, J. Kalns"
    event_temp_name_en: str = ""
    room_info_text: str = ""  # "Zunda krastmala 10 - 101"
    room_info_text_en: str = ""
    lecturer_info_text: str = ""  # "J. Kalns, A. Liepa"
    lecturer_info_text_en: str = ""
    program_info_text: str | None = None
    program_info_text_en: str | None = None
    room: EventRoom | None = None
    event_date: int  # epoch milliseconds
    custom_start: EventTime = Field(default_factory=EventTime)
    custom_end: EventTime = Field(default_factory=EventTime)

    @field_validator(
        "event_temp_name",
        "event_temp_name_en",
        "room_info_text",
        "room_info_text_en",
        "lecturer_info_text",
        "lecturer_info_text_en",
        mode="before",
    )
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class Subject(_ApiModel):
    """Subject taught in a semester program (``getSemProgSubjects``)."""

    subject_id: int
    title_lv: str = Field(default="", alias="titleLV")
    title_en: str = Field(default="", alias="titleEN")
    code: str = ""
    part: int | None = None
    deleted_date: str | None = None


class CourseRecord(_ApiModel):
    """Course (year of study) as returned by ``findCourseByProgramId``.

    The endpoint answers either with objects or with bare course numbers
    (``[1, 2, 3]``); bare numbers become ``{"id": n, "name": "n. kurss"}``.
    """

    id: int
    name: str = ""
    code: str = ""
    semester: int | None = None
    program_id: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_number(cls, data: Any) -> Any:
        if isinstance(data, int) and not isinstance(data, bool):
            return {"id": data, "name": f"{data}. kurss", "semester": data}
        return data


class GroupRecord(_ApiModel):
    """Group as returned by ``findGroupByCourseId``.

    Also accepts the semester-program shape
    (``{"semesterProgramId": 27317, "group": "13", "course": 1}``).
    """

    id: int
    name: str = ""
    student_count: int | None = None
    course_id: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_semester_program(cls, data: Any) -> Any:
        if isinstance(data, dict) and "id" not in data and "semesterProgramId" in data:
            return {
                "id": data["semesterProgramId"],
                "name": str(data.get("group") or ""),
                "studentCount": data.get("studentCount"),
                "courseId": data.get("course"),
            }
        return data


# ---------------------------------------------------------------------------
# Catalog HTML records
# ---------------------------------------------------------------------------


class Semester(BaseModel):
    """``<option>`` of the semester selector."""

    id: int
    name: str
    is_selected: bool = False


class SemesterMetadata(BaseModel):
    """Hidden inputs describing the currently selected semester."""

    start_date: str = ""
    end_date: str = ""
    language: str = ""


class ProgramOption(BaseModel):
    """``<option>`` of the program selector."""

    id: int
    name: str  # "Datorsistēmas (RDBD0)"
    code: str = ""
    tokens: str = ""


class Faculty(BaseModel):
    """``<optgroup>`` of the program selector."""

    faculty_name: str
    faculty_code: str = ""
    programs: list[ProgramOption] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Resolved domain records
# ---------------------------------------------------------------------------


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class StudyFaculty(_Record):
    name: str
    code: str


class StudyPeriod(_Record):
    """A semester with its code, academic year, season and date bounds."""

    id: int
    name: str  # "2025/2026 Rudens semestris (25/26-R)"
    code: str  # "25/26-R"
    academic_year: str  # "2025/2026"
    season: Season
    start_date: dt.date
    end_date: dt.date
    is_selected: bool = False


class StudyProgram(_Record):
    id: int
    name: str  # "Datorsistēmas"
    code: str  # "RDBD0"
    full_name: str  # "Datorsistēmas (RDBD0)"
    faculty: StudyFaculty
    tokens: str = ""


class StudyCourse(_Record):
    id: int
    number: int
    name: str


class StudyGroup(_Record):
    id: int
    number: int
    name: str
    student_count: int | None = None
    semester_program_id: int  # key for event fetching


class ScheduleSubject(_Record):
    name: str
    code: str = ""


class ScheduleEntry(_Record):
    """A single timetable entry with parsed metadata."""

    id: int
    subject: ScheduleSubject
    date: dt.date
    start_time: str  # "HH:MM"
    end_time: str
    start_datetime: dt.datetime
    end_datetime: dt.datetime
    duration_minutes: int
    location: str
    building: str | None = None
    room: str | None = None
    lecturer: str
    lecturers: tuple[str, ...] = ()
    type: ScheduleEntryType
    type_raw: str
    group: str = ""
    groups: tuple[str, ...] = ()
    week_number: int
    day_of_week: int  # 1=Monday .. 7=Sunday
    day_name: str
    raw: SemesterEvent | None = Field(default=None, repr=False)


class ScheduleMetadata(_Record):
    period: StudyPeriod
    program: StudyProgram
    course: StudyCourse
    group: StudyGroup | None = None
    fetched_at: dt.datetime


class GetScheduleOptions(BaseModel):
    """Selector for ``RTUSchedule.get_schedule``.

    ``period_id`` wins over ``period``, ``program_id`` over ``program``.
    Without a period the current one is used; without dates the period's
    own bounds are used.
    """

    model_config = ConfigDict(extra="forbid")

    period: int | str | None = None
    period_id: int | None = None
    program: int | str | None = None
    program_id: int | None = None
    course: int | None = None
    group: int | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> Any:
        # datetimes are narrowed to their calendar day
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return dt.datetime.fromisoformat(value).date()
        return value
