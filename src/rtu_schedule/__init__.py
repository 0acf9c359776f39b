"""RTU timetable access by human-friendly identifiers.

Resolves semester/program/course/group selections against the
nodarbibas.rtu.lv catalog and assembles a sorted, deduplicated Schedule.
"""

from rtu_schedule.client import RTUApiClient
from rtu_schedule.config import ScheduleConfig, get_config
from rtu_schedule.discovery import DiscoveryService
from rtu_schedule.errors import (
    ApiError,
    CourseNotFoundError,
    DiscoveryError,
    GroupNotFoundError,
    InvalidOptionsError,
    InvalidResponseError,
    PeriodNotFoundError,
    ProgramNotFoundError,
    RateLimitError,
    RTUScheduleError,
    ScheduleNotPublishedError,
    TransientError,
)
from rtu_schedule.models import (
    GetScheduleOptions,
    ScheduleEntry,
    ScheduleEntryType,
    ScheduleMetadata,
    ScheduleSubject,
    StudyCourse,
    StudyFaculty,
    StudyGroup,
    StudyPeriod,
    StudyProgram,
)
from rtu_schedule.resolver import Resolver
from rtu_schedule.schedule import Schedule
from rtu_schedule.service import RTUSchedule

__all__ = [
    "RTUSchedule",
    "Schedule",
    "RTUApiClient",
    "DiscoveryService",
    "Resolver",
    "ScheduleConfig",
    "get_config",
    "GetScheduleOptions",
    "ScheduleEntry",
    "ScheduleEntryType",
    "ScheduleMetadata",
    "ScheduleSubject",
    "StudyCourse",
    "StudyFaculty",
    "StudyGroup",
    "StudyPeriod",
    "StudyProgram",
    "RTUScheduleError",
    "PeriodNotFoundError",
    "ProgramNotFoundError",
    "CourseNotFoundError",
    "GroupNotFoundError",
    "ScheduleNotPublishedError",
    "DiscoveryError",
    "InvalidOptionsError",
    "ApiError",
    "InvalidResponseError",
    "TransientError",
    "RateLimitError",
]
