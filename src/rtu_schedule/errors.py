"""Error hierarchy for timetable resolution and retrieval.

Resolution misses, caller mistakes and upstream failures each get their own
type so callers can handle them selectively. The HTTP layer reuses the
transient/permanent split so tenacity retry decorators can classify failures:

    AsyncRetrying(retry=retry_if_exception_type(TransientError), ...)
"""

from __future__ import annotations


class RTUScheduleError(Exception):
    """Base exception for all rtu_schedule errors.

    Carries an optional wrapped ``cause`` which is also chained as
    ``__cause__`` so tracebacks show the original failure.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class PeriodNotFoundError(RTUScheduleError):
    """No study period matched the given id, code or name."""

    def __init__(self, input: int | str) -> None:
        super().__init__(f'Study period not found: "{input}"')
        self.input = input


class ProgramNotFoundError(RTUScheduleError):
    """No study program matched the given id, code or name."""

    def __init__(self, input: int | str) -> None:
        super().__init__(f'Study program not found: "{input}"')
        self.input = input


class CourseNotFoundError(RTUScheduleError):
    def __init__(self, course_number: int) -> None:
        super().__init__(f"Course {course_number} not found")
        self.input = course_number
        self.course_number = course_number


class GroupNotFoundError(RTUScheduleError):
    def __init__(self, group_number: int) -> None:
        super().__init__(f"Group {group_number} not found")
        self.input = group_number
        self.group_number = group_number


class ScheduleNotPublishedError(RTUScheduleError):
    """Schedule exists but has not been published yet.

    Reserved: nothing in the library raises it automatically, callers can
    raise it after ``is_schedule_published`` returns False.
    """

    def __init__(self) -> None:
        super().__init__("Schedule is not yet published")


class DiscoveryError(RTUScheduleError):
    """Fetching or parsing the catalog page failed."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(f"Failed to discover RTU data: {message}", cause)


class InvalidOptionsError(RTUScheduleError):
    """Schedule options are malformed. Raised before any I/O."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Invalid schedule options: {message}")


class ApiError(RTUScheduleError):
    """Permanent failure talking to the RTU endpoints.

    Examples: 4xx responses, payloads of the wrong shape.
    """

    pass


class InvalidResponseError(ApiError):
    """Response body could not be interpreted."""

    pass


class TransientError(ApiError):
    """Temporary failure that may succeed on retry.

    Examples: network timeouts, connection resets, 5xx responses.
    """

    pass


class RateLimitError(TransientError):
    """Rate limit exceeded (HTTP 429).

    Inherits from TransientError so tenacity will retry it.
    """

    pass
