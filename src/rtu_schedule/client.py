"""Async HTTP client for the RTU timetable endpoints.

All data endpoints are form-encoded POSTs answered with JSON; the catalog
(semesters, programs) is the HTML landing page itself. Numeric parameters
are validated before any request is made, responses are cached per
(endpoint, params) and transient failures are retried with tenacity.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from rtu_schedule.cache import TTLCache
from rtu_schedule.config import ScheduleConfig, get_config
from rtu_schedule.errors import (
    ApiError,
    InvalidResponseError,
    RateLimitError,
    TransientError,
)
from rtu_schedule.logging import get_logger
from rtu_schedule.models import CourseRecord, GroupRecord, SemesterEvent, Subject

log = get_logger(__name__)

EVENTS_PATH = "/getSemesterProgEventList"
SUBJECTS_PATH = "/getSemProgSubjects"
PUBLISHED_PATH = "/isSemesterProgramPublished"
COURSES_PATH = "/findCourseByProgramId"
GROUPS_PATH = "/findGroupByCourseId"

_EVENTS = TypeAdapter(list[SemesterEvent])
_SUBJECTS = TypeAdapter(list[Subject])
_COURSES = TypeAdapter(list[CourseRecord])
_GROUPS = TypeAdapter(list[GroupRecord])


def _require_id(value: int, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"Invalid {name}: {value!r}")


def _require_year_month(year: int, month: int) -> None:
    if isinstance(year, bool) or not isinstance(year, int) or not 1 <= year <= 9999:
        raise ValueError(f"Invalid year: {year!r}")
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month!r}")


class RTUApiClient:
    """Client for nodarbibas.rtu.lv.

    Acts as both the event source (events, courses, groups, published
    check) and the catalog source (landing page HTML).

    Args:
        config: Configuration; defaults to the environment singleton.
        http_client: Pre-built ``httpx.AsyncClient`` (tests pass one over
            ``httpx.MockTransport``). The caller keeps ownership of it.
    """

    def __init__(
        self,
        config: ScheduleConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or get_config()
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout / 1000,
            headers=self._default_headers(),
            follow_redirects=True,
        )
        self._cache = TTLCache(self.config.cache_timeout / 1000, name="api")

    def _default_headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.config.user_agent,
            "Accept": "application/json, text/javascript, */*; q=0.01",
            "Accept-Language": "lv,en-US;q=0.7,en;q=0.5",
            "X-Requested-With": "XMLHttpRequest",
            "Origin": self.config.base_url,
            "Referer": f"{self.config.base_url}/?lang={self.config.language}",
        }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> RTUApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def clear_cache(self) -> None:
        self._cache.clear()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Single request with error classification."""
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise TransientError(f"Request to {path} timed out: {e}", e) from e
        except httpx.TransportError as e:
            raise TransientError(f"Request to {path} failed: {e}", e) from e

        if response.status_code == 429:
            raise RateLimitError(f"Rate limited by {path}")
        if response.status_code >= 500:
            raise TransientError(
                f"API request failed: {path} returned {response.status_code}"
            )
        if response.status_code >= 400:
            raise ApiError(f"API request failed: {path} returned {response.status_code}")
        return response

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Request with retries on TransientError."""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.config.retry_attempts),
            wait=wait_fixed(self.config.retry_wait),
            retry=retry_if_exception_type(TransientError),
            reraise=True,
        ):
            with attempt:
                number = attempt.retry_state.attempt_number
                if number > 1:
                    log.info("request_retry", path=path, attempt=number)
                return await self._send(method, path, **kwargs)
        raise AssertionError("unreachable")  # pragma: no cover

    async def _post_json(self, path: str, params: Mapping[str, int]) -> Any:
        key = (path, tuple(sorted(params.items())))

        async def fetch() -> Any:
            response = await self._request(
                "POST", path, data={k: str(v) for k, v in params.items()}
            )
            try:
                payload = response.json()
            except json.JSONDecodeError as e:
                raise InvalidResponseError(f"Invalid response data from {path}", e) from e
            log.debug("api_response", path=path, params=dict(params))
            return payload

        return await self._cache.get_or_fetch(key, fetch)

    async def _post_list(self, path: str, params: Mapping[str, int], adapter: TypeAdapter) -> list:
        payload = await self._post_json(path, params)
        if not isinstance(payload, list):
            raise InvalidResponseError(
                f"Invalid response data from {path}: expected a list, "
                f"got {type(payload).__name__}"
            )
        try:
            return adapter.validate_python(payload)
        except ValidationError as e:
            raise InvalidResponseError(f"Invalid response data from {path}", e) from e

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def fetch_catalog_page(self, semester_id: int | None = None) -> str:
        """GET the landing page holding the semester/program selectors.

        Not cached here; DiscoveryService caches the parsed result.
        """
        params: dict[str, str | int] = {"lang": self.config.language}
        if semester_id is not None:
            _require_id(semester_id, "semesterId")
            params["semesterId"] = semester_id
        response = await self._request(
            "GET", "/", params=params, headers={"Accept": "text/html"}
        )
        return response.text

    async def fetch_semester_program_events(
        self, semester_program_id: int, year: int, month: int
    ) -> list[SemesterEvent]:
        """Events of one semester program for one calendar month."""
        _require_id(semester_program_id, "semesterProgramId")
        _require_year_month(year, month)
        return await self._post_list(
            EVENTS_PATH,
            {"semesterProgramId": semester_program_id, "year": year, "month": month},
            _EVENTS,
        )

    async def fetch_semester_program_subjects(self, semester_program_id: int) -> list[Subject]:
        _require_id(semester_program_id, "semesterProgramId")
        return await self._post_list(
            SUBJECTS_PATH, {"semesterProgramId": semester_program_id}, _SUBJECTS
        )

    async def check_semester_program_published(self, semester_program_id: int) -> bool:
        """True if the timetable of a semester program is published.

        The endpoint answers ``true``/``false`` either as plain text, a bare
        JSON boolean or ``{"published": bool}``.
        """
        _require_id(semester_program_id, "semesterProgramId")
        path = PUBLISHED_PATH
        key = (path, (("semesterProgramId", semester_program_id),))

        async def fetch() -> bool:
            response = await self._request(
                "POST", path, data={"semesterProgramId": str(semester_program_id)}
            )
            try:
                payload = response.json()
            except json.JSONDecodeError:
                payload = response.text
            if isinstance(payload, dict):
                payload = payload.get("published", False)
            if isinstance(payload, str):
                return payload.strip().lower() == "true"
            return bool(payload)

        return await self._cache.get_or_fetch(key, fetch)

    async def find_courses_by_program(self, semester_id: int, program_id: int) -> list[CourseRecord]:
        _require_id(semester_id, "semesterId")
        _require_id(program_id, "programId")
        return await self._post_list(
            COURSES_PATH, {"semesterId": semester_id, "programId": program_id}, _COURSES
        )

    async def find_groups_by_course(
        self, course_id: int, semester_id: int, program_id: int
    ) -> list[GroupRecord]:
        _require_id(course_id, "courseId")
        _require_id(semester_id, "semesterId")
        _require_id(program_id, "programId")
        return await self._post_list(
            GROUPS_PATH,
            {"courseId": course_id, "semesterId": semester_id, "programId": program_id},
            _GROUPS,
        )
