"""Catalog page parsing (HTML -> models).

The RTU landing page carries two selectors and a few hidden inputs:

  select#semester-id
    option[value][selected] -> "2025/2026 Rudens semestris (25/26-R)"
  input#semester-start-date / #semester-end-date / #language (hidden)
  select#program-id
    optgroup[label="Datorzinātnes ... fakultāte (33000)"]
      option[value][data-tokens] -> "Datorsistēmas (RDBD0)"

Every function here is pure and total: empty or malformed markup yields
empty results, never an exception.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Tag

from rtu_schedule.models import Faculty, ProgramOption, Semester, SemesterMetadata

PLACEHOLDER_OPTIONS = frozenset({"Izvēlne..", "Izvēlieties..."})
UNCATEGORIZED_FACULTY = "Uncategorized"

_TRAILING_PARENS = re.compile(r"\(([^)]+)\)$")
_NUMBER = re.compile(r"\d+")
_WHITESPACE = re.compile(r"\s+")
_TIME = re.compile(r"^\d{1,2}:\d{2}$")


def _soup(html: str | None) -> BeautifulSoup | None:
    if not html:
        return None
    return BeautifulSoup(html, "html.parser")


def _int_attr(tag: Tag, name: str) -> int:
    try:
        return int(str(tag.get(name, "0")).strip())
    except ValueError:
        return 0


def normalize_text(text: str) -> str:
    """Collapse runs of whitespace and trim."""
    return _WHITESPACE.sub(" ", text).strip()


def extract_number(text: str) -> int:
    """First integer in text, or 0."""
    match = _NUMBER.search(text or "")
    return int(match.group(0)) if match else 0


def extract_trailing_code(label: str) -> str:
    """"Datorsistēmas (RDBD0)" -> "RDBD0"."""
    match = _TRAILING_PARENS.search(label.strip())
    return match.group(1) if match else ""


def parse_semesters(html: str | None) -> list[Semester]:
    """Parse ``#semester-id`` options into Semester records."""
    soup = _soup(html)
    if soup is None:
        return []

    semesters: list[Semester] = []
    for option in soup.select("#semester-id option"):
        semester_id = _int_attr(option, "value")
        name = normalize_text(option.get_text())
        if semester_id > 0 and name and name not in PLACEHOLDER_OPTIONS:
            semesters.append(
                Semester(
                    id=semester_id,
                    name=name,
                    is_selected=option.has_attr("selected"),
                )
            )
    return semesters


def parse_semester_metadata(html: str | None) -> SemesterMetadata:
    """Read the hidden semester inputs; missing inputs become empty strings."""
    soup = _soup(html)
    if soup is None:
        return SemesterMetadata()

    def _value(selector: str) -> str:
        tag = soup.select_one(selector)
        if tag is None:
            return ""
        return str(tag.get("value", "")).strip()

    return SemesterMetadata(
        start_date=_value("#semester-start-date"),
        end_date=_value("#semester-end-date"),
        language=_value("#language"),
    )


def _program_option(option: Tag) -> ProgramOption | None:
    program_id = _int_attr(option, "value")
    name = normalize_text(option.get_text())
    if program_id <= 0 or not name or name in PLACEHOLDER_OPTIONS:
        return None
    return ProgramOption(
        id=program_id,
        name=name,
        code=extract_trailing_code(name),
        tokens=str(option.get("data-tokens", "")),
    )


def parse_programs(html: str | None) -> list[Faculty]:
    """Parse ``#program-id`` into faculties with their programs.

    Options outside any optgroup are collected into an "Uncategorized"
    faculty with an empty code.
    """
    soup = _soup(html)
    if soup is None:
        return []
    select = soup.select_one("#program-id")
    if select is None:
        return []

    faculties: list[Faculty] = []
    for optgroup in select.find_all("optgroup"):
        label = normalize_text(str(optgroup.get("label", "")))
        programs = [
            program
            for program in map(_program_option, optgroup.find_all("option"))
            if program is not None
        ]
        if programs:
            faculties.append(
                Faculty(
                    faculty_name=label,
                    faculty_code=extract_trailing_code(label),
                    programs=programs,
                )
            )

    orphans = [
        program
        for program in map(_program_option, select.find_all("option", recursive=False))
        if program is not None
    ]
    if orphans:
        faculties.append(
            Faculty(faculty_name=UNCATEGORIZED_FACULTY, faculty_code="", programs=orphans)
        )

    return faculties


def parse_time_slot(time_range: str) -> tuple[str, str, int]:
    """Parse "09:00 - 10:30" into (start, end, duration_minutes).

    Unparsable input gives ("", "", 0); negative durations are clamped to 0.
    """
    parts = re.split(r"\s*[-–]\s*", (time_range or "").strip())
    if len(parts) != 2 or not all(_TIME.match(part) for part in parts):
        return "", "", 0

    start, end = parts
    start_h, start_m = (int(x) for x in start.split(":"))
    end_h, end_m = (int(x) for x in end.split(":"))
    duration = (end_h * 60 + end_m) - (start_h * 60 + start_m)
    return start, end, max(duration, 0)
