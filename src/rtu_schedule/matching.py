"""Text matching over normalized strings.

Normalization case-folds, trims and strips diacritics ("Datorsistēmas" ->
"datorsistemas") so identifiers typed without Latvian characters still match.
Each function is pure and usable on its own; the Resolver chains them into
ordered strategies.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass

from rtu_schedule.models import Season

# Checked in order: "pavasar" contains "vasar", so spring precedes summer.
SEASON_KEYWORDS: tuple[tuple[Season, tuple[str, ...]], ...] = (
    ("autumn", ("rudens", "autumn", "fall", "-r")),
    ("spring", ("pavasar", "spring", "-p")),
    ("summer", ("vasar", "summer", "-v")),
)
SEASON_SUFFIXES: dict[str, Season] = {"r": "autumn", "p": "spring", "v": "summer"}

_PERIOD_CODE = re.compile(r"(\d{2})/(\d{2})-([RPV])", re.IGNORECASE)
_YEAR = re.compile(r"\d{4}/\d{4}|\d{4}")


def normalize_for_comparison(text: str) -> str:
    """Lowercase, trim and remove combining accents."""
    decomposed = unicodedata.normalize("NFD", text.casefold().strip())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def exact_match(query: str, target: str) -> bool:
    return normalize_for_comparison(query) == normalize_for_comparison(target)


def fuzzy_match(query: str, target: str) -> bool:
    """True if the normalized query is a substring of the normalized target."""
    return normalize_for_comparison(query) in normalize_for_comparison(target)


def detect_season(text: str) -> Season | None:
    """Season named by a keyword in text, else by a trailing r/p/v, else None."""
    normalized = normalize_for_comparison(text)
    for season, keywords in SEASON_KEYWORDS:
        if any(keyword in normalized for keyword in keywords):
            return season
    if normalized:
        return SEASON_SUFFIXES.get(normalized[-1])
    return None


@dataclass(frozen=True)
class PeriodQuery:
    """Components extracted from a free-text period identifier."""

    season: Season | None = None
    year: str | None = None
    code: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.season is None and self.year is None


def parse_period_query(text: str) -> PeriodQuery:
    """Extract season, year and code from input like "Rudens 2025/2026".

    A code such as "25/26-R" also yields the academic year "2025/2026"
    when no four-digit year is present.
    """
    code_match = _PERIOD_CODE.search(text)
    year_match = _YEAR.search(text)

    code = None
    year = year_match.group(0) if year_match else None
    if code_match:
        code = code_match.group(0).upper()
        if year is None:
            year = f"20{code_match.group(1)}/20{code_match.group(2)}"

    return PeriodQuery(season=detect_season(text), year=year, code=code)
