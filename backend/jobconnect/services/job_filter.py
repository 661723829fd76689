"""In-memory job search and filtering.

``filter_jobs`` is pure: it reads job attributes, never writes them, and
returns matches in their original order.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

from jobconnect.schemas.job import WILDCARD, JobFilterCriteria

JobT = TypeVar("JobT")

SEARCHABLE_FIELDS: tuple[str, ...] = (
    "title",
    "description",
    "company",
    "location",
    "skills",
    "category",
    "job_type",
    "experience",
    "education",
    "benefits",
)

_LEADING_INT = re.compile(r"^\s*(-?\d+)")


def parse_leading_int(value: Any) -> int | None:
    """Parse the integer at the start of ``value``.

    ``"80000"`` and ``"3 years"`` parse; ``"abc"``, ``""`` and ``None`` do not.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def split_skills(skills: str | None) -> list[str]:
    return [skill.strip() for skill in (skills or "").split(",") if skill.strip()]


def _is_wildcard(value: str | None) -> bool:
    return value is None or value == "" or value == WILDCARD


def _matches_text(job: Any, tokens: list[str]) -> bool:
    if not tokens:
        return True
    haystack = [str(getattr(job, name, None) or "").lower() for name in SEARCHABLE_FIELDS]
    return all(any(token in field for field in haystack) for token in tokens)


def _matches_exact(stored: Any, wanted: str) -> bool:
    if _is_wildcard(wanted):
        return True
    return stored is not None and stored == wanted


def _matches_education(stored: Any, wanted: str) -> bool:
    if _is_wildcard(wanted):
        return True
    return stored is not None and str(stored).lower() == wanted.lower()


def _matches_skill(stored: Any, wanted: str) -> bool:
    if _is_wildcard(wanted):
        return True
    if stored is None:
        return False
    wanted_lower = wanted.strip().lower()
    return any(skill.lower() == wanted_lower for skill in split_skills(str(stored)))


def _matches_experience(stored: Any, bucket: str) -> bool:
    if _is_wildcard(bucket):
        return True
    if stored is None:
        return False

    text = str(stored).strip()
    if text.lower() == bucket.lower():
        return True

    years = parse_leading_int(text)
    if bucket == "entry":
        return "entry" in text.lower() or years == 0
    if years is None:
        return False
    if bucket == "1-2":
        return 1 <= years <= 2
    if bucket == "3-5":
        return 3 <= years <= 5
    if bucket == "5+":
        return years >= 5
    return False


def _matches_salary(stored: Any, minimum: int | None, maximum: int | None) -> bool:
    if minimum is None and maximum is None:
        return True
    salary = parse_leading_int(stored)
    if salary is None:
        return False
    if minimum is not None and salary < minimum:
        return False
    if maximum is not None and salary > maximum:
        return False
    return True


def filter_jobs(jobs: Sequence[JobT], criteria: JobFilterCriteria) -> list[JobT]:
    """Return the jobs satisfying every active criterion, in input order.

    Args:
        jobs: Job-like objects exposing the searchable attributes.
        criteria: Search request; wildcard values do not constrain.

    Returns:
        New list holding the matching jobs.
    """
    tokens = criteria.search.strip().lower().split()
    minimum = parse_leading_int(criteria.salary_min)
    maximum = parse_leading_int(criteria.salary_max)

    matched: list[JobT] = []
    for job in jobs:
        if not _matches_text(job, tokens):
            continue
        if not _matches_exact(getattr(job, "category", None), criteria.category):
            continue
        if not _matches_exact(getattr(job, "job_type", None), criteria.job_type):
            continue
        if not _matches_education(getattr(job, "education", None), criteria.education):
            continue
        if not _matches_exact(getattr(job, "location", None), criteria.location):
            continue
        if not _matches_skill(getattr(job, "skills", None), criteria.skill):
            continue
        if not _matches_experience(getattr(job, "experience", None), criteria.experience):
            continue
        if criteria.remote_only and getattr(job, "remote", None) is not True:
            continue
        if not _matches_salary(getattr(job, "salary", None), minimum, maximum):
            continue
        matched.append(job)
    return matched


def job_facets(jobs: Iterable[Any]) -> dict[str, list[str]]:
    """Collect the distinct locations and skills offered as filter options.

    Values keep the order in which they are first seen.
    """
    locations: dict[str, None] = {}
    skills: dict[str, None] = {}
    for job in jobs:
        location = (getattr(job, "location", None) or "").strip()
        if location:
            locations.setdefault(location, None)
        for skill in split_skills(getattr(job, "skills", None)):
            skills.setdefault(skill, None)
    return {"locations": list(locations), "skills": list(skills)}


__all__ = [
    "SEARCHABLE_FIELDS",
    "filter_jobs",
    "job_facets",
    "parse_leading_int",
    "split_skills",
]
