from __future__ import annotations

import re
from typing import Any

from talent_api.schemas.resume import ParsedResumeData

# Lookup paths per field, highest precedence first. The nested layout the
# prompt asks for comes first, flat and legacy spellings after it.
FIELD_PATHS: dict[str, tuple[tuple[str, ...], ...]] = {
    "first_name": (("firstName",), ("name", "first")),
    "last_name": (("lastName",), ("name", "last")),
    "email": (("email",),),
    "phone": (("phone",),),
    "location": (("location",),),
    "years_experience": (("yearsExperience",), ("experience_years",)),
    "skills": (("skills",),),
    "bio": (("sections", "bioText"), ("bio",)),
    "linkedin_url": (("links", "linkedin"), ("linkedinUrl",), ("linkedin",)),
    "github_url": (("links", "github"), ("githubUrl",), ("github",)),
    "portfolio_url": (("links", "portfolio"), ("portfolioUrl",), ("portfolio",)),
    "education": (("sections", "education"), ("education",)),
    "work_experience": (("sections", "experience"), ("experience",), ("work_experience",)),
    "certifications": (("sections", "certifications"), ("certifications",)),
}

_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")


def _lookup(data: Any, path: tuple[str, ...]) -> Any:
    node = data
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return True


def pick(data: Any, field: str) -> Any:
    for path in FIELD_PATHS[field]:
        value = _lookup(data, path)
        if _is_present(value):
            return value
    return None


def _as_text(value: Any) -> str:
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, (str, int, float)):
        return str(value).strip()
    return ""


def _as_years(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, (int, float)):
        return max(0, value)
    if isinstance(value, str):
        match = _NUMBER_RE.search(value)
        if match:
            number = float(match.group(0))
            return int(number) if number.is_integer() else number
    return 0


def _item_text(item: Any) -> str:
    if isinstance(item, dict):
        return ", ".join(_as_text(value) for value in item.values() if _as_text(value))
    return _as_text(item)


def _as_text_list(value: Any, *, split_commas: bool = False) -> list[str]:
    if isinstance(value, str):
        parts = value.split(",") if split_commas else value.splitlines()
        return [part.strip() for part in parts if part.strip()]
    if not isinstance(value, list):
        return []
    return [text for text in (_item_text(item) for item in value) if text]


def format_experience_entry(entry: Any) -> str:
    if not isinstance(entry, dict):
        return _as_text(entry)
    title = _as_text(entry.get("title"))
    company = _as_text(entry.get("company"))
    period = _as_text(entry.get("duration")) or " - ".join(
        part for part in (_as_text(entry.get("startDate")), _as_text(entry.get("endDate"))) if part
    )
    role = title + (f" at {company}" if company else "")
    header = " ".join(part for part in (role, f"({period})" if period else "") if part)
    description = _as_text(entry.get("description"))
    return "\n".join(part for part in (header, description) if part)


def _as_experience_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return _as_text_list(value)
    if not isinstance(value, list):
        return []
    return [text for text in (format_experience_entry(entry) for entry in value) if text]


def normalize_resume_payload(payload: Any) -> ParsedResumeData:
    """Map whatever JSON the model returned onto ParsedResumeData.

    Never raises; anything missing or unusable becomes an empty default.
    """
    data = payload if isinstance(payload, dict) else {}
    return ParsedResumeData(
        first_name=_as_text(pick(data, "first_name")),
        last_name=_as_text(pick(data, "last_name")),
        email=_as_text(pick(data, "email")),
        phone=_as_text(pick(data, "phone")),
        location=_as_text(pick(data, "location")),
        years_experience=_as_years(pick(data, "years_experience")),
        skills=_as_text_list(pick(data, "skills"), split_commas=True),
        bio=_as_text(pick(data, "bio")),
        linkedin_url=_as_text(pick(data, "linkedin_url")),
        github_url=_as_text(pick(data, "github_url")),
        portfolio_url=_as_text(pick(data, "portfolio_url")),
        education=_as_text_list(pick(data, "education")),
        work_experience=_as_experience_list(pick(data, "work_experience")),
        certifications=_as_text_list(pick(data, "certifications")),
    )
