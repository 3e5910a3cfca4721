import json
from pathlib import Path
from typing import Any

import yaml

from applyassist.services.field_resolver import FIELD_ALIASES, vocabulary

# Synthetic defaults: these values are not read from the profile document.
# They answer questions every target asks and the profile has no section for.
SYNTHETIC_AVAILABLE_FULL_TIME = "Yes"

SYNTHETIC_DEFAULTS: dict[str, Any] = {
    "availableFullTime": SYNTHETIC_AVAILABLE_FULL_TIME,
}

# Keys outside the resolver vocabulary that rules and templates read.
EXTRA_KEYS = [
    "website",
    "visaStatus",
    "expectedStartDate",
    "willingToRelocate",
    "noticePeriod",
    "gpa",
    "skills",
    "whyCompany",
]


def _section(data: Any, key: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        return {}
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _text(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _join_location(city: Any, state: Any, country: Any) -> str | None:
    parts = [str(part).strip() for part in (city, state, country) if part and str(part).strip()]
    return ", ".join(parts) if parts else None


def flatten_profile(profile: dict[str, Any] | None) -> dict[str, Any]:
    """Flatten the nested personal profile into canonical keys.

    Every resolver key gets a slot; a value the profile does not provide is
    stored as None. fullName and location are derived when not given.
    """
    personal = _section(profile, "personalInfo")
    location = _section(personal, "location")
    auth = _section(profile, "workAuthorization")
    availability = _section(profile, "availability")
    experience = _section(profile, "experience")
    education = _section(profile, "education")
    demographics = _section(profile, "demographics")
    additional = _section(profile, "additionalInfo")

    flat: dict[str, Any] = {key: None for key in vocabulary(FIELD_ALIASES)}
    flat.update({key: None for key in EXTRA_KEYS})

    first = _text(personal.get("firstName"))
    last = _text(personal.get("lastName"))
    full = _text(personal.get("fullName"))
    if not full and (first or last):
        full = " ".join(part for part in (first, last) if part)

    flat.update(
        {
            "firstName": first,
            "lastName": last,
            "fullName": full,
            "email": _text(personal.get("email")),
            "phone": _text(personal.get("phone")),
            "dateOfBirth": _text(personal.get("dateOfBirth")),
            "linkedin": _text(personal.get("linkedin")),
            "github": _text(personal.get("github")),
            "portfolio": _text(personal.get("portfolio")) or _text(personal.get("website")),
            "website": _text(personal.get("website")),
            "city": _text(location.get("city")),
            "state": _text(location.get("state")),
            "country": _text(location.get("country")),
            "zipCode": _text(location.get("zipCode")),
            "location": _text(location.get("address"))
            or _join_location(location.get("city"), location.get("state"), location.get("country")),
            "authorized": auth.get("authorized"),
            "requiresSponsorship": auth.get("requiresSponsorship"),
            "visaStatus": _text(auth.get("visaStatus")),
            "startDate": _text(availability.get("startDate")),
            "expectedStartDate": _text(availability.get("expectedStartDate")),
            "willingToRelocate": availability.get("willingToRelocate"),
            "noticePeriod": _text(availability.get("noticePeriod")),
            "yearsOfExperience": experience.get("yearsOfExperience"),
            "currentCompany": _text(experience.get("currentCompany")),
            "currentTitle": _text(experience.get("currentTitle")),
            "degree": _text(education.get("degree")),
            "field": _text(education.get("field")),
            "university": _text(education.get("university")),
            "graduationYear": education.get("graduationYear"),
            "gpa": education.get("gpa"),
            "gender": _text(demographics.get("gender")),
            "ethnicity": _text(demographics.get("ethnicity")),
            "veteran": _text(demographics.get("veteran")),
            "disability": _text(demographics.get("disability")),
            "coverLetter": _text(additional.get("coverLetter")),
            "referralSource": _text(additional.get("referralSource")),
            "whyCompany": _text(additional.get("whyCompany")),
        }
    )

    skills = profile.get("skills") if isinstance(profile, dict) else None
    if isinstance(skills, list):
        flat["skills"] = [str(skill).strip() for skill in skills if str(skill).strip()] or None

    flat.update(SYNTHETIC_DEFAULTS)
    return flat


def load_profile(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(
            f"Personal profile not found: {path}. "
            "Create it from data/personal-details.example.json."
        )
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".yaml", ".yml"}:
        data = yaml.safe_load(text)
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Personal profile must be a mapping at the top level: {path}")
    return data


def _pick_best_pdf(*, directory: Path, prefer_keywords: list[str]) -> Path | None:
    if not directory.exists() or not directory.is_dir():
        return None
    candidates = [p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == ".pdf"]
    if not candidates:
        return None
    lowered = {p: p.name.lower() for p in candidates}
    for kw in prefer_keywords:
        hits = [p for p in candidates if kw in lowered[p]]
        if hits:
            return max(hits, key=lambda x: x.stat().st_size)
    return max(candidates, key=lambda x: x.stat().st_size)


def resolve_resume_path(settings) -> Path | None:
    if settings.resume_path.exists():
        return settings.resume_path
    return _pick_best_pdf(directory=settings.data_dir, prefer_keywords=["resume", "cv"])
