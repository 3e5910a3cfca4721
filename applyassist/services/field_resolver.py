import re
from typing import Sequence

# Ordered: when a signal matches aliases of several keys, the earliest key wins.
# Short signals over-match: "name" is inside "firstname", so it lands on firstName
# even when the control asks for a full name.
FIELD_ALIASES: list[tuple[str, list[str]]] = [
    # Name
    ("firstName", ["first_name", "firstname", "first-name", "given_name", "givenname"]),
    ("lastName", ["last_name", "lastname", "last-name", "family_name", "familyname", "surname"]),
    ("fullName", ["full_name", "fullname", "full-name", "name", "your_name", "yourname"]),
    # Contact
    ("email", ["email", "email_address", "e-mail", "emailaddress", "mail"]),
    ("phone", ["phone", "phone_number", "phonenumber", "telephone", "mobile", "cell"]),
    # Personal
    ("dateOfBirth", ["date_of_birth", "dob", "birth_date", "birthdate", "birthday"]),
    # Location
    ("city", ["city", "town", "locality"]),
    ("state", ["state", "province", "region"]),
    ("country", ["country"]),
    ("zipCode", ["zip", "zipcode", "zip_code", "postal", "postalcode", "postal_code"]),
    ("location", ["location", "address"]),
    # Links
    ("linkedin", ["linkedin", "linkedin_url", "linkedin_profile"]),
    ("github", ["github", "github_url", "github_username"]),
    ("portfolio", ["portfolio", "portfolio_url", "website", "personal_website"]),
    # Work authorization
    ("authorized", ["authorized", "work_authorization", "legally_authorized", "right_to_work"]),
    ("requiresSponsorship", ["sponsorship", "require_sponsorship", "visa_sponsorship", "need_sponsorship"]),
    # Experience
    ("yearsOfExperience", ["years_experience", "experience_years", "years_of_experience", "experience"]),
    ("currentCompany", ["current_company", "employer", "company"]),
    ("currentTitle", ["current_title", "job_title", "title", "position"]),
    # Education
    ("degree", ["degree", "education_level", "highest_degree"]),
    ("field", ["field", "major", "field_of_study", "study_field"]),
    ("university", ["university", "school", "college", "institution"]),
    ("graduationYear", ["graduation_year", "grad_year", "year_graduated"]),
    # Availability
    ("startDate", ["start_date", "available_start", "availability", "notice_period"]),
    # Demographics
    ("gender", ["gender", "sex"]),
    ("ethnicity", ["ethnicity", "race", "ethnic_background"]),
    ("veteran", ["veteran", "veteran_status", "military"]),
    ("disability", ["disability", "disability_status"]),
    # Other
    ("coverLetter", ["cover_letter", "coverletter", "message", "additional_info"]),
    ("referralSource", ["referral", "how_did_you_hear", "source", "referral_source"]),
]

_SEPARATORS = re.compile(r"[\s_-]+")


def normalize_signal(value: str) -> str:
    return _SEPARATORS.sub("", (value or "").lower())


def vocabulary(aliases: Sequence[tuple[str, Sequence[str]]] = FIELD_ALIASES) -> list[str]:
    return [key for key, _ in aliases]


class FieldResolver:
    def __init__(self, aliases: Sequence[tuple[str, Sequence[str]]] | None = None) -> None:
        table = FIELD_ALIASES if aliases is None else aliases
        self._table: list[tuple[str, list[str]]] = [
            (key, [normalize_signal(alias) for alias in variants if normalize_signal(alias)])
            for key, variants in table
        ]

    @property
    def keys(self) -> list[str]:
        return [key for key, _ in self._table]

    def resolve(self, signal_text: str) -> str | None:
        normalized = normalize_signal(signal_text)
        if not normalized:
            return None
        for key, variants in self._table:
            if any(variant in normalized or normalized in variant for variant in variants):
                return key
        return None


_default_resolver = FieldResolver()


def resolve(signal_text: str) -> str | None:
    return _default_resolver.resolve(signal_text)
