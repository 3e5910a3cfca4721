"""Heuristic policy: every opinionated table the filler and the suitability
filter rely on, in one auditable structure.

Defaults below are the shipped worked example (an applicant based in India
looking for software internships). A YAML file can override any section;
sections it omits keep these defaults.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from applyassist.services.field_resolver import FIELD_ALIASES


class FieldAliasEntry(BaseModel):
    key: str
    aliases: list[str]


class SurveyQuestion(BaseModel):
    name: str
    keywords: list[str]
    answers: list[str] = Field(default_factory=list)
    # When set and the flattened profile has a value, that value leads the chain.
    profile_key: str | None = None


ETHNICITY_FALLBACK = [
    "Asian (Not Hispanic or Latino)",
    "Asian or Asian American",
    "Asian",
    "Indian",
    "South Asian",
]

# Order matters: transgender and gender identity are tested before plain gender.
DEFAULT_SURVEY_QUESTIONS = [
    SurveyQuestion(
        name="referral_source",
        keywords=["how did you hear", "how did you find"],
        answers=["Job Board"],
    ),
    SurveyQuestion(
        name="prior_employment",
        keywords=["have you been employed by", "previously worked at", "worked here before", "previously employed"],
        answers=["No"],
    ),
    SurveyQuestion(
        name="full_time_availability",
        keywords=["available for a full-time internship", "available for a full time internship"],
        answers=["Yes"],
        profile_key="availableFullTime",
    ),
    SurveyQuestion(
        name="education_level",
        keywords=["current level of education", "education you are pursuing"],
        answers=["Undergrad", "Undergraduate", "Bachelor"],
    ),
    SurveyQuestion(
        name="age_bracket",
        keywords=["current age", "age range"],
        answers=["Under 30"],
    ),
    SurveyQuestion(
        name="transgender",
        keywords=["transgender"],
        answers=["No"],
    ),
    SurveyQuestion(
        name="gender_identity",
        keywords=["gender identity"],
        answers=["Man", "Male"],
        profile_key="gender",
    ),
    SurveyQuestion(
        name="gender",
        keywords=["gender"],
        answers=["Male", "Man"],
        profile_key="gender",
    ),
    SurveyQuestion(
        name="sexual_orientation",
        keywords=["sexual orientation"],
        answers=["Heterosexual / straight", "Heterosexual", "Straight"],
    ),
    SurveyQuestion(
        name="communities",
        keywords=["communities do you belong"],
        answers=["None of the above"],
    ),
    SurveyQuestion(
        name="veteran_status",
        keywords=["veteran status", "protected veteran"],
        answers=["I am not a protected veteran", "No"],
        profile_key="veteran",
    ),
    SurveyQuestion(
        name="ethnicity",
        keywords=["ethnicity", "race", "ethnic background"],
        answers=list(ETHNICITY_FALLBACK),
        profile_key="ethnicity",
    ),
    SurveyQuestion(
        name="consent",
        keywords=["i agree", "consent", "retain", "candidate data"],
        answers=["I agree", "Yes", "I consent"],
    ),
]


class FillPolicy(BaseModel):
    field_aliases: list[FieldAliasEntry] = Field(
        default_factory=lambda: [FieldAliasEntry(key=key, aliases=list(aliases)) for key, aliases in FIELD_ALIASES]
    )
    survey_questions: list[SurveyQuestion] = Field(
        default_factory=lambda: [q.model_copy(deep=True) for q in DEFAULT_SURVEY_QUESTIONS]
    )
    honeypot_markers: list[str] = Field(
        default_factory=lambda: ["robots only", "leave this field blank", "do not fill this"]
    )
    narrative_triggers: list[str] = Field(
        default_factory=lambda: [
            "what makes you",
            "good fit",
            "why do you want",
            "why this company",
            "why join",
            "why are you interested",
        ]
    )
    start_date_triggers: list[str] = Field(
        default_factory=lambda: ["start date", "expected start", "available start", "availability date"]
    )
    # Matched as whole words against name/id; labels need one of the fuller phrases.
    birth_date_triggers: list[str] = Field(default_factory=lambda: ["birth", "dob", "birthdate", "birthday"])
    birth_date_labels: list[str] = Field(
        default_factory=lambda: ["date of birth", "birth date", "birthdate", "dob"]
    )
    birth_date_exclusions: list[str] = Field(
        default_factory=lambda: ["country of birth", "place of birth", "city of birth", "birthplace", "birth country"]
    )
    date_part_markers: list[str] = Field(default_factory=lambda: ["month", "day", "year"])
    consent_phrases: list[str] = Field(
        default_factory=lambda: ["i agree", "consent", "retain", "candidate data", "allow"]
    )
    authorization_phrases: list[str] = Field(
        default_factory=lambda: ["authorized to work", "legally authorized", "right to work"]
    )
    no_sponsorship_phrases: list[str] = Field(
        default_factory=lambda: ["do not require sponsorship", "no sponsorship", "not require sponsorship"]
    )
    sponsorship_phrases: list[str] = Field(default_factory=lambda: ["require sponsorship", "need sponsorship"])
    work_eligibility_markers: list[str] = Field(
        default_factory=lambda: ["eligible to work in", "authorized to work in", "legal right to work"]
    )
    foreign_eligibility_markers: list[str] = Field(
        default_factory=lambda: ["country where you are applying", "this country"]
    )
    interest_options: list[str] = Field(
        default_factory=lambda: ["Backend Development", "Frontend Development", "Full-stack Development"]
    )
    resume_keywords: list[str] = Field(default_factory=lambda: ["resume", "cv", "curriculum"])
    non_resume_keywords: list[str] = Field(default_factory=lambda: ["cover", "transcript"])


class SuitabilityPolicy(BaseModel):
    home_region: str = "India"
    home_locations: list[str] = Field(
        default_factory=lambda: [
            "india",
            "pune",
            "mumbai",
            "delhi",
            "bangalore",
            "bengaluru",
            "hyderabad",
            "chennai",
        ]
    )
    full_time_markers: list[str] = Field(
        default_factory=lambda: ["full time", "full-time", "employment type: full time"]
    )
    on_site_markers: list[str] = Field(
        default_factory=lambda: ["on-site", "on site", "onsite", "in-office", "location type: on-site"]
    )
    remote_markers: list[str] = Field(default_factory=lambda: ["remote", "work from home", "anywhere"])
    in_person_markers: list[str] = Field(
        default_factory=lambda: [
            "in-person",
            "in person",
            "work from our offices",
            "anchor days",
            "come to the office",
            "work out of our",
        ]
    )
    disallowed_office_locations: list[str] = Field(
        default_factory=lambda: [
            "new york",
            "nyc",
            "ny",
            "san francisco",
            "sf",
            "california",
            "boston",
            "seattle",
            "austin",
        ]
    )
    disallowed_regions: list[str] = Field(
        default_factory=lambda: [
            "san francisco",
            "new york",
            "california",
            "ny",
            "sf",
            "usa",
            "united states",
            "bucharest",
            "romania",
            "europe",
            "london",
            "united kingdom",
            "canada",
            "toronto",
            "vancouver",
        ]
    )
    authorization_requirement_phrases: list[str] = Field(
        default_factory=lambda: [
            "must be authorized to work",
            "must be legally authorized to work",
            "required to be authorized",
            "you must have authorization",
            "must have work authorization",
        ]
    )
    authorization_regions: list[str] = Field(
        default_factory=lambda: [
            "united states",
            "usa",
            "u.s.",
            "the us",
            "america",
            "canada",
            "united kingdom",
            "uk",
            "europe",
            "european union",
            "australia",
            "singapore",
            "germany",
            "france",
            "netherlands",
            "romania",
            "ireland",
        ]
    )
    position_type: str = "internship"
    position_type_keywords: list[str] = Field(
        default_factory=lambda: ["intern", "interns", "internship", "internships"]
    )


class NarrativeTheme(BaseModel):
    name: str
    keywords: list[str]
    phrase: str


class NarrativePolicy(BaseModel):
    role_title: str = "Software Engineer Intern"
    company_fallback: str = "this company"
    applicant_pitch: str = (
        "With a strong foundation in full-stack development and hands-on internship experience, "
        "I am eager to contribute to building scalable solutions."
    )
    themes: list[NarrativeTheme] = Field(
        default_factory=lambda: [
            NarrativeTheme(
                name="scale",
                keywords=["million", "millions", "billion", "at scale"],
                phrase="work with a product used by millions",
            ),
            NarrativeTheme(
                name="impact",
                keywords=["impact", "impactful"],
                phrase="create impactful solutions",
            ),
            NarrativeTheme(
                name="mentorship",
                keywords=["mentor", "mentors", "mentorship"],
                phrase="learn from experienced mentors",
            ),
            NarrativeTheme(
                name="innovation",
                keywords=["innovative", "innovation", "cutting-edge", "cutting edge"],
                phrase="work on innovative technologies",
            ),
        ]
    )
    themed_template: str = (
        "I am excited about the opportunity to join {company} as a {role_title}. {applicant_pitch} "
        "I am particularly drawn to {company}'s mission and the opportunity to {themes}."
    )
    generic_template: str = (
        "I am excited about the opportunity to join {company} as a {role_title}. {applicant_pitch} "
        "I am particularly drawn to {company}'s mission and the opportunity to make a meaningful impact."
    )


class Policy(BaseModel):
    fill: FillPolicy = Field(default_factory=FillPolicy)
    suitability: SuitabilityPolicy = Field(default_factory=SuitabilityPolicy)
    narrative: NarrativePolicy = Field(default_factory=NarrativePolicy)

    def alias_table(self) -> list[tuple[str, list[str]]]:
        return [(entry.key, list(entry.aliases)) for entry in self.fill.field_aliases]


def load_policy(path: Path | None) -> Policy:
    if path is None or not path.exists():
        return Policy()
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Policy file must be a mapping at the top level: {path}")
    try:
        return Policy.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid policy file {path}: {exc}") from exc
