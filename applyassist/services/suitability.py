import logging
import re
from dataclasses import dataclass, field

from applyassist.services.policy import NarrativePolicy, Policy, SuitabilityPolicy
from applyassist.services.text import contains_any, first_mention, mentions_any, normalize_space

logger = logging.getLogger(__name__)

RULE_LOCATION = "location"
RULE_AUTHORIZATION = "authorization"
RULE_POSITION_TYPE = "position_type"

COMPANY_LABEL_PATTERN = re.compile(r"^\s*(?:company|employer)\s*[:\-]\s*(.+)$", re.IGNORECASE | re.MULTILINE)
COMPANY_VERB_PATTERN = re.compile(
    r"\b([A-Z][A-Za-z0-9&.]*(?:[ \t]+[A-Z][A-Za-z0-9&.]*)*)[ \t]+(?:is|helps|provides|builds)\b"
)
COMPANY_STOPWORDS = {"the", "this", "it", "we", "our", "you", "your", "there", "what", "who", "that", "role", "team"}

LOCATION_PATTERNS = [
    re.compile(r"\blocation\s*[:\-]\s*([^.\n]+)", re.IGNORECASE),
    re.compile(r"\boffices?\s*[:\-]\s*([^.\n]+)", re.IGNORECASE),
    re.compile(r"\b(san francisco|new york|california|india|remote|hybrid)\b", re.IGNORECASE),
]

ROLE_PATTERN = re.compile(r"\b(software|frontend|backend|full[- ]?stack|engineer|developer)\b", re.IGNORECASE)

OFFICE_DAY_PATTERNS = [
    re.compile(
        r"available to work in our (?P<office>[a-z .,'-]+?) office (?P<days>\d+)(?:\s*-\s*\d+)? days? (?:a|per) week"
    ),
    re.compile(r"work (?:from|in|at) our (?P<office>[a-z .,'-]+?) office (?P<days>\d+)(?:\s*-\s*\d+)? days?"),
    re.compile(r"(?P<days>\d+)(?:\s*-\s*\d+)? days? (?:a|per) week in (?:the|our) (?P<office>[a-z .,'-]+?) office"),
    re.compile(r"in.office (?P<days>\d+)(?:\s*-\s*\d+)? days?"),
]

_AUTHORIZATION_WINDOW = 120
_AUTHORIZATION_REGION_PATTERN = re.compile(
    r"\s*(?:to\s+work\s+)?(?:in|within)\s+(?:the\s+)?(?P<region>[a-z][a-z.' -]{1,40}?)\s*(?:[,.;:!?()\n]|\b(?:and|for|without|to|as|by)\b|$)"
)


@dataclass(frozen=True)
class JobAttributes:
    company: str | None = None
    location: str | None = None
    role: str | None = None


@dataclass(frozen=True)
class RuleResult:
    passed: bool
    reason: str | None = None


@dataclass(frozen=True)
class SuitabilityVerdict:
    accepted: bool
    reason: str | None = None
    rule: str | None = None
    extracted_attributes: JobAttributes = field(default_factory=JobAttributes)
    narrative: str | None = None


def _clean(value: str | None, *, max_len: int = 120) -> str | None:
    if value is None:
        return None
    text = normalize_space(value).strip(" -|:,")
    if not text:
        return None
    return text[:max_len].rstrip(" -|,;")


def _extract_company(page_text: str) -> str | None:
    label = COMPANY_LABEL_PATTERN.search(page_text)
    if label:
        return _clean(label.group(1))
    for match in COMPANY_VERB_PATTERN.finditer(page_text):
        candidate = match.group(1).strip()
        if candidate.lower() in COMPANY_STOPWORDS:
            continue
        return _clean(candidate)
    return None


def _extract_location(page_text: str) -> str | None:
    for pattern in LOCATION_PATTERNS:
        match = pattern.search(page_text)
        if match:
            return _clean(match.group(1))
    return None


def extract_job_details(page_text: str) -> JobAttributes:
    """Pull employer, location and role out of free text; unknown parts stay None."""
    text = page_text or ""
    try:
        role_match = ROLE_PATTERN.search(text)
        return JobAttributes(
            company=_extract_company(text),
            location=_extract_location(text),
            role=role_match.group(1) if role_match else None,
        )
    except Exception as exc:
        logger.debug("Job detail extraction failed: %s", exc)
        return JobAttributes()


def check_location(attributes: JobAttributes, lowered: str, policy: SuitabilityPolicy) -> RuleResult:
    location = (attributes.location or "").lower()
    home = policy.home_region

    is_full_time = contains_any(lowered, policy.full_time_markers)
    is_on_site = contains_any(lowered, policy.on_site_markers)
    is_remote = mentions_any(lowered, policy.remote_markers)
    is_home = mentions_any(location, policy.home_locations) or mentions_any(lowered, policy.home_locations)

    if is_full_time and is_on_site and not is_home and not is_remote:
        office = first_mention(lowered, policy.disallowed_office_locations) or first_mention(
            lowered, policy.disallowed_regions
        )
        where = f" ({office})" if office else ""
        return RuleResult(
            False,
            f"Location: full-time on-site position{where} outside {home} with no remote option",
        )

    for pattern in OFFICE_DAY_PATTERNS:
        match = pattern.search(lowered)
        if not match:
            continue
        office = (match.groupdict().get("office") or "").strip()
        office_disallowed = mentions_any(office, policy.disallowed_office_locations) or any(
            f"office in {loc}" in lowered for loc in policy.disallowed_office_locations
        )
        if office_disallowed:
            return RuleResult(
                False,
                f"Location: requires in-office presence in {office or 'a disallowed office'}, "
                f"which cannot be attended from {home}",
            )

    requires_in_person = contains_any(lowered, policy.in_person_markers)
    region = first_mention(location, policy.disallowed_regions) or first_mention(lowered, policy.disallowed_regions)
    if requires_in_person and region:
        return RuleResult(
            False,
            f"Location: requires in-person work in {region}, which cannot be attended from {home}",
        )

    return RuleResult(True)


def check_work_authorization(lowered: str, policy: SuitabilityPolicy) -> RuleResult:
    """Reject only on an asserted requirement; a question about authorization is answerable on the form.

    A region named right after the requirement counts unless it is a home location,
    whether or not it appears in the known region list.
    """
    for phrase in policy.authorization_requirement_phrases:
        for match in re.finditer(re.escape(phrase.lower()), lowered):
            window = lowered[match.end() : match.end() + _AUTHORIZATION_WINDOW]
            named = _AUTHORIZATION_REGION_PATTERN.match(window)
            if named:
                region = named.group("region").strip()
                if mentions_any(region, policy.home_locations):
                    continue
            else:
                if mentions_any(window, policy.home_locations):
                    continue
                region = first_mention(window, policy.authorization_regions) or first_mention(
                    lowered, policy.authorization_regions
                )
            if region:
                return RuleResult(
                    False,
                    f"Authorization: explicitly requires {region} work authorization, which would need sponsorship",
                )
    return RuleResult(True)


def check_position_type(lowered: str, policy: SuitabilityPolicy) -> RuleResult:
    if mentions_any(lowered, policy.position_type_keywords):
        return RuleResult(True)
    return RuleResult(False, f"Position type: posting does not mention {policy.position_type}")


def _join_phrases(phrases: list[str]) -> str:
    if len(phrases) <= 1:
        return "".join(phrases)
    return ", ".join(phrases[:-1]) + " and " + phrases[-1]


def detect_themes(page_text: str, policy: NarrativePolicy) -> list[str]:
    lowered = (page_text or "").lower()
    return [theme.name for theme in policy.themes if contains_any(lowered, theme.keywords)]


def generate_why_company(attributes: JobAttributes, page_text: str, policy: NarrativePolicy) -> str:
    company = attributes.company or policy.company_fallback
    found = set(detect_themes(page_text, policy))
    phrases = [theme.phrase for theme in policy.themes if theme.name in found]
    values = {
        "company": company,
        "role_title": policy.role_title,
        "applicant_pitch": policy.applicant_pitch,
        "themes": _join_phrases(phrases),
    }
    template = policy.themed_template if phrases else policy.generic_template
    return normalize_space(template.format(**values))


def evaluate(page_text: str, policy: Policy | None = None, *, synthesize_narrative: bool = True) -> SuitabilityVerdict:
    policy = policy or Policy()
    try:
        text = page_text or ""
        lowered = text.lower()
        attributes = extract_job_details(text)
        rules = [
            (RULE_LOCATION, lambda: check_location(attributes, lowered, policy.suitability)),
            (RULE_AUTHORIZATION, lambda: check_work_authorization(lowered, policy.suitability)),
            (RULE_POSITION_TYPE, lambda: check_position_type(lowered, policy.suitability)),
        ]
        for name, check in rules:
            result = check()
            if not result.passed:
                logger.info("Target rejected by %s rule: %s", name, result.reason)
                return SuitabilityVerdict(
                    accepted=False,
                    reason=result.reason,
                    rule=name,
                    extracted_attributes=attributes,
                )

        narrative = generate_why_company(attributes, text, policy.narrative) if synthesize_narrative else None
        return SuitabilityVerdict(accepted=True, extracted_attributes=attributes, narrative=narrative)
    except Exception as exc:
        logger.warning("Suitability analysis failed, accepting target: %s", exc)
        return SuitabilityVerdict(accepted=True)
