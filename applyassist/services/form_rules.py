"""Special-case fill rules, the survey answer chain and option matching.

Text rules are plugins: a predicate over the control's signal text and an
action. The filler evaluates them in TEXT_RULES order ahead of generic
resolution; the first rule whose predicate holds owns the control.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Iterable, Mapping

from applyassist.core.enums import ControlKind
from applyassist.services.escalation import HumanEscalation
from applyassist.services.field_resolver import FieldResolver, normalize_signal
from applyassist.services.form_page import ChoiceOption, ControlDescriptor
from applyassist.services.policy import Policy, SurveyQuestion
from applyassist.services.text import contains_any, mentions, mentions_any, norm


ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")

ACTION_FILL = "fill"
ACTION_SKIP = "skip"
ACTION_DEFER = "defer"


def render_value(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (list, tuple)):
        items = [str(item).strip() for item in value if str(item).strip()]
        return ", ".join(items) or None
    text = str(value).strip()
    return text or None


def signal_mentions(control: ControlDescriptor, phrases: Iterable[str], *, include_group: bool = False) -> bool:
    """Separator-insensitive containment of any phrase in the control's signal text."""
    signal = control.signal_text
    if include_group and control.group_text:
        signal = f"{signal} {control.group_text}"
    normalized = normalize_signal(signal)
    if not normalized:
        return False
    return any(normalize_signal(phrase) and normalize_signal(phrase) in normalized for phrase in phrases)


def _contains_either(left: str, right: str) -> bool:
    # Single characters ("y", "n") sit inside almost any word.
    return bool(left and right) and (
        (len(right) > 1 and right in left) or (len(left) > 1 and left in right)
    )


def match_option(options: list[ChoiceOption], candidates: Iterable[str]) -> ChoiceOption | None:
    """First option matching the earliest candidate.

    Per candidate, on visible text or underlying value: an exact
    case-insensitive match wins, then whole-word containment in either
    direction, then plain substring containment in either direction. The
    earlier tiers keep "Male" off "Female" and "No" off "None" whenever a
    better option exists.
    """
    usable = [opt for opt in options if norm(opt.text) or norm(opt.value)]
    for candidate in candidates:
        wanted = norm(candidate)
        if not wanted:
            continue
        for opt in usable:
            if wanted in {norm(opt.text), norm(opt.value)}:
                return opt
        for opt in usable:
            for side in (norm(opt.text), norm(opt.value)):
                if side and (mentions(side, wanted) or mentions(wanted, side)):
                    return opt
        for opt in usable:
            if _contains_either(norm(opt.text), wanted) or _contains_either(norm(opt.value), wanted):
                return opt
    return None


def match_survey_question(question_text: str, questions: Iterable[SurveyQuestion]) -> SurveyQuestion | None:
    lowered = norm(question_text)
    if not lowered:
        return None
    for question in questions:
        if mentions_any(lowered, question.keywords):
            return question
    return None


def survey_chain(question: SurveyQuestion, flat_profile: Mapping[str, Any]) -> list[str]:
    chain: list[str] = []
    if question.profile_key:
        lead = render_value(flat_profile.get(question.profile_key))
        if lead:
            chain.append(lead)
    chain.extend(answer for answer in question.answers if answer not in chain)
    return chain


def work_eligibility_answer(question_text: str, policy: Policy) -> str | None:
    lowered = norm(question_text)
    if not contains_any(lowered, policy.fill.work_eligibility_markers):
        return None
    if mentions_any(lowered, policy.suitability.home_locations):
        return "Yes"
    if contains_any(lowered, policy.fill.foreign_eligibility_markers) or mentions_any(
        lowered, policy.suitability.authorization_regions
    ):
        return "No"
    return None


def answer_chain(
    control: ControlDescriptor,
    flat_profile: Mapping[str, Any],
    policy: Policy,
    resolver: FieldResolver,
) -> tuple[list[str], str | None]:
    """Ordered candidate answers for a choice control and the key they came from."""
    question_text = control.question_text
    chain: list[str] = []
    source: str | None = None

    survey = match_survey_question(question_text, policy.fill.survey_questions)
    if survey is not None:
        chain.extend(survey_chain(survey, flat_profile))
        source = survey.profile_key or survey.name

    eligibility = work_eligibility_answer(question_text, policy)
    if eligibility and eligibility not in chain:
        chain.append(eligibility)
        source = source or "authorized"

    key = resolver.resolve(control.signal_text) or resolver.resolve(control.group_text)
    value = render_value(flat_profile.get(key)) if key else None
    if value and value not in chain:
        chain.append(value)
        source = source or key
    return chain, source


def is_date_part(control: ControlDescriptor, policy: Policy) -> bool:
    identifier = normalize_signal(control.identifier)
    return any(marker in identifier for marker in policy.fill.date_part_markers)


@dataclass
class RuleContext:
    control: ControlDescriptor
    flat_profile: Mapping[str, Any]
    dynamic_answers: Mapping[str, Any]
    policy: Policy
    escalation: HumanEscalation
    today: date


@dataclass(frozen=True)
class RuleOutcome:
    action: str
    value: str | None = None
    key: str | None = None
    detail: str = ""


@dataclass(frozen=True)
class TextRule:
    name: str
    applies: Callable[[RuleContext], bool]
    act: Callable[[RuleContext], RuleOutcome]


def _is_honeypot(ctx: RuleContext) -> bool:
    return signal_mentions(ctx.control, ctx.policy.fill.honeypot_markers)


def _skip_honeypot(ctx: RuleContext) -> RuleOutcome:
    return RuleOutcome(ACTION_SKIP, detail="honeypot field left blank")


def _is_narrative(ctx: RuleContext) -> bool:
    return signal_mentions(ctx.control, ctx.policy.fill.narrative_triggers, include_group=True)


def _fill_narrative(ctx: RuleContext) -> RuleOutcome:
    answer = render_value(ctx.dynamic_answers.get("whyCompany")) or render_value(ctx.flat_profile.get("whyCompany"))
    if answer:
        return RuleOutcome(ACTION_FILL, value=answer, key="whyCompany", detail="narrative answer")
    return RuleOutcome(ACTION_DEFER, key="whyCompany", detail="no narrative answer available")


def _is_start_date(ctx: RuleContext) -> bool:
    return signal_mentions(ctx.control, ctx.policy.fill.start_date_triggers)


def _fill_start_date(ctx: RuleContext) -> RuleOutcome:
    value = render_value(ctx.flat_profile.get("startDate")) or render_value(ctx.flat_profile.get("expectedStartDate"))
    if ctx.control.kind == ControlKind.DATE and value and not ISO_DATE_PATTERN.match(value):
        value = None
    if value:
        return RuleOutcome(ACTION_FILL, value=value, key="startDate", detail="start date from profile")
    return RuleOutcome(ACTION_FILL, value=ctx.today.isoformat(), key="startDate", detail="start date set to today")


def _identifier_words(control: ControlDescriptor) -> str:
    return _CAMEL_BOUNDARY.sub(r"\1 \2", f"{control.name} {control.id}").lower()


def _is_birth_date(ctx: RuleContext) -> bool:
    fill = ctx.policy.fill
    if signal_mentions(ctx.control, fill.birth_date_exclusions):
        return False
    if mentions_any(_identifier_words(ctx.control), fill.birth_date_triggers):
        return True
    question = " ".join(part for part in (ctx.control.label, ctx.control.aria_label, ctx.control.placeholder) if part)
    return mentions_any(question, fill.birth_date_labels)


def _fill_birth_date(ctx: RuleContext) -> RuleOutcome:
    value = render_value(ctx.flat_profile.get("dateOfBirth"))
    if value:
        return RuleOutcome(ACTION_FILL, value=value, key="dateOfBirth", detail="date of birth from profile")
    answer = ctx.escalation.ask_for_missing_value("Date of Birth (YYYY-MM-DD)")
    if answer:
        return RuleOutcome(ACTION_FILL, value=answer, key="dateOfBirth", detail="date of birth from human")
    return RuleOutcome(ACTION_SKIP, key="dateOfBirth", detail="no date of birth provided")


TEXT_RULES = [
    TextRule("honeypot", _is_honeypot, _skip_honeypot),
    TextRule("narrative", _is_narrative, _fill_narrative),
    TextRule("start_date", _is_start_date, _fill_start_date),
    TextRule("birth_date", _is_birth_date, _fill_birth_date),
]


def apply_text_rules(ctx: RuleContext, rules: list[TextRule] | None = None) -> tuple[str, RuleOutcome] | None:
    for rule in rules or TEXT_RULES:
        if rule.applies(ctx):
            return rule.name, rule.act(ctx)
    return None


def checkbox_reason(control: ControlDescriptor, flat_profile: Mapping[str, Any], policy: Policy) -> str | None:
    """Why an individual checkbox should be ticked, or None to leave it."""
    text = norm(f"{control.label} {control.aria_label}") or norm(control.question_text)
    fill = policy.fill
    if contains_any(text, fill.consent_phrases):
        return "consent"
    if contains_any(text, fill.authorization_phrases) and flat_profile.get("authorized"):
        return "authorized"
    sponsorship = flat_profile.get("requiresSponsorship")
    if sponsorship is False and contains_any(text, fill.no_sponsorship_phrases):
        return "requiresSponsorship"
    if (
        sponsorship is True
        and contains_any(text, fill.sponsorship_phrases)
        and not contains_any(text, fill.no_sponsorship_phrases)
    ):
        return "requiresSponsorship"
    if match_option([ChoiceOption(text=control.label)], fill.interest_options) is not None:
        return "interests"
    return None


def is_resume_control(control: ControlDescriptor, policy: Policy) -> bool:
    text = norm(f"{control.name} {control.id} {control.label}")
    if contains_any(text, policy.fill.non_resume_keywords):
        return False
    if any(mentions(text, kw) or kw in normalize_signal(text) for kw in policy.fill.resume_keywords):
        return True
    return "pdf" in control.accept
