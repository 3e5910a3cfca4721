import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from applyassist.agents.policies.guardrails import redact_value
from applyassist.core.enums import ControlKind
from applyassist.services import form_rules
from applyassist.services.escalation import HumanEscalation
from applyassist.services.field_resolver import FieldResolver
from applyassist.services.form_page import ChoiceOption, ControlDescriptor, FormPage, describe_control
from applyassist.services.policy import Policy

logger = logging.getLogger(__name__)

EVENT_FILLED = "filled"
EVENT_OVERRIDE = "override"
EVENT_SKIPPED = "skipped"
EVENT_ESCALATED = "escalated"
EVENT_UNFILLED = "unfilled"
EVENT_ERROR = "error"

TEXT_KINDS = [ControlKind.TEXT, ControlKind.TEXTAREA, ControlKind.DATE]


@dataclass(frozen=True)
class FillEvent:
    action: str
    control: str
    key: str | None = None
    detail: str = ""

    def status_line(self) -> str:
        key = f" [{self.key}]" if self.key else ""
        detail = f": {self.detail}" if self.detail else ""
        return f"{self.action} {self.control or 'unnamed control'}{key}{detail}"


@dataclass
class FillSummary:
    filled_keys: set[str] = field(default_factory=set)
    events: list[FillEvent] = field(default_factory=list)
    resume_uploaded: bool = False

    @property
    def filled_count(self) -> int:
        return len(self.filled_keys)

    def events_for(self, action: str) -> list[FillEvent]:
        return [event for event in self.events if event.action == action]


class FormFiller:
    """Walks the form one control kind at a time and fills what the profile can answer."""

    def __init__(
        self,
        page: FormPage,
        flat_profile: Mapping[str, Any],
        dynamic_answers: Mapping[str, Any] | None = None,
        *,
        escalation: HumanEscalation,
        policy: Policy | None = None,
        resume_path: Path | None = None,
        resume_first: bool = True,
        autofill_wait_ms: int = 0,
        today: date | None = None,
    ) -> None:
        self.page = page
        self.flat_profile = MappingProxyType(dict(flat_profile))
        self.dynamic_answers = MappingProxyType(dict(dynamic_answers or {}))
        self.escalation = escalation
        self.policy = policy or Policy()
        self.resolver = FieldResolver(self.policy.alias_table())
        self.resume_path = resume_path
        self.resume_first = resume_first
        self.autofill_wait_ms = autofill_wait_ms
        self.today = today or date.today()
        self.summary = FillSummary()

    def fill(self) -> FillSummary:
        logger.info("Starting form fill")
        if self._challenge_present():
            self.escalation.wait_for_challenge("Detected before filling the form")

        if self.resume_first:
            self.upload_resume()
            if self.summary.resume_uploaded and self.autofill_wait_ms > 0:
                self.page.wait("autofill", self.autofill_wait_ms)
        for kind in TEXT_KINDS:
            self.fill_text_controls(kind)
        self.fill_selects()
        self.fill_radio_groups()
        self.fill_checkbox_groups()
        if not self.resume_first:
            self.upload_resume()

        logger.info("Form filling completed. Filled %d fields.", self.summary.filled_count)
        return self.summary

    def _record(self, action: str, control: str, key: str | None = None, detail: str = "") -> None:
        event = FillEvent(action=action, control=control, key=key, detail=detail)
        self.summary.events.append(event)
        level = logging.WARNING if action in {EVENT_ERROR, EVENT_ESCALATED} else logging.INFO
        logger.log(level, event.status_line())

    def _challenge_present(self) -> bool:
        try:
            return bool(self.page.detect_challenge())
        except Exception as exc:
            logger.debug("Challenge detection failed: %s", exc)
            return False

    def _controls(self, kind: ControlKind) -> list[ControlDescriptor]:
        try:
            handles = self.page.enumerate_controls(kind)
        except Exception as exc:
            self._record(EVENT_ERROR, f"{kind.value} controls", detail=str(exc))
            return []
        controls: list[ControlDescriptor] = []
        for handle in handles:
            try:
                controls.append(describe_control(self.page, handle, kind))
            except Exception as exc:
                self._record(EVENT_ERROR, f"{kind.value} control", detail=str(exc))
        return controls

    def _set_text(self, control: ControlDescriptor, value: str, key: str | None, action: str, detail: str = "") -> None:
        self.page.set_value(control.handle, value)
        if key:
            self.summary.filled_keys.add(key)
        shown = redact_value(key, value)
        self._record(action, control.hint, key, detail or f'set to "{shown[:60]}"')

    def _escalate_missing(self, control: ControlDescriptor, key: str | None) -> None:
        self._record(EVENT_ESCALATED, control.hint, key, "required field without data")
        answer = self.escalation.ask_for_missing_value(control.hint)
        if answer:
            self.page.set_value(control.handle, answer)
            if key:
                self.summary.filled_keys.add(key)
            self._record(EVENT_FILLED, control.hint, key, "manually filled")
        else:
            self._record(EVENT_UNFILLED, control.hint, key, "no value provided")

    # Text-like controls

    def fill_text_controls(self, kind: ControlKind) -> None:
        for control in self._controls(kind):
            try:
                self._fill_text_control(control)
            except Exception as exc:
                self._record(EVENT_ERROR, control.hint, detail=str(exc))

    def _fill_text_control(self, control: ControlDescriptor) -> None:
        if control.current_value:
            self._record(EVENT_SKIPPED, control.hint, detail="already has a value")
            return

        ctx = form_rules.RuleContext(
            control=control,
            flat_profile=self.flat_profile,
            dynamic_answers=self.dynamic_answers,
            policy=self.policy,
            escalation=self.escalation,
            today=self.today,
        )
        ruled = form_rules.apply_text_rules(ctx)
        if ruled is not None:
            rule_name, outcome = ruled
            if outcome.action == form_rules.ACTION_FILL and outcome.value:
                self._set_text(control, outcome.value, outcome.key, EVENT_OVERRIDE, f"{rule_name} rule: {outcome.detail}")
                return
            if outcome.action == form_rules.ACTION_SKIP:
                self._record(EVENT_SKIPPED, control.hint, outcome.key, outcome.detail)
                return
            if control.required:
                self._escalate_missing(control, outcome.key)
            else:
                self._record(EVENT_UNFILLED, control.hint, outcome.key, outcome.detail)
            return

        key = self.resolver.resolve(control.signal_text)
        value = form_rules.render_value(self.flat_profile.get(key)) if key else None
        if key and value:
            self._set_text(control, value, key, EVENT_FILLED)
            return
        if control.required:
            self._escalate_missing(control, key)
            return
        self._record(EVENT_UNFILLED, control.hint, key, "no matching profile value")

    # Single-select dropdowns

    def fill_selects(self) -> None:
        for control in self._controls(ControlKind.SELECT):
            try:
                self._fill_select(control)
            except Exception as exc:
                self._record(EVENT_ERROR, control.hint, detail=str(exc))

    def _fill_select(self, control: ControlDescriptor) -> None:
        if control.current_value:
            self._record(EVENT_SKIPPED, control.hint, detail="option already chosen")
            return
        options = self.page.get_options(control.handle)
        chain, source = form_rules.answer_chain(control, self.flat_profile, self.policy, self.resolver)
        choice = form_rules.match_option(options, chain)
        if choice is not None:
            self.page.select_option(control.handle, choice.text)
            self._mark_choice(control.hint, choice.text, source)
            return
        if form_rules.is_date_part(control, self.policy):
            self._record(EVENT_ESCALATED, control.hint, detail="date dropdown requires manual selection")
            self.escalation.pause(f"Please select the date field: {control.hint}, then press Enter.")
            return
        if control.required:
            self._record(EVENT_UNFILLED, control.hint, source, "required dropdown without a matching option")
        else:
            self._record(EVENT_UNFILLED, control.hint, source, "no matching option")

    def _mark_choice(self, hint: str, choice_text: str, source: str | None) -> None:
        if source and source in self.flat_profile:
            self.summary.filled_keys.add(source)
        shown = redact_value(source, choice_text)
        self._record(EVENT_FILLED, hint, source, f'selected "{shown}"')

    # Choice groups

    def _groups(self, kind: ControlKind) -> list[list[ControlDescriptor]]:
        groups: dict[str, list[ControlDescriptor]] = {}
        for index, control in enumerate(self._controls(kind)):
            group_key = control.name or control.id or f"#{index}"
            groups.setdefault(group_key, []).append(control)
        return list(groups.values())

    def _group_checked(self, group: list[ControlDescriptor]) -> bool:
        return any(self.page.is_checked(control.handle) for control in group)

    def _pick_in_group(self, group: list[ControlDescriptor], chain: list[str]) -> ControlDescriptor | None:
        options = [_option_for(control) for control in group]
        choice = form_rules.match_option(options, chain)
        if choice is None:
            return None
        return group[options.index(choice)]

    def fill_radio_groups(self) -> None:
        for group in self._groups(ControlKind.RADIO):
            try:
                self._fill_radio_group(group)
            except Exception as exc:
                self._record(EVENT_ERROR, _group_hint(group), detail=str(exc))

    def _fill_radio_group(self, group: list[ControlDescriptor]) -> None:
        hint = _group_hint(group)
        if self._group_checked(group):
            self._record(EVENT_SKIPPED, hint, detail="option already chosen")
            return
        question = _group_question(group)
        chain, source = form_rules.answer_chain(question, self.flat_profile, self.policy, self.resolver)
        picked = self._pick_in_group(group, chain)
        if picked is None:
            self._record(EVENT_UNFILLED, hint, source, "no matching option")
            return
        self.page.set_checked(picked.handle, True)
        self._mark_choice(hint, _option_for(picked).text or _option_for(picked).value, source)

    def fill_checkbox_groups(self) -> None:
        for group in self._groups(ControlKind.CHECKBOX):
            try:
                self._fill_checkbox_group(group)
            except Exception as exc:
                self._record(EVENT_ERROR, _group_hint(group), detail=str(exc))

    def _fill_checkbox_group(self, group: list[ControlDescriptor]) -> None:
        hint = _group_hint(group)
        if self._group_checked(group):
            self._record(EVENT_SKIPPED, hint, detail="already checked")
            return

        group_text = group[0].group_text
        survey = form_rules.match_survey_question(group_text, self.policy.fill.survey_questions) if group_text else None
        if survey is not None:
            picked = self._pick_in_group(group, form_rules.survey_chain(survey, self.flat_profile))
            if picked is not None:
                self.page.set_checked(picked.handle, True)
                self._mark_choice(hint, _option_for(picked).text, survey.profile_key or survey.name)
                return

        checked_any = False
        for control in group:
            reason = form_rules.checkbox_reason(control, self.flat_profile, self.policy)
            if reason is None:
                continue
            self.page.set_checked(control.handle, True)
            checked_any = True
            if reason in self.flat_profile:
                self.summary.filled_keys.add(reason)
            self._record(EVENT_FILLED, control.hint, reason, "checked")
        if not checked_any:
            self._record(EVENT_UNFILLED, hint, detail="no checkbox rule applied")

    # File upload

    def upload_resume(self) -> None:
        controls = self._controls(ControlKind.FILE)
        if not controls:
            return
        if self.resume_path is None:
            self._record(EVENT_SKIPPED, "resume upload", detail="no resume file configured")
            return
        target = next((c for c in controls if form_rules.is_resume_control(c, self.policy)), None)
        if target is None and len(controls) == 1:
            target = controls[0]
        if target is None:
            self._record(EVENT_UNFILLED, "resume upload", detail="no resume file input identified")
            return
        try:
            self.page.set_file(target.handle, str(self.resume_path))
        except Exception as exc:
            self._record(EVENT_ERROR, target.hint or "resume upload", detail=f"could not upload resume: {exc}")
            return
        self.summary.resume_uploaded = True
        self._record(EVENT_FILLED, target.hint or "resume upload", detail="resume uploaded")


def _option_for(control: ControlDescriptor) -> ChoiceOption:
    return ChoiceOption(text=control.label or control.aria_label, value=control.option_value)


def _group_hint(group: list[ControlDescriptor]) -> str:
    lead = group[0]
    return lead.group_text or lead.name or lead.hint


def _group_question(group: list[ControlDescriptor]) -> ControlDescriptor:
    """A descriptor for the group's question, without any one option's label mixed in."""
    lead = group[0]
    return ControlDescriptor(
        kind=lead.kind,
        handle=lead.handle,
        name=lead.name,
        group_text=lead.group_text,
        required=any(control.required for control in group),
    )


def fill_form(
    page: FormPage,
    flat_profile: Mapping[str, Any],
    dynamic_answers: Mapping[str, Any] | None = None,
    *,
    escalation: HumanEscalation,
    policy: Policy | None = None,
    resume_path: Path | None = None,
    resume_first: bool = True,
    autofill_wait_ms: int = 0,
    today: date | None = None,
) -> FillSummary:
    return FormFiller(
        page,
        flat_profile,
        dynamic_answers,
        escalation=escalation,
        policy=policy,
        resume_path=resume_path,
        resume_first=resume_first,
        autofill_wait_ms=autofill_wait_ms,
        today=today,
    ).fill()
