import logging
from pathlib import Path
from typing import Any, Callable, Mapping

from applyassist.agents.state import ApplicationState
from applyassist.core.config import Settings
from applyassist.core.enums import ApplicationStatus
from applyassist.services.escalation import HumanEscalation
from applyassist.services.form_filler import fill_form
from applyassist.services.policy import Policy

logger = logging.getLogger(__name__)


def make_node(
    page,
    *,
    escalation: HumanEscalation,
    flat_profile: Mapping[str, Any],
    policy: Policy,
    settings: Settings,
    resume_path: Path | None,
) -> Callable[[ApplicationState], ApplicationState]:
    def form_fill_executor_node(state: ApplicationState) -> ApplicationState:
        verdict = state.get("verdict")
        dynamic_answers = {"whyCompany": getattr(verdict, "narrative", None)}
        logger.info("Filling application form...")
        try:
            summary = fill_form(
                page,
                flat_profile,
                dynamic_answers,
                escalation=escalation,
                policy=policy,
                resume_path=resume_path,
                resume_first=settings.upload_resume_first,
                autofill_wait_ms=settings.autofill_wait_ms,
            )
        except Exception as exc:
            logger.error("Form filling error: %s", exc)
            state.setdefault("errors", []).append(f"Form filling failed: {exc}")
            state["status"] = ApplicationStatus.FAILED.value
            return state

        state["fill_summary"] = summary
        if page.detect_challenge():
            escalation.wait_for_challenge("Detected after filling the form")

        state["status"] = ApplicationStatus.FILLED.value
        return state

    return form_fill_executor_node
