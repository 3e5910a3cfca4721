import logging
from typing import Callable

from applyassist.agents.policies.guardrails import assert_submission_allowed
from applyassist.agents.state import ApplicationState
from applyassist.core.config import Settings
from applyassist.core.enums import ApplicationStatus
from applyassist.services.escalation import HumanEscalation

logger = logging.getLogger(__name__)


def make_node(page, escalation: HumanEscalation, settings: Settings) -> Callable[[ApplicationState], ApplicationState]:
    def submission_gate_node(state: ApplicationState) -> ApplicationState:
        auto_submit = bool(state.get("auto_submit", False))
        if auto_submit:
            logger.warning("AUTO-SUBMIT MODE - Submitting automatically...")
            confirmed = False
        else:
            confirmed = escalation.confirm_submission(state.get("title"), state.get("company"))
            if not confirmed:
                logger.info("Application not submitted")
                state["submitted"] = False
                state["status"] = ApplicationStatus.SKIPPED.value
                return state

        assert_submission_allowed(auto_submit=auto_submit, confirmed=confirmed)
        try:
            clicked = page.click_submit()
        except Exception as exc:
            logger.warning("Could not click submit button: %s", exc)
            clicked = False

        if clicked:
            page.wait("settle", settings.settle_wait_ms)
            logger.info("Submit button clicked")
        else:
            escalation.pause("Submit button not found. Please review the form and submit manually.")

        state["submitted"] = True
        state["status"] = ApplicationStatus.SUBMITTED.value
        return state

    return submission_gate_node
