import logging
from typing import Callable

from applyassist.agents.state import ApplicationState
from applyassist.core.config import Settings
from applyassist.core.enums import ApplicationStatus
from applyassist.services.escalation import HumanEscalation

logger = logging.getLogger(__name__)


def make_node(page, escalation: HumanEscalation, settings: Settings) -> Callable[[ApplicationState], ApplicationState]:
    def form_opener_node(state: ApplicationState) -> ApplicationState:
        try:
            clicked = page.click_apply()
        except Exception as exc:
            state.setdefault("errors", []).append(f"Could not click apply button: {exc}")
            state["status"] = ApplicationStatus.FAILED.value
            return state

        if not clicked:
            logger.warning("Could not find apply button on this page")
            state.setdefault("errors", []).append("Apply button not found")
            state["status"] = ApplicationStatus.NO_FORM.value
            return state

        logger.info("Apply button found")
        if not page.wait("form", settings.navigation_timeout_ms):
            logger.warning("No form controls appeared after clicking apply")
        page.wait("settle", settings.settle_wait_ms)

        if page.detect_challenge():
            escalation.wait_for_challenge("Detected after opening the application form")

        state["status"] = ApplicationStatus.FORM_OPENED.value
        return state

    return form_opener_node
