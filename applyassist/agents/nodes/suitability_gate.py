import logging
from typing import Callable

from applyassist.agents.state import ApplicationState
from applyassist.core.enums import ApplicationStatus
from applyassist.services.policy import Policy
from applyassist.services.suitability import evaluate

logger = logging.getLogger(__name__)


def make_node(page, policy: Policy) -> Callable[[ApplicationState], ApplicationState]:
    def suitability_gate_node(state: ApplicationState) -> ApplicationState:
        logger.info("Analyzing job suitability...")
        page_text = page.get_page_text()
        verdict = evaluate(page_text, policy)
        state["verdict"] = verdict
        state["company"] = verdict.extracted_attributes.company
        if not state.get("title"):
            state["title"] = page.title() or "Unknown Position"

        if not verdict.accepted:
            state["status"] = ApplicationStatus.REJECTED.value
            logger.warning("Skipping job: %s", verdict.reason)
            return state

        state["status"] = ApplicationStatus.SUITABLE.value
        logger.info("Job is suitable for application")
        return state

    return suitability_gate_node
