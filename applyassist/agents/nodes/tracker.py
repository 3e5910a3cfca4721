import logging
from typing import Callable

from applyassist.agents.state import ApplicationState
from applyassist.core.enums import ApplicationStatus

logger = logging.getLogger(__name__)


def make_node() -> Callable[[ApplicationState], ApplicationState]:
    def tracker_node(state: ApplicationState) -> ApplicationState:
        summary = state.get("fill_summary")
        payload = {
            "run_id": state.get("run_id"),
            "url": state.get("url"),
            "status": state.get("status"),
            "filled_count": getattr(summary, "filled_count", 0),
            "errors": list(state.get("errors", [])),
        }
        level = logging.WARNING if state.get("status") == ApplicationStatus.FAILED.value else logging.INFO
        logger.log(
            level,
            "Application %s: %s (%d fields filled)",
            payload["status"],
            state.get("title") or state.get("url") or "unknown target",
            payload["filled_count"],
            extra={"extra": payload},
        )
        return state

    return tracker_node
