import uuid
from pathlib import Path
from typing import Any, Mapping

from langgraph.graph import END, StateGraph

from applyassist.agents.nodes import (
    form_fill_executor,
    form_opener,
    submission_gate,
    suitability_gate,
    tracker,
)
from applyassist.agents.state import ApplicationState
from applyassist.core.config import Settings
from applyassist.core.enums import ApplicationStatus
from applyassist.services.escalation import HumanEscalation
from applyassist.services.policy import Policy


def _route_after_suitability(state: ApplicationState) -> str:
    if state.get("status") == ApplicationStatus.REJECTED.value:
        return "tracker"
    return "form_opener"


def _route_after_opener(state: ApplicationState) -> str:
    if state.get("status") == ApplicationStatus.FORM_OPENED.value:
        return "form_fill_executor"
    return "tracker"


def _route_after_fill(state: ApplicationState) -> str:
    if state.get("status") == ApplicationStatus.FILLED.value:
        return "submission_gate"
    return "tracker"


def build_pipeline(
    page,
    *,
    escalation: HumanEscalation,
    flat_profile: Mapping[str, Any],
    policy: Policy,
    settings: Settings,
    resume_path: Path | None,
):
    graph = StateGraph(ApplicationState)

    graph.add_node("suitability_gate", suitability_gate.make_node(page, policy))
    graph.add_node("form_opener", form_opener.make_node(page, escalation, settings))
    graph.add_node(
        "form_fill_executor",
        form_fill_executor.make_node(
            page,
            escalation=escalation,
            flat_profile=flat_profile,
            policy=policy,
            settings=settings,
            resume_path=resume_path,
        ),
    )
    graph.add_node("submission_gate", submission_gate.make_node(page, escalation, settings))
    graph.add_node("tracker", tracker.make_node())

    graph.set_entry_point("suitability_gate")
    graph.add_conditional_edges(
        "suitability_gate",
        _route_after_suitability,
        {
            "form_opener": "form_opener",
            "tracker": "tracker",
        },
    )
    graph.add_conditional_edges(
        "form_opener",
        _route_after_opener,
        {
            "form_fill_executor": "form_fill_executor",
            "tracker": "tracker",
        },
    )
    graph.add_conditional_edges(
        "form_fill_executor",
        _route_after_fill,
        {
            "submission_gate": "submission_gate",
            "tracker": "tracker",
        },
    )
    graph.add_edge("submission_gate", "tracker")
    graph.add_edge("tracker", END)

    return graph.compile()


def run_application(
    page,
    *,
    flat_profile: Mapping[str, Any],
    escalation: HumanEscalation,
    settings: Settings,
    policy: Policy | None = None,
    resume_path: Path | None = None,
    url: str | None = None,
    title: str | None = None,
    auto_submit: bool | None = None,
) -> ApplicationState:
    app = build_pipeline(
        page,
        escalation=escalation,
        flat_profile=flat_profile,
        policy=policy or Policy(),
        settings=settings,
        resume_path=resume_path,
    )
    initial_state: ApplicationState = {
        "run_id": str(uuid.uuid4()),
        "url": url or "",
        "title": title or "",
        "status": ApplicationStatus.OPENED.value,
        "errors": [],
        "auto_submit": settings.auto_submit if auto_submit is None else bool(auto_submit),
        "submitted": False,
    }
    return app.invoke(initial_state)
