import logging
from pathlib import Path
from typing import Any, Mapping

from applyassist.agents.graph import run_application
from applyassist.agents.state import ApplicationState
from applyassist.core.config import Settings
from applyassist.core.enums import ApplicationStatus
from applyassist.services.escalation import HumanEscalation
from applyassist.services.policy import Policy

logger = logging.getLogger(__name__)


def run_targets(
    session,
    targets: list[str],
    *,
    flat_profile: Mapping[str, Any],
    escalation: HumanEscalation,
    settings: Settings,
    policy: Policy,
    resume_path: Path | None,
    max_applications: int | None = None,
) -> list[ApplicationState]:
    """Run the application flow for each target until the cap or the human stops it."""
    cap = settings.max_applications_per_run if max_applications is None else max_applications
    results: list[ApplicationState] = []
    submitted = 0

    for idx, url in enumerate(targets):
        if submitted >= cap:
            logger.warning("Reached max applications limit (%d)", cap)
            break

        logger.info("Target %d/%d: %s", idx + 1, len(targets), url)
        tab = None
        try:
            tab = session.open_tab(url)
            state = run_application(
                session.form_page(tab),
                flat_profile=flat_profile,
                escalation=escalation,
                settings=settings,
                policy=policy,
                resume_path=resume_path,
                url=url,
            )
        except Exception as exc:
            logger.error("Error applying to %s: %s", url, exc)
            state = {"url": url, "status": ApplicationStatus.FAILED.value, "errors": [str(exc)]}
        finally:
            if tab is not None:
                session.close_tab(tab)

        results.append(state)
        if state.get("submitted"):
            submitted += 1

        if idx < len(targets) - 1 and not escalation.confirm_continuation("Continue to next job?"):
            logger.info("Stopping at operator request")
            break

    logger.info("Processed %d target(s), submitted %d application(s)", len(results), submitted)
    return results
