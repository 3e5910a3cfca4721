import argparse
import logging
from pathlib import Path

from applyassist.agents.policies.guardrails import redact_sensitive
from applyassist.agents.runner import run_targets
from applyassist.core.config import get_settings
from applyassist.core.enums import ApplicationStatus
from applyassist.core.logging import setup_logging
from applyassist.services.browser import BrowserSession
from applyassist.services.escalation import ConsoleResponder, HumanEscalation
from applyassist.services.policy import load_policy
from applyassist.services.profile import flatten_profile, load_profile, resolve_resume_path
from applyassist.services.targets import load_targets

logger = logging.getLogger("applyassist.run_apply")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Open job application forms and fill them from your profile")
    parser.add_argument("urls", nargs="*", help="Target job posting URLs (overrides the targets file)")
    parser.add_argument("--targets", type=Path, help="File with one target URL per line")
    parser.add_argument("--profile", type=Path, help="Personal details file (JSON or YAML)")
    parser.add_argument("--policy", type=Path, help="Heuristic policy YAML")
    parser.add_argument("--resume", type=Path, help="Resume PDF to upload")
    parser.add_argument(
        "--auto-submit",
        action="store_true",
        help="Submit without asking for confirmation (still stops for CAPTCHAs)",
    )
    parser.add_argument("--max-applications", type=int, help="Stop after this many submitted applications")
    parser.add_argument("--headless", action="store_true", help="Run the browser without a window")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = get_settings()
    updates = {}
    if args.auto_submit:
        updates["auto_submit"] = True
    if args.headless:
        updates["browser_headless"] = True
    if args.resume:
        updates["resume_path"] = args.resume
    if updates:
        settings = settings.model_copy(update=updates)

    log_path = setup_logging(settings.log_level, settings.log_dir)
    logger.info("Starting %s", settings.app_name)
    if log_path:
        logger.info("Session log: %s", log_path)

    profile = load_profile(args.profile or settings.profile_path)
    flat_profile = flatten_profile(profile)
    logger.debug("Profile: %s", redact_sensitive(flat_profile))
    policy = load_policy(args.policy or settings.policy_path)
    targets = args.urls or load_targets(args.targets or settings.targets_path)
    if not targets:
        raise SystemExit("No target URLs given")

    resume_path = resolve_resume_path(settings)
    if resume_path is None:
        logger.warning("No resume PDF found; file upload fields will be left for you")
    else:
        logger.info("Resume: %s", resume_path)

    logger.info("Configuration loaded")
    logger.info("  - Targets: %d", len(targets))
    logger.info("  - Max applications: %d", args.max_applications or settings.max_applications_per_run)
    logger.info("  - Auto-submit: %s", "ENABLED" if settings.auto_submit else "disabled")

    escalation = HumanEscalation(ConsoleResponder())
    session = BrowserSession(settings)
    try:
        session.launch()
        results = run_targets(
            session,
            targets,
            flat_profile=flat_profile,
            escalation=escalation,
            settings=settings,
            policy=policy,
            resume_path=resume_path,
            max_applications=args.max_applications,
        )
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        results = []
    finally:
        session.close()

    submitted = [state for state in results if state.get("status") == ApplicationStatus.SUBMITTED.value]
    rejected = [state for state in results if state.get("status") == ApplicationStatus.REJECTED.value]
    print(f"Processed {len(results)} targets: submitted={len(submitted)}, skipped_unsuitable={len(rejected)}")
    for state in results:
        print(f"  {state.get('status')}: {state.get('url')}", f"errors={state.get('errors')}" if state.get("errors") else "")


if __name__ == "__main__":
    main()
