import pytest

from applyassist.agents.graph import run_application
from applyassist.agents.nodes import form_fill_executor
from applyassist.core.config import Settings
from applyassist.core.enums import ApplicationStatus, ControlKind, EscalationKind

POSTING = (
    "Acme Robotics is building warehouse automation.\n"
    "Software Engineering Intern, Remote.\n"
    "Mentorship from senior engineers.\n"
)

ON_SITE = (
    "Software Engineering Intern\n"
    "Employment type: Full time\n"
    "Location type: On-site\n"
    "Office: San Francisco\n"
)


@pytest.fixture
def settings():
    return Settings(_env_file=None, settle_wait_ms=0, autofill_wait_ms=0)


def _form(make_control):
    return [
        make_control(ControlKind.TEXT, name="first_name", label="First Name"),
        make_control(ControlKind.TEXTAREA, name="q1", label="Why do you want to join Acme Robotics?"),
    ]


def test_confirmed_application_is_filled_and_submitted(make_page, make_control, make_escalation, flat_profile, settings):
    controls = _form(make_control)
    page = make_page(controls, page_text=POSTING)
    escalation, responder = make_escalation("y")

    state = run_application(page, flat_profile=flat_profile, escalation=escalation, settings=settings, url="https://x/1")

    assert state["status"] == ApplicationStatus.SUBMITTED.value
    assert state["submitted"] is True
    assert state["company"] == "Acme Robotics"
    assert state["title"] == "Software Engineer Intern"
    assert controls[0].value == "Aarav"
    assert "join Acme Robotics" in controls[1].value
    assert "learn from experienced mentors" in controls[1].value
    assert page.apply_clicks == 1
    assert page.submit_clicks == 1
    assert responder.kinds() == [EscalationKind.CONFIRM_SUBMISSION]
    assert "   Company: Acme Robotics" in responder.requests[0].context


def test_rejected_target_never_reaches_the_form(make_page, make_control, make_escalation, flat_profile, settings):
    controls = _form(make_control)
    page = make_page(controls, page_text=ON_SITE)
    escalation, responder = make_escalation()

    state = run_application(page, flat_profile=flat_profile, escalation=escalation, settings=settings)

    assert state["status"] == ApplicationStatus.REJECTED.value
    assert state["verdict"].reason.startswith("Location:")
    assert page.apply_clicks == 0
    assert controls[0].writes == 0
    assert responder.requests == []


def test_declined_confirmation_submits_nothing(make_page, make_control, make_escalation, flat_profile, settings):
    page = make_page(_form(make_control), page_text=POSTING)
    escalation, _ = make_escalation("no")

    state = run_application(page, flat_profile=flat_profile, escalation=escalation, settings=settings)

    assert state["status"] == ApplicationStatus.SKIPPED.value
    assert state["submitted"] is False
    assert page.submit_clicks == 0


def test_auto_submit_clicks_without_asking(make_page, make_control, make_escalation, flat_profile, settings):
    page = make_page(_form(make_control), page_text=POSTING)
    escalation, responder = make_escalation()

    state = run_application(
        page, flat_profile=flat_profile, escalation=escalation, settings=settings, auto_submit=True
    )

    assert state["status"] == ApplicationStatus.SUBMITTED.value
    assert page.submit_clicks == 1
    assert EscalationKind.CONFIRM_SUBMISSION not in responder.kinds()


def test_missing_submit_button_pauses_for_manual_submit(make_page, make_control, make_escalation, flat_profile, settings):
    page = make_page(_form(make_control), page_text=POSTING, submit_button=False)
    escalation, responder = make_escalation("yes")

    state = run_application(page, flat_profile=flat_profile, escalation=escalation, settings=settings)

    assert state["status"] == ApplicationStatus.SUBMITTED.value
    assert responder.kinds() == [EscalationKind.CONFIRM_SUBMISSION, EscalationKind.MANUAL_STEP]


def test_missing_apply_button_ends_without_form(make_page, make_control, make_escalation, flat_profile, settings):
    page = make_page(_form(make_control), page_text=POSTING, apply_button=False)
    escalation, _ = make_escalation()

    state = run_application(page, flat_profile=flat_profile, escalation=escalation, settings=settings)

    assert state["status"] == ApplicationStatus.NO_FORM.value
    assert "Apply button not found" in state["errors"]
    assert page.submit_clicks == 0


def test_challenge_after_opening_waits_for_human(make_page, make_control, make_escalation, flat_profile, settings):
    page = make_page(_form(make_control), page_text=POSTING, challenges=[True])
    escalation, responder = make_escalation("", "y")

    run_application(page, flat_profile=flat_profile, escalation=escalation, settings=settings)

    assert responder.kinds()[0] == EscalationKind.CHALLENGE
    assert page.submit_clicks == 1


def test_fill_failure_marks_application_failed(monkeypatch, make_page, make_control, make_escalation, flat_profile, settings):
    def broken_fill(*args, **kwargs):
        raise RuntimeError("page crashed")

    monkeypatch.setattr(form_fill_executor, "fill_form", broken_fill)
    page = make_page(_form(make_control), page_text=POSTING)
    escalation, _ = make_escalation()

    state = run_application(page, flat_profile=flat_profile, escalation=escalation, settings=settings)

    assert state["status"] == ApplicationStatus.FAILED.value
    assert state["errors"] == ["Form filling failed: page crashed"]
    assert page.submit_clicks == 0
