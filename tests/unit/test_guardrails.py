import pytest

from applyassist.agents.policies.guardrails import (
    REDACTED,
    assert_action_allowed,
    assert_submission_allowed,
    redact_sensitive,
    redact_value,
)


def test_disallowed_actions_raise():
    with pytest.raises(ValueError):
        assert_action_allowed("captcha_bypass")
    assert_action_allowed("fill_form")


def test_submission_needs_confirmation_or_auto_submit():
    assert_submission_allowed(auto_submit=False, confirmed=True)
    assert_submission_allowed(auto_submit=True, confirmed=False)
    with pytest.raises(ValueError):
        assert_submission_allowed(auto_submit=False, confirmed=False)


def test_redaction_masks_personal_keys_only():
    payload = {"email": "a@b.c", "dateOfBirth": "2004-02-29", "firstName": "Aarav", "zipCode": "411001"}
    redacted = redact_sensitive(payload)

    assert redacted["email"] == REDACTED
    assert redacted["dateOfBirth"] == REDACTED
    assert redacted["zipCode"] == REDACTED
    assert redacted["firstName"] == "Aarav"
    assert payload["email"] == "a@b.c"


def test_redact_value():
    assert redact_value("phone", "+91 1") == REDACTED
    assert redact_value("city", "Pune") == "Pune"
    assert redact_value(None, "manual") == "manual"
    assert redact_value("email", None) == ""
