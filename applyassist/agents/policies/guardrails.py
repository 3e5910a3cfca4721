from typing import Any

DISALLOWED_ACTIONS = {
    "captcha_bypass",
    "stealth_browser",
    "submit_without_confirmation",
}

SENSITIVE_KEYS = {
    "email",
    "phone",
    "dateofbirth",
    "location",
    "address",
    "zipcode",
    "ethnicity",
    "gender",
    "veteran",
    "disability",
}

REDACTED = "[REDACTED]"


def assert_action_allowed(action: str) -> None:
    if action in DISALLOWED_ACTIONS:
        raise ValueError(f"Action is disallowed by policy: {action}")


def assert_submission_allowed(*, auto_submit: bool, confirmed: bool) -> None:
    if not (auto_submit or confirmed):
        assert_action_allowed("submit_without_confirmation")


def is_sensitive(key: str | None) -> bool:
    return bool(key) and key.lower() in SENSITIVE_KEYS


def redact_value(key: str | None, value: Any) -> str:
    if value is None:
        return ""
    return REDACTED if is_sensitive(key) else str(value)


def redact_sensitive(payload: dict[str, Any]) -> dict[str, Any]:
    redacted = dict(payload)
    for key in list(redacted.keys()):
        if is_sensitive(key):
            redacted[key] = REDACTED
    return redacted
