from enum import Enum


class ControlKind(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    DATE = "date"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    FILE = "file"


class ApplicationStatus(str, Enum):
    OPENED = "OPENED"
    REJECTED = "REJECTED"
    SUITABLE = "SUITABLE"
    FORM_OPENED = "FORM_OPENED"
    NO_FORM = "NO_FORM"
    FILLED = "FILLED"
    SUBMITTED = "SUBMITTED"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


class EscalationKind(str, Enum):
    CHALLENGE = "challenge"
    MISSING_VALUE = "missing_value"
    CONFIRM_SUBMISSION = "confirm_submission"
    CONFIRM_CONTINUATION = "confirm_continuation"
    MANUAL_STEP = "manual_step"
