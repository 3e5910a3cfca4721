import pytest

from applyassist.core.enums import ControlKind
from applyassist.services.escalation import HumanEscalation, ScriptedResponder
from applyassist.services.form_page import ChoiceOption
from applyassist.services.profile import flatten_profile


class FakeControl:
    def __init__(
        self,
        kind: ControlKind,
        *,
        name: str = "",
        id: str = "",
        label: str = "",
        placeholder: str = "",
        aria_label: str = "",
        group: str = "",
        value: str = "",
        options=None,
        checked: bool = False,
        required: bool = False,
        type: str | None = None,
        accept: str = "",
        fail: bool = False,
    ):
        self.kind = kind
        self.name = name
        self.id = id
        self.label = label
        self.placeholder = placeholder
        self.aria_label = aria_label
        self.group = group
        self.value = value
        self.options = [
            opt if isinstance(opt, ChoiceOption) else ChoiceOption(text=opt, value=opt.lower()) for opt in options or []
        ]
        self.checked = checked
        self.required = required
        self.type = type
        self.accept = accept
        self.fail = fail
        self.file = None
        self.selected = None
        self.writes = 0

    def __repr__(self) -> str:
        return f"FakeControl({self.kind.value}, name={self.name!r}, label={self.label!r})"


class FakeFormPage:
    def __init__(
        self,
        controls=None,
        *,
        page_text: str = "",
        page_title: str = "Software Engineer Intern",
        challenges=None,
        apply_button: bool = True,
        submit_button: bool = True,
    ):
        self.controls = list(controls or [])
        self.page_text = page_text
        self.page_title = page_title
        self.challenges = list(challenges or [])
        self.apply_button = apply_button
        self.submit_button = submit_button
        self.apply_clicks = 0
        self.submit_clicks = 0
        self.waits: list[tuple[str, int]] = []
        self.calls: list[str] = []

    def enumerate_controls(self, kind):
        self.calls.append(f"enumerate:{ControlKind(kind).value}")
        return [control for control in self.controls if control.kind == kind]

    def get_attribute(self, handle, name):
        if name == "required":
            return "" if handle.required else None
        values = {
            "name": handle.name,
            "id": handle.id,
            "placeholder": handle.placeholder,
            "aria-label": handle.aria_label,
            "type": handle.type,
            "accept": handle.accept,
            "value": handle.value,
        }
        value = values.get(name)
        return value if value else None

    def get_label_text(self, handle):
        return handle.label

    def get_group_text(self, handle):
        return handle.group

    def get_current_value(self, handle):
        return handle.value

    def get_options(self, handle):
        return list(handle.options)

    def is_checked(self, handle):
        return handle.checked

    def _write(self, handle):
        if handle.fail:
            raise RuntimeError(f"element not interactable: {handle.name or handle.id}")
        handle.writes += 1

    def set_value(self, handle, value):
        self._write(handle)
        handle.value = value

    def set_checked(self, handle, checked):
        self._write(handle)
        handle.checked = checked

    def select_option(self, handle, option_label):
        self._write(handle)
        handle.selected = option_label
        match = next((opt for opt in handle.options if opt.text == option_label), None)
        handle.value = match.value if match and match.value else option_label

    def set_file(self, handle, path):
        self._write(handle)
        handle.file = path
        self.calls.append("set_file")

    def get_page_text(self):
        return self.page_text

    def detect_challenge(self):
        if self.challenges:
            return self.challenges.pop(0)
        return False

    def wait(self, condition, timeout_ms):
        self.waits.append((condition, timeout_ms))
        return True

    def title(self):
        return self.page_title

    def click_apply(self):
        self.apply_clicks += 1
        return self.apply_button

    def click_submit(self):
        if self.submit_button:
            self.submit_clicks += 1
        return self.submit_button


@pytest.fixture
def make_control():
    return FakeControl


@pytest.fixture
def make_page():
    return FakeFormPage


@pytest.fixture
def make_escalation():
    def _make(*answers: str):
        responder = ScriptedResponder(answers)
        return HumanEscalation(responder), responder

    return _make


@pytest.fixture
def profile():
    return {
        "personalInfo": {
            "firstName": "Aarav",
            "lastName": "Sharma",
            "email": "aarav.sharma@example.com",
            "phone": "+91 98765 43210",
            "linkedin": "https://linkedin.com/in/aaravsharma",
            "github": "https://github.com/aaravsharma",
            "location": {"city": "Pune", "state": "Maharashtra", "country": "India", "zipCode": "411001"},
        },
        "workAuthorization": {"authorized": True, "requiresSponsorship": False, "visaStatus": "Citizen"},
        "availability": {"startDate": "Immediately", "willingToRelocate": False, "noticePeriod": "None"},
        "experience": {"yearsOfExperience": 1, "currentCompany": "Acme Labs", "currentTitle": "Software Intern"},
        "education": {
            "degree": "Bachelor of Engineering",
            "field": "Computer Engineering",
            "university": "University of Pune",
            "graduationYear": 2026,
            "gpa": "8.7/10",
        },
        "skills": ["Python", "React", "PostgreSQL"],
        "demographics": {"gender": "Male", "ethnicity": None, "veteran": None, "disability": None},
        "additionalInfo": {"coverLetter": None, "referralSource": "Job Board"},
    }


@pytest.fixture
def flat_profile(profile):
    return flatten_profile(profile)
