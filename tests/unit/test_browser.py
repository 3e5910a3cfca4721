from applyassist.core.enums import ControlKind
from applyassist.services.browser import CONTROL_SELECTORS, PlaywrightFormPage, has_captcha_text
from applyassist.services.form_page import describe_control


class StubLocator:
    def __init__(self, nodes=None, attrs=None, visible=True):
        self.nodes = nodes or []
        self.attrs = attrs or {}
        self.visible = visible
        self.clicked = 0

    def count(self):
        return len(self.nodes)

    def nth(self, idx):
        return self.nodes[idx]

    @property
    def first(self):
        return self.nodes[0]

    def is_visible(self):
        return self.visible

    def click(self, timeout=None):
        self.clicked += 1

    def get_attribute(self, name, timeout=None):
        if name == "broken":
            raise TimeoutError("locator timed out")
        return self.attrs.get(name)

    def evaluate(self, script):
        return self.attrs.get("_label", "")

    def input_value(self, timeout=None):
        return self.attrs.get("_value", "")


class StubPage:
    def __init__(self, selectors, body=""):
        self.selectors = selectors
        self.body = body
        self.timeouts = []

    def locator(self, selector):
        return self.selectors.get(selector, StubLocator())

    def inner_text(self, selector, timeout=None):
        return self.body

    def wait_for_timeout(self, ms):
        self.timeouts.append(ms)

    def wait_for_selector(self, selector, timeout=None):
        raise TimeoutError("no form")


def test_has_captcha_text():
    assert has_captcha_text("Please verify you are human")
    assert has_captcha_text("CAPTCHA required")
    assert not has_captcha_text("We value robotics engineers")


def test_challenge_detection_from_iframe_or_text():
    iframe = StubLocator(nodes=[StubLocator()])
    assert PlaywrightFormPage(StubPage({"iframe[src*='recaptcha']": iframe})).detect_challenge()
    assert PlaywrightFormPage(StubPage({}, body="I am not a robot")).detect_challenge()
    assert not PlaywrightFormPage(StubPage({}, body="Apply now")).detect_challenge()


def test_describe_control_reads_attributes_and_label():
    field = StubLocator(attrs={"name": "email", "required": "", "_label": "Email address", "_value": ""})
    page = PlaywrightFormPage(StubPage({CONTROL_SELECTORS[ControlKind.TEXT]: StubLocator(nodes=[field])}))

    handles = page.enumerate_controls(ControlKind.TEXT)
    control = describe_control(page, handles[0], ControlKind.TEXT)

    assert control.name == "email"
    assert control.label == "Email address"
    assert control.required is True
    assert page.get_attribute(field, "broken") is None


def test_click_apply_uses_first_visible_match_and_waits():
    hidden = StubLocator(nodes=[StubLocator(visible=False)])
    button = StubLocator()
    visible = StubLocator(nodes=[button])
    stub = StubPage({"a:has-text('Apply for this job')": hidden, "button:has-text('Apply Now')": visible})
    page = PlaywrightFormPage(stub)

    assert page.click_apply() is True
    assert button.clicked == 1
    assert page.wait("form", 10) is False
    assert page.wait("settle", 25) is True
    assert stub.timeouts == [25]
