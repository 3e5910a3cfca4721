import logging
import re
from typing import Any

from applyassist.core.config import Settings
from applyassist.core.enums import ControlKind
from applyassist.services.form_page import ChoiceOption

logger = logging.getLogger(__name__)

CONTROL_SELECTORS = {
    ControlKind.TEXT: (
        "input[type='text'], input[type='email'], input[type='tel'], input[type='url'], input:not([type])"
    ),
    ControlKind.TEXTAREA: "textarea",
    ControlKind.DATE: "input[type='date']",
    ControlKind.SELECT: "select",
    ControlKind.RADIO: "input[type='radio']",
    ControlKind.CHECKBOX: "input[type='checkbox']",
    ControlKind.FILE: "input[type='file']",
}

CHALLENGE_SELECTORS = [
    "iframe[src*='recaptcha']",
    "iframe[src*='hcaptcha']",
    "[class*='captcha']",
    "[id*='captcha']",
    ".g-recaptcha",
    "#recaptcha",
]

CAPTCHA_PATTERNS = [
    re.compile(r"\bcaptcha\b", re.IGNORECASE),
    re.compile(r"\bi am not a robot\b", re.IGNORECASE),
    re.compile(r"\bverify you are human\b", re.IGNORECASE),
]

APPLY_SELECTORS = [
    "a:has-text('Apply for this job')",
    "button:has-text('Apply for this job')",
    "a:has-text('Apply Now')",
    "button:has-text('Apply Now')",
    "a:has-text('Apply')",
    "button:has-text('Apply')",
    "[class*='apply']",
    "[id*='apply']",
]

SUBMIT_SELECTORS = [
    "button:has-text('Submit application')",
    "button[type='submit']",
    "input[type='submit']",
]

SUBMIT_BUTTON_PATTERNS = [
    re.compile(r"submit application", re.IGNORECASE),
    re.compile(r"\bsubmit\b", re.IGNORECASE),
    re.compile(r"\bsend application\b", re.IGNORECASE),
]

FORM_READY_SELECTOR = "form, input, textarea, select"

_LABEL_SCRIPT = """
(el) => {
  const text = (node) => ((node && node.textContent) || '').replace(/\\s+/g, ' ').trim();
  if (el.labels && el.labels.length) return text(el.labels[0]);
  const wrapping = el.closest('label');
  if (wrapping) return text(wrapping);
  const ids = (el.getAttribute('aria-labelledby') || '').split(/\\s+/).filter(Boolean);
  return ids.map((id) => text(document.getElementById(id))).filter(Boolean).join(' ');
}
"""

_GROUP_SCRIPT = """
(el) => {
  const text = (node) => ((node && node.textContent) || '').replace(/\\s+/g, ' ').trim();
  const fieldset = el.closest('fieldset');
  if (fieldset) {
    const legend = fieldset.querySelector('legend');
    if (legend) return text(legend);
  }
  const group = el.closest('[role="group"], [role="radiogroup"]');
  if (group) {
    const aria = group.getAttribute('aria-label');
    if (aria) return aria.trim();
    const ids = (group.getAttribute('aria-labelledby') || '').split(/\\s+/).filter(Boolean);
    const joined = ids.map((id) => text(document.getElementById(id))).filter(Boolean).join(' ');
    if (joined) return joined;
  }
  return '';
}
"""

_OPTIONS_SCRIPT = """
(el) => Array.from(el.options || []).map((opt) => ({
  text: (opt.textContent || '').replace(/\\s+/g, ' ').trim(),
  value: opt.value || '',
}))
"""


def has_captcha_text(text: str) -> bool:
    return any(pattern.search(text or "") for pattern in CAPTCHA_PATTERNS)


class PlaywrightFormPage:
    """Form page over a sync Playwright page; a timed-out lookup means "not there"."""

    def __init__(self, page, *, control_timeout_ms: int = 1500, page_timeout_ms: int = 30000) -> None:
        self.page = page
        self.control_timeout_ms = control_timeout_ms
        self.page_timeout_ms = page_timeout_ms

    def enumerate_controls(self, kind: ControlKind) -> list[Any]:
        nodes = self.page.locator(CONTROL_SELECTORS[ControlKind(kind)])
        try:
            count = nodes.count()
        except Exception:
            return []
        return [nodes.nth(idx) for idx in range(count)]

    def get_attribute(self, handle, name: str) -> str | None:
        try:
            return handle.get_attribute(name, timeout=self.control_timeout_ms)
        except Exception:
            return None

    def get_label_text(self, handle) -> str:
        try:
            return handle.evaluate(_LABEL_SCRIPT) or ""
        except Exception:
            return ""

    def get_group_text(self, handle) -> str:
        try:
            return handle.evaluate(_GROUP_SCRIPT) or ""
        except Exception:
            return ""

    def get_current_value(self, handle) -> str:
        try:
            return handle.input_value(timeout=self.control_timeout_ms) or ""
        except Exception:
            return ""

    def get_options(self, handle) -> list[ChoiceOption]:
        try:
            raw = handle.evaluate(_OPTIONS_SCRIPT) or []
        except Exception:
            return []
        return [ChoiceOption(text=str(item.get("text") or ""), value=str(item.get("value") or "")) for item in raw]

    def is_checked(self, handle) -> bool:
        try:
            return bool(handle.is_checked(timeout=self.control_timeout_ms))
        except Exception:
            return False

    def set_value(self, handle, value: str) -> None:
        handle.fill(value, timeout=self.control_timeout_ms)

    def set_checked(self, handle, checked: bool) -> None:
        handle.set_checked(checked, timeout=self.control_timeout_ms)

    def select_option(self, handle, option_label: str) -> None:
        handle.select_option(label=option_label, timeout=self.control_timeout_ms)

    def set_file(self, handle, path: str) -> None:
        handle.set_input_files(path, timeout=self.control_timeout_ms)

    def get_page_text(self) -> str:
        try:
            return self.page.inner_text("body", timeout=self.page_timeout_ms) or ""
        except Exception as exc:
            logger.debug("Could not read page text: %s", exc)
            return ""

    def detect_challenge(self) -> bool:
        for sel in CHALLENGE_SELECTORS:
            try:
                if self.page.locator(sel).count() > 0:
                    return True
            except Exception:
                continue
        try:
            text = self.page.inner_text("body", timeout=self.control_timeout_ms)
        except Exception:
            return False
        return has_captcha_text(text)

    def wait(self, condition: str, timeout_ms: int) -> bool:
        if condition == "form":
            try:
                self.page.wait_for_selector(FORM_READY_SELECTOR, timeout=timeout_ms)
                return True
            except Exception:
                return False
        self.page.wait_for_timeout(timeout_ms)
        return True

    def title(self) -> str:
        try:
            return self.page.title() or ""
        except Exception:
            return ""

    def _click_first_visible(self, selectors: list[str]) -> bool:
        for sel in selectors:
            try:
                loc = self.page.locator(sel)
                if loc.count() > 0 and loc.first.is_visible():
                    loc.first.click(timeout=self.control_timeout_ms)
                    return True
            except Exception:
                continue
        return False

    def click_apply(self) -> bool:
        return self._click_first_visible(APPLY_SELECTORS)

    def click_submit(self) -> bool:
        if self._click_first_visible(SUBMIT_SELECTORS):
            return True
        nodes = self.page.locator("button, [role='button']")
        try:
            count = nodes.count()
        except Exception:
            count = 0
        for idx in range(count):
            node = nodes.nth(idx)
            try:
                if not node.is_visible():
                    continue
                blob = (node.inner_text(timeout=500) or "").strip()
            except Exception:
                continue
            if any(pattern.search(blob) for pattern in SUBMIT_BUTTON_PATTERNS):
                node.click(timeout=self.control_timeout_ms)
                return True
        return False


class BrowserSession:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._playwright = None
        self._browser = None
        self._context = None

    def launch(self) -> "BrowserSession":
        try:
            from playwright.sync_api import sync_playwright
        except Exception as exc:
            raise RuntimeError("Playwright is required to drive the browser. Install playwright and browsers.") from exc

        logger.info("Launching browser...")
        self._playwright = sync_playwright().start()
        self._browser = self._playwright.chromium.launch(
            headless=self.settings.browser_headless,
            slow_mo=self.settings.browser_slow_mo_ms,
        )
        self._context = self._browser.new_context(viewport={"width": 1280, "height": 900})
        self._context.set_default_timeout(self.settings.page_timeout_ms)
        self._context.set_default_navigation_timeout(self.settings.navigation_timeout_ms)
        logger.info("Browser launched successfully")
        return self

    def open_tab(self, url: str):
        if self._context is None:
            raise RuntimeError("Browser session is not launched")
        page = self._context.new_page()
        page.goto(url, wait_until="domcontentloaded", timeout=self.settings.navigation_timeout_ms)
        page.wait_for_timeout(self.settings.settle_wait_ms)
        return page

    def form_page(self, page) -> PlaywrightFormPage:
        return PlaywrightFormPage(
            page,
            control_timeout_ms=self.settings.control_timeout_ms,
            page_timeout_ms=self.settings.page_timeout_ms,
        )

    def close_tab(self, page) -> None:
        try:
            page.close()
        except Exception as exc:
            logger.debug("Could not close tab: %s", exc)

    def close(self) -> None:
        for name, closer in (
            ("context", getattr(self._context, "close", None)),
            ("browser", getattr(self._browser, "close", None)),
            ("playwright", getattr(self._playwright, "stop", None)),
        ):
            if closer is None:
                continue
            try:
                closer()
            except Exception as exc:
                logger.debug("Could not close %s: %s", name, exc)
        self._context = self._browser = self._playwright = None
        logger.info("Browser closed")

    def __enter__(self) -> "BrowserSession":
        return self.launch()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
