from dataclasses import dataclass, field
from typing import Any, Protocol

from applyassist.core.enums import ControlKind


@dataclass(frozen=True)
class ChoiceOption:
    text: str
    value: str = ""


@dataclass
class ControlDescriptor:
    kind: ControlKind
    handle: Any
    name: str = ""
    id: str = ""
    label: str = ""
    placeholder: str = ""
    aria_label: str = ""
    group_text: str = ""
    input_type: str = ""
    accept: str = ""
    required: bool = False
    current_value: str = ""
    option_value: str = ""

    @property
    def identifier(self) -> str:
        return " ".join(part for part in (self.name, self.id) if part)

    @property
    def signal_text(self) -> str:
        parts = [self.name, self.id, self.label, self.placeholder, self.aria_label]
        return " ".join(part.strip() for part in parts if part and part.strip())

    @property
    def question_text(self) -> str:
        parts: list[str] = []
        for part in (self.group_text, self.label, self.aria_label, self.placeholder):
            part = (part or "").strip()
            if part and part not in parts:
                parts.append(part)
        return " ".join(parts) or self.signal_text

    @property
    def hint(self) -> str:
        return (self.label or self.group_text or self.placeholder or self.aria_label or self.name or self.id).strip()


class FormPage(Protocol):
    """What the filler and the application flow need from a live page."""

    def enumerate_controls(self, kind: ControlKind) -> list[Any]: ...

    def get_attribute(self, handle: Any, name: str) -> str | None: ...

    def get_label_text(self, handle: Any) -> str: ...

    def get_group_text(self, handle: Any) -> str: ...

    def get_current_value(self, handle: Any) -> str: ...

    def get_options(self, handle: Any) -> list[ChoiceOption]: ...

    def is_checked(self, handle: Any) -> bool: ...

    def set_value(self, handle: Any, value: str) -> None: ...

    def set_checked(self, handle: Any, checked: bool) -> None: ...

    def select_option(self, handle: Any, option_label: str) -> None: ...

    def set_file(self, handle: Any, path: str) -> None: ...

    def get_page_text(self) -> str: ...

    def detect_challenge(self) -> bool: ...

    def wait(self, condition: str, timeout_ms: int) -> bool: ...

    def title(self) -> str: ...

    def click_apply(self) -> bool: ...

    def click_submit(self) -> bool: ...


def describe_control(page: FormPage, handle: Any, kind: ControlKind) -> ControlDescriptor:
    def attr(name: str) -> str:
        return (page.get_attribute(handle, name) or "").strip()

    descriptor = ControlDescriptor(
        kind=kind,
        handle=handle,
        name=attr("name"),
        id=attr("id"),
        label=(page.get_label_text(handle) or "").strip(),
        placeholder=attr("placeholder"),
        aria_label=attr("aria-label"),
        input_type=attr("type").lower(),
        accept=attr("accept").lower(),
        required=page.get_attribute(handle, "required") is not None or attr("aria-required").lower() == "true",
    )
    if kind in {ControlKind.RADIO, ControlKind.CHECKBOX}:
        descriptor.group_text = (page.get_group_text(handle) or "").strip()
        descriptor.option_value = attr("value")
    elif kind != ControlKind.FILE:
        descriptor.current_value = (page.get_current_value(handle) or "").strip()
    return descriptor
