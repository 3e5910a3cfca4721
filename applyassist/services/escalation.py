import logging
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable

from applyassist.core.enums import EscalationKind

logger = logging.getLogger(__name__)

YES_ANSWERS = {"y", "yes"}


@dataclass(frozen=True)
class EscalationRequest:
    kind: EscalationKind
    prompt: str
    context: list[str] = field(default_factory=list)


class Responder(ABC):
    """Consumer side of the escalation channel: turns a request into the human's answer."""

    @abstractmethod
    def respond(self, request: EscalationRequest) -> str:
        raise NotImplementedError


class ConsoleResponder(Responder):
    def __init__(self, input_fn=input, output_fn=print) -> None:
        self._input = input_fn
        self._output = output_fn

    def respond(self, request: EscalationRequest) -> str:
        self._output("")
        for line in request.context:
            self._output(line)
        try:
            answer = self._input(request.prompt)
        except EOFError:
            return ""
        return (answer or "").strip()


class ScriptedResponder(Responder):
    """Answers from a fixed queue; an exhausted queue answers with an empty string."""

    def __init__(self, answers: Iterable[str] = ()) -> None:
        self._answers = deque(answers)
        self.requests: list[EscalationRequest] = []

    def respond(self, request: EscalationRequest) -> str:
        self.requests.append(request)
        if not self._answers:
            return ""
        return self._answers.popleft()

    def kinds(self) -> list[EscalationKind]:
        return [request.kind for request in self.requests]


def is_yes(answer: str | None) -> bool:
    return (answer or "").strip().lower() in YES_ANSWERS


class HumanEscalation:
    """Producer side: each call describes what is asked and blocks until the responder answers."""

    def __init__(self, responder: Responder | None = None) -> None:
        self.responder = responder or ConsoleResponder()

    def _ask(self, kind: EscalationKind, prompt: str, context: list[str]) -> str:
        logger.info("Waiting for human: %s", context[0] if context else prompt.strip())
        return self.responder.respond(EscalationRequest(kind=kind, prompt=prompt, context=context))

    def wait_for_challenge(self, detail: str = "") -> None:
        context = ["CAPTCHA or verification challenge detected. Please solve it manually in the browser."]
        if detail:
            context.append(f"   {detail}")
        self._ask(EscalationKind.CHALLENGE, "Press Enter once you have solved the challenge...", context)
        logger.info("Challenge cleared, continuing")

    def ask_for_missing_value(self, field_hint: str) -> str:
        hint = (field_hint or "").strip() or "unlabelled field"
        context = [f"Required field not found in personal details: {hint}"]
        answer = self._ask(EscalationKind.MISSING_VALUE, f'Please enter value for "{hint}": ', context)
        return answer.strip()

    def confirm_submission(self, job_title: str | None, employer: str | None) -> bool:
        context = [
            "Ready to submit application:",
            f"   Job: {job_title or 'Unknown Position'}",
            f"   Company: {employer or 'Unknown'}",
        ]
        return is_yes(self._ask(EscalationKind.CONFIRM_SUBMISSION, "Submit this application? (yes/no): ", context))

    def confirm_continuation(self, prompt_text: str = "Continue to next job?") -> bool:
        context = [prompt_text]
        return is_yes(self._ask(EscalationKind.CONFIRM_CONTINUATION, f"{prompt_text} (yes/no): ", context))

    def pause(self, prompt_text: str) -> None:
        context = [prompt_text]
        self._ask(EscalationKind.MANUAL_STEP, "Press Enter when done...", context)
