from typing import Any, TypedDict


class ApplicationState(TypedDict, total=False):
    run_id: str
    url: str
    title: str
    company: str | None

    verdict: Any
    fill_summary: Any

    status: str
    errors: list[str]
    auto_submit: bool
    submitted: bool
