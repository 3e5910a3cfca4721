from . import (
    form_fill_executor,
    form_opener,
    submission_gate,
    suitability_gate,
    tracker,
)

__all__ = [
    "form_fill_executor",
    "form_opener",
    "submission_gate",
    "suitability_gate",
    "tracker",
]
