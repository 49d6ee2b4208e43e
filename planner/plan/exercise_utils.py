from __future__ import annotations

_COMPOUND_KEYWORDS = [
    "squat",
    "press",
    "row",
    "deadlift",
    "pull-up",
    "chin-up",
    "pulldown",
    "push-up",
    "lunge",
    "step-up",
    "dip",
    "thrust",
    "good morning",
    "clean",
]


def _is_compound_exercise(name: str) -> bool:
    lower = name.lower()
    return any(keyword in lower for keyword in _COMPOUND_KEYWORDS)
