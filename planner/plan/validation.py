from __future__ import annotations

from typing import FrozenSet, Iterable, List, Optional

from planner.plan.models import Day, Plan

MIN_EXERCISES_PER_DAY = 5
MAX_EXERCISES_PER_DAY = 8
DEFAULT_MAX_OVERLAP = 0.5


def plan_signature(day: Day) -> FrozenSet[str]:
    return frozenset(row.exercise_name.strip().lower() for row in day.exercises)


def _overlap(first: FrozenSet[str], second: FrozenSet[str]) -> float:
    smaller = min(len(first), len(second))
    if smaller == 0:
        return 0.0
    return len(first & second) / smaller


def is_diverse(plan: Plan, max_overlap: float = DEFAULT_MAX_OVERLAP) -> bool:
    """Reject plans that repeat the same day or barely change between sessions."""
    signatures = [plan_signature(day) for day in plan.training_days]
    if len(set(signatures)) != len(signatures):
        return False
    for previous, current in zip(signatures, signatures[1:]):
        if _overlap(previous, current) > max_overlap:
            return False
    return True


def validate_plan(
    plan: Plan,
    expected_days: Optional[int] = None,
    vocabulary: Optional[Iterable[str]] = None,
    max_overlap: float = DEFAULT_MAX_OVERLAP,
) -> List[str]:
    errors: List[str] = []
    training_days = plan.training_days
    if not training_days:
        return ["Plan has no training days."]
    if expected_days is not None and len(training_days) != expected_days:
        errors.append(f"Expected {expected_days} training days, got {len(training_days)}.")
    allowed = {name.strip().lower() for name in vocabulary} if vocabulary is not None else None
    for day in training_days:
        count = len(day.exercises)
        if not MIN_EXERCISES_PER_DAY <= count <= MAX_EXERCISES_PER_DAY:
            errors.append(
                f"{day.name or 'Day'} has {count} exercises "
                f"(expected {MIN_EXERCISES_PER_DAY}-{MAX_EXERCISES_PER_DAY})."
            )
        for row in day.exercises:
            if not row.exercise_name:
                errors.append(f"{day.name or 'Day'} has an exercise without a name.")
                continue
            if row.sets < 1:
                errors.append(f"{row.exercise_name}: sets must be at least 1.")
            if allowed is not None and row.exercise_name.strip().lower() not in allowed:
                errors.append(f"{row.exercise_name} is not in the allowed exercise list.")
    if not is_diverse(plan, max_overlap=max_overlap):
        errors.append("Plan is not diverse enough between days.")
    return errors
