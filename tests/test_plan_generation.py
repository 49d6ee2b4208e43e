import random

import pytest

from planner.plan.exercise_bank import (
    BODYWEIGHT,
    DAY_TYPE_LABELS,
    DUMBBELLS,
    LEG_DAY_TYPES,
    allowed_vocabulary,
    exercises_for,
)
from planner.plan.exercise_utils import _is_compound_exercise
from planner.plan.plan_generation import (
    REPS_BY_GOAL,
    PlanInputs,
    build_rule_plan,
    generate_rule_plan,
    lower_body_sessions,
    normalize_inputs,
    split_for,
)
from planner.prompts.system_prompt import build_json_plan_prompt
from planner.plan.validation import is_diverse, validate_plan


@pytest.mark.parametrize("sessions", range(1, 8))
def test_training_day_count_matches_sessions(sessions: int) -> None:
    plan = generate_rule_plan({"sessionsPerWeek": sessions})
    assert len(plan.days) == 7
    assert len(plan.training_days) == sessions
    for day in plan.training_days:
        assert 5 <= len(day.exercises) <= 8


def test_sessions_are_clamped_to_a_week() -> None:
    assert normalize_inputs({"sessionsPerWeek": 12}).sessions_per_week == 7
    assert normalize_inputs({"sessionsPerWeek": 0}).sessions_per_week == 1
    assert normalize_inputs({"days": "4 dni w tygodniu"}).sessions_per_week == 4
    assert normalize_inputs({}).sessions_per_week == 3


def test_female_three_day_plan_is_lower_body_biased() -> None:
    plan = generate_rule_plan({"sessionsPerWeek": 3, "goal": "hypertrophy", "gender": "Kobieta"})
    leg_labels = {DAY_TYPE_LABELS["pl"][day_type] for day_type in LEG_DAY_TYPES}
    leg_days = [day for day in plan.training_days if day.focus in leg_labels]
    assert len(plan.training_days) == 3
    assert len(leg_days) >= 2


def test_female_detection_accepts_polish_and_english() -> None:
    assert normalize_inputs({"gender": "Kobieta"}).female
    assert normalize_inputs({"gender": "female"}).female
    assert normalize_inputs({"sex": "K"}).female
    assert not normalize_inputs({"gender": "Mężczyzna"}).female
    assert not normalize_inputs({}).female


def test_male_split_keeps_push_pull_legs() -> None:
    assert split_for(PlanInputs(sessions_per_week=3)) == ["PUSH", "PULL", "LEGS"]


@pytest.mark.parametrize("goal", sorted(REPS_BY_GOAL))
def test_reps_follow_compound_rule(goal: str) -> None:
    plan = generate_rule_plan(PlanInputs(sessions_per_week=4, goal=goal))
    compound_reps, isolation_reps = REPS_BY_GOAL[goal]
    for day in plan.training_days:
        for row in day.exercises:
            expected = compound_reps if _is_compound_exercise(row.exercise_name) else isolation_reps
            assert row.reps == expected, row.exercise_name


def test_no_duplicate_exercise_within_a_day() -> None:
    plan = generate_rule_plan(PlanInputs(sessions_per_week=7, level="advanced", equipment=BODYWEIGHT))
    for day in plan.training_days:
        names = [row.exercise_name for row in day.exercises]
        assert len(names) == len(set(names))


def test_equipment_limits_exercise_choice() -> None:
    plan = generate_rule_plan(PlanInputs(sessions_per_week=5, equipment=DUMBBELLS))
    allowed = set()
    for category in ("CHEST", "BACK", "SHOULDERS", "BICEPS", "TRICEPS", "QUADS", "HAMSTRINGS", "GLUTES", "CALVES", "CORE"):
        allowed.update(exercises_for(category, DUMBBELLS))
    assert set(plan.exercise_names()) <= allowed
    assert "Back squat" not in plan.exercise_names()


@pytest.mark.parametrize("sessions", range(1, 8))
def test_gym_plans_are_valid_and_diverse(sessions: int) -> None:
    plan = generate_rule_plan(PlanInputs(sessions_per_week=sessions, level="advanced"))
    assert is_diverse(plan)
    assert validate_plan(plan, expected_days=sessions, vocabulary=allowed_vocabulary()) == []


def test_same_seed_gives_same_plan() -> None:
    first = generate_rule_plan({"sessionsPerWeek": 4}, seed=42)
    second = generate_rule_plan({"sessionsPerWeek": 4}, seed=42)
    assert first.to_dict() == second.to_dict()
    assert first.seed == 42


def test_default_seed_is_stable_for_same_inputs() -> None:
    raw = {"sessionsPerWeek": 3, "goal": "siła", "level": "początkujący"}
    assert generate_rule_plan(raw).to_dict() == generate_rule_plan(raw).to_dict()


def test_injected_random_source_is_used() -> None:
    inputs = PlanInputs(sessions_per_week=3)
    first = build_rule_plan(inputs, random.Random(7))
    second = build_rule_plan(inputs, random.Random(7))
    assert first.exercise_names() == second.exercise_names()


def test_strength_goal_uses_long_rest_on_compounds() -> None:
    plan = generate_rule_plan(PlanInputs(sessions_per_week=3, goal="strength", level="advanced"))
    for day in plan.training_days:
        for row in day.exercises:
            if _is_compound_exercise(row.exercise_name):
                assert row.rest == "3 min"
                assert row.sets == 5
            assert row.rir == "1"
            assert row.rpe == "9"


def test_english_plan_uses_english_weekdays() -> None:
    plan = generate_rule_plan({"sessionsPerWeek": 2}, rng=random.Random(1))
    assert plan.days[0].name == "Poniedziałek"
    plan = generate_rule_plan(normalize_inputs({"sessionsPerWeek": 2}, lang="en"))
    assert [day.name for day in plan.training_days] == ["Monday", "Thursday"]
    assert plan.name == "Training plan – 2x per week"


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_sessions_use_default(value) -> None:
    assert normalize_inputs({"sessionsPerWeek": value}).sessions_per_week == 3


def test_lower_body_sessions_follow_the_split() -> None:
    assert lower_body_sessions(PlanInputs(sessions_per_week=3, female=True)) == 2
    assert lower_body_sessions(PlanInputs(sessions_per_week=3)) == 1
    assert lower_body_sessions(PlanInputs(sessions_per_week=1, female=True)) == 0


def test_female_json_prompt_asks_for_lower_body_days() -> None:
    inputs = PlanInputs(sessions_per_week=5, female=True)
    prompt = build_json_plan_prompt(inputs, ["Back squat"])
    assert "at least 3 of 5 days" in prompt
    assert "lower-body" not in build_json_plan_prompt(PlanInputs(sessions_per_week=5), ["Back squat"])
