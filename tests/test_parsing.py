import json

import pytest

from planner.errors import PlanParseError
from planner.plan.models import Day, ExerciseRow, Plan
from planner.plan.parsing import (
    extract_json_object,
    format_plan_text,
    parse_plan_text,
    plan_from_llm_json,
    weekday_index,
)
from planner.plan.plan_generation import PlanInputs, generate_rule_plan
from planner.plan.validation import is_diverse, plan_signature, validate_plan


def _day(name, exercises):
    return Day(name=name, exercises=[ExerciseRow(exercise_name=item, sets=3, reps=10) for item in exercises])


FIVE_PUSH = ["Flat bench press", "Overhead press", "Cable fly", "Triceps pushdown", "Lateral raise"]
FIVE_PULL = ["Barbell row", "Lat pulldown", "Barbell curl", "Face pull", "Hammer curl"]


def test_identical_days_are_not_diverse() -> None:
    plan = Plan(name="x", days=[_day("Monday", FIVE_PUSH), _day("Wednesday", FIVE_PUSH)])
    assert not is_diverse(plan)
    assert "Plan is not diverse enough between days." in validate_plan(plan)


def test_heavy_overlap_between_consecutive_days_is_rejected() -> None:
    almost_same = FIVE_PUSH[:3] + ["Skull crusher", "Front raise"]
    plan = Plan(name="x", days=[_day("Monday", FIVE_PUSH), _day("Tuesday", almost_same)])
    assert not is_diverse(plan)
    assert is_diverse(Plan(name="x", days=[_day("Monday", FIVE_PUSH), _day("Tuesday", FIVE_PULL)]))


def test_signature_ignores_case_and_order() -> None:
    assert plan_signature(_day("a", ["Push-up", "Dead bug"])) == plan_signature(_day("b", ["dead bug", "push-up"]))


def test_validation_reports_count_vocabulary_and_day_errors() -> None:
    plan = Plan(name="x", days=[_day("Monday", FIVE_PUSH[:4] + ["Unicorn lift"])])
    errors = validate_plan(plan, expected_days=2, vocabulary=FIVE_PUSH)
    assert "Expected 2 training days, got 1." in errors
    assert "Unicorn lift is not in the allowed exercise list." in errors
    assert validate_plan(Plan(name="x", days=[_day("Monday", FIVE_PUSH[:4])]))[0].startswith("Monday has 4 exercises")
    assert validate_plan(Plan(name="empty")) == ["Plan has no training days."]


def test_weekday_index_handles_polish_diacritics() -> None:
    assert weekday_index("Dzień 3 — Środa") == 2
    assert weekday_index("ŚRODA") == 2
    assert weekday_index("Friday session") == 4
    assert weekday_index("Trening A") is None


def test_extract_json_strips_code_fences() -> None:
    assert extract_json_object('```json\n{"days": []}\n```') == {"days": []}
    assert extract_json_object('Here you go: {"a": 1} enjoy') == {"a": 1}
    with pytest.raises(PlanParseError):
        extract_json_object("no json here")
    with pytest.raises(PlanParseError):
        extract_json_object("   ")


def test_llm_json_is_placed_on_weekdays_and_canonicalized() -> None:
    payload = {
        "planName": "Push / Pull",
        "days": [
            {"name": "Wednesday", "focus": "Pull", "exercises": [{"exercise": "lat  PULLDOWN", "sets": "4", "reps": "8"}]},
            {"name": "Monday", "exercises": [{"exerciseName": "flat bench press", "sets": 3, "reps": "8-10"}]},
        ],
    }
    plan = plan_from_llm_json(json.dumps(payload), lang="en")
    assert plan.source == "llm"
    assert [day.name for day in plan.days][:3] == ["Monday", "Tuesday", "Wednesday"]
    assert plan.days[0].exercises[0].exercise_name == "Flat bench press"
    assert plan.days[0].exercises[0].reps == "8-10"
    assert plan.days[2].exercises[0].exercise_name == "Lat pulldown"
    assert plan.days[2].exercises[0].sets == 4
    assert plan.days[2].exercises[0].reps == 8
    assert plan.days[1].is_rest


def test_llm_json_with_more_than_seven_days_fails() -> None:
    days = [{"name": f"Day {index}", "exercises": []} for index in range(8)]
    with pytest.raises(PlanParseError):
        plan_from_llm_json(json.dumps({"days": days}))


def test_llm_json_source_field_cannot_be_spoofed() -> None:
    plan = generate_rule_plan(PlanInputs(sessions_per_week=2))
    parsed = plan_from_llm_json(json.dumps(plan.to_dict()))
    assert parsed.source == "llm"
    assert parsed.exercise_names() == plan.exercise_names()


@pytest.mark.parametrize(
    "reply",
    [
        '{"days": [{"name": "Monday", "exercises": 5}]}',
        '{"days": [{"name": "Monday", "exercises": [{"exercise": "Back squat", "sets": 1e999, "reps": 5}]}]}',
        '{"days": [{"name": "Monday", "exercises": [{"exercise": "Back squat", "sets": "three", "reps": 5}]}]}',
        '{"days": [{"name": "Monday", "exercises": [{"exercise": "Back squat", "sets": NaN, "reps": 5}]}]}',
        '{"days": [{"name": "Monday", "exercises": ["Back squat 4x8"]}]}',
        '{"days": "Monday: squats"}',
        '{"days": [7]}',
        '[{"name": "Monday", "exercises": [{"exercise": {"en": "Back squat"}, "sets": 3, "reps": 5}]}]',
    ],
)
def test_llm_json_with_wrong_shape_raises_parse_error(reply: str) -> None:
    with pytest.raises(PlanParseError):
        plan_from_llm_json(reply)


def test_llm_json_aliases_and_missing_values() -> None:
    reply = {"title": "A", "plan": [{"day": "Friday", "exercises": [{"name": "Back squat", "series": 4.0, "repetitions": 6.0}]}]}
    plan = plan_from_llm_json(json.dumps(reply), lang="en")
    row = plan.days[4].exercises[0]
    assert plan.name == "A"
    assert (row.exercise_name, row.sets, row.reps, row.rest) == ("Back squat", 4, 6, None)
    empty = Day.from_dict({"name": " Monday ", "exercises": None})
    assert empty.name == "Monday"
    assert empty.is_rest


def test_parse_plan_text_reads_headings_and_bullets() -> None:
    text = "\n".join(
        [
            "# Plan",
            "Some intro line 3x10 that is not under a day",
            "## Dzień 1 — Poniedziałek",
            "- Back squat 4x8",
            "- **Romanian deadlift**: 3 x 10–12",
            "- rest well",
            "## Dzień 2 — Czwartek",
            "1. Flat bench press 4x6",
            "2. Cable fly 3x15",
        ]
    )
    plan = parse_plan_text(text, lang="pl", name="Plan")
    assert plan.source == "text"
    assert len(plan.days) == 7
    monday, thursday = plan.days[0], plan.days[3]
    assert [row.exercise_name for row in monday.exercises] == ["Back squat", "Romanian deadlift"]
    assert monday.exercises[1].reps == "10-12"
    assert [row.sets for row in thursday.exercises] == [4, 3]
    assert len(plan.training_days) == 2


def test_parse_plan_text_without_days_returns_empty_plan() -> None:
    plan = parse_plan_text("Just eat well and sleep.", name="x")
    assert plan.days == []


def test_formatted_text_parses_back() -> None:
    plan = generate_rule_plan(PlanInputs(sessions_per_week=3, lang="en"))
    parsed = parse_plan_text(format_plan_text(plan, "en"), lang="en")
    assert parsed.exercise_names() == plan.exercise_names()
    assert [day.name for day in parsed.training_days] == [day.name for day in plan.training_days]
