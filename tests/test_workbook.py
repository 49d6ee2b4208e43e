import base64
import io

import pytest
from openpyxl import load_workbook

from planner.config.constants import COLUMN_LABELS
from planner.export.workbook import (
    LAYOUT_SHEETS,
    LAYOUT_SINGLE,
    build_workbook,
    read_workbook,
    workbook_base64,
    workbook_bytes,
)
from planner.plan.models import Day, ExerciseRow, Plan
from planner.plan.plan_generation import PlanInputs, generate_rule_plan


@pytest.fixture
def plan() -> Plan:
    return generate_rule_plan(PlanInputs(sessions_per_week=3, goal="hypertrophy"), seed=3)


@pytest.mark.parametrize("layout", [LAYOUT_SHEETS, LAYOUT_SINGLE])
def test_workbook_round_trip(plan: Plan, layout: str) -> None:
    restored = read_workbook(workbook_bytes(build_workbook(plan, lang="pl", layout=layout)))
    assert restored.name == plan.name
    assert [day.to_dict() for day in restored.days] == [day.to_dict() for day in plan.training_days]


def test_one_sheet_per_training_day(plan: Plan) -> None:
    wb = build_workbook(plan, lang="pl", layout=LAYOUT_SHEETS)
    assert wb.sheetnames == [day.name for day in plan.training_days]
    ws = wb[plan.training_days[0].name]
    assert ws["A1"].value == plan.training_days[0].title
    assert [cell.value for cell in ws[2]] == COLUMN_LABELS["pl"]
    assert ws["A1"].font.bold
    assert ws.freeze_panes == "A3"


def test_single_sheet_separates_days_with_blank_row(plan: Plan) -> None:
    wb = build_workbook(plan, lang="en", layout=LAYOUT_SINGLE)
    assert len(wb.sheetnames) == 1
    ws = wb.active
    first = plan.training_days[0]
    blank_row = 2 + len(first.exercises) + 1
    assert all(cell.value is None for cell in ws[blank_row])
    assert ws.cell(row=blank_row + 1, column=1).value == plan.training_days[1].title
    assert ws.cell(row=2, column=1).value == "EXERCISE"


def test_base64_output_is_a_valid_xlsx(plan: Plan) -> None:
    data = base64.b64decode(workbook_base64(plan, lang="en"))
    wb = load_workbook(io.BytesIO(data))
    assert len(wb.worksheets) == 3


def test_text_reps_and_long_names_survive() -> None:
    long_name = "Sobota: trening/obwód [A]"
    plan = Plan(
        name="Custom",
        days=[
            Day(
                name=long_name,
                focus=None,
                exercises=[ExerciseRow(exercise_name="Nordic curl", sets=3, reps="6-8", comment="slow eccentric")],
            )
        ],
    )
    wb = build_workbook(plan, layout=LAYOUT_SHEETS)
    assert wb.sheetnames == ["Sobota treningobwód A"]
    restored = read_workbook(workbook_bytes(wb))
    row = restored.days[0].exercises[0]
    assert restored.days[0].name == long_name
    assert row.reps == "6-8"
    assert row.comment == "slow eccentric"
    assert row.rest is None


def test_formula_like_text_stays_literal() -> None:
    plan = Plan(
        name="Custom",
        days=[
            Day(
                name="=Monday",
                exercises=[ExerciseRow(exercise_name="=SUM(A1:A3)", sets=3, reps="=8", comment="=1+1")],
            )
        ],
    )
    wb = build_workbook(plan, layout=LAYOUT_SINGLE)
    assert wb.active["A1"].data_type == "s"
    assert wb.active["A3"].data_type == "s"
    restored = read_workbook(workbook_bytes(wb))
    row = restored.days[0].exercises[0]
    assert restored.days[0].name == "=Monday"
    assert (row.exercise_name, row.reps, row.comment) == ("=SUM(A1:A3)", "=8", "=1+1")
