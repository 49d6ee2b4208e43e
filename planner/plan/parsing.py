from __future__ import annotations

import json
import re
import unicodedata
from typing import Any, List, Optional

from pydantic import ValidationError

from planner.config.constants import WEEKDAYS
from planner.errors import PlanParseError
from planner.plan.exercise_bank import canonical_name
from planner.plan.models import Day, ExerciseRow, Plan

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")
_BULLET_RE = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+(.+)$")
_DAY_NUMBER_RE = re.compile(r"^(?:#+\s*)?(?:\*\*)?\s*(?:dzie[nń]|day)\s*\d+", re.IGNORECASE)
_EXERCISE_RE = re.compile(
    r"^(?P<name>.+?)\s*[:—–-]?\s*(?P<sets>\d+)\s*[x×X]\s*(?P<reps>\d+(?:\s*[–-]\s*\d+)?)"
)


def _fold(text: str) -> str:
    text = text.lower().replace("ł", "l")
    normalized = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in normalized if not unicodedata.combining(ch))


_WEEKDAY_KEYS = [
    [_fold(WEEKDAYS["pl"][index]), _fold(WEEKDAYS["en"][index])] for index in range(7)
]


def weekday_index(text: str) -> Optional[int]:
    folded = _fold(text or "")
    for index, keys in enumerate(_WEEKDAY_KEYS):
        if any(key in folded for key in keys):
            return index
    return None


def extract_json_object(text: str) -> Any:
    raw = (text or "").strip()
    if not raw:
        raise PlanParseError("Model returned empty content.")
    cleaned = _FENCE_RE.sub("", raw).strip()
    try:
        return json.loads(cleaned)
    except ValueError:
        pass
    match = re.search(r"\{.*\}", cleaned, re.DOTALL)
    if not match:
        raise PlanParseError("Model did not return JSON.")
    try:
        return json.loads(match.group(0))
    except ValueError as exc:
        snippet = cleaned[:200].replace("\n", " ")
        raise PlanParseError(f"Model returned invalid JSON: {snippet}") from exc


def _place_on_week(days: List[Day], lang: str) -> List[Day]:
    if len(days) > 7:
        raise PlanParseError(f"Plan has {len(days)} days; a week has 7.")
    names = WEEKDAYS.get(lang, WEEKDAYS["pl"])
    week: List[Optional[Day]] = [None] * 7
    unplaced: List[Day] = []
    for day in days:
        index = weekday_index(day.name)
        if index is None or week[index] is not None:
            unplaced.append(day)
            continue
        week[index] = day
    free = [index for index in range(7) if week[index] is None]
    for index, day in zip(free, unplaced):
        week[index] = day
    placed: List[Day] = []
    for index, day in enumerate(week):
        if day is None:
            placed.append(Day(name=names[index]))
            continue
        day.name = names[index]
        placed.append(day)
    return placed


def plan_from_llm_json(text: str, lang: str = "pl", name: Optional[str] = None) -> Plan:
    data = extract_json_object(text)
    if isinstance(data, list):
        data = {"days": data}
    if not isinstance(data, dict):
        raise PlanParseError("Model JSON must be an object with a days list.")
    try:
        plan = Plan.from_dict(data, source="llm")
    except ValidationError as exc:
        problem = exc.errors()[0]
        where = ".".join(str(part) for part in problem["loc"])
        raise PlanParseError(f"Model JSON has an invalid {where}: {problem['msg']}") from exc
    if not plan.days:
        raise PlanParseError("Model JSON has no days.")
    for day in plan.days:
        for row in day.exercises:
            row.exercise_name = canonical_name(row.exercise_name) or row.exercise_name
    plan.days = _place_on_week(plan.days, lang)
    if name:
        plan.name = name
    return plan


def _parse_exercise_line(line: str) -> Optional[ExerciseRow]:
    cleaned = line.replace("**", "").strip()
    match = _EXERCISE_RE.match(cleaned)
    if not match:
        return None
    exercise = match.group("name").strip(" :—–-")
    if not exercise:
        return None
    reps_text = re.sub(r"\s*[–-]\s*", "-", match.group("reps"))
    reps: Any = int(reps_text) if reps_text.isdigit() else reps_text
    return ExerciseRow(
        exercise_name=canonical_name(exercise) or exercise,
        sets=int(match.group("sets")),
        reps=reps,
    )


def _is_day_heading(line: str) -> bool:
    stripped = line.strip().lstrip("#").replace("**", "").strip()
    if not stripped:
        return False
    if _DAY_NUMBER_RE.match(stripped):
        return True
    if weekday_index(stripped) is None:
        return False
    bullet = _BULLET_RE.match(stripped)
    body = bullet.group(1) if bullet else stripped
    return _parse_exercise_line(body) is None


def parse_plan_text(text: str, lang: str = "pl", name: str = "") -> Plan:
    """Pull day headings and "name SETSxREPS" bullet lines out of a free-text plan."""
    days: List[Day] = []
    current: Optional[Day] = None
    for line in (text or "").splitlines():
        if _is_day_heading(line):
            heading = line.strip().lstrip("#").replace("**", "").strip()
            current = Day(name=heading)
            days.append(current)
            continue
        if current is None:
            continue
        bullet = _BULLET_RE.match(line)
        if not bullet:
            continue
        row = _parse_exercise_line(bullet.group(1))
        if row is not None:
            current.exercises.append(row)
    training = [day for day in days if day.exercises]
    return Plan(name=name, days=_place_on_week(training[:7], lang) if training else [], source="text")


def format_plan_text(plan: Plan, lang: str = "pl") -> str:
    """Render a plan in the same heading/bullet layout ``parse_plan_text`` reads."""
    label = "Day" if lang == "en" else "Dzień"
    lines: List[str] = [plan.name] if plan.name else []
    for number, day in enumerate(plan.training_days, start=1):
        heading = f"{label} {number} — {day.name}"
        if day.focus:
            heading = f"{heading} ({day.focus})"
        lines.extend(["", heading])
        for row in day.exercises:
            line = f"- {row.exercise_name} {row.sets}x{row.reps}"
            extras = [value for value in (row.rest, f"RIR {row.rir}" if row.rir else None, row.tempo) if value]
            if extras:
                line = f"{line} ({', '.join(extras)})"
            lines.append(line)
    return "\n".join(lines).strip()
