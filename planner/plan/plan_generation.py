from __future__ import annotations

import hashlib
import json
import math
import random
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Optional, Set

from loguru import logger

from planner.config.constants import WEEKDAYS
from planner.plan import exercise_bank
from planner.plan.exercise_bank import DAY_TEMPLATES, LEG_DAY_TYPES, day_type_label, exercises_for
from planner.plan.exercise_utils import _is_compound_exercise
from planner.plan.models import Day, ExerciseRow, Plan
from planner.plan.validation import MAX_EXERCISES_PER_DAY, is_diverse

DEFAULT_SESSIONS = 3
MAX_ATTEMPTS = 5

SPLITS = {
    1: ["FULL"],
    2: ["UPPER", "LOWER"],
    3: ["PUSH", "PULL", "LEGS"],
    4: ["UPPER", "LOWER", "UPPER", "LOWER"],
    5: ["PUSH", "PULL", "LEGS", "UPPER", "LOWER"],
    6: ["PUSH", "PULL", "LEGS", "PUSH", "PULL", "LEGS"],
    7: ["PUSH", "PULL", "LEGS", "UPPER", "LOWER", "FULL", "GLUTES"],
}

# Lower-body-biased splits used for female inputs.
FEMALE_SPLITS = {
    1: ["FULL"],
    2: ["LOWER", "UPPER"],
    3: ["LEGS", "UPPER", "GLUTES"],
    4: ["LEGS", "UPPER", "GLUTES", "FULL"],
    5: ["LEGS", "UPPER", "GLUTES", "PULL", "LOWER"],
    6: ["LEGS", "UPPER", "GLUTES", "PUSH", "LOWER", "PULL"],
    7: ["LEGS", "UPPER", "GLUTES", "PUSH", "LOWER", "PULL", "FULL"],
}

# Weekday indexes (Monday = 0) used for each weekly frequency.
SCHEDULE = {
    1: [0],
    2: [0, 3],
    3: [0, 2, 4],
    4: [0, 1, 3, 4],
    5: [0, 1, 2, 4, 5],
    6: [0, 1, 2, 3, 4, 5],
    7: [0, 1, 2, 3, 4, 5, 6],
}

EXERCISES_PER_DAY = {"beginner": 5, "intermediate": 6, "advanced": 7}

# (compound reps, isolation reps)
REPS_BY_GOAL = {
    "hypertrophy": (10, 12),
    "general": (10, 12),
    "strength": (5, 8),
    "fat_loss": (12, 15),
}

COMPOUND_SETS = {"beginner": 3, "intermediate": 4, "advanced": 4}
ISOLATION_SETS = {"beginner": 3, "intermediate": 3, "advanced": 4}
RIR_BY_LEVEL = {"beginner": 3, "intermediate": 2, "advanced": 1}

WARMUP_COMMENT = {
    "pl": "2–3 serie rozgrzewkowe przed seriami roboczymi",
    "en": "2–3 warm-up sets before the working sets",
}


@dataclass(frozen=True)
class PlanInputs:
    sessions_per_week: int = DEFAULT_SESSIONS
    goal: str = "general"
    level: str = "intermediate"
    equipment: str = exercise_bank.GYM
    female: bool = False
    lang: str = "pl"

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple, set)):
        return " ".join(str(item) for item in value)
    return str(value)


def _extract_sessions(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    digits = "".join(ch if ch.isdigit() else " " for ch in _text(value)).split()
    if not digits:
        return None
    try:
        return int(digits[0])
    except ValueError:
        return None


def _normalize_goal(value: Any) -> str:
    text = _text(value).lower()
    if any(key in text for key in ("strength", "sił", "sil", "power", "moc")):
        return "strength"
    if any(key in text for key in ("fat", "loss", "reduk", "odchud", "schud", "cut", "spal", "kondyc", "endur")):
        return "fat_loss"
    if any(key in text for key in ("hyper", "mas", "muscle", "mięś", "miesn", "build", "sylwet")):
        return "hypertrophy"
    return "general"


def _normalize_level(value: Any) -> str:
    text = _text(value).lower()
    # "średniozaawansowany" contains "zaawans", so intermediate is checked first
    if any(key in text for key in ("inter", "średnio", "srednio", "mid")):
        return "intermediate"
    if any(key in text for key in ("begin", "począt", "poczat", "novice", "nowicj", "start")):
        return "beginner"
    if any(key in text for key in ("advan", "zaawans", "expert", "pro")):
        return "advanced"
    return "intermediate"


def _normalize_equipment(value: Any) -> str:
    text = _text(value).lower()
    if any(key in text for key in ("siłown", "silown", "gym", "barbell", "sztang", "maszyn", "machine")):
        return exercise_bank.GYM
    if any(key in text for key in ("hantl", "dumbbell", "kettle")):
        return exercise_bank.DUMBBELLS
    if any(key in text for key in ("body", "ciała", "ciala", "bez ", "none", "brak", "kalisten", "calisth", "dom", "home")):
        return exercise_bank.BODYWEIGHT
    return exercise_bank.GYM


def _is_female(value: Any) -> bool:
    text = _text(value).strip().lower()
    if not text:
        return False
    if text.startswith(("female", "kobieta", "woman", "women")):
        return True
    return text in {"k", "f", "w", "kobieta", "female", "woman"}


def _normalize_lang(value: Any) -> str:
    return "en" if _text(value).lower().startswith("en") else "pl"


def normalize_inputs(raw: Optional[Dict[str, Any]], lang: Optional[str] = None) -> PlanInputs:
    raw = raw or {}
    sessions = None
    for key in ("sessionsPerWeek", "sessions_per_week", "sessions", "daysPerWeek", "days", "freq"):
        if raw.get(key) not in (None, ""):
            sessions = _extract_sessions(raw.get(key))
            if sessions is not None:
                break
    if sessions is None:
        sessions = DEFAULT_SESSIONS
    sessions = min(7, max(1, sessions))
    return PlanInputs(
        sessions_per_week=sessions,
        goal=_normalize_goal(raw.get("goal")),
        level=_normalize_level(raw.get("level")),
        equipment=_normalize_equipment(raw.get("equipment")),
        female=_is_female(raw.get("gender") if raw.get("gender") is not None else raw.get("sex")),
        lang=_normalize_lang(lang if lang is not None else raw.get("lang")),
    )


def _seed_from_inputs(inputs: PlanInputs) -> int:
    digest = hashlib.sha256(json.dumps(inputs.as_dict(), sort_keys=True).encode("utf-8")).hexdigest()
    return int(digest[:8], 16)


def split_for(inputs: PlanInputs) -> List[str]:
    table = FEMALE_SPLITS if inputs.female else SPLITS
    return list(table[inputs.sessions_per_week])


def lower_body_sessions(inputs: PlanInputs) -> int:
    return sum(1 for day_type in split_for(inputs) if day_type in LEG_DAY_TYPES)


def _exercises_per_day(inputs: PlanInputs) -> int:
    count = EXERCISES_PER_DAY[inputs.level]
    if inputs.sessions_per_week <= 2:
        count += 1
    return min(count, MAX_EXERCISES_PER_DAY)


class _ExercisePicker:
    """Walks a shuffled pool per category, tracking names used during the week."""

    def __init__(self, equipment: str, rng: random.Random) -> None:
        self.equipment = equipment
        self.rng = rng
        self._order: Dict[str, List[str]] = {}
        self._used: Dict[str, Set[str]] = {}

    def _pool(self, category: str) -> List[str]:
        if category not in self._order:
            pool = exercises_for(category, self.equipment)
            self._order[category] = self.rng.sample(pool, len(pool))
            self._used[category] = set()
        return self._order[category]

    def pick(self, category: str, exclude: Iterable[str] = ()) -> str:
        order = self._pool(category)
        used = self._used[category]
        excluded = set(exclude)
        candidates = [name for name in order if name not in used and name not in excluded]
        if not candidates:
            used.clear()
            candidates = [name for name in order if name not in excluded] or order
        name = candidates[0]
        used.add(name)
        return name


def _build_row(name: str, inputs: PlanInputs, first: bool) -> ExerciseRow:
    compound = _is_compound_exercise(name)
    compound_reps, isolation_reps = REPS_BY_GOAL[inputs.goal]
    if compound:
        sets = COMPOUND_SETS[inputs.level] + (1 if inputs.goal == "strength" and inputs.level != "beginner" else 0)
        reps = compound_reps
    else:
        sets = ISOLATION_SETS[inputs.level]
        reps = isolation_reps
    if inputs.goal == "strength" and compound:
        rest = "3 min"
    elif inputs.goal == "fat_loss":
        rest = "90 s" if compound else "60 s"
    else:
        rest = "2 min" if compound else "90 s"
    rir = RIR_BY_LEVEL[inputs.level]
    tempo = "3-0-1-0" if compound else "2-0-1-1"
    return ExerciseRow(
        exercise_name=name,
        sets=sets,
        reps=reps,
        rest=rest,
        rir=str(rir),
        rpe=str(10 - rir),
        tempo=tempo,
        comment=WARMUP_COMMENT[inputs.lang] if first and compound else None,
    )


def _plan_name(inputs: PlanInputs) -> str:
    if inputs.lang == "en":
        return f"Training plan – {inputs.sessions_per_week}x per week"
    return f"Plan treningowy – {inputs.sessions_per_week}x w tygodniu"


def build_rule_plan(inputs: PlanInputs, rng: random.Random, seed: Optional[int] = None) -> Plan:
    weekday_names = WEEKDAYS[inputs.lang]
    day_types = split_for(inputs)
    slots = SCHEDULE[inputs.sessions_per_week]
    per_day = _exercises_per_day(inputs)
    picker = _ExercisePicker(inputs.equipment, rng)
    days = [Day(name=name) for name in weekday_names]
    for weekday_index, day_type in zip(slots, day_types):
        day = days[weekday_index]
        day.focus = day_type_label(day_type, inputs.lang)
        chosen: List[str] = []
        for category in DAY_TEMPLATES[day_type][:per_day]:
            chosen.append(picker.pick(category, exclude=chosen))
        day.exercises = [_build_row(name, inputs, first=index == 0) for index, name in enumerate(chosen)]
    return Plan(name=_plan_name(inputs), days=days, source="rules", seed=seed)


def generate_rule_plan(
    raw_inputs: Any,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    max_attempts: int = MAX_ATTEMPTS,
) -> Plan:
    inputs = raw_inputs if isinstance(raw_inputs, PlanInputs) else normalize_inputs(raw_inputs)
    base_seed = seed if seed is not None else _seed_from_inputs(inputs)
    plan: Optional[Plan] = None
    for attempt in range(max(1, max_attempts)):
        current_seed = base_seed + attempt
        generator = rng if rng is not None else random.Random(current_seed)
        plan = build_rule_plan(inputs, generator, seed=None if rng is not None else current_seed)
        if is_diverse(plan):
            return plan
        logger.debug(f"Rule plan attempt {attempt + 1} not diverse enough, regenerating")
    logger.warning(f"Accepting rule plan after {max_attempts} attempts without passing the diversity check")
    return plan
