from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Optional

from planner.plan.plan_generation import PlanInputs, lower_body_sessions

JSON_PLAN_SYSTEM_PROMPT = (
    "You are an experienced strength & conditioning coach. Return ONLY valid JSON with this schema:\n"
    '{"planName": string, "days": [{"name": weekday, "focus": string, "exercises": '
    '[{"exercise": string, "sets": int, "reps": int|string, "rest": string, "rir": string, '
    '"rpe": string, "tempo": string, "comment": string}]}]}\n'
    "Rules: exactly one entry per training day; 5 to 8 exercises per day; use only exercise names "
    "from the allowed list, spelled exactly as given; do not repeat the same day twice; "
    "compound lifts 8-10 reps, isolation 10-15 reps unless the goal is strength. No markdown."
)

_TEXT_PLAN_SYSTEM_PROMPT = """
You are an elite hybrid-training coach (strength, running, climbing, conditioning).
Write in language: {lang}. Be concise, practical, and structured.
This is NOT medical advice. If any pain/illness, recommend consulting a professional.

Output strictly as Markdown with these sections (use the language {lang} for headings):
1) Cel (Goal) — 1–3 bullets
2) Założenia i ograniczenia (Assumptions & constraints)
3) Tygodniowy rozkład (Weekly schedule) — one heading per training day, e.g. "Dzień 1 — Poniedziałek",
   followed by bullet lines "Exercise name SETSxREPS"
4) Objętość / Intensywność (Volume/Intensity) — sets×reps, RPE/pace/zone
5) Progresja (Progression) — microcycle + mesocycle, % changes week-to-week
6) Deload / Recovery — where and how to reduce volume/intensity
7) Modyfikacje (Modifications) — beginner / intermediate / advanced
8) Uwagi dot. kontuzji i bezpieczeństwa (Injury & safety notes)

Heuristics:
- Keep 24–48h between high-intensity stress on the same muscle group or system.
- Avoid conflicts (e.g., heavy lower-body strength day vs. intervals on the same/next day).
- Respect available time and equipment; prioritize main goal first.
- Include concrete prescriptions (RPE/zones/tempos), not vague text.
"""

_GOAL_LABELS = {
    "hypertrophy": "muscle growth (hypertrophy)",
    "strength": "maximal strength",
    "fat_loss": "fat loss / conditioning",
    "general": "general fitness",
}


def text_plan_system_prompt(lang: str = "pl") -> str:
    return _TEXT_PLAN_SYSTEM_PROMPT.format(lang="en" if lang == "en" else "pl").strip()


def build_json_plan_prompt(
    inputs: PlanInputs,
    vocabulary: Iterable[str],
    extra: Optional[Dict[str, Any]] = None,
) -> str:
    lines = [
        f"Training days per week: {inputs.sessions_per_week}",
        f"Goal: {_GOAL_LABELS.get(inputs.goal, inputs.goal)}",
        f"Level: {inputs.level}",
        f"Equipment: {inputs.equipment}",
        f"Gender: {'female' if inputs.female else 'male/unspecified'}",
        f"Language for day names and comments: {'English' if inputs.lang == 'en' else 'Polish'}",
    ]
    lower_days = lower_body_sessions(inputs) if inputs.female else 0
    if lower_days:
        lines.append(
            f"Bias the week toward lower-body (legs/glutes) sessions: "
            f"at least {lower_days} of {inputs.sessions_per_week} days."
        )
    if extra:
        notes = {key: value for key, value in extra.items() if value not in (None, "", [], {})}
        if notes:
            lines.append(f"Additional answers: {json.dumps(notes, ensure_ascii=False)}")
    lines.append("Allowed exercises: " + ", ".join(vocabulary))
    return "\n".join(lines)


def build_default_prompt(mode: str, inputs: Optional[Dict[str, Any]], lang: str = "pl") -> str:
    answers = json.dumps(inputs or {}, ensure_ascii=False)
    if lang == "en":
        length = "12-week" if mode == "A" else "4-week hybrid"
        return (
            f"You are an experienced S&C coach. Create a complete {length} plan following the formatting "
            f"rules, using allowed exercises only. Input data: {answers}."
        )
    length = "12 tygodni" if mode == "A" else "4 tygodnie hybrydowy"
    return (
        f"Jesteś doświadczonym trenerem S&C. Stwórz kompletny plan ({length}) zgodnie z zasadami "
        f"formatowania, tylko z dozwolonych ćwiczeń. Dane wejściowe: {answers}."
    )


def plan_title(mode: str, lang: str = "pl", title: Optional[str] = None) -> str:
    if title:
        return title
    if lang == "en":
        return "Training Plan (12 weeks)" if mode == "A" else "Hybrid Training Plan (4 weeks)"
    return "Plan Treningowy (12 tygodni)" if mode == "A" else "Hybrydowy Plan Treningowy (4 tygodnie)"
