from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

Reps = Union[int, str]


def _finite(value: Any, label: str) -> float:
    try:
        number = float(value)
    except OverflowError as exc:
        raise ValueError(f"{label} is out of range") from exc
    if not math.isfinite(number):
        raise ValueError(f"{label} must be a finite number")
    return number


class ExerciseRow(BaseModel):
    exercise_name: str = Field(
        default="",
        validation_alias=AliasChoices("exercise", "exerciseName", "exercise_name", "name"),
        serialization_alias="exercise",
    )
    sets: int = Field(default=0, validation_alias=AliasChoices("sets", "series"))
    reps: Reps = Field(default="", validation_alias=AliasChoices("reps", "repetitions"))
    rest: Optional[str] = None
    rir: Optional[str] = None
    rpe: Optional[str] = None
    tempo: Optional[str] = None
    comment: Optional[str] = None
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("exercise_name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> str:
        if value is None:
            return ""
        if not isinstance(value, (str, int, float)) or isinstance(value, bool):
            raise ValueError("exercise name must be text")
        return str(value).strip()

    @field_validator("sets", mode="before")
    @classmethod
    def _coerce_sets(cls, value: Any) -> int:
        if value is None or value == "":
            return 0
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise ValueError("sets must be a number")
        return max(0, int(_finite(value, "sets")))

    @field_validator("reps", mode="before")
    @classmethod
    def _coerce_reps(cls, value: Any) -> Reps:
        if isinstance(value, bool):
            return str(value)
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            number = _finite(value, "reps")
            return int(number) if number.is_integer() else str(number)
        if value is not None and not isinstance(value, str):
            raise ValueError("reps must be a number or text")
        text = (value or "").strip()
        if text.isdigit():
            return int(text)
        return text

    @field_validator("rest", "rir", "rpe", "tempo", "comment", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError("value must be a finite number")
        text = str(value).strip()
        return text or None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExerciseRow":
        return cls.model_validate(data)


class Day(BaseModel):
    name: str = Field(default="", validation_alias=AliasChoices("name", "day", "title"))
    focus: Optional[str] = None
    exercises: List[ExerciseRow] = Field(default_factory=list)
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> str:
        return str(value if value is not None else "").strip()

    @field_validator("focus", mode="before")
    @classmethod
    def _strip_focus(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return str(value).strip() or None

    @field_validator("exercises", mode="before")
    @classmethod
    def _default_exercises(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def is_rest(self) -> bool:
        return not self.exercises

    @property
    def title(self) -> str:
        if self.focus:
            return f"{self.name} · {self.focus}"
        return self.name

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Day":
        return cls.model_validate(data)


class Plan(BaseModel):
    name: str = Field(
        default="",
        validation_alias=AliasChoices("planName", "name", "title"),
        serialization_alias="planName",
    )
    source: str = "rules"
    seed: Optional[int] = None
    days: List[Day] = Field(default_factory=list, validation_alias=AliasChoices("days", "plan"))
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> str:
        return str(value if value is not None else "").strip()

    @field_validator("seed", mode="before")
    @classmethod
    def _int_seed(cls, value: Any) -> Optional[int]:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return None

    @field_validator("days", mode="before")
    @classmethod
    def _default_days(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def training_days(self) -> List[Day]:
        return [day for day in self.days if not day.is_rest]

    def exercise_names(self) -> List[str]:
        return [row.exercise_name for day in self.training_days for row in day.exercises]

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: str = "llm") -> "Plan":
        return cls.model_validate({**data, "source": source})
