"""Planned-workout exercise references and split templates."""
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class PlannedExerciseRef(BaseModel):
    """One exercise slot of a planned workout.

    Older rows stored either a bare exercise id or ``{"id": ..., **extra}``;
    both are normalized here so the rest of the code sees one shape.
    """
    model_config = ConfigDict(populate_by_name=True)

    exercise_id: int = Field(validation_alias=AliasChoices("exercise_id", "id"))
    overrides: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def normalize_shape(cls, data: Any) -> Any:
        if isinstance(data, int) and not isinstance(data, bool):
            return {"exercise_id": data}
        if isinstance(data, dict) and "overrides" not in data:
            ident_keys = {"id", "exercise_id"}
            return {
                "exercise_id": data.get("exercise_id", data.get("id")),
                "overrides": {k: v for k, v in data.items() if k not in ident_keys},
            }
        return data


def parse_planned_exercises(raw: list[Any] | None) -> list[PlannedExerciseRef]:
    return [PlannedExerciseRef.model_validate(item) for item in (raw or [])]


def dump_planned_exercises(refs: list[PlannedExerciseRef]) -> list[dict[str, Any]]:
    return [ref.model_dump(mode="json") for ref in refs]


class SplitSessionTemplate(BaseModel):
    """A session of a split as authored in the split catalog."""
    title: str | None = None
    main_muscles: list[str] = Field(default_factory=list)
    optional_muscles: list[str] = Field(default_factory=list)
