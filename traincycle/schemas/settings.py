"""Typed user preferences stored on ``UserSettings.preferences``."""
from datetime import datetime, timezone
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from traincycle.config import training_rules
from traincycle.core.logging import get_logger

PREFERENCES_VERSION = 1

logger = get_logger(__name__)


class RestTimePreferences(BaseModel):
    enabled: bool = True
    compound: int = Field(default=training_rules.default_rest_time_compound, ge=0, le=600)
    isolation: int = Field(default=training_rules.default_rest_time_isolation, ge=0, le=600)


class WarmupPreferences(BaseModel):
    enabled: bool = True
    compound: int = Field(default=training_rules.default_warmup_sets_compound, ge=0)
    isolation: int = Field(default=training_rules.default_warmup_sets_isolation, ge=0)


class SkipRecord(BaseModel):
    """The user skipped ``session_index`` of a split (or routine) at ``skipped_at``.

    Accepts the legacy ``split`` / ``routine`` / ``session`` keys on input.
    """
    model_config = ConfigDict(populate_by_name=True)

    split_id: int | None = Field(default=None, validation_alias=AliasChoices("split_id", "split"))
    routine_id: int | None = Field(default=None, validation_alias=AliasChoices("routine_id", "routine"))
    session_index: int = Field(validation_alias=AliasChoices("session_index", "session"))
    skipped_at: datetime

    @field_validator("skipped_at")
    @classmethod
    def to_naive_utc(cls, v: datetime) -> datetime:
        """Session timestamps are naive UTC; keep skips comparable with them."""
        if v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @model_validator(mode="after")
    def exactly_one_context(self) -> "SkipRecord":
        if (self.split_id is None) == (self.routine_id is None):
            raise ValueError("A skip belongs to exactly one of split_id or routine_id")
        return self

    def same_context(self, split_id: int | None, routine_id: int | None) -> bool:
        if split_id is not None:
            return self.split_id == split_id
        return self.routine_id == routine_id


class UserPreferences(BaseModel):
    """Versioned preference document; mutate it only through ``UserSettingsService``."""
    model_config = ConfigDict(extra="ignore")

    version: int = PREFERENCES_VERSION
    workout_duration: int = Field(default=training_rules.default_workout_duration_minutes, ge=1)
    rest_time: RestTimePreferences = Field(default_factory=RestTimePreferences)
    warmup_sets: WarmupPreferences = Field(default_factory=WarmupPreferences)
    custom_timers: dict[int, int] = Field(default_factory=dict)
    excluded_exercises: list[int] = Field(default_factory=list)
    skipped_sessions: list[SkipRecord] = Field(default_factory=list)

    @field_validator("skipped_sessions", mode="before")
    @classmethod
    def drop_unreadable_skips(cls, v: Any) -> Any:
        """A malformed skip entry only loses that skip, not the whole document."""
        if not isinstance(v, list):
            return []
        kept = []
        for raw in v:
            try:
                kept.append(SkipRecord.model_validate(raw))
            except ValidationError as e:
                logger.debug("skip_record_dropped", entry=raw, errors=e.error_count())
        return kept

    def record_skip(
        self,
        session_index: int,
        skipped_at: datetime,
        split_id: int | None = None,
        routine_id: int | None = None,
    ) -> SkipRecord:
        """Replace any earlier skip for the same split/routine with this one."""
        skip = SkipRecord(
            split_id=split_id,
            routine_id=routine_id,
            session_index=session_index,
            skipped_at=skipped_at,
        )
        self.skipped_sessions = [
            s for s in self.skipped_sessions
            if not s.same_context(split_id, routine_id)
        ]
        self.skipped_sessions.append(skip)
        return skip

    def last_skip_for_split(self, split_id: int) -> SkipRecord | None:
        skips = [s for s in self.skipped_sessions if s.split_id == split_id]
        if not skips:
            return None
        return max(skips, key=lambda s: s.skipped_at)

    def exclude_exercise(self, exercise_id: int) -> bool:
        """Returns False when the exercise was already excluded."""
        if exercise_id in self.excluded_exercises:
            return False
        self.excluded_exercises.append(exercise_id)
        return True

    def rest_time_for(self, exercise_id: int, compound: bool) -> int:
        custom = self.custom_timers.get(exercise_id)
        if custom is not None:
            return custom
        return self.rest_time.compound if compound else self.rest_time.isolation
