"""
Tagged session context.

A TrainingSession belongs to exactly one logical slot. The slot used to be
spread over four nullable columns; here it is one of four variants, each of
which knows its column mapping and its canonical key. Equality between
contexts is plain dataclass equality.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from traincycle.models.enums import ContextKind

CONTEXT_COLUMNS = ("split_id", "session_index", "session_id", "punctual_id", "routine_id")


@dataclass(frozen=True)
class SplitContext:
    split_id: int
    session_index: int

    kind = ContextKind.SPLIT

    @property
    def key(self) -> str:
        return f"split:{self.split_id}:{self.session_index}"

    def columns(self) -> dict[str, Any]:
        return {"split_id": self.split_id, "session_index": self.session_index}


@dataclass(frozen=True)
class RoutineContext:
    session_id: int
    # Stored alongside the session for display; not part of identity.
    routine_id: int | None = field(default=None, compare=False)

    kind = ContextKind.ROUTINE

    @property
    def key(self) -> str:
        return f"routine:{self.session_id}"

    def columns(self) -> dict[str, Any]:
        return {"session_id": self.session_id, "routine_id": self.routine_id}


@dataclass(frozen=True)
class PunctualContext:
    punctual_id: int

    kind = ContextKind.PUNCTUAL

    @property
    def key(self) -> str:
        return f"punctual:{self.punctual_id}"

    def columns(self) -> dict[str, Any]:
        return {"punctual_id": self.punctual_id}


@dataclass(frozen=True)
class FreeContext:
    kind = ContextKind.FREE

    @property
    def key(self) -> str:
        return "free"

    def columns(self) -> dict[str, Any]:
        return {}


SessionContext = Union[SplitContext, RoutineContext, PunctualContext, FreeContext]


def context_to_columns(context: SessionContext) -> dict[str, Any]:
    """Full column mapping for a context: its own fields set, every other one null."""
    values: dict[str, Any] = {name: None for name in CONTEXT_COLUMNS}
    values.update(context.columns())
    values["context_key"] = context.key
    return values


def build_context(
    split_id: int | None = None,
    session_index: int | None = None,
    session_id: int | None = None,
    punctual_id: int | None = None,
    routine_id: int | None = None,
) -> SessionContext:
    """Pick a context from loosely-shaped input.

    Precedence: split (needs both split_id and session_index), then routine
    session, then punctual, otherwise free.
    """
    if split_id is not None and session_index is not None:
        return SplitContext(split_id=split_id, session_index=session_index)
    if session_id is not None:
        return RoutineContext(session_id=session_id, routine_id=routine_id)
    if punctual_id is not None:
        return PunctualContext(punctual_id=punctual_id)
    return FreeContext()


def context_from_columns(row: Any) -> SessionContext:
    """Rebuild the context of a persisted row (anything with the context attributes)."""
    return build_context(
        split_id=getattr(row, "split_id", None),
        session_index=getattr(row, "session_index", None),
        session_id=getattr(row, "session_id", None),
        punctual_id=getattr(row, "punctual_id", None),
        routine_id=getattr(row, "routine_id", None),
    )
