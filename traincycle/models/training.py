"""Training session, its exercises and their sets."""
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    text,
)
from sqlalchemy.orm import relationship

from traincycle.db.database import Base
from traincycle.models.context import (
    SessionContext,
    context_from_columns,
    context_to_columns,
)


class TrainingSession(Base):
    """A concrete workout the user is doing or has done.

    Open while ``end_time`` is null. At most one open session exists per user
    and context; ``context_key`` is the canonical form of the context and is
    what the partial unique index below is built on.
    """
    __tablename__ = "training_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Context columns, written only through the ``context`` property.
    split_id = Column(Integer, nullable=True)
    session_index = Column(Integer, nullable=True)
    session_id = Column(Integer, nullable=True)
    punctual_id = Column(Integer, nullable=True)
    routine_id = Column(Integer, nullable=True)
    context_key = Column(String(64), nullable=False, default="free")

    start_time = Column(DateTime, nullable=True)
    end_time = Column(DateTime, nullable=True)

    # Summary, filled on finalize
    volume = Column(Float, nullable=True)
    calories_burned = Column(Integer, nullable=True)
    muscles_worked = Column(JSON, nullable=True)
    performance_data = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    exercises = relationship(
        "TrainingExercise",
        back_populates="training",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="[TrainingExercise.position, TrainingExercise.id]",
    )

    __table_args__ = (
        Index("ix_training_sessions_user_split_end", "user_id", "split_id", "end_time"),
        Index(
            "uq_training_sessions_open_context",
            "user_id",
            "context_key",
            unique=True,
            postgresql_where=text("end_time IS NULL"),
            sqlite_where=text("end_time IS NULL"),
        ),
    )

    @property
    def context(self) -> SessionContext:
        return context_from_columns(self)

    @context.setter
    def context(self, value: SessionContext) -> None:
        for name, column_value in context_to_columns(value).items():
            setattr(self, name, column_value)

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    @property
    def is_started(self) -> bool:
        return self.start_time is not None

    def __repr__(self):
        return (
            f"<TrainingSession(id={self.id}, user_id={self.user_id}, "
            f"context={self.context_key!r}, open={self.is_open})>"
        )


class TrainingExercise(Base):
    """A session-scoped instance of a catalog exercise."""
    __tablename__ = "training_exercises"

    id = Column(Integer, primary_key=True, index=True)
    training_id = Column(
        Integer,
        ForeignKey("training_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    exercise_id = Column(Integer, ForeignKey("exercises.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    performance_data = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    training = relationship("TrainingSession", back_populates="exercises")
    exercise = relationship("Exercise")
    series = relationship(
        "ExerciseSeries",
        back_populates="training_exercise",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="[ExerciseSeries.is_warmup.desc(), ExerciseSeries.order]",
    )

    def __repr__(self):
        return (
            f"<TrainingExercise(id={self.id}, training_id={self.training_id}, "
            f"exercise_id={self.exercise_id})>"
        )


class ExerciseSeries(Base):
    """One set. Keyed by its exercise, its position and its warm-up partition.

    ``timestamp`` is null until the user marks the set done.
    """
    __tablename__ = "exercise_series"

    training_exercise_id = Column(
        Integer,
        ForeignKey("training_exercises.id", ondelete="CASCADE"),
        primary_key=True,
    )
    order = Column("order", Integer, primary_key=True)
    is_warmup = Column(Boolean, primary_key=True, default=False)

    reps = Column(Integer, nullable=True)
    weight = Column(Float, nullable=True)
    time_seconds = Column(Integer, nullable=True)
    distance = Column(Float, nullable=True)
    timestamp = Column(DateTime, nullable=True)
    record = Column(JSON, nullable=True)

    training_exercise = relationship("TrainingExercise", back_populates="series")

    @property
    def is_completed(self) -> bool:
        return self.timestamp is not None

    def __repr__(self):
        return (
            f"<ExerciseSeries(te={self.training_exercise_id}, order={self.order}, "
            f"warmup={self.is_warmup}, reps={self.reps}, weight={self.weight})>"
        )
