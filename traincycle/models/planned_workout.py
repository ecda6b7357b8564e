"""Planned workout templates that make up a user's split."""
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from traincycle.db.database import Base


class UserPlannedWorkout(Base):
    """One session template of a split, addressed by its zero-based ``session_index``.

    ``exercises`` is a JSON list of ``{"exercise_id": int, "overrides": {}}``
    entries; read and write it through ``PlannedExerciseRef``.
    """
    __tablename__ = "user_planned_workouts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    split_id = Column(Integer, nullable=False)
    session_index = Column(Integer, nullable=False)
    title = Column(String(200), nullable=True)
    exercises = Column(JSON, nullable=False, default=list)
    details = Column(JSON, nullable=False, default=dict)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "split_id", "session_index", name="uq_planned_workout_slot"),
    )

    def __repr__(self):
        return (
            f"<UserPlannedWorkout(id={self.id}, split_id={self.split_id}, "
            f"session_index={self.session_index})>"
        )
