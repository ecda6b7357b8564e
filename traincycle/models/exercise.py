"""Exercise catalog (read-only for the training engine)."""
from sqlalchemy import JSON, Boolean, Column, Integer, String

from traincycle.db.database import Base


class Exercise(Base):
    __tablename__ = "exercises"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    compound = Column(Boolean, default=False, nullable=False)
    equipment_required = Column(JSON, nullable=False, default=list)
    primary_muscle = Column(String(64), nullable=True, index=True)
    secondary_muscles = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, default=True, nullable=False)

    @property
    def equipment(self) -> list[str]:
        """Required equipment, lower-cased."""
        return [e.lower().strip() for e in (self.equipment_required or []) if e]

    @property
    def muscles(self) -> list[str]:
        """Primary muscle followed by secondary muscles."""
        secondary = self.secondary_muscles or []
        if isinstance(secondary, str):
            secondary = [secondary]
        muscles = [self.primary_muscle] if self.primary_muscle else []
        return muscles + [m for m in secondary if m]

    def __repr__(self):
        return f"<Exercise(id={self.id}, name={self.name!r}, compound={self.compound})>"
