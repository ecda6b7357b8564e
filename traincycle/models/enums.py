"""Enumerations shared by models, services and schemas."""
from enum import Enum


class Goal(str, Enum):
    """Training goal a user declares during onboarding."""
    STRENGTH = "strength"
    HYPERTROPHY = "hypertrophy"
    ENDURANCE = "endurance"
    FAT_LOSS = "fat_loss"
    GENERAL_FITNESS = "general_fitness"


class MovementClass(str, Enum):
    """Whether an exercise loads several joints or a single one."""
    COMPOUND = "compound"
    ISOLATION = "isolation"


class ContextKind(str, Enum):
    """Which logical slot a training session belongs to."""
    SPLIT = "split"
    ROUTINE = "routine"
    PUNCTUAL = "punctual"
    FREE = "free"
