"""Application configuration module.

This module organizes configuration into specialized files:

- **settings.py**: Environment-based settings (Pydantic BaseSettings)
  - Database URL, logging switches, default user for header-less requests
  - Loaded from .env file via pydantic-settings

- **training_rules.py**: Domain tables used by the training engine
  - Goal profiles (rep ranges, load percentage, set counts)
  - Default starting weights, progression factor, calorie estimate
  - Muscle priority matrix and timing constants for split generation
"""
from traincycle.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
