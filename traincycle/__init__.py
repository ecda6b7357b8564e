"""TrainCycle training-session lifecycle and progressive workout generation service."""

__version__ = "0.1.0"
