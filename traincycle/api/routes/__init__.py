"""API routes module."""
from traincycle.api.routes.settings import router as settings_router
from traincycle.api.routes.training import router as training_router
from traincycle.api.routes.workouts import router as workouts_router

__all__ = [
    "settings_router",
    "training_router",
    "workouts_router",
]
