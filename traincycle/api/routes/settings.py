"""API routes for user training settings."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from traincycle.api.routes.dependencies import get_current_user_id
from traincycle.db.database import get_db
from traincycle.schemas.settings import RestTimePreferences, UserPreferences, WarmupPreferences
from traincycle.services.user_settings import UserSettingsService

router = APIRouter()


class UserSettingsResponse(BaseModel):
    fitness_goal: str | None = None
    selected_split_id: int | None = None
    preferences: UserPreferences


class PreferencesUpdate(BaseModel):
    workout_duration: int | None = Field(default=None, ge=1)
    rest_time: RestTimePreferences | None = None
    warmup_sets: WarmupPreferences | None = None


class GoalUpdate(BaseModel):
    goal: str


class SplitSelection(BaseModel):
    split_id: int | None = None


class RestTimeUpdate(BaseModel):
    seconds: int | None = Field(default=None, ge=0)


async def _settings_response(service: UserSettingsService, user_id: int) -> UserSettingsResponse:
    user_settings = await service.get_settings(user_id)
    preferences = await service.get_preferences(user_id)
    return UserSettingsResponse(
        fitness_goal=user_settings.fitness_goal,
        selected_split_id=user_settings.selected_split_id,
        preferences=preferences,
    )


@router.get("", response_model=UserSettingsResponse)
async def get_user_settings(
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return await _settings_response(UserSettingsService(db), user_id)


@router.patch("/preferences", response_model=UserPreferences)
async def update_preferences(
    update: PreferencesUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    changes = update.model_dump(exclude_unset=True, exclude_none=True)
    return await UserSettingsService(db).update_preferences(user_id, changes)


@router.put("/goal", response_model=UserSettingsResponse)
async def set_goal(
    update: GoalUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    service = UserSettingsService(db)
    await service.set_fitness_goal(user_id, update.goal)
    return await _settings_response(service, user_id)


@router.put("/split", response_model=UserSettingsResponse)
async def select_split(
    selection: SplitSelection,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    service = UserSettingsService(db)
    await service.select_split(user_id, selection.split_id)
    return await _settings_response(service, user_id)


@router.post("/excluded-exercises/{exercise_id}")
async def exclude_exercise(
    exercise_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    added = await UserSettingsService(db).exclude_exercise(user_id, exercise_id)
    return {"exercise_id": exercise_id, "added": added}


@router.put("/rest-times/{exercise_id}", response_model=UserPreferences)
async def set_rest_time(
    exercise_id: int,
    update: RestTimeUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return await UserSettingsService(db).set_custom_rest_time(user_id, exercise_id, update.seconds)
