"""
Meal Planner User Endpoints
Current user, subscription status and dietary preferences
"""

from fastapi import APIRouter
from sqlalchemy import select
import structlog

from core.dependencies import Context, CurrentUser, DBSession
from middleware.logging import log_user_activity
from models.users import Preferences
from schemas.user_schemas import (
    PreferencesEnvelope,
    PreferencesResponse,
    PreferencesUpdate,
    UserResponse,
)

logger = structlog.get_logger()
router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: CurrentUser, context: Context):
    """Current user with the tier in effect and its limits"""
    return UserResponse(
        user_id=current_user.id,
        email=current_user.email,
        subscription_tier=context.tier.value,
        subscription_expires_at=current_user.subscription_expires_at,
        limits=context.limits.to_dict(),
    )


@router.get("/preferences", response_model=PreferencesEnvelope)
async def get_preferences(current_user: CurrentUser, db: DBSession):
    result = await db.execute(select(Preferences).where(Preferences.user_id == current_user.id))
    prefs = result.scalar_one_or_none()
    return PreferencesEnvelope(preferences=PreferencesResponse.model_validate(prefs) if prefs else None)


@router.post("/preferences", response_model=PreferencesEnvelope)
async def save_preferences(payload: PreferencesUpdate, current_user: CurrentUser, db: DBSession):
    """
    Create or update dietary preferences

    meals_per_day is not checked against the tier here; generation enforces it.
    """
    result = await db.execute(select(Preferences).where(Preferences.user_id == current_user.id))
    prefs = result.scalar_one_or_none()

    if prefs is None:
        prefs = Preferences(user_id=current_user.id)
        db.add(prefs)

    prefs.diet_type = payload.diet_type
    prefs.calorie_target = payload.calorie_target
    prefs.meals_per_day = payload.meals_per_day
    prefs.allergies = payload.allergies
    await db.flush()

    log_user_activity("preferences_saved", payload.model_dump())
    return PreferencesEnvelope(
        message="Preferences saved successfully",
        preferences=PreferencesResponse.model_validate(prefs),
    )
