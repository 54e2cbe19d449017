"""
Meal Planner Meal Planning Endpoints
Weekly plan generation, retrieval, meal replacement and deletion
"""

from fastapi import APIRouter, status
import structlog

from core.dependencies import Context, DBSession, RecipeProvider
from core.exceptions import UpstreamFailure
from services.meal_planning_service import meal_planning_service
from services.meal_replacement_service import replace_meal
from schemas.meal_planning_schemas import (
    CurrentPlanResponse,
    GeneratePlanResponse,
    MealPlanItemResponse,
    MealPlanListResponse,
    MealPlanResponse,
    MessageResponse,
    ReplaceMealResponse,
)

logger = structlog.get_logger()
router = APIRouter()


@router.post("/generate", response_model=GeneratePlanResponse, status_code=status.HTTP_200_OK)
async def generate_meal_plan(context: Context, db: DBSession, provider: RecipeProvider):
    """
    Generate a weekly meal plan from the user's preferences

    Limited by tier: plan count and meals per day.
    """
    try:
        plan = await meal_planning_service.generate_plan(db, context, provider)
    except UpstreamFailure as e:
        if e.status_code < 500:
            raise
        logger.error("Generate meal plan error", user_id=context.user_id, error=e.message)
        raise UpstreamFailure("Failed to generate meal plan") from e

    return GeneratePlanResponse(
        message="Meal plan generated successfully",
        meal_plan=MealPlanResponse.from_plan(plan),
    )


@router.get("/", response_model=MealPlanListResponse)
async def list_meal_plans(context: Context, db: DBSession):
    """All plans of the current user, newest first"""
    plans = await meal_planning_service.list_plans(db, context)
    return MealPlanListResponse(
        meal_plans=[MealPlanResponse.from_plan(plan, include_items=False) for plan in plans],
        total=len(plans),
    )


@router.get("/{user_id}", response_model=CurrentPlanResponse)
async def get_meal_plan(user_id: int, context: Context, db: DBSession):
    """Most recent meal plan of a user; only the user themself may read it"""
    plan = await meal_planning_service.get_plan_for_user(db, context, user_id)
    return CurrentPlanResponse(meal_plan=MealPlanResponse.from_plan(plan) if plan else None)


@router.put("/item/{item_id}", response_model=ReplaceMealResponse)
async def replace_meal_item(item_id: int, context: Context, db: DBSession, provider: RecipeProvider):
    """Swap one meal for a random recipe matching the user's preferences"""
    try:
        item = await replace_meal(db, context, item_id, provider)
    except UpstreamFailure as e:
        logger.error("Replace meal error", item_id=item_id, error=e.message)
        raise UpstreamFailure("Failed to replace meal") from e

    return ReplaceMealResponse(
        message="Meal replaced successfully",
        item=MealPlanItemResponse.from_item(item),
    )


@router.delete("/{plan_id}", response_model=MessageResponse)
async def delete_meal_plan(plan_id: int, context: Context, db: DBSession):
    """Delete a meal plan and everything derived from it"""
    await meal_planning_service.delete_plan(db, context, plan_id)
    return MessageResponse(message="Meal plan deleted successfully")
