"""
Meal Planner Meal Replacement Service
Swaps the recipe of one plan slot for a random recipe with the same filters
"""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.exceptions import Forbidden, NotFound
from middleware.logging import log_business_event
from models.meal_planning_models import MealPlan, MealPlanItem
from services.meal_planning_service import get_preferences
from services.recipe_importer import import_recipe
from services.spoonacular_client import SpoonacularClient
from services.tier_policy import RequestContext

logger = structlog.get_logger()


async def replace_meal(
    session: AsyncSession,
    context: RequestContext,
    item_id: int,
    provider: SpoonacularClient,
) -> MealPlanItem:
    """Replace the recipe of ``item_id``; day and meal number are kept"""
    result = await session.execute(
        select(MealPlanItem, MealPlan.user_id)
        .join(MealPlan, MealPlanItem.plan_id == MealPlan.id)
        .where(MealPlanItem.id == item_id)
    )
    row = result.first()

    if row is None:
        raise NotFound("Meal not found")

    item, owner_id = row
    if owner_id != context.user_id:
        logger.warning("Meal access denied", item_id=item_id, owner_id=owner_id, requester_id=context.user_id)
        raise Forbidden()

    prefs = await get_preferences(session, context.user_id)
    diet_type = prefs.diet_type if prefs else None
    intolerances = prefs.intolerances if prefs else None

    replacement = await provider.random_recipe(diet=diet_type, intolerances=intolerances)
    new_recipe_id = await import_recipe(session, replacement, diet_type, provider)

    previous_recipe_id = item.recipe_id
    item.recipe_id = new_recipe_id
    await session.flush()

    result = await session.execute(
        select(MealPlanItem)
        .where(MealPlanItem.id == item_id)
        .options(selectinload(MealPlanItem.recipe))
        .execution_options(populate_existing=True)
    )
    item = result.scalar_one()

    logger.info(
        "Meal replaced",
        item_id=item_id,
        plan_id=item.plan_id,
        previous_recipe_id=previous_recipe_id,
        recipe_id=new_recipe_id,
    )
    log_business_event("meal_replaced", {"item_id": item_id, "recipe_id": new_recipe_id})
    return item
