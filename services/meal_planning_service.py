"""
Meal Planner Meal Planning Service
Weekly plan generation from dietary preferences, plus plan reads and deletes
"""

from typing import List, Optional, Tuple

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.exceptions import Forbidden, NotFound, PolicyRejection, UpstreamFailure
from middleware.logging import log_business_event
from models.meal_planning_models import DAYS_OF_WEEK, MealPlan, MealPlanItem, ShoppingListItem
from models.users import Preferences
from services.recipe_importer import import_recipe
from services.spoonacular_client import SpoonacularClient
from services.tier_policy import RequestContext
from utils.date_utils import utc_now

logger = structlog.get_logger()

DEFAULT_MEALS_PER_DAY = 3
CALORIE_WIGGLE_ROOM = 200


def calorie_window(calorie_target: Optional[int], meals_per_day: int) -> Tuple[Optional[int], Optional[int]]:
    """Per-meal (min, max) calories around the daily target, or (None, None)"""
    if not calorie_target:
        return None, None
    per_meal = int(calorie_target) // meals_per_day
    return max(0, per_meal - CALORIE_WIGGLE_ROOM), per_meal + CALORIE_WIGGLE_ROOM


async def get_preferences(session: AsyncSession, user_id: int) -> Optional[Preferences]:
    result = await session.execute(select(Preferences).where(Preferences.user_id == user_id))
    return result.scalar_one_or_none()


async def count_plans(session: AsyncSession, user_id: int) -> int:
    result = await session.execute(
        select(func.count()).select_from(MealPlan).where(MealPlan.user_id == user_id)
    )
    return result.scalar_one()


async def load_plan(session: AsyncSession, plan_id: int) -> Optional[MealPlan]:
    """Plan with items and their recipes eagerly loaded"""
    result = await session.execute(
        select(MealPlan)
        .where(MealPlan.id == plan_id)
        .options(selectinload(MealPlan.items).selectinload(MealPlanItem.recipe))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_owned_plan(session: AsyncSession, context: RequestContext, plan_id: int) -> MealPlan:
    plan = await session.get(MealPlan, plan_id)
    if plan is None:
        raise NotFound("Meal plan not found")
    if plan.user_id != context.user_id:
        logger.warning("Plan access denied", plan_id=plan_id, owner_id=plan.user_id, requester_id=context.user_id)
        raise Forbidden()
    return plan


class MealPlanningService:
    """Generates weekly plans within the limits of the user's tier"""

    async def _check_limits(self, session: AsyncSession, context: RequestContext) -> Tuple[Preferences, int]:
        tier = context.tier.value
        limits = context.limits

        # see if they hit their plan limit
        if limits.has_plan_cap:
            plan_count = await count_plans(session, context.user_id)
            if plan_count >= limits.max_plans:
                raise PolicyRejection(
                    f"Your {tier} tier is limited to {limits.max_plans} meal plans. Upgrade for more!",
                    upgrade_required=True,
                )

        prefs = await get_preferences(session, context.user_id)
        if prefs is None:
            raise PolicyRejection("Please set your preferences first")

        meals_per_day = prefs.meals_per_day or DEFAULT_MEALS_PER_DAY
        if meals_per_day > limits.max_meals_per_day:
            raise PolicyRejection(
                f"Your {tier} tier allows up to {limits.max_meals_per_day} meals per day. Upgrade for more!",
                upgrade_required=True,
            )

        return prefs, meals_per_day

    async def generate_plan(
        self,
        session: AsyncSession,
        context: RequestContext,
        provider: SpoonacularClient,
    ) -> MealPlan:
        """
        Generate and persist a weekly meal plan

        Args:
            session: Database session; the caller's unit of work
            context: Authenticated user and resolved tier
            provider: Recipe provider client

        Returns:
            The new plan with one item per (day, meal number) slot

        Raises:
            PolicyRejection: plan cap reached, preferences missing, or too
                many meals per day for the tier
            UpstreamFailure: provider error or not enough recipes
        """
        prefs, meals_per_day = await self._check_limits(session, context)

        total_meals = len(DAYS_OF_WEEK) * meals_per_day
        min_calories, max_calories = calorie_window(prefs.calorie_target, meals_per_day)

        candidates = await provider.search_recipes(
            number=total_meals,
            diet=prefs.diet_type,
            intolerances=prefs.intolerances,
            min_calories=min_calories,
            max_calories=max_calories,
        )

        if len(candidates) < total_meals:
            logger.info("Not enough recipes found", user_id=context.user_id, needed=total_meals, found=len(candidates))
            raise UpstreamFailure("Not enough recipes found. Try adjusting your preferences.", status_code=400)

        plan = MealPlan(user_id=context.user_id, week_start_date=utc_now())
        session.add(plan)
        await session.flush()

        # Imports run one at a time; later recipes reuse ingredient rows written by earlier ones
        recipe_index = 0
        for day in DAYS_OF_WEEK:
            for meal_number in range(1, meals_per_day + 1):
                recipe_id = await import_recipe(session, candidates[recipe_index], prefs.diet_type, provider)
                session.add(
                    MealPlanItem(
                        plan_id=plan.id,
                        day_of_week=day,
                        meal_number=meal_number,
                        recipe_id=recipe_id,
                    )
                )
                recipe_index += 1

        await session.flush()
        plan = await load_plan(session, plan.id)

        logger.info("Meal plan generated", user_id=context.user_id, plan_id=plan.id, items=len(plan.items))
        log_business_event("meal_plan_generated", {
            "plan_id": plan.id,
            "tier": context.tier.value,
            "meals_per_day": meals_per_day,
            "items": len(plan.items),
        })
        return plan

    async def get_latest_plan(self, session: AsyncSession, context: RequestContext) -> Optional[MealPlan]:
        """Most recent plan for the requester, or None"""
        result = await session.execute(
            select(MealPlan.id)
            .where(MealPlan.user_id == context.user_id)
            .order_by(MealPlan.week_start_date.desc(), MealPlan.id.desc())
            .limit(1)
        )
        plan_id = result.scalar_one_or_none()
        if plan_id is None:
            return None
        return await load_plan(session, plan_id)

    async def get_plan_for_user(self, session: AsyncSession, context: RequestContext, user_id: int) -> Optional[MealPlan]:
        # users can only read their own plans
        if user_id != context.user_id:
            raise Forbidden()
        return await self.get_latest_plan(session, context)

    async def list_plans(self, session: AsyncSession, context: RequestContext) -> List[MealPlan]:
        result = await session.execute(
            select(MealPlan)
            .where(MealPlan.user_id == context.user_id)
            .order_by(MealPlan.week_start_date.desc(), MealPlan.id.desc())
        )
        return list(result.scalars().all())

    async def delete_plan(self, session: AsyncSession, context: RequestContext, plan_id: int) -> None:
        """Delete a plan together with its items and cached shopping list"""
        await get_owned_plan(session, context, plan_id)

        await session.execute(delete(ShoppingListItem).where(ShoppingListItem.plan_id == plan_id))
        await session.execute(delete(MealPlanItem).where(MealPlanItem.plan_id == plan_id))
        await session.execute(delete(MealPlan).where(MealPlan.id == plan_id))

        logger.info("Meal plan deleted", user_id=context.user_id, plan_id=plan_id)
        log_business_event("meal_plan_deleted", {"plan_id": plan_id})


meal_planning_service = MealPlanningService()
