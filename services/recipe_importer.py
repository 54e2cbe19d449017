"""
Meal Planner Recipe Importer
Stores a provider recipe locally together with its ingredient links
"""

from typing import Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import UpstreamFailure
from models.recipe_models import Recipe
from schemas.provider_schemas import RecipeSummary
from services.ingredient_store import link_ingredient, upsert_ingredient
from services.spoonacular_client import SpoonacularClient

logger = structlog.get_logger()

RECIPE_SOURCE = "spoonacular"


async def import_recipe(
    session: AsyncSession,
    summary: RecipeSummary,
    diet_type: Optional[str],
    provider: SpoonacularClient,
) -> int:
    """
    Persist ``summary`` as a new local recipe and return its id

    Ingredient detail is best-effort: a failed detail fetch leaves the recipe
    without ingredients, and a failed ingredient is skipped on its own.
    Neither is raised to the caller.
    """
    recipe = Recipe(
        external_id=summary.id,
        title=summary.title,
        image_url=summary.image,
        source=RECIPE_SOURCE,
        calories=summary.calories,
        diet_type=diet_type,
    )
    session.add(recipe)
    await session.flush()

    try:
        ingredients = await provider.recipe_ingredients(summary.id)
    except UpstreamFailure as e:
        logger.warning("Could not fetch ingredients", recipe=summary.title, external_id=summary.id, error=e.message)
        return recipe.id

    stored = 0
    for ingredient in ingredients:
        try:
            # Savepoint so a failed row does not poison the outer transaction
            async with session.begin_nested():
                ingredient_id = await upsert_ingredient(session, ingredient.display_name, ingredient.category)
                await link_ingredient(
                    session,
                    recipe.id,
                    ingredient_id,
                    ingredient.quantity,
                    ingredient.unit_or_blank,
                )
            stored += 1
        except (SQLAlchemyError, ValueError, LookupError) as e:
            logger.warning("Error storing ingredient", ingredient=ingredient.name, recipe_id=recipe.id, error=str(e))

    logger.info("Stored ingredients", recipe=summary.title, recipe_id=recipe.id, stored=stored, received=len(ingredients))
    return recipe.id
