"""
Meal Planner Ingredient Store
Canonical ingredient records keyed by normalised name
"""

from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from models.recipe_models import Ingredient, RecipeIngredient

logger = structlog.get_logger()

DEFAULT_CATEGORY = "Other"


def normalize_name(name: str) -> str:
    """Lower-case, trim and collapse whitespace"""
    return " ".join((name or "").lower().split())


def _insert_for(session: AsyncSession):
    if session.get_bind().dialect.name == "sqlite":
        return sqlite.insert
    return postgresql.insert


async def get_ingredient_id(session: AsyncSession, name: str) -> Optional[int]:
    result = await session.execute(
        select(Ingredient.id).where(Ingredient.name == normalize_name(name))
    )
    return result.scalar_one_or_none()


async def upsert_ingredient(session: AsyncSession, name: str, category: Optional[str] = None) -> int:
    """
    Insert an ingredient if its normalised name is new, return its id either way

    Concurrent inserts of the same name are settled by the unique constraint
    on ``ingredients.name``; the loser falls through to the lookup.
    """
    canonical = normalize_name(name)
    if not canonical:
        raise ValueError("Ingredient name must not be empty")

    insert = _insert_for(session)
    stmt = (
        insert(Ingredient)
        .values(
            name=canonical,
            display_name=(name or "").strip(),
            category=category or DEFAULT_CATEGORY,
        )
        .on_conflict_do_nothing(index_elements=["name"])
        .returning(Ingredient.id)
    )
    result = await session.execute(stmt)
    ingredient_id = result.scalar_one_or_none()

    if ingredient_id is None:
        ingredient_id = await get_ingredient_id(session, canonical)
        if ingredient_id is None:
            raise LookupError(f"Ingredient {canonical!r} vanished after conflicting insert")

    return ingredient_id


async def link_ingredient(
    session: AsyncSession,
    recipe_id: int,
    ingredient_id: int,
    amount: Optional[float] = None,
    unit: Optional[str] = None,
) -> RecipeIngredient:
    """Attach an ingredient quantity to a recipe"""
    link = RecipeIngredient(
        recipe_id=recipe_id,
        ingredient_id=ingredient_id,
        amount=amount or 0,
        unit=unit or "",
    )
    session.add(link)
    await session.flush()
    return link
