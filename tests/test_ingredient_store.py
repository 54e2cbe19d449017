"""
Tests for canonical ingredient records.
"""
import pytest
from sqlalchemy import func, select

from models.recipe_models import Ingredient, Recipe, RecipeIngredient
from services.ingredient_store import (
    get_ingredient_id,
    link_ingredient,
    normalize_name,
    upsert_ingredient,
)


def test_normalize_name():
    assert normalize_name("  Tomato ") == "tomato"
    assert normalize_name("Olive   OIL") == "olive oil"
    assert normalize_name("") == ""


async def test_upsert_is_idempotent_by_normalised_name(session):
    first = await upsert_ingredient(session, "Tomato", "Produce")
    second = await upsert_ingredient(session, " tomato ", "Canned")

    assert first == second
    count = await session.scalar(select(func.count()).select_from(Ingredient))
    assert count == 1


async def test_first_insert_keeps_display_name_and_category(session):
    ingredient_id = await upsert_ingredient(session, " Red Onion", "Produce")
    await upsert_ingredient(session, "red onion", "Spices")

    ingredient = await session.get(Ingredient, ingredient_id)
    assert ingredient.name == "red onion"
    assert ingredient.display_name == "Red Onion"
    assert ingredient.category == "Produce"


async def test_missing_category_defaults_to_other(session):
    ingredient_id = await upsert_ingredient(session, "salt")

    ingredient = await session.get(Ingredient, ingredient_id)
    assert ingredient.category == "Other"


async def test_empty_name_is_rejected(session):
    with pytest.raises(ValueError):
        await upsert_ingredient(session, "   ")


async def test_lookup_by_name(session):
    assert await get_ingredient_id(session, "basil") is None

    ingredient_id = await upsert_ingredient(session, "Basil", "Produce")
    assert await get_ingredient_id(session, "BASIL") == ingredient_id


async def test_link_defaults_missing_quantity(session):
    recipe = Recipe(external_id=1, title="Soup")
    session.add(recipe)
    await session.flush()
    ingredient_id = await upsert_ingredient(session, "water")

    link = await link_ingredient(session, recipe.id, ingredient_id)

    stored = await session.get(RecipeIngredient, link.id)
    assert stored.amount == 0
    assert stored.unit == ""
