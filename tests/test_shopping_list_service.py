"""
Tests for shopping list aggregation and export.
"""
import pytest
from sqlalchemy import select

from core.exceptions import Forbidden, NotFound, PolicyRejection
from models.meal_planning_models import MealPlan, MealPlanItem, ShoppingListItem
from models.recipe_models import Ingredient, Recipe
from models.users import SubscriptionTier
from services.ingredient_store import link_ingredient, upsert_ingredient
from services.shopping_list_service import (
    IngredientLine,
    ShoppingList,
    build_shopping_list,
    export_shopping_list,
    group_by_aisle,
    merge_ingredients,
    render_text,
)

from conftest import context_for, create_user


def _line(name, amount, unit, recipe_id=1, category="Baking"):
    return IngredientLine(
        recipe_id=recipe_id,
        recipe_title=f"Recipe {recipe_id}",
        name=name,
        category=category,
        amount=amount,
        unit=unit,
    )


def test_same_unit_amounts_are_summed():
    merged = merge_ingredients([_line("flour", 1, "cup", 1), _line("Flour", 2, "cup", 2)])

    entry = merged["flour"]
    assert entry.amount == 3
    assert entry.unit == "cup"
    assert entry.notes is None
    assert entry.to_dict() == {"name": "flour", "amount": 3, "unit": "cup", "aisle": "Baking"}


def test_mismatched_units_are_kept_in_notes():
    merged = merge_ingredients([_line("flour", 1, "cup"), _line("flour", 200, "g")])

    entry = merged["flour"]
    assert entry.amount == 1
    assert entry.unit == "cup"
    assert "1 cup" in entry.notes
    assert "200 g" in entry.notes
    assert entry.to_dict()["notes"] == entry.notes


def test_every_mismatched_unit_is_listed():
    merged = merge_ingredients([
        _line("butter", 1, "cup"),
        _line("butter", 2, "tbsp"),
        _line("butter", 50, "g"),
        _line("butter", 1, "tbsp"),
    ])

    assert merged["butter"].notes == "1 cup + 3 tbsp + 50 g"


def test_group_by_aisle_defaults_to_other():
    merged = merge_ingredients([_line("salt", 1, "tsp", category=None), _line("sugar", 1, "cup")])

    grouped = group_by_aisle(merged.values())
    assert set(grouped) == {"Other", "Baking"}
    assert [entry.name for entry in grouped["Other"]] == ["salt"]


def test_render_text():
    merged = merge_ingredients([
        _line("flour", 1, "cup"),
        _line("flour", 200, "g"),
        _line("eggs", 2, "", category="Dairy"),
    ])
    shopping_list = ShoppingList(plan_id=1, by_aisle=group_by_aisle(merged.values()), by_recipe=[])

    text = render_text(shopping_list)

    assert text.startswith("Shopping List\n\n")
    assert "Baking:\n  - flour 1.0 cup\n    (1 cup + 200 g)\n" in text
    assert "Dairy:\n  - eggs 2.0\n" in text


async def _recipe(session, title, ingredients):
    recipe = Recipe(external_id=len(title), title=title)
    session.add(recipe)
    await session.flush()
    for name, amount, unit, category in ingredients:
        ingredient_id = await upsert_ingredient(session, name, category)
        await link_ingredient(session, recipe.id, ingredient_id, amount, unit)
    return recipe


async def _plan(session, user, recipes):
    plan = MealPlan(user_id=user.id)
    session.add(plan)
    await session.flush()
    for index, recipe in enumerate(recipes):
        session.add(MealPlanItem(plan_id=plan.id, day_of_week="Mon", meal_number=index + 1, recipe_id=recipe.id))
    await session.flush()
    return plan


@pytest.fixture
async def planned(session):
    user = await create_user(session, tier=SubscriptionTier.PREMIUM, meals_per_day=3)
    pancakes = await _recipe(session, "Pancakes", [
        ("Flour", 1, "cup", "Baking"),
        ("Milk", 1, "cup", "Milk, Eggs, Other Dairy"),
    ])
    bread = await _recipe(session, "Bread", [
        ("flour", 2, "cup", "Baking"),
        ("Yeast", 7, "g", "Baking"),
    ])
    plain = await _recipe(session, "Mystery", [])
    plan = await _plan(session, user, [pancakes, bread, plain])
    return user, plan, [pancakes, bread, plain]


async def test_build_shopping_list(session, planned):
    user, plan, (pancakes, bread, _) = planned

    shopping_list = await build_shopping_list(session, context_for(user), plan.id)

    data = shopping_list.to_dict()
    assert data["planId"] == plan.id
    assert data["totalItems"] == 3
    assert data["shoppingList"]["Baking"] == [
        {"name": "Flour", "amount": 3, "unit": "cup", "aisle": "Baking"},
        {"name": "Yeast", "amount": 7, "unit": "g", "aisle": "Baking"},
    ]
    assert [recipe["recipeId"] for recipe in data["byRecipe"]] == [pancakes.id, bread.id]
    assert data["byRecipe"][1]["ingredients"][0] == {"name": "Flour", "amount": 2, "unit": "cup", "aisle": "Baking"}


async def test_shopping_list_is_persisted_and_rebuilt(session, planned):
    user, plan, _ = planned
    context = context_for(user)

    await build_shopping_list(session, context, plan.id)
    await build_shopping_list(session, context, plan.id)

    result = await session.execute(
        select(Ingredient.name, ShoppingListItem.total_amount, ShoppingListItem.unit)
        .join(Ingredient, ShoppingListItem.ingredient_id == Ingredient.id)
        .where(ShoppingListItem.plan_id == plan.id)
        .order_by(Ingredient.name)
    )
    assert result.all() == [("flour", 3, "cup"), ("milk", 1, "cup"), ("yeast", 7, "g")]


async def test_repeated_recipe_counts_once(session):
    user = await create_user(session, meals_per_day=2)
    soup = await _recipe(session, "Soup", [("Carrot", 2, "", "Produce")])
    plan = await _plan(session, user, [soup, soup])

    shopping_list = await build_shopping_list(session, context_for(user), plan.id)

    assert shopping_list.to_dict()["shoppingList"]["Produce"][0]["amount"] == 2


async def test_empty_plan_gives_empty_list(session):
    user = await create_user(session, meals_per_day=2)
    plan = await _plan(session, user, [])

    shopping_list = await build_shopping_list(session, context_for(user), plan.id)

    assert shopping_list.to_dict() == {"planId": plan.id, "shoppingList": {}, "byRecipe": [], "totalItems": 0}


async def test_shopping_list_ownership(session, planned):
    _, plan, _ = planned
    intruder = await create_user(session, email="intruder@example.com")

    with pytest.raises(Forbidden):
        await build_shopping_list(session, context_for(intruder), plan.id)

    with pytest.raises(NotFound):
        await build_shopping_list(session, context_for(intruder), plan.id + 100)


async def test_export_for_premium(session, planned):
    user, plan, _ = planned

    text = await export_shopping_list(session, context_for(user), plan.id)

    assert text.startswith("Shopping List\n\n")
    assert "  - Flour 3.0 cup\n" in text
    assert "Milk, Eggs, Other Dairy:\n" in text


async def test_export_rejected_for_free_tier(session):
    user = await create_user(session, meals_per_day=2)
    plan = await _plan(session, user, [])

    with pytest.raises(PolicyRejection) as exc_info:
        await export_shopping_list(session, context_for(user), plan.id)

    assert exc_info.value.upgrade_required
    assert await session.scalar(select(ShoppingListItem.id)) is None
