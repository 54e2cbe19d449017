"""
Meal Planner Shopping List Service
Aggregates a plan's stored ingredients into a unit-aware shopping list
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from middleware.logging import log_business_event
from models.meal_planning_models import MealPlanItem, ShoppingListItem
from models.recipe_models import Ingredient, Recipe, RecipeIngredient
from services.ingredient_store import DEFAULT_CATEGORY, normalize_name, upsert_ingredient
from services.meal_planning_service import get_owned_plan
from services.tier_policy import RequestContext, require_export

logger = structlog.get_logger()


def format_quantity(amount: float, unit: str) -> str:
    return f"{amount:g} {unit}".strip()


@dataclass
class IngredientLine:
    """One stored recipe ingredient row"""
    recipe_id: int
    recipe_title: str
    name: str
    category: Optional[str]
    amount: float
    unit: str

    @property
    def aisle(self) -> str:
        return self.category or DEFAULT_CATEGORY

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "amount": self.amount, "unit": self.unit, "aisle": self.aisle}


@dataclass
class ShoppingEntry:
    """Aggregated ingredient across all recipes of a plan"""
    name: str
    unit: str
    aisle: str
    quantities: Dict[str, float] = field(default_factory=dict)  # unit -> summed amount, first seen first

    @property
    def amount(self) -> float:
        return self.quantities.get(self.unit, 0.0)

    @property
    def notes(self) -> Optional[str]:
        if len(self.quantities) < 2:
            return None
        return " + ".join(format_quantity(amount, unit) for unit, amount in self.quantities.items())

    def add(self, amount: float, unit: str) -> None:
        # Amounts only combine when units match; mismatches are kept side by side
        self.quantities[unit] = self.quantities.get(unit, 0.0) + amount

    def to_dict(self) -> Dict[str, Any]:
        data = {"name": self.name, "amount": self.amount, "unit": self.unit, "aisle": self.aisle}
        if self.notes:
            data["notes"] = self.notes
        return data


@dataclass
class ShoppingList:
    plan_id: int
    by_aisle: Dict[str, List[ShoppingEntry]]
    by_recipe: List[Dict[str, Any]]

    @property
    def total_items(self) -> int:
        return sum(len(entries) for entries in self.by_aisle.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "planId": self.plan_id,
            "shoppingList": {
                aisle: [entry.to_dict() for entry in entries]
                for aisle, entries in self.by_aisle.items()
            },
            "byRecipe": self.by_recipe,
            "totalItems": self.total_items,
        }


def merge_ingredients(lines: Iterable[IngredientLine]) -> Dict[str, ShoppingEntry]:
    """Merge ingredient lines by lower-cased name"""
    merged: Dict[str, ShoppingEntry] = {}
    for line in lines:
        key = normalize_name(line.name)
        entry = merged.get(key)
        if entry is None:
            entry = ShoppingEntry(name=line.name, unit=line.unit, aisle=line.aisle)
            merged[key] = entry
        entry.add(float(line.amount or 0), line.unit)
    return merged


def group_by_aisle(entries: Iterable[ShoppingEntry]) -> Dict[str, List[ShoppingEntry]]:
    grouped: Dict[str, List[ShoppingEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.aisle or DEFAULT_CATEGORY, []).append(entry)
    return grouped


def render_text(shopping_list: ShoppingList) -> str:
    """Plain-text list, one section per aisle"""
    text = "Shopping List\n\n"
    for aisle, entries in shopping_list.by_aisle.items():
        text += f"{aisle}:\n"
        for entry in entries:
            amount = f"{entry.amount:.1f}" if entry.amount else ""
            text += f"  - {entry.name} {amount} {entry.unit}".rstrip() + "\n"
            if entry.notes:
                text += f"    ({entry.notes})\n"
        text += "\n"
    return text


async def _plan_recipes(session: AsyncSession, plan_id: int) -> List[Recipe]:
    result = await session.execute(
        select(Recipe)
        .join(MealPlanItem, MealPlanItem.recipe_id == Recipe.id)
        .where(MealPlanItem.plan_id == plan_id)
        .distinct()
        .order_by(Recipe.id)
    )
    return list(result.scalars().all())


async def _recipe_lines(session: AsyncSession, recipe: Recipe) -> List[IngredientLine]:
    result = await session.execute(
        select(Ingredient.display_name, Ingredient.category, RecipeIngredient.amount, RecipeIngredient.unit)
        .join(Ingredient, RecipeIngredient.ingredient_id == Ingredient.id)
        .where(RecipeIngredient.recipe_id == recipe.id)
        .order_by(RecipeIngredient.id)
    )
    return [
        IngredientLine(
            recipe_id=recipe.id,
            recipe_title=recipe.title,
            name=name,
            category=category,
            amount=amount or 0,
            unit=unit or "",
        )
        for name, category, amount, unit in result.all()
    ]


async def _save_shopping_list(session: AsyncSession, plan_id: int, entries: Iterable[ShoppingEntry]) -> None:
    """Replace the cached shopping list rows of the plan"""
    await session.execute(delete(ShoppingListItem).where(ShoppingListItem.plan_id == plan_id))

    for entry in entries:
        ingredient_id = await upsert_ingredient(session, entry.name, entry.aisle)
        session.add(
            ShoppingListItem(
                plan_id=plan_id,
                ingredient_id=ingredient_id,
                total_amount=entry.amount,
                unit=entry.unit,
                notes=entry.notes,
            )
        )
    await session.flush()


async def build_shopping_list(session: AsyncSession, context: RequestContext, plan_id: int) -> ShoppingList:
    """Aggregate, persist and return the shopping list of a plan"""
    await get_owned_plan(session, context, plan_id)

    recipes = await _plan_recipes(session, plan_id)

    all_lines: List[IngredientLine] = []
    by_recipe: List[Dict[str, Any]] = []
    for recipe in recipes:
        lines = await _recipe_lines(session, recipe)
        if not lines:
            logger.info("No ingredients found for recipe", recipe_id=recipe.id, title=recipe.title)
            continue
        all_lines.extend(lines)
        by_recipe.append({
            "recipeId": recipe.id,
            "title": recipe.title,
            "ingredients": [line.to_dict() for line in lines],
        })

    merged = merge_ingredients(all_lines)
    shopping_list = ShoppingList(
        plan_id=plan_id,
        by_aisle=group_by_aisle(merged.values()),
        by_recipe=by_recipe,
    )

    await _save_shopping_list(session, plan_id, merged.values())

    logger.info(
        "Shopping list built",
        plan_id=plan_id,
        recipes=len(recipes),
        recipes_with_ingredients=len(by_recipe),
        total_items=shopping_list.total_items,
    )
    return shopping_list


async def export_shopping_list(session: AsyncSession, context: RequestContext, plan_id: int) -> str:
    """Plain-text shopping list; paid tiers only"""
    require_export(context)
    shopping_list = await build_shopping_list(session, context, plan_id)
    log_business_event("shopping_list_exported", {"plan_id": plan_id, "total_items": shopping_list.total_items})
    return render_text(shopping_list)
