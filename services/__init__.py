"""
Meal Planner Services Module
Plan generation, meal replacement and shopping list aggregation
"""

from .spoonacular_client import SpoonacularClient, get_recipe_provider
from .tier_policy import TierLimits, RequestContext, limits_for, resolve_effective_tier
from .ingredient_store import upsert_ingredient, normalize_name
from .recipe_importer import import_recipe
from .meal_planning_service import MealPlanningService, meal_planning_service
from .meal_replacement_service import replace_meal
from .shopping_list_service import ShoppingList, build_shopping_list, export_shopping_list

__all__ = [
    # Provider
    "SpoonacularClient",
    "get_recipe_provider",

    # Tier policy
    "TierLimits",
    "RequestContext",
    "limits_for",
    "resolve_effective_tier",

    # Recipes and ingredients
    "upsert_ingredient",
    "normalize_name",
    "import_recipe",

    # Meal planning
    "MealPlanningService",
    "meal_planning_service",
    "replace_meal",

    # Shopping lists
    "ShoppingList",
    "build_shopping_list",
    "export_shopping_list",
]
