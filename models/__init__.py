"""
Meal Planner Database Models
Central import module for all database models
"""

from .users import User, Preferences, SubscriptionTier
from .recipe_models import Recipe, Ingredient, RecipeIngredient
from .meal_planning_models import (
    MealPlan,
    MealPlanItem,
    ShoppingListItem,
    DAYS_OF_WEEK,
    DAY_INDEX,
)

__all__ = [
    # User models
    "User",
    "Preferences",

    # Enums
    "SubscriptionTier",

    # Recipe models
    "Recipe",
    "Ingredient",
    "RecipeIngredient",

    # Meal planning models
    "MealPlan",
    "MealPlanItem",
    "ShoppingListItem",
    "DAYS_OF_WEEK",
    "DAY_INDEX",
]
