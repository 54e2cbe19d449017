"""
Meal Planner API Endpoints
All API endpoint modules
"""

from . import health, users, meal_planning, shopping_lists

__all__ = [
    "health",
    "users",
    "meal_planning",
    "shopping_lists"
]
