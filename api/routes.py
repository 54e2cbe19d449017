"""
Meal Planner API Routes
Main router configuration for all API endpoints
"""

from fastapi import APIRouter
import structlog

from api.endpoints import health, users, meal_planning, shopping_lists

logger = structlog.get_logger()

# Create main API router
api_router = APIRouter()

api_router.include_router(
    health.router,
    prefix="/health",
    tags=["health"]
)

api_router.include_router(
    users.router,
    prefix="/users",
    tags=["users"]
)

api_router.include_router(
    meal_planning.router,
    prefix="/mealplan",
    tags=["meal-planning"]
)

api_router.include_router(
    shopping_lists.router,
    prefix="/shoppinglist",
    tags=["shopping-lists"]
)

logger.info("API routes configured successfully")
