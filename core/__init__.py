"""
Meal Planner Core Module
Central configuration and utilities
"""

from .config import settings
from .database import Base, get_db, get_db_session, init_db, close_db
from .exceptions import MealPlannerError, PolicyRejection, NotFound, Forbidden, UpstreamFailure

__all__ = [
    "settings",
    "Base",
    "get_db",
    "get_db_session",
    "init_db",
    "close_db",
    "MealPlannerError",
    "PolicyRejection",
    "NotFound",
    "Forbidden",
    "UpstreamFailure",
]
