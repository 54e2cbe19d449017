"""
Meal Planner Middleware
Custom middleware for request logging
"""

from .logging import LoggingMiddleware, log_user_activity, log_business_event

__all__ = [
    "LoggingMiddleware",
    "log_user_activity",
    "log_business_event"
]
