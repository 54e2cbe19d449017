"""
Meal Planner Exceptions
Error taxonomy shared by services and API endpoints
"""

from typing import Any, Dict


class MealPlannerError(Exception):
    """Base error carrying a user-facing message and an HTTP status"""

    status_code: int = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class PolicyRejection(MealPlannerError):
    """Tier limit exceeded or missing prerequisites; user-actionable"""

    status_code = 400

    def __init__(self, message: str, upgrade_required: bool = False, status_code: int = None):
        if status_code is None:
            status_code = 403 if upgrade_required else 400
        super().__init__(message, status_code)
        self.upgrade_required = upgrade_required

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "upgradeRequired": self.upgrade_required}


class NotFound(MealPlannerError):
    status_code = 404


class Forbidden(MealPlannerError):
    status_code = 403

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class UpstreamFailure(MealPlannerError):
    """Recipe provider returned an error, timed out or sent too little data"""

    status_code = 500


__all__ = [
    "MealPlannerError",
    "PolicyRejection",
    "NotFound",
    "Forbidden",
    "UpstreamFailure",
]
