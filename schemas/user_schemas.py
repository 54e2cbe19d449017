"""
Meal Planner User Schemas
Pydantic models for user, subscription and preference payloads
"""

from typing import Any, Dict, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class PreferencesUpdate(BaseModel):
    diet_type: Optional[str] = Field(None, max_length=50)
    calorie_target: Optional[int] = Field(None, gt=0)
    meals_per_day: Optional[int] = Field(3, ge=1)  # tier cap applies at generation
    allergies: Optional[str] = Field(None, max_length=500)


class PreferencesResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    diet_type: Optional[str] = None
    calorie_target: Optional[int] = None
    meals_per_day: Optional[int] = None
    allergies: Optional[str] = None


class PreferencesEnvelope(BaseModel):
    message: Optional[str] = None
    preferences: Optional[PreferencesResponse] = None


class UserResponse(BaseModel):
    user_id: int
    email: str
    subscription_tier: str
    subscription_expires_at: Optional[datetime] = None
    limits: Dict[str, Any]
