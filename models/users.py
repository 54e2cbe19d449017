"""
Meal Planner User Models
Database models for users, subscription tiers and dietary preferences
"""

from sqlalchemy import Integer, String, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func
from datetime import datetime
from enum import Enum as PyEnum
from typing import List, Optional

from core.database import Base


class SubscriptionTier(str, PyEnum):
    """User subscription tiers"""
    FREE = "free"
    PREMIUM = "premium"
    PRO = "pro"


class User(Base):
    """Main user account model"""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)

    # Subscription information
    subscription_tier: Mapped[SubscriptionTier] = mapped_column(
        Enum(SubscriptionTier, name="subscription_tier", values_callable=lambda e: [m.value for m in e]),
        default=SubscriptionTier.FREE,
        nullable=False,
    )
    subscription_expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    preferences = relationship("Preferences", back_populates="user", uselist=False, cascade="all, delete-orphan")
    meal_plans = relationship("MealPlan", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, tier={self.subscription_tier.value})>"


class Preferences(Base):
    """Dietary preferences used to filter recipe searches"""
    __tablename__ = "preferences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    diet_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)  # vegetarian, vegan, ketogenic, ...
    calorie_target: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # per day
    allergies: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)  # comma-separated intolerances
    meals_per_day: Mapped[Optional[int]] = mapped_column(Integer, default=3, nullable=True)

    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    user = relationship("User", back_populates="preferences")

    @property
    def intolerances(self) -> Optional[str]:
        """Allergy tokens normalised for the provider's intolerances filter"""
        if not self.allergies:
            return None
        tokens: List[str] = [token.strip() for token in self.allergies.split(",") if token.strip()]
        return ",".join(tokens) or None

    def __repr__(self):
        return f"<Preferences(user_id={self.user_id}, diet={self.diet_type}, meals_per_day={self.meals_per_day})>"
