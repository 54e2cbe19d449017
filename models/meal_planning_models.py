"""
Meal Planner Meal Planning Models
SQLAlchemy models for weekly plans, their meal slots and shopping lists
"""

from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from core.database import Base

DAYS_OF_WEEK = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
DAY_INDEX = {day: index for index, day in enumerate(DAYS_OF_WEEK)}


class MealPlan(Base):
    """
    One generated weekly plan
    Owns one item per (day, meal number) slot
    """
    __tablename__ = "meal_plans"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    week_start_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)

    # Relationships
    user = relationship("User", back_populates="meal_plans")
    items = relationship(
        "MealPlanItem",
        back_populates="meal_plan",
        cascade="all, delete-orphan",
        order_by="MealPlanItem.id",
    )
    shopping_list_items = relationship("ShoppingListItem", back_populates="meal_plan", cascade="all, delete-orphan")

    @property
    def sorted_items(self):
        """Items ordered Mon..Sun, then by meal number"""
        return sorted(self.items, key=lambda item: (DAY_INDEX.get(item.day_of_week, 7), item.meal_number))


class MealPlanItem(Base):
    """
    A single meal slot within a plan
    Links a recipe to a day of week and meal number
    """
    __tablename__ = "meal_plan_items"
    __table_args__ = (
        UniqueConstraint("plan_id", "day_of_week", "meal_number", name="uq_meal_plan_items_slot"),
    )

    id = Column(Integer, primary_key=True)
    plan_id = Column(Integer, ForeignKey("meal_plans.id", ondelete="CASCADE"), nullable=False, index=True)
    day_of_week = Column(String(3), nullable=False)  # Mon..Sun
    meal_number = Column(Integer, nullable=False)  # 1-based
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False, index=True)

    # Relationships
    meal_plan = relationship("MealPlan", back_populates="items")
    recipe = relationship("Recipe")


class ShoppingListItem(Base):
    """
    Aggregated ingredient total for a plan
    Rebuilt from scratch every time the plan's shopping list is requested
    """
    __tablename__ = "shopping_list_items"

    id = Column(Integer, primary_key=True)
    plan_id = Column(Integer, ForeignKey("meal_plans.id", ondelete="CASCADE"), nullable=False, index=True)
    ingredient_id = Column(Integer, ForeignKey("ingredients.id"), nullable=False)
    total_amount = Column(Float, nullable=False, default=0)
    unit = Column(String(50), nullable=False, default="")
    notes = Column(Text)

    # Relationships
    meal_plan = relationship("MealPlan", back_populates="shopping_list_items")
    ingredient = relationship("Ingredient")
