"""
Meal Planner Meal Planning Schemas
Pydantic models for meal planning API requests and responses
"""

from typing import List, Optional, Dict, Any
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from models.meal_planning_models import MealPlan, MealPlanItem


class MealPlanItemResponse(BaseModel):
    item_id: int
    plan_id: int
    day_of_week: str
    meal_number: int
    recipe_id: int
    title: Optional[str] = None
    image_url: Optional[str] = None
    calories: Optional[float] = None

    @classmethod
    def from_item(cls, item: MealPlanItem) -> "MealPlanItemResponse":
        recipe = item.__dict__.get("recipe")  # only when eagerly loaded
        return cls(
            item_id=item.id,
            plan_id=item.plan_id,
            day_of_week=item.day_of_week,
            meal_number=item.meal_number,
            recipe_id=item.recipe_id,
            title=recipe.title if recipe else None,
            image_url=recipe.image_url if recipe else None,
            calories=recipe.calories if recipe else None,
        )


class MealPlanResponse(BaseModel):
    plan_id: int
    user_id: int
    week_start_date: datetime
    items: List[MealPlanItemResponse] = Field(default_factory=list)

    @classmethod
    def from_plan(cls, plan: MealPlan, include_items: bool = True) -> "MealPlanResponse":
        items = []
        if include_items:
            items = [MealPlanItemResponse.from_item(item) for item in plan.sorted_items]
        return cls(
            plan_id=plan.id,
            user_id=plan.user_id,
            week_start_date=plan.week_start_date,
            items=items,
        )


class GeneratePlanResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    meal_plan: MealPlanResponse = Field(alias="mealPlan")


class CurrentPlanResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    meal_plan: Optional[MealPlanResponse] = Field(None, alias="mealPlan")


class MealPlanListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    meal_plans: List[MealPlanResponse] = Field(alias="mealPlans")
    total: int


class ReplaceMealResponse(BaseModel):
    message: str
    item: MealPlanItemResponse


class MessageResponse(BaseModel):
    message: str


class ShoppingListEntryResponse(BaseModel):
    name: str
    amount: float
    unit: str
    aisle: str
    notes: Optional[str] = None


class RecipeIngredientsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recipe_id: int = Field(alias="recipeId")
    title: str
    ingredients: List[Dict[str, Any]] = Field(default_factory=list)


class ShoppingListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    plan_id: int = Field(alias="planId")
    shopping_list: Dict[str, List[ShoppingListEntryResponse]] = Field(
        alias="shoppingList"
    )
    by_recipe: List[RecipeIngredientsResponse] = Field(alias="byRecipe")
    total_items: int = Field(alias="totalItems")
