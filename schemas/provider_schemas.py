"""
Meal Planner Provider Schemas
Pydantic models for Spoonacular payloads, with defaults for every field the
provider may leave out
"""

from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Nutrient(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    amount: Optional[float] = None
    unit: Optional[str] = None


class Nutrition(BaseModel):
    model_config = ConfigDict(extra="ignore")

    nutrients: List[Nutrient] = Field(default_factory=list)


class RecipeSummary(BaseModel):
    """One search or random result"""
    model_config = ConfigDict(extra="ignore")

    id: int
    title: str = ""
    image: Optional[str] = None
    nutrition: Optional[Nutrition] = None

    @field_validator("title", mode="before")
    @classmethod
    def blank_title(cls, v):
        return v or ""

    @property
    def calories(self) -> float:
        # complexSearch puts the calorie filter's nutrient first
        if self.nutrition and self.nutrition.nutrients:
            return self.nutrition.nutrients[0].amount or 0
        return 0


class ExtendedIngredient(BaseModel):
    """One entry of a recipe's ``extendedIngredients``"""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: Optional[str] = ""
    name_clean: Optional[str] = Field(default=None, alias="nameClean")
    aisle: Optional[str] = None
    amount: Optional[float] = None
    unit: Optional[str] = None

    @property
    def display_name(self) -> str:
        return (self.name_clean or self.name or "").strip()

    @property
    def category(self) -> str:
        return self.aisle or "Other"

    @property
    def quantity(self) -> float:
        return self.amount or 0

    @property
    def unit_or_blank(self) -> str:
        return self.unit or ""


class SearchResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    results: List[RecipeSummary] = Field(default_factory=list)
    total_results: Optional[int] = Field(default=None, alias="totalResults")


class RandomResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    recipes: List[RecipeSummary] = Field(default_factory=list)


class RecipeInformation(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[int] = None
    title: Optional[str] = None
    # Entries are validated one by one so a malformed ingredient only drops itself
    extended_ingredients: Optional[List[Any]] = Field(default=None, alias="extendedIngredients")
