"""
Meal Planner Recipe Models
Database models for recipes and ingredients
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from core.database import Base


class Recipe(Base):
    """Locally cached copy of one provider recipe"""
    __tablename__ = "recipes"

    id = Column(Integer, primary_key=True)
    external_id = Column(Integer, index=True)  # provider recipe id, not unique
    title = Column(String(255), nullable=False)
    image_url = Column(String(500))
    source = Column(String(50), nullable=False, default="spoonacular")
    calories = Column(Float, nullable=False, default=0)
    diet_type = Column(String(50))

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    ingredients = relationship("RecipeIngredient", back_populates="recipe", cascade="all, delete-orphan")

    def to_dict(self):
        """Convert recipe to dictionary"""
        return {
            "recipe_id": self.id,
            "external_id": self.external_id,
            "title": self.title,
            "image_url": self.image_url,
            "source": self.source,
            "calories": self.calories,
            "diet_type": self.diet_type,
        }


class Ingredient(Base):
    """Canonical ingredient, identified by its normalised name"""
    __tablename__ = "ingredients"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, unique=True)  # lower-cased, trimmed
    display_name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False, default="Other")  # store aisle

    def __repr__(self):
        return f"<Ingredient(id={self.id}, name={self.name}, category={self.category})>"


class RecipeIngredient(Base):
    """Quantity of one ingredient used by one recipe"""
    __tablename__ = "recipe_ingredients"

    id = Column(Integer, primary_key=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True)
    ingredient_id = Column(Integer, ForeignKey("ingredients.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False, default=0)
    unit = Column(String(50), nullable=False, default="")

    # Relationships
    recipe = relationship("Recipe", back_populates="ingredients")
    ingredient = relationship("Ingredient")
