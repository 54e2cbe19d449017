"""initial schema
Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

subscription_tier = sa.Enum("free", "premium", "pro", name="subscription_tier")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("subscription_tier", subscription_tier, nullable=False),
        sa.Column("subscription_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "preferences",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("diet_type", sa.String(length=50), nullable=True),
        sa.Column("calorie_target", sa.Integer(), nullable=True),
        sa.Column("allergies", sa.String(length=500), nullable=True),
        sa.Column("meals_per_day", sa.Integer(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_preferences_user_id_users", ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id", name="pk_preferences"),
        sa.UniqueConstraint("user_id", name="uq_preferences_user_id"),
    )

    op.create_table(
        "recipes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("external_id", sa.Integer(), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("image_url", sa.String(length=500), nullable=True),
        sa.Column("source", sa.String(length=50), nullable=False),
        sa.Column("calories", sa.Float(), nullable=False),
        sa.Column("diet_type", sa.String(length=50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_recipes"),
    )
    op.create_index("ix_recipes_external_id", "recipes", ["external_id"])

    op.create_table(
        "ingredients",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_ingredients"),
        sa.UniqueConstraint("name", name="uq_ingredients_name"),
    )

    op.create_table(
        "recipe_ingredients",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("recipe_id", sa.Integer(), nullable=False),
        sa.Column("ingredient_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("unit", sa.String(length=50), nullable=False),
        sa.ForeignKeyConstraint(["recipe_id"], ["recipes.id"], name="fk_recipe_ingredients_recipe_id_recipes", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["ingredient_id"], ["ingredients.id"], name="fk_recipe_ingredients_ingredient_id_ingredients"),
        sa.PrimaryKeyConstraint("id", name="pk_recipe_ingredients"),
    )
    op.create_index("ix_recipe_ingredients_recipe_id", "recipe_ingredients", ["recipe_id"])
    op.create_index("ix_recipe_ingredients_ingredient_id", "recipe_ingredients", ["ingredient_id"])

    op.create_table(
        "meal_plans",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("week_start_date", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_meal_plans_user_id_users", ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id", name="pk_meal_plans"),
    )
    op.create_index("ix_meal_plans_user_id", "meal_plans", ["user_id"])
    op.create_index("ix_meal_plans_week_start_date", "meal_plans", ["week_start_date"])

    op.create_table(
        "meal_plan_items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("plan_id", sa.Integer(), nullable=False),
        sa.Column("day_of_week", sa.String(length=3), nullable=False),
        sa.Column("meal_number", sa.Integer(), nullable=False),
        sa.Column("recipe_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["plan_id"], ["meal_plans.id"], name="fk_meal_plan_items_plan_id_meal_plans", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["recipe_id"], ["recipes.id"], name="fk_meal_plan_items_recipe_id_recipes"),
        sa.PrimaryKeyConstraint("id", name="pk_meal_plan_items"),
        sa.UniqueConstraint("plan_id", "day_of_week", "meal_number", name="uq_meal_plan_items_slot"),
    )
    op.create_index("ix_meal_plan_items_plan_id", "meal_plan_items", ["plan_id"])
    op.create_index("ix_meal_plan_items_recipe_id", "meal_plan_items", ["recipe_id"])

    op.create_table(
        "shopping_list_items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("plan_id", sa.Integer(), nullable=False),
        sa.Column("ingredient_id", sa.Integer(), nullable=False),
        sa.Column("total_amount", sa.Float(), nullable=False),
        sa.Column("unit", sa.String(length=50), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["plan_id"], ["meal_plans.id"], name="fk_shopping_list_items_plan_id_meal_plans", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["ingredient_id"], ["ingredients.id"], name="fk_shopping_list_items_ingredient_id_ingredients"),
        sa.PrimaryKeyConstraint("id", name="pk_shopping_list_items"),
    )
    op.create_index("ix_shopping_list_items_plan_id", "shopping_list_items", ["plan_id"])


def downgrade() -> None:
    op.drop_table("shopping_list_items")
    op.drop_table("meal_plan_items")
    op.drop_table("meal_plans")
    op.drop_table("recipe_ingredients")
    op.drop_table("ingredients")
    op.drop_table("recipes")
    op.drop_table("preferences")
    op.drop_table("users")
    subscription_tier.drop(op.get_bind(), checkfirst=True)
