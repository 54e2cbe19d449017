"""
Meal Planner Shopping Lists Endpoints
Aggregated shopping lists derived from meal plans
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from core.dependencies import Context, DBSession
from services.shopping_list_service import build_shopping_list, export_shopping_list
from schemas.meal_planning_schemas import ShoppingListResponse

router = APIRouter()


@router.get("/{plan_id}", response_model=ShoppingListResponse)
async def get_shopping_list(plan_id: int, context: Context, db: DBSession):
    """
    Shopping list for a meal plan

    Ingredients are merged by name, grouped by aisle, and also listed per recipe.
    """
    shopping_list = await build_shopping_list(db, context, plan_id)
    return ShoppingListResponse.model_validate(shopping_list.to_dict())


@router.get("/{plan_id}/export", response_class=PlainTextResponse)
async def export_list(plan_id: int, context: Context, db: DBSession):
    """Download the shopping list as text (premium and pro)"""
    text = await export_shopping_list(db, context, plan_id)
    return PlainTextResponse(
        text,
        headers={"Content-Disposition": f'attachment; filename="shopping-list-{plan_id}.txt"'},
    )
