"""
Meal Planner Core Dependencies
FastAPI dependencies for the authenticated user and the tier-resolved request context
"""

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, Annotated
import structlog

from core.database import get_db
from models.users import User
from services.spoonacular_client import SpoonacularClient, get_recipe_provider
from services.tier_policy import RequestContext, build_request_context, coerce_tier

logger = structlog.get_logger()


async def get_current_user(
    x_user_id: Annotated[Optional[str], Header(alias="X-User-ID")] = None,
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Load the user resolved by the upstream auth gateway

    Raises:
        HTTPException: 401 if no valid user id was forwarded, 404 if the user is unknown
    """
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    try:
        user_id = int(x_user_id)
    except ValueError:
        logger.warning("Malformed user id header", value=x_user_id)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    user = await db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    return user


async def get_request_context(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> RequestContext:
    """Resolve the effective tier once per request, downgrading expired subscriptions"""
    stored_tier = coerce_tier(current_user.subscription_tier)
    context = await build_request_context(db, current_user)

    if context.tier != stored_tier:
        # The downgrade must outlive a rollback of the operation that follows
        await db.commit()

    return context


# Type aliases for common dependencies
CurrentUser = Annotated[User, Depends(get_current_user)]
Context = Annotated[RequestContext, Depends(get_request_context)]
DBSession = Annotated[AsyncSession, Depends(get_db)]
RecipeProvider = Annotated[SpoonacularClient, Depends(get_recipe_provider)]
