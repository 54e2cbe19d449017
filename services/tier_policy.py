"""
Meal Planner Tier Policy
Subscription limits per tier and lazy expiry handling
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Union

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import PolicyRejection
from models.users import SubscriptionTier, User
from utils.date_utils import is_past, utc_now

logger = structlog.get_logger()

UNLIMITED = -1


@dataclass(frozen=True)
class TierLimits:
    """What each tier gets"""
    max_plans: int
    meals_per_plan: int
    can_export: bool
    can_share_plans: bool
    api_calls_per_day: int

    @property
    def has_plan_cap(self) -> bool:
        return self.max_plans != UNLIMITED

    @property
    def max_meals_per_day(self) -> int:
        return self.meals_per_plan // 7

    def to_dict(self) -> Dict[str, object]:
        return {
            "maxPlans": self.max_plans,
            "mealsPerPlan": self.meals_per_plan,
            "maxMealsPerDay": self.max_meals_per_day,
            "canExport": self.can_export,
            "canSharePlans": self.can_share_plans,
            "apiCallsPerDay": self.api_calls_per_day,
        }


TIER_LIMITS: Dict[SubscriptionTier, TierLimits] = {
    SubscriptionTier.FREE: TierLimits(
        max_plans=3,
        meals_per_plan=14,  # 7 days times 2 meals
        can_export=False,
        can_share_plans=False,
        api_calls_per_day=50,
    ),
    SubscriptionTier.PREMIUM: TierLimits(
        max_plans=10,
        meals_per_plan=21,  # 7 days times 3 meals
        can_export=True,
        can_share_plans=False,
        api_calls_per_day=150,
    ),
    SubscriptionTier.PRO: TierLimits(
        max_plans=UNLIMITED,
        meals_per_plan=28,  # 7 days times 4 meals
        can_export=True,
        can_share_plans=True,
        api_calls_per_day=500,
    ),
}


def coerce_tier(tier: Union[SubscriptionTier, str, None]) -> SubscriptionTier:
    if isinstance(tier, SubscriptionTier):
        return tier
    try:
        return SubscriptionTier(tier)
    except ValueError:
        return SubscriptionTier.FREE


def limits_for(tier: Union[SubscriptionTier, str, None]) -> TierLimits:
    """Limits for a tier; unknown tiers get the free limits"""
    return TIER_LIMITS[coerce_tier(tier)]


def is_expired(user: User, now: Optional[datetime] = None) -> bool:
    return is_past(user.subscription_expires_at, now)


async def resolve_effective_tier(
    session: AsyncSession,
    user: User,
    now: Optional[datetime] = None,
) -> SubscriptionTier:
    """
    Tier the user is entitled to right now

    A paid tier whose expiry has passed reverts to free, and the downgrade
    is written so later requests read ``free`` directly.
    """
    tier = coerce_tier(user.subscription_tier)

    if tier != SubscriptionTier.FREE and is_expired(user, now):
        logger.info(
            "Subscription expired, downgrading to free",
            user_id=user.id,
            previous_tier=tier.value,
            expired_at=str(user.subscription_expires_at),
        )
        user.subscription_tier = SubscriptionTier.FREE
        await session.flush()
        return SubscriptionTier.FREE

    return tier


@dataclass(frozen=True)
class RequestContext:
    """Authenticated user and resolved tier for one request"""
    user_id: int
    tier: SubscriptionTier
    limits: TierLimits


async def build_request_context(
    session: AsyncSession,
    user: User,
    now: Optional[datetime] = None,
) -> RequestContext:
    tier = await resolve_effective_tier(session, user, now)
    return RequestContext(user_id=user.id, tier=tier, limits=limits_for(tier))


def require_export(context: RequestContext) -> None:
    if not context.limits.can_export:
        raise PolicyRejection(
            f"Exporting shopping lists is not available on the {context.tier.value} tier. Upgrade for more!",
            upgrade_required=True,
        )
