"""
Tests for subscription limits and lazy expiry.
"""
from datetime import timedelta

import pytest

from core.exceptions import PolicyRejection
from models.users import SubscriptionTier, User
from services.tier_policy import (
    TIER_LIMITS,
    UNLIMITED,
    build_request_context,
    limits_for,
    require_export,
    resolve_effective_tier,
)
from utils.date_utils import utc_now

from conftest import context_for, create_user


def test_tier_limits_table():
    """Each tier's quantities match the published plans."""
    free = limits_for(SubscriptionTier.FREE)
    assert (free.max_plans, free.meals_per_plan, free.can_export, free.can_share_plans) == (3, 14, False, False)

    premium = limits_for("premium")
    assert (premium.max_plans, premium.meals_per_plan, premium.can_export) == (10, 21, True)

    pro = limits_for(SubscriptionTier.PRO)
    assert pro.max_plans == UNLIMITED
    assert not pro.has_plan_cap
    assert pro.can_share_plans


def test_meals_per_day_derived_from_weekly_quota():
    """meals per day is the weekly quota divided over seven days."""
    assert limits_for("free").max_meals_per_day == 2
    assert limits_for("premium").max_meals_per_day == 3
    assert limits_for("pro").max_meals_per_day == 4

    for limits in TIER_LIMITS.values():
        assert limits.max_meals_per_day * 7 <= limits.meals_per_plan


def test_unknown_tier_gets_free_limits():
    assert limits_for("platinum") == limits_for(SubscriptionTier.FREE)
    assert limits_for(None) == limits_for(SubscriptionTier.FREE)


def test_limits_to_dict_uses_camel_case():
    data = limits_for("premium").to_dict()
    assert data["maxPlans"] == 10
    assert data["maxMealsPerDay"] == 3
    assert data["canExport"] is True


async def test_expired_paid_tier_is_downgraded_and_persisted(session):
    user = await create_user(session, tier=SubscriptionTier.PREMIUM, expires_at=utc_now() - timedelta(days=1))
    await session.commit()

    context = await build_request_context(session, user)
    await session.commit()

    assert context.tier == SubscriptionTier.FREE
    assert context.limits == limits_for("free")

    session.expire_all()
    stored = await session.get(User, user.id)
    assert stored.subscription_tier == SubscriptionTier.FREE


async def test_active_paid_tier_is_kept(session):
    user = await create_user(session, tier=SubscriptionTier.PRO, expires_at=utc_now() + timedelta(days=30))

    assert await resolve_effective_tier(session, user) == SubscriptionTier.PRO


async def test_paid_tier_without_expiry_never_lapses(session):
    user = await create_user(session, tier=SubscriptionTier.PREMIUM)

    assert await resolve_effective_tier(session, user) == SubscriptionTier.PREMIUM


async def test_expiry_is_checked_against_given_time(session):
    expires_at = utc_now() + timedelta(days=2)
    user = await create_user(session, tier=SubscriptionTier.PREMIUM, expires_at=expires_at)

    later = expires_at + timedelta(seconds=1)
    assert await resolve_effective_tier(session, user, now=later) == SubscriptionTier.FREE


async def test_export_requires_paid_tier(session):
    free_user = await create_user(session, email="free@example.com")
    premium_user = await create_user(session, email="premium@example.com", tier=SubscriptionTier.PREMIUM)

    with pytest.raises(PolicyRejection) as exc_info:
        require_export(context_for(free_user))
    assert exc_info.value.upgrade_required
    assert exc_info.value.status_code == 403

    require_export(context_for(premium_user))
