"""
Shared fixtures: an in-memory database per test and a fake recipe provider.
"""
from datetime import datetime
from typing import Dict, List, Optional

import httpx
import pytest

from core import database
from core.database import close_db, init_db
from models.users import Preferences, SubscriptionTier, User
from services.spoonacular_client import SpoonacularClient
from services.tier_policy import RequestContext, limits_for

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
PROVIDER_BASE_URL = "https://provider.test/recipes"


def recipe_payload(external_id: int, title: Optional[str] = None, calories: float = 450) -> Dict:
    """A search or random result as the provider sends it"""
    return {
        "id": external_id,
        "title": title or f"Recipe {external_id}",
        "image": f"https://img.test/{external_id}.jpg",
        "nutrition": {"nutrients": [{"name": "Calories", "amount": calories, "unit": "kcal"}]},
    }


def ingredient_payload(name: str, amount: Optional[float], unit: Optional[str], aisle: Optional[str] = "Produce") -> Dict:
    return {"name": name, "nameClean": name, "amount": amount, "unit": unit, "aisle": aisle}


class FakeSpoonacular:
    """Answers provider requests from in-memory data through httpx.MockTransport"""

    def __init__(self):
        self.recipes: List[Dict] = []
        self.random_recipes: List[Dict] = []
        self.ingredients: Dict[int, List[Dict]] = {}
        self.failing_details = set()
        self.search_status = 200
        self.requests: List[httpx.Request] = []

    def add_recipes(self, count: int, start: int = 1000, ingredients: Optional[List[Dict]] = None) -> None:
        for external_id in range(start, start + count):
            self.recipes.append(recipe_payload(external_id))
            self.ingredients[external_id] = list(ingredients or [])

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.endswith("/complexSearch"):
            if self.search_status != 200:
                return httpx.Response(self.search_status, json={"message": "quota exceeded"})
            number = int(request.url.params["number"])
            return httpx.Response(200, json={"results": self.recipes[:number], "totalResults": len(self.recipes)})

        if path.endswith("/random"):
            return httpx.Response(200, json={"recipes": self.random_recipes[:1]})

        if path.endswith("/information"):
            external_id = int(path.split("/")[-2])
            if external_id in self.failing_details:
                return httpx.Response(500, json={"message": "boom"})
            return httpx.Response(
                200,
                json={"id": external_id, "extendedIngredients": self.ingredients.get(external_id, [])},
            )

        return httpx.Response(404)

    def paths(self, suffix: str) -> List[httpx.Request]:
        return [request for request in self.requests if request.url.path.endswith(suffix)]

    def client(self) -> SpoonacularClient:
        return SpoonacularClient(
            api_key="test-key",
            base_url=PROVIDER_BASE_URL,
            client=httpx.AsyncClient(transport=httpx.MockTransport(self.handler)),
        )


@pytest.fixture
async def db_engine():
    """Fresh in-memory schema for every test"""
    await init_db(TEST_DATABASE_URL, create_all=True)
    yield database.engine
    await close_db()


@pytest.fixture
async def session(db_engine):
    async with database.async_session_factory() as session:
        yield session


@pytest.fixture
def fake_spoonacular() -> FakeSpoonacular:
    return FakeSpoonacular()


@pytest.fixture
async def provider(fake_spoonacular):
    client = fake_spoonacular.client()
    yield client
    await client.close()


async def create_user(
    session,
    email: str = "cook@example.com",
    tier: SubscriptionTier = SubscriptionTier.FREE,
    expires_at: Optional[datetime] = None,
    **preferences,
) -> User:
    """Add a user and, when any preference is given, a preferences row"""
    user = User(email=email, subscription_tier=tier, subscription_expires_at=expires_at)
    session.add(user)
    await session.flush()

    if preferences:
        session.add(Preferences(user_id=user.id, **preferences))
        await session.flush()

    return user


def context_for(user: User) -> RequestContext:
    tier = SubscriptionTier(user.subscription_tier)
    return RequestContext(user_id=user.id, tier=tier, limits=limits_for(tier))
