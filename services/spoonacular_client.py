"""
Meal Planner Recipe Provider Client
Calls the Spoonacular recipes API for search, random picks and ingredient detail
"""

from typing import Any, Dict, List, Optional
import structlog
import httpx
from pydantic import ValidationError

from core.config import settings
from core.exceptions import UpstreamFailure
from schemas.provider_schemas import (
    ExtendedIngredient,
    RandomResponse,
    RecipeInformation,
    RecipeSummary,
    SearchResponse,
)

logger = structlog.get_logger()


class SpoonacularClient:
    """Client for the external recipe provider"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.SPOONACULAR_API_KEY
        self.base_url = (base_url or settings.SPOONACULAR_BASE_URL).rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=timeout or settings.PROVIDER_TIMEOUT)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        await self.client.aclose()

    async def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        query = {"apiKey": self.api_key or ""}
        query.update({key: value for key, value in params.items() if value is not None})

        try:
            response = await self.client.get(f"{self.base_url}{path}", params=query)
            response.raise_for_status()
            return response.json()

        except httpx.TimeoutException as e:
            logger.error("Recipe provider timed out", path=path, error=str(e))
            raise UpstreamFailure(f"Recipe provider timed out: {path}") from e
        except httpx.HTTPStatusError as e:
            logger.error("Recipe provider returned error", path=path, status=e.response.status_code)
            raise UpstreamFailure(f"API responded with status: {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error("Recipe provider request failed", path=path, error=str(e))
            raise UpstreamFailure(f"Recipe provider request failed: {e}") from e
        except ValueError as e:
            logger.error("Recipe provider sent invalid JSON", path=path, error=str(e))
            raise UpstreamFailure("Recipe provider sent an invalid response") from e

    async def search_recipes(
        self,
        number: int,
        diet: Optional[str] = None,
        intolerances: Optional[str] = None,
        min_calories: Optional[int] = None,
        max_calories: Optional[int] = None,
    ) -> List[RecipeSummary]:
        """Search for ``number`` recipes matching the dietary filters"""
        data = await self._get(
            "/complexSearch",
            {
                "number": number,
                "addRecipeInformation": "true",
                "fillIngredients": "true",
                "diet": diet or None,
                "intolerances": intolerances or None,
                "minCalories": min_calories,
                "maxCalories": max_calories,
            },
        )
        try:
            results = SearchResponse.model_validate(data).results
        except ValidationError as e:
            logger.error("Unexpected search payload", error=str(e))
            raise UpstreamFailure("Recipe provider sent an invalid search response") from e

        logger.info("Recipe search completed", requested=number, returned=len(results), diet=diet)
        return results

    async def random_recipe(
        self,
        diet: Optional[str] = None,
        intolerances: Optional[str] = None,
    ) -> RecipeSummary:
        """Fetch a single random recipe respecting the dietary filters"""
        data = await self._get(
            "/random",
            {
                "number": 1,
                "addRecipeInformation": "true",
                "diet": diet or None,
                "intolerances": intolerances or None,
            },
        )
        try:
            recipes = RandomResponse.model_validate(data).recipes
        except ValidationError as e:
            logger.error("Unexpected random payload", error=str(e))
            raise UpstreamFailure("Recipe provider sent an invalid random response") from e

        if not recipes:
            raise UpstreamFailure("Recipe provider returned no random recipe")
        return recipes[0]

    async def recipe_ingredients(self, external_id: int) -> List[ExtendedIngredient]:
        """Fetch the full ingredient list of one provider recipe"""
        data = await self._get(f"/{external_id}/information", {"includeNutrition": "false"})
        try:
            information = RecipeInformation.model_validate(data)
        except ValidationError as e:
            logger.error("Unexpected recipe information payload", external_id=external_id, error=str(e))
            raise UpstreamFailure("Recipe provider sent an invalid recipe detail") from e

        ingredients: List[ExtendedIngredient] = []
        for position, raw in enumerate(information.extended_ingredients or []):
            try:
                ingredients.append(ExtendedIngredient.model_validate(raw))
            except ValidationError as e:
                logger.warning(
                    "Skipping malformed ingredient",
                    external_id=external_id,
                    position=position,
                    error=str(e),
                )
        return ingredients


# Shared client, opened in the application lifespan
spoonacular_client: Optional[SpoonacularClient] = None


def init_recipe_provider() -> SpoonacularClient:
    global spoonacular_client
    if spoonacular_client is None:
        spoonacular_client = SpoonacularClient()
        logger.info("Recipe provider client created", base_url=spoonacular_client.base_url)
    return spoonacular_client


async def close_recipe_provider() -> None:
    global spoonacular_client
    if spoonacular_client is not None:
        await spoonacular_client.close()
        spoonacular_client = None
        logger.info("Recipe provider client closed")


def get_recipe_provider() -> SpoonacularClient:
    """Dependency returning the shared provider client"""
    return init_recipe_provider()
