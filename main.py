"""
Smart Meal Planner Backend Service - Main API Server
Meal plan generation, meal replacement and shopping lists
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog
import time
from typing import AsyncGenerator

from core.config import settings
from core.database import init_db, close_db
from core.exceptions import MealPlannerError
from core.logging import configure_logging
from api.routes import api_router
from middleware.logging import LoggingMiddleware, get_request_id
from services.spoonacular_client import init_recipe_provider, close_recipe_provider

configure_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events"""
    logger.info("Starting Smart Meal Planner Backend Service", environment=settings.ENVIRONMENT)

    try:
        await init_db()
        logger.info("Database connection established")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))

    init_recipe_provider()
    if not settings.SPOONACULAR_API_KEY:
        logger.warning("SPOONACULAR_API_KEY is not set; recipe provider calls will be rejected")

    logger.info("Backend service startup complete")

    yield

    logger.info("Shutting down Smart Meal Planner Backend Service")
    await close_recipe_provider()
    await close_db()
    logger.info("Backend service shutdown complete")


app = FastAPI(
    title="Smart Meal Planner Backend Service",
    description="Weekly meal plans from dietary preferences, with aggregated shopping lists",
    version=settings.VERSION,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Process-Time", "X-Request-ID"]
)
app.add_middleware(LoggingMiddleware)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add response time header"""
    start_time = time.time()
    response = await call_next(request)
    response.headers["X-Process-Time"] = str(time.time() - start_time)
    return response


@app.exception_handler(MealPlannerError)
async def meal_planner_exception_handler(request: Request, exc: MealPlannerError):
    """Policy, ownership and provider errors"""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "Request rejected",
        error=exc.message,
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        path=request.url.path,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(
        "Unhandled exception",
        exception=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
        headers={"X-Request-ID": get_request_id()}
    )


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": settings.APP_NAME,
        "version": settings.VERSION,
        "status": "running",
        "environment": settings.ENVIRONMENT
    }


app.include_router(api_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development,
        log_config=None  # Use structlog instead
    )
