from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from talentmatch import config
from talentmatch.middleware.error_handlers import ExceptionHandlerMiddleware, PerformanceMiddleware
from talentmatch.models.scoring_settings import SCORE_WEIGHTS
from talentmatch.routers import matches, recommendations
from talentmatch.utils.logging_config import configure_for_environment, get_logger

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    logger.info("Match scoring API starting up...")
    try:
        from talentmatch.services.db import init_indexes
        await init_indexes()
    except Exception as e:
        logger.warning(f"Database index initialization had issues: {e}")
    logger.info("Match scoring API startup completed")

    yield

    logger.info("Match scoring API shutting down...")


app = FastAPI(title="Talent Match API", version="1.0.0", lifespan=lifespan)

# Last added runs first: request ids are assigned before timing starts
app.add_middleware(PerformanceMiddleware, slow_request_threshold=config.SLOW_REQUEST_THRESHOLD)
app.add_middleware(ExceptionHandlerMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
@app.head("/")
async def root():
    """Root endpoint with the scoring weight contract"""
    return {
        "message": "Welcome to the Talent Match API",
        "version": "1.0.0",
        "status": "ok",
        "weights": SCORE_WEIGHTS.model_dump(),
    }


@app.get("/health")
@app.head("/health")
async def health_check():
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


app.include_router(recommendations.router, prefix="/api/jobs", tags=["recommendations"])
app.include_router(matches.router, prefix="/api/match", tags=["match"])

logger.info("Match scoring API initialized successfully")
