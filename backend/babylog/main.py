"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from babylog.config import settings
from babylog.db.database import engine, Base
from babylog.db.redis import close_redis
from babylog.services.scoring_service import ScoringService, load_scoring_config

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create tables (dev only; use Alembic in production)
    import babylog.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    app.state.scoring_service = ScoringService(load_scoring_config(settings.SCORING_CONFIG_PATH))
    logger.info("Scoring service ready (config: %s)", settings.SCORING_CONFIG_PATH or "defaults")
    yield
    # Shutdown: close connections
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title="Babylog API",
    description="Backend API for logging infant-care events, with points and a leaderboard",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # TODO: restrict to the web client's origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Routes ---
from babylog.api.routes import users, activities, todos, scoring  # noqa: E402

app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(activities.router, prefix="/api/activities", tags=["activities"])
app.include_router(todos.router, prefix="/api/todos", tags=["todos"])
app.include_router(scoring.router, prefix="/api/scoring", tags=["scoring"])


@app.get("/health")
async def health_check():
    return {"status": "ok"}
