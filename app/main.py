import asyncio
import logging
from contextlib import asynccontextmanager

import alembic.command
import alembic.config
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_exception_handlers
from app.api.router import api_router
from app.core.config import settings
from app.core.database import engine
from app.core.responses import success_response

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

ENDPOINTS = {
    "health": "/api/health",
    "doctors": "/api/doctors",
    "episodes": "/api/episodes",
    "enemies": "/api/enemies",
    "queries": {
        "joins": [
            "/api/queries/join/doctor/{id}",
            "/api/queries/join/episode/{id}",
        ],
        "views": [
            "/api/queries/view/doctor-summary",
            "/api/queries/view/enemy-summary",
        ],
        "procedures": [
            "/api/queries/procedure/enemies/{threat_level}",
            "/api/queries/procedure/doctor/{incarnation}",
        ],
        "updates": ["/api/queries/update/enemy/{id}/threat-level"],
    },
    "llm": "/api/llm/query",
}


def run_migrations():
    """Sync function to run migrations"""
    alembic_cfg = alembic.config.Config("alembic.ini")
    alembic.command.upgrade(alembic_cfg, "head")


# Close the engine once everything is done and close all the sessions
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Apply any pending migrations automatically when the app starts
    if settings.RUN_MIGRATIONS:
        try:
            await asyncio.to_thread(run_migrations)
            logger.info("Migrations applied successfully (or already up-to-date)")
        except Exception as e:
            logger.error(f"Migration error during startup: {e}")

    yield
    await engine.dispose()


app = FastAPI(title="Doctor Who Database API", version=API_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include the master router containing all our endpoints
app.include_router(api_router)


@app.get("/")
async def root(request: Request):
    return success_response(
        request,
        {
            "message": "Welcome to the Doctor Who Database API",
            "version": API_VERSION,
            "endpoints": ENDPOINTS,
        },
    )
