import logging

from fastapi import APIRouter, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.api.dependencies import db_dep
from app.api.endpoints import doctors, enemies, episodes, llm, queries
from app.core.errors import DatabaseError
from app.core.responses import success_response

api_router = APIRouter(prefix="/api")

# Combine all sub-routers into one
api_router.include_router(doctors.router)
api_router.include_router(episodes.router)
api_router.include_router(enemies.router)
api_router.include_router(queries.router)
api_router.include_router(llm.router)


@api_router.get("/health", tags=["Health"])
async def health(request: Request, db: db_dep):
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as error:
        logging.error(f"Health check failed: {error}")
        raise DatabaseError("Database connection failed")
    return success_response(request, {"database": "connected"})
