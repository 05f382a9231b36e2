from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends
from openai import AsyncOpenAI
from sqlalchemy.ext.asyncio import AsyncSession

from app.ai_feature.service import NaturalLanguageQueryService
from app.core import repository
from app.core.config import settings
from app.core.database import get_db
from app.core.queries.service import QueryService
from app.core.repository import EntityRepository

# Modern Dependency Injection
db_dep = Annotated[AsyncSession, Depends(get_db)]


def get_doctor_repository(db: db_dep) -> EntityRepository:
    return EntityRepository(db, repository.DOCTORS)


def get_episode_repository(db: db_dep) -> EntityRepository:
    return EntityRepository(db, repository.EPISODES)


def get_enemy_repository(db: db_dep) -> EntityRepository:
    return EntityRepository(db, repository.ENEMIES)


def get_query_service(db: db_dep) -> QueryService:
    return QueryService(db)


@lru_cache
def get_llm_client() -> Optional[AsyncOpenAI]:
    # No key means the feature is off, the service refuses before calling out
    if not settings.OPENAI_API_KEY:
        return None
    return AsyncOpenAI(api_key=settings.OPENAI_API_KEY)


def get_nl_query_service(
    db: db_dep,
    client: Annotated[Optional[AsyncOpenAI], Depends(get_llm_client)],
) -> NaturalLanguageQueryService:
    return NaturalLanguageQueryService(db, client, settings.OPENAI_MODEL)


doctor_repo_dep = Annotated[EntityRepository, Depends(get_doctor_repository)]
episode_repo_dep = Annotated[EntityRepository, Depends(get_episode_repository)]
enemy_repo_dep = Annotated[EntityRepository, Depends(get_enemy_repository)]
query_service_dep = Annotated[QueryService, Depends(get_query_service)]
nl_service_dep = Annotated[NaturalLanguageQueryService, Depends(get_nl_query_service)]
