"""Natural-language questions about the database, answered by a chat model.

Flow:
1. Collect the table names and a fixed list of relationships
2. Pull three sample rows each from doctors, episodes and enemies
3. Send the prompt plus the user's question to the chat-completion API
4. Return the completion text verbatim
"""

import json
import logging
from typing import Any, Dict, List, Optional

import openai
from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core import models
from app.core.database import Base
from app.core.errors import (
    LLMAuthenticationError,
    LLMNotConfiguredError,
    LLMQuotaExceededError,
    LLMServiceError,
)

logger = logging.getLogger(__name__)

TEMPERATURE = 0.7
MAX_TOKENS = 500
SAMPLE_SIZE = 3

RELATIONSHIPS = [
    "Doctors have companions (many-to-many)",
    "Episodes have enemies (many-to-many)",
    "Episodes visit planets (many-to-many)",
    "Doctors are played by actors (one-to-many)",
    "Episodes belong to seasons (many-to-one)",
]


def table_names() -> List[str]:
    return list(Base.metadata.tables.keys())


def _compact(rows: List[Dict[str, Any]]) -> str:
    return json.dumps(rows, separators=(",", ":"), default=str)


async def collect_samples(db: AsyncSession) -> Dict[str, List[Dict[str, Any]]]:
    doctors = await db.execute(
        select(models.Doctor)
        .options(selectinload(models.Doctor.actor))
        .order_by(models.Doctor.doctor_id)
        .limit(SAMPLE_SIZE)
    )
    episodes = await db.execute(
        select(models.Episode)
        .options(selectinload(models.Episode.season))
        .order_by(models.Episode.episode_id)
        .limit(SAMPLE_SIZE)
    )
    enemies = await db.execute(
        select(models.Enemy).order_by(models.Enemy.enemy_id).limit(SAMPLE_SIZE)
    )

    return {
        "doctors": [
            {
                "id": d.doctor_id,
                "incarnation": d.incarnation_number,
                "actor": d.actor.name if d.actor else None,
            }
            for d in doctors.scalars().all()
        ],
        "episodes": [
            {
                "id": e.episode_id,
                "title": e.title,
                "season": e.season.series_number if e.season else None,
            }
            for e in episodes.scalars().all()
        ],
        "enemies": [
            {"id": e.enemy_id, "name": e.name, "threat": e.threat_level}
            for e in enemies.scalars().all()
        ],
    }


def build_system_prompt(samples: Dict[str, List[Dict[str, Any]]]) -> str:
    return (
        "Help users query our Doctor Who database. "
        f"Tables: {', '.join(table_names())}.\n\n"
        f"Relationships: {', '.join(RELATIONSHIPS)}\n\n"
        "Sample data:\n"
        f"Doctors: {_compact(samples['doctors'])}\n"
        f"Episodes: {_compact(samples['episodes'])}\n"
        f"Enemies: {_compact(samples['enemies'])}\n\n"
        "Answer questions about the database and suggest relevant API endpoints "
        "when helpful."
    )


def _upstream_message(error: openai.APIStatusError) -> Optional[str]:
    body = error.body
    if isinstance(body, dict):
        inner = body.get("error", body)
        if isinstance(inner, dict):
            return inner.get("message")
    return None


class NaturalLanguageQueryService:
    def __init__(self, db: AsyncSession, client: Optional[Any], model: str):
        self.db = db
        self.client = client
        self.model = model

    async def answer(self, question: str) -> Dict[str, Any]:
        """
        Ask the chat model about the database.

        Raises:
            LLMNotConfiguredError: no API key, nothing is sent
            LLMQuotaExceededError: upstream answered 429
            LLMAuthenticationError: upstream answered 401
            LLMServiceError: any other upstream failure
        """
        if self.client is None:
            raise LLMNotConfiguredError()

        samples = await collect_samples(self.db)
        messages = [
            {"role": "system", "content": build_system_prompt(samples)},
            {"role": "user", "content": question},
        ]

        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=TEMPERATURE,
                max_tokens=MAX_TOKENS,
            )
        except openai.APIStatusError as error:
            logger.error(f"LLM request failed with {error.status_code}: {error}")
            if error.status_code == status.HTTP_429_TOO_MANY_REQUESTS:
                raise LLMQuotaExceededError(_upstream_message(error))
            if error.status_code == status.HTTP_401_UNAUTHORIZED:
                raise LLMAuthenticationError()
            raise LLMServiceError(str(error), details=_upstream_message(error))
        except openai.APIError as error:
            logger.error(f"LLM request failed: {error}")
            raise LLMServiceError(str(error))

        return {
            "answer": completion.choices[0].message.content,
            "query": question,
            "model": self.model,
        }
