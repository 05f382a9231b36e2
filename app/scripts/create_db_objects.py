"""
(Re)create the summary views on the configured database.

Usage:
    python -m app.scripts.create_db_objects
"""

import asyncio
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from app.core.database import engine
from app.core.db_objects import provision_views

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def create_db_objects() -> None:
    try:
        # One transaction: either both views exist afterwards or neither changed
        async with engine.begin() as conn:
            created = await provision_views(conn)
        for name in created:
            logger.info(f"View created: {name}")
    finally:
        await engine.dispose()


def main() -> int:
    try:
        asyncio.run(create_db_objects())
    except (SQLAlchemyError, ValueError) as error:
        logger.error(f"Failed to create database objects: {error}")
        return 1
    logger.info("Database objects created successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
