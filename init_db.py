"""
Create all tables from the SQLModel entities.

Usage: python init_db.py
"""

import asyncio
import logging

from sqlmodel import SQLModel

import src.domain.entities  # noqa: F401  registers the tables on SQLModel.metadata
from config import ApplicationConfig
from src.depends import engine

logger = logging.getLogger(__name__)


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    await engine.dispose()
    logger.info(f"Tables created on {ApplicationConfig.DB_URI.split('@')[-1]}")


if __name__ == "__main__":
    logging.basicConfig(level=ApplicationConfig.LOG_LEVEL)
    asyncio.run(init_db())
