import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from motor.motor_asyncio import AsyncIOMotorClient

from config.settings import MONGODB_URI, MONGODB_DB

logger = logging.getLogger(__name__)

client = AsyncIOMotorClient(MONGODB_URI)
database = client[MONGODB_DB]


async def create_indexes(db=None):
    db = db if db is not None else database
    await db["users"].create_index("username", unique=True)
    await db["users"].create_index("email", unique=True)
    await db["quizzes"].create_index("isPublic")
    await db["attempts"].create_index("user")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await client.admin.command("ping")
    logger.info("MongoDB connected: %s", MONGODB_DB)
    await create_indexes()
    yield
    client.close()
    logger.info("MongoDB connection closed")
