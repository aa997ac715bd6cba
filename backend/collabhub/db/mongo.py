from contextlib import asynccontextmanager
from motor.motor_asyncio import AsyncIOMotorClient
import asyncio
import logging
from ..core.settings import settings

logger = logging.getLogger(__name__)

_client: AsyncIOMotorClient | None = None
_db = None


async def connect(max_retries: int = 10, delay: float = 2.0):
    """Connect to MongoDB on startup with retry logic and create indexes."""
    global _client, _db

    for attempt in range(max_retries):
        try:
            _client = AsyncIOMotorClient(
                settings.MONGODB_URI,
                serverSelectionTimeoutMS=5000
            )
            # Actually test the connection with a ping
            await _client.admin.command('ping')
            _db = _client[settings.MONGODB_DB_NAME]
            logger.info("Connected to MongoDB db=%s", settings.MONGODB_DB_NAME)

            await create_indexes()
            return
        except Exception as e:
            if attempt < max_retries - 1:
                logger.warning("MongoDB connection attempt %d failed, retrying in %ss... (%s)", attempt + 1, delay, e)
                await asyncio.sleep(delay)
            else:
                logger.error("Failed to connect to MongoDB after %d attempts: %s", max_retries, e)
                raise


async def create_indexes():
    """Create database indexes for lookups and joins."""
    # Users: identity lookups and the $lookup join target
    await _db["users"].create_index("user_id", unique=True)
    await _db["users"].create_index("username", unique=True)
    await _db["users"].create_index("email", unique=True)

    # Projects
    await _db["projects"].create_index("project_id", unique=True)
    await _db["projects"].create_index("members.user_id")
    await _db["projects"].create_index("created_at")

    # Contents are always read scoped to a project
    await _db["contents"].create_index("content_id", unique=True)
    await _db["contents"].create_index("project_id")

    # Versions: approval clears flags across one content item
    await _db["versions"].create_index("version_id", unique=True)
    await _db["versions"].create_index([("content_id", 1), ("approved", 1)])

    logger.info("MongoDB indexes created")


async def close():
    """Close MongoDB connection on shutdown."""
    global _client
    if _client:
        _client.close()
        logger.info("MongoDB connection closed")


def db():
    """Return the database instance. Call after connect()."""
    if _db is None:
        raise RuntimeError("Database not connected. Call connect() first.")
    return _db


@asynccontextmanager
async def transaction():
    """
    Group writes that touch more than one collection.

    Yields a session bound to a multi-document transaction when
    MONGODB_USE_TRANSACTIONS is enabled. Otherwise yields None and the
    writes are applied one after another with no rollback.
    """
    if not settings.MONGODB_USE_TRANSACTIONS:
        yield None
        return

    async with await _client.start_session() as session:
        async with session.start_transaction():
            yield session
