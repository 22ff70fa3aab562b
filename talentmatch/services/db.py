import motor.motor_asyncio
from pymongo import ASCENDING, DESCENDING

from talentmatch import config
from talentmatch.utils.logging_config import get_logger

logger = get_logger(__name__)

logger.info(f"Initializing MongoDB connection to database: {config.DB_NAME}")

# Motor connects lazily, so building the client does not touch the network
client = motor.motor_asyncio.AsyncIOMotorClient(config.MONGO_DETAILS)
db = client[config.DB_NAME]

# Collections
embeddings_coll = db["embeddings"]
jobs_coll = db["jobs"]


async def init_indexes():
    """Index initialization for collections."""
    logger.info("Starting database index initialization")

    try:
        await embeddings_coll.create_index([("userId", ASCENDING), ("createdAt", DESCENDING)])
        logger.debug("Created index on embeddings.(userId, createdAt)")
    except Exception as e:
        logger.warning(f"Could not create index on embeddings.(userId, createdAt): {e}")

    try:
        await jobs_coll.create_index([("status", ASCENDING), ("deadline", ASCENDING)])
        logger.debug("Created index on jobs.(status, deadline)")
    except Exception as e:
        logger.warning(f"Could not create index on jobs.(status, deadline): {e}")

    logger.info("Database index initialization completed")
