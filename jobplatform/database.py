import logging

from motor.motor_asyncio import AsyncIOMotorClient

from jobplatform import config

logger = logging.getLogger(__name__)

client = None
db = None


async def connect_to_mongo():
    """Open the shared Motor client. Any failure here is fatal for the process."""
    global client, db

    if not config.MONGO_URI:
        logger.critical("MONGO_URI environment variable is not set! Check your .env file.")
        raise SystemExit(1)

    try:
        client = AsyncIOMotorClient(config.MONGO_URI)
        db = client[config.DATABASE_NAME]
        await client.admin.command("ping")
        await ensure_indexes(db)
    except Exception:
        logger.exception("MongoDB connection failed")
        raise SystemExit(1)

    logger.info("Connected to MongoDB database %r", config.DATABASE_NAME)


async def ensure_indexes(database):
    await database.users.create_index("email", unique=True)
    await database.companies.create_index("companyId", unique=True)
    await database.jobs.create_index([("createdAt", -1)])
    await database.applications.create_index("job")
    await database.applications.create_index("applicant")


async def close_mongo_connection():
    if client:
        client.close()
        logger.info("MongoDB connection closed")


def get_db():
    return db
