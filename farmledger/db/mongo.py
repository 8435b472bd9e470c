from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from farmledger.core.config import settings
from farmledger.core.logging import get_logger

log = get_logger("db")

# Collections holding farm-scoped records
COLLECTIONS = (
    "employees",
    "groups",
    "travels",
    "drivers",
    "debts",
    "expenses",
    "loans",
    "computations",
    "lands",
    "plates",
    "destinations",
)

class MongoDatabase:
    """MongoDB connection manager."""
    
    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None

mongodb = MongoDatabase()

async def connect_to_mongo():
    """Connect to MongoDB."""
    mongodb.client = AsyncIOMotorClient(settings.MONGODB_URL)
    mongodb.db = mongodb.client[settings.DATABASE_NAME]
    
    await create_indexes()
    log.info("Connected to MongoDB: %s", settings.DATABASE_NAME)

async def close_mongo_connection():
    """Disconnect from MongoDB."""
    if mongodb.client is not None:
        mongodb.client.close()
    log.info("Disconnected from MongoDB")

async def create_indexes():
    """Create database indexes."""
    # Every collection is read per farm scope
    for name in COLLECTIONS:
        await mongodb.db[name].create_index("farm_id")

    # Linked loan expenses are cleaned up by loan id
    await mongodb.db["expenses"].create_index([("farm_id", 1), ("related_loan_id", 1)])

    # Per-employee and per-group lookups
    await mongodb.db["debts"].create_index([("farm_id", 1), ("employee_id", 1), ("paid", 1)])
    await mongodb.db["drivers"].create_index([("farm_id", 1), ("employee_id", 1)])
    await mongodb.db["travels"].create_index([("farm_id", 1), ("group_id", 1)])
    await mongodb.db["travels"].create_index([("farm_id", 1), ("date", -1)])