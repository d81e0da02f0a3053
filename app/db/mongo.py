# app/db/mongo.py
from pymongo import MongoClient, ASCENDING
from pymongo.database import Database

from app.config import settings


# Lazy initialization - don't connect at import time
_client = None
_db = None


def get_client() -> MongoClient:
    """Get or create the MongoDB client."""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongo_uri)
    return _client


def get_db() -> Database:
    """Get or create the MongoDB database."""
    global _db
    if _db is None:
        _db = get_client()[settings.mongo_db]
    return _db


def ensure_indexes(db: Database) -> None:
    """Create all necessary indexes. Safe to call multiple times."""
    # Project names are unique across all clients
    db.projects.create_index([("name", ASCENDING)], unique=True, name="projects_name_unique")
    # Cascade deletes and Client.projects look projects up by owner
    db.projects.create_index([("client_id", ASCENDING)], name="projects_by_client")
