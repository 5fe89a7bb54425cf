"""
MongoDB connection management.

Used when STORAGE_BACKEND=mongo. Holds a single MongoClient and exposes
collections by name.
"""

import logging
from typing import Optional

from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection

from config import settings

logger = logging.getLogger(__name__)

COLLECTIONS = [
    "question_categories",
    "questions",
    "assessments",
    "assessment_responses",
    "reports",
]


class Database:
    """Thin wrapper around a MongoClient and one database."""

    def __init__(self, uri: Optional[str] = None, db_name: Optional[str] = None):
        self.client = MongoClient(uri or settings.mongodb_uri)
        self.db = self.client[db_name or settings.mongodb_db_name]

    def get_collection(self, name: str) -> Collection:
        return self.db[name]

    def close(self) -> None:
        self.client.close()


_database: Optional[Database] = None


def get_db() -> Database:
    """Get the global Database instance."""
    global _database
    if _database is None:
        _database = Database()
    return _database


def initialize_collections(db: Optional[Database] = None) -> None:
    """
    Create collections and indexes.

    Responses are looked up by (assessment_id, question_id); uniqueness of
    that pair is kept by upsert logic, so the index is not unique.
    """
    db = db or get_db()
    existing = set(db.db.list_collection_names())
    for name in COLLECTIONS:
        if name not in existing:
            db.db.create_collection(name)
            logger.info(f"Created collection {name}")

    db.get_collection("assessment_responses").create_index(
        [("assessment_id", ASCENDING), ("question_id", ASCENDING)]
    )
    db.get_collection("questions").create_index([("category_id", ASCENDING)])
    db.get_collection("reports").create_index([("assessment_id", ASCENDING)])
