"""
MongoDB connection. One MongoClient per process, created on first use.
"""

import logging
from functools import lru_cache

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from company_api.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

COMPANY_COLLECTION = "companies"


def build_mongo_uri(settings: Settings | None = None) -> str:
    return (settings or get_settings()).mongo_uri


@lru_cache()
def get_mongo_client() -> MongoClient:
    uri = build_mongo_uri()
    logger.info("Connecting to MongoDB at %s", uri)
    # MongoClient connects lazily; failures surface on the first query.
    return MongoClient(uri)


def get_database() -> Database:
    return get_mongo_client()[get_settings().mongo_db]


def get_company_collection() -> Collection:
    """Dependency: the collection holding Company documents."""
    return get_database()[COMPANY_COLLECTION]


def close_mongo_client() -> None:
    if get_mongo_client.cache_info().currsize == 0:
        return
    get_mongo_client().close()
    get_mongo_client.cache_clear()
    logger.info("MongoDB client closed")
