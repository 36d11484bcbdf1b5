from functools import lru_cache

from pymongo import MongoClient
from pymongo.database import Database

from wikicontent.services.config import load_settings
from wikicontent.services.logger import get_logger

logger = get_logger(__name__)


@lru_cache
def get_client(uri=None, timeout_ms=None) -> MongoClient:
    """Connect and ping once; a failed ping is fatal."""
    settings = load_settings()
    uri = uri or settings.mongo_uri
    timeout_ms = timeout_ms or settings.server_selection_timeout_ms

    client = MongoClient(uri, serverSelectionTimeoutMS=timeout_ms)
    try:
        client.admin.command("ping")
        logger.info("mongodb_connected", extra={"extra": {"timeout_ms": timeout_ms}})
    except Exception:
        logger.exception("mongodb_connection_failed")
        client.close()
        raise
    return client


def get_db(name=None, uri=None) -> Database:
    settings = load_settings()
    return get_client(uri)[name or settings.mongo_db]
