"""
Migration 001 - wiki content collections and indexes.

Creates the current-content and revision-log collections with their nine
indexes. Collection names come from WIKI_CONTENT_COLLECTION and
WIKI_HISTORY_COLLECTION.

It must define a function "run(db)" that the migration runner will call.
"""

from wikicontent.db.schema import build_schema, ensure_schema
from wikicontent.services.config import load_settings


def run(db):
    settings = load_settings()
    schema = build_schema(settings.content_collection, settings.history_collection)
    ensure_schema(db, schema)
