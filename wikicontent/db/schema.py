"""
Collections and indexes of the wiki content store.

Two collections:

- the content collection holds one document per wiki page (the current
  version), unique on wikiPageId and full-text indexed on content;
- the history collection is an append-only revision log keyed by
  (wikiPageId, version).

Only wikiPageId uniqueness is enforced by the database. Every other field
shape is convention kept by ContentStore.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from pymongo import ASCENDING, DESCENDING, TEXT
from pymongo.database import Database
from pymongo.errors import OperationFailure

from wikicontent.services.config import DEFAULT_CONTENT_COLLECTION, DEFAULT_HISTORY_COLLECTION
from wikicontent.services.logger import get_logger

logger = get_logger(__name__)

# Server error codes for an index that exists under the same name or keys
# with a different definition.
INDEX_OPTIONS_CONFLICT = 85
INDEX_KEY_SPECS_CONFLICT = 86


class IndexDefinitionConflict(RuntimeError):
    """An existing index does not match the declared definition."""

    def __init__(self, collection, index_name, message):
        super().__init__(message)
        self.collection = collection
        self.index_name = index_name


@dataclass(frozen=True)
class IndexSpec:
    name: str
    keys: Tuple[Tuple[str, object], ...]
    unique: bool = False

    def options(self) -> dict:
        opts = {"name": self.name}
        if self.unique:
            opts["unique"] = True
        return opts


@dataclass(frozen=True)
class CollectionSpec:
    name: str
    indexes: Tuple[IndexSpec, ...] = field(default_factory=tuple)


CONTENT_INDEXES = (
    IndexSpec("wikiPageId_unique", (("wikiPageId", ASCENDING),), unique=True),
    IndexSpec("idx_project_updated", (("projectId", ASCENDING), ("updatedAt", DESCENDING))),
    IndexSpec("idx_wiki_version", (("wikiPageId", ASCENDING), ("currentVersion", DESCENDING))),
    IndexSpec("updatedAt_index", (("updatedAt", ASCENDING),)),
    IndexSpec("content_text_index", (("content", TEXT),)),
)

HISTORY_INDEXES = (
    IndexSpec("idx_wiki_version", (("wikiPageId", ASCENDING), ("version", DESCENDING))),
    IndexSpec("idx_project_created", (("projectId", ASCENDING), ("createdAt", DESCENDING))),
    IndexSpec("wikiPageId_index", (("wikiPageId", ASCENDING),)),
    IndexSpec("createdAt_index", (("createdAt", ASCENDING),)),
)


def build_schema(content_collection=DEFAULT_CONTENT_COLLECTION, history_collection=DEFAULT_HISTORY_COLLECTION):
    return (
        CollectionSpec(content_collection, CONTENT_INDEXES),
        CollectionSpec(history_collection, HISTORY_INDEXES),
    )


SCHEMA = build_schema()


def _ensure_index(db: Database, collection: str, index: IndexSpec) -> str:
    try:
        name = db[collection].create_index(list(index.keys), **index.options())
    except OperationFailure as e:
        if e.code in (INDEX_OPTIONS_CONFLICT, INDEX_KEY_SPECS_CONFLICT):
            logger.error(
                "index_definition_conflict",
                extra={"extra": {"collection": collection, "index": index.name, "error": str(e)}},
            )
            raise IndexDefinitionConflict(collection, index.name, str(e)) from e
        raise
    logger.debug("index_ensured", extra={"extra": {"collection": collection, "index": name}})
    return name


def ensure_schema(db: Database, schema: Optional[Tuple[CollectionSpec, ...]] = None) -> Dict[str, List[str]]:
    """
    Create the collections and indexes in `schema` (default SCHEMA) on `db`.

    Safe to re-run: existing collections are left alone and create_index is
    a no-op for an identical definition. A same-named index with another
    definition raises IndexDefinitionConflict; nothing already created is
    rolled back.
    """
    schema = schema or SCHEMA
    existing = set(db.list_collection_names())
    ensured = {}

    for spec in schema:
        if spec.name not in existing:
            db.create_collection(spec.name)
            logger.debug("collection_created", extra={"extra": {"collection": spec.name}})
        ensured[spec.name] = [_ensure_index(db, spec.name, index) for index in spec.indexes]

    logger.info(
        f"MongoDB collections and indexes created in database '{db.name}'",
        extra={"extra": {"collections": {name: len(names) for name, names in ensured.items()}}},
    )
    return ensured
