from datetime import datetime, timezone
from typing import List, Optional

from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from wikicontent.services.config import DEFAULT_CONTENT_COLLECTION, DEFAULT_HISTORY_COLLECTION
from wikicontent.services.diff import calculate_diff, change_stats, content_hash
from wikicontent.services.logger import get_logger

logger = get_logger(__name__)

NO_ID = {"_id": 0}


class DuplicatePageError(ValueError):
    pass


class VersionConflictError(RuntimeError):
    pass


class PageNotFoundError(LookupError):
    pass


class VersionNotFoundError(LookupError):
    pass


def _strip_id(doc):
    return {k: v for k, v in doc.items() if k != "_id"}


class ContentStore:
    """
    Current content per wiki page plus its append-only revision log.

    Every successful save writes the content document (insert on the first
    save, in-place update afterwards) and appends one history document
    holding the full snapshot and the diff from the previous version.
    Saving the same content under the same project is a no-op.
    """

    def __init__(self, db: Database, content_collection=DEFAULT_CONTENT_COLLECTION,
                 history_collection=DEFAULT_HISTORY_COLLECTION):
        self.db = db
        self.contents = db[content_collection]
        self.history = db[history_collection]

    def save_content(self, wiki_page_id, project_id, content, *, editor_id=None,
                     change_description=None, now: Optional[datetime] = None) -> dict:
        now = now or datetime.now(timezone.utc)
        new_hash = content_hash(content)
        current = self.contents.find_one({"wikiPageId": wiki_page_id}, NO_ID)

        if current is None:
            previous_content = None
            doc = {
                "wikiPageId": wiki_page_id,
                "projectId": project_id,
                "currentVersion": 1,
                "content": content,
                "contentHash": new_hash,
                "lastEditorId": editor_id,
                "createdAt": now,
                "updatedAt": now,
            }
            try:
                self.contents.insert_one(doc)
            except DuplicateKeyError as e:
                raise DuplicatePageError(f"wiki page {wiki_page_id!r} already has content") from e
            doc = _strip_id(doc)
        else:
            if current.get("contentHash") == new_hash and current.get("projectId") == project_id:
                logger.debug("content_unchanged", extra={"extra": {"wikiPageId": wiki_page_id}})
                return current

            previous_content = current.get("content")
            expected_version = current["currentVersion"]
            doc = self.contents.find_one_and_update(
                {"wikiPageId": wiki_page_id, "currentVersion": expected_version},
                {
                    "$set": {
                        "projectId": project_id,
                        "currentVersion": expected_version + 1,
                        "content": content,
                        "contentHash": new_hash,
                        "lastEditorId": editor_id,
                        "updatedAt": now,
                    }
                },
                return_document=ReturnDocument.AFTER,
            )
            if doc is None:
                raise VersionConflictError(
                    f"wiki page {wiki_page_id!r} changed after version {expected_version} was read"
                )
            doc = _strip_id(doc)

        self._append_history(doc, previous_content, editor_id, change_description, now)
        logger.info(
            "content_saved",
            extra={"extra": {"wikiPageId": wiki_page_id, "version": doc["currentVersion"]}},
        )
        return doc

    def _append_history(self, doc, previous_content, editor_id, change_description, created_at):
        stats = change_stats(previous_content, doc["content"])
        self.history.insert_one(
            {
                "wikiPageId": doc["wikiPageId"],
                "version": doc["currentVersion"],
                "projectId": doc["projectId"],
                "content": doc["content"],
                "contentHash": doc["contentHash"],
                "contentDiff": calculate_diff(previous_content, doc["content"]) if previous_content is not None else "",
                "changeDescription": change_description,
                "editorId": editor_id,
                "addedLines": stats.added_lines,
                "deletedLines": stats.deleted_lines,
                "changedChars": stats.changed_chars,
                "createdAt": created_at,
            }
        )

    def get_current(self, wiki_page_id) -> Optional[dict]:
        return self.contents.find_one({"wikiPageId": wiki_page_id}, NO_ID)

    def get_history(self, wiki_page_id, limit=None) -> List[dict]:
        """Revisions of a page, newest version first."""
        cursor = self.history.find({"wikiPageId": wiki_page_id}, NO_ID).sort("version", DESCENDING)
        if limit:
            cursor = cursor.limit(limit)
        return list(cursor)

    def get_version(self, wiki_page_id, version) -> dict:
        doc = self.history.find_one({"wikiPageId": wiki_page_id, "version": version}, NO_ID)
        if doc is None:
            if self.get_current(wiki_page_id) is None:
                raise PageNotFoundError(f"wiki page {wiki_page_id!r} has no content")
            raise VersionNotFoundError(f"wiki page {wiki_page_id!r} has no version {version}")
        return doc

    def compare_versions(self, wiki_page_id, version1, version2) -> str:
        old = self.get_version(wiki_page_id, version1)
        new = self.get_version(wiki_page_id, version2)
        return calculate_diff(old.get("content"), new.get("content"))

    def list_project_pages(self, project_id, limit=20) -> List[dict]:
        """Pages of a project, most recently updated first."""
        return list(
            self.contents.find({"projectId": project_id}, NO_ID)
            .sort("updatedAt", DESCENDING)
            .limit(limit)
        )

    def list_project_activity(self, project_id, since: Optional[datetime] = None, limit=50) -> List[dict]:
        query = {"projectId": project_id}
        if since is not None:
            query["createdAt"] = {"$gte": since}
        return list(
            self.history.find(query, NO_ID)
            .sort("createdAt", DESCENDING)
            .limit(limit)
        )

    def updated_between(self, start: datetime, end: datetime) -> List[dict]:
        """Pages whose updatedAt falls in [start, end), oldest first."""
        return list(
            self.contents.find({"updatedAt": {"$gte": start, "$lt": end}}, NO_ID)
            .sort("updatedAt", ASCENDING)
        )

    def search(self, text, project_id=None, limit=20) -> List[dict]:
        """Full-text search on content, best match first."""
        query = {"$text": {"$search": text}}
        if project_id is not None:
            query["projectId"] = project_id
        projection = {"_id": 0, "score": {"$meta": "textScore"}}
        return list(
            self.contents.find(query, projection)
            .sort([("score", {"$meta": "textScore"})])
            .limit(limit)
        )
