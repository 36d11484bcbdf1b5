import random
from datetime import datetime, timedelta, timezone

from wikicontent.services.config import load_settings
from wikicontent.services.content_store import ContentStore
from wikicontent.services.db import get_db
from wikicontent.services.logger import get_logger

logger = get_logger(__name__)

topics = [
    "deployment guide for the cluster",
    "onboarding checklist",
    "release notes",
    "architecture overview",
    "incident postmortem",
    "api reference",
    "meeting minutes",
    "coding conventions",
]

edits = [
    "Added a troubleshooting section.",
    "Fixed broken links.",
    "Clarified the prerequisites.",
    "Updated screenshots and examples.",
    "Reworded the introduction.",
]


def seed_pages(store, projects=3, pages_per_project=4, max_edits=3):
    start = datetime.now(timezone.utc) - timedelta(days=30)
    saved = 0
    for project in range(1, projects + 1):
        project_id = f"proj{project}"
        for page in range(1, pages_per_project + 1):
            wiki_page_id = f"{project_id}-page{page}"
            when = start + timedelta(hours=random.randint(0, 24 * 20))
            content = f"# {random.choice(topics).title()}\n\nInitial draft of page {page}."
            store.save_content(wiki_page_id, project_id, content, editor_id="seeder",
                               change_description="Initial version", now=when)
            saved += 1
            for _ in range(random.randint(0, max_edits)):
                when += timedelta(hours=random.randint(1, 48))
                edit = random.choice(edits)
                content = f"{content}\n{edit}"
                store.save_content(wiki_page_id, project_id, content, editor_id="seeder",
                                   change_description=edit, now=when)
                saved += 1
    logger.info("pages_seeded", extra={"extra": {"projects": projects, "revisions": saved}})
    return saved


def run():
    settings = load_settings()
    store = ContentStore(get_db(), settings.content_collection, settings.history_collection)
    seed_pages(store)
    logger.info("Seeder finished.")


if __name__ == "__main__":
    run()
