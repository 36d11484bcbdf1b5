import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


DEFAULT_CONTENT_COLLECTION = "current-content-by-page"
DEFAULT_HISTORY_COLLECTION = "content-revision-log"


@dataclass(frozen=True)
class Settings:
    mongo_uri: str
    mongo_db: str
    content_collection: str
    history_collection: str
    server_selection_timeout_ms: int
    log_level: str
    log_dir: Optional[str]
    skip_migrations: bool
    migrations_dir: str


def _default_migrations_dir() -> str:
    return os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "db", "migrations")


def load_settings() -> Settings:
    """Read settings from the environment, after loading a .env file if present."""
    load_dotenv()

    return Settings(
        mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
        mongo_db=os.getenv("MONGO_DB", "zhiyan_wiki"),
        content_collection=os.getenv("WIKI_CONTENT_COLLECTION", DEFAULT_CONTENT_COLLECTION),
        history_collection=os.getenv("WIKI_HISTORY_COLLECTION", DEFAULT_HISTORY_COLLECTION),
        server_selection_timeout_ms=int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", 5000)),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_dir=os.getenv("LOG_DIR") or None,
        skip_migrations=os.getenv("SKIP_MIGRATIONS", "false").lower() == "true",
        migrations_dir=os.getenv("MIGRATIONS_DIR", _default_migrations_dir()),
    )
