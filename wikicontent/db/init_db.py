import argparse
import os
import runpy
import sys
from datetime import datetime, timezone

from wikicontent.services.config import load_settings
from wikicontent.services.db import get_db
from wikicontent.services.logger import get_logger

logger = get_logger(__name__)

MIGRATIONS_COLLECTION = "migrations"


def applied_migrations(db):
    """Names of the migration files already recorded in the ledger."""
    return {d["name"] for d in db[MIGRATIONS_COLLECTION].find({}, {"name": 1})}


def record_migration(db, name):
    db[MIGRATIONS_COLLECTION].insert_one({"name": name, "appliedAt": datetime.now(timezone.utc)})


def _sorted_migration_paths(migrations_dir):
    files = [
        f
        for f in os.listdir(migrations_dir)
        if f.endswith(".py") and not f.startswith("__")
    ]
    files.sort()
    return [os.path.join(migrations_dir, f) for f in files]


def run_migrations(db, migrations_dir=None):
    """Apply every migration not yet recorded in the ledger, in file-name order."""
    migrations_dir = migrations_dir or load_settings().migrations_dir
    applied = applied_migrations(db)
    ran = []

    for path in _sorted_migration_paths(migrations_dir):
        name = os.path.basename(path)
        if name in applied:
            logger.info("migration_skipped", extra={"extra": {"migration": name}})
            continue

        logger.info("migration_applying", extra={"extra": {"migration": name}})
        module_globals = runpy.run_path(path)
        if "run" not in module_globals:
            raise RuntimeError(
                f"Migration file {name} does not define a run(db) function."
            )
        module_globals["run"](db)
        record_migration(db, name)
        ran.append(name)
        logger.info("migration_recorded", extra={"extra": {"migration": name}})

    logger.info("migrations_processed", extra={"extra": {"applied": ran}})
    return ran


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="wikicontent-init",
        description="Create the wiki content collections and indexes.",
    )
    parser.add_argument("--uri", help="MongoDB connection string (default: MONGO_URI)")
    parser.add_argument("--db", help="target database name (default: MONGO_DB)")
    parser.add_argument("--migrations-dir", help="migration folder (default: MIGRATIONS_DIR)")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    settings = load_settings()

    if settings.skip_migrations:
        logger.info("SKIP_MIGRATIONS is set. Exiting without running migrations.")
        return 0

    db = get_db(args.db, uri=args.uri)
    run_migrations(db, args.migrations_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
