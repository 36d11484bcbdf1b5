import os
import uuid

import pytest
from pymongo import MongoClient

MONGO_IMAGE = os.getenv("MONGO_TEST_IMAGE", "mongo:7.0")


@pytest.fixture(scope="session")
def mongo_uri():
    """
    MongoDB for integration tests.

    Uses MONGO_TEST_URI when set, otherwise starts an ephemeral container
    with testcontainers (requires Docker).
    """
    uri = os.getenv("MONGO_TEST_URI")
    if uri:
        yield uri
        return

    from testcontainers.mongodb import MongoDbContainer

    container = MongoDbContainer(MONGO_IMAGE)
    try:
        container.start()
    except Exception as e:
        pytest.skip(f"could not start MongoDB container: {e}")
    try:
        yield container.get_connection_url()
    finally:
        container.stop()


@pytest.fixture
def live_db(mongo_uri):
    # fresh database per test to avoid colliding with other data
    client = MongoClient(mongo_uri, serverSelectionTimeoutMS=5000)
    name = f"test_wiki_{uuid.uuid4().hex[:12]}"
    try:
        yield client[name]
    finally:
        client.drop_database(name)
        client.close()
