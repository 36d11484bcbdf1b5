import mongomock
import pytest

from wikicontent.services.content_store import ContentStore
from wikicontent.services.config import DEFAULT_CONTENT_COLLECTION


@pytest.fixture
def mock_db():
    client = mongomock.MongoClient()
    yield client["wiki_test"]
    client.close()


@pytest.fixture
def store(mock_db):
    mock_db[DEFAULT_CONTENT_COLLECTION].create_index("wikiPageId", unique=True, name="wikiPageId_unique")
    return ContentStore(mock_db)
