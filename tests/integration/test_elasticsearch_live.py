"""Live Elasticsearch writes.

Runs only when ELASTIC_SEARCH_URI (and credentials) point at a disposable node.
"""

import os
import uuid
from collections.abc import Iterator
from datetime import datetime, timezone
from typing import Any

import pytest

from destination_catalog.destinations import DriverProxy, get_destination

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        not os.environ.get("ELASTIC_SEARCH_URI"), reason="ELASTIC_SEARCH_URI not set"
    ),
]

SETTING_KEYS = [
    "ELASTIC_SEARCH_URI",
    "ELASTIC_SEARCH_BASIC_USER",
    "ELASTIC_SEARCH_BASIC_PASSWORD",
    "ELASTIC_SEARCH_API_KEY",
    "ELASTIC_SEARCH_TLS_CA",
    "ELASTIC_SEARCH_TLS_CA_PATH",
]


@pytest.fixture
def proxy() -> DriverProxy:
    settings = {key: os.environ[key] for key in SETTING_KEYS if os.environ.get(key)}
    return get_destination("elasticsearch", settings)


@pytest.fixture
def index(proxy: DriverProxy) -> Iterator[str]:
    """Create a throwaway index and drop it afterwards."""
    name = f"test-{uuid.uuid4().hex[:5]}"
    with proxy.session() as driver:
        driver.client.indices.create(index=name)
    yield name
    with proxy.session() as driver:
        driver.client.indices.delete(index=name)


def match_count(proxy: DriverProxy, index: str, field: str, text: str) -> int:
    with proxy.session() as driver:
        driver.client.indices.refresh(index=index)
        result: Any = driver.client.search(index=index, query={"match": {field: text}})
        return len(result["hits"]["hits"])


class TestElasticsearchLive:
    """Document writes against a running node."""

    def test_connection(self, proxy: DriverProxy) -> None:
        assert proxy.test_connection().success

    def test_index_update_delete(self, proxy: DriverProxy, index: str) -> None:
        """Test "winter" matches move 1 -> 2 -> 1 across writes."""
        proxy.index(index=index, document={"character": "Ned Stark", "quote": "Winter is coming."})
        dragon = proxy.index(
            index=index,
            document={"character": "Daenerys Targaryen", "quote": "I am the blood of the dragon."},
        )
        proxy.index(
            index=index,
            document={
                "character": "Tyrion Lannister",
                "quote": "A mind needs books like a sword needs a whetstone.",
            },
        )
        assert match_count(proxy, index, "quote", "winter") == 1

        proxy.update(
            index=index,
            id=dragon["_id"],
            doc={
                "character": "Daenerys Targaryen",
                "quote": "I am the blood of the winter dragon.",
            },
        )
        assert match_count(proxy, index, "quote", "winter") == 2

        proxy.delete(index=index, id=dragon["_id"])
        assert match_count(proxy, index, "quote", "winter") == 1

    def test_bulk(self, proxy: DriverProxy, index: str) -> None:
        """Test a bulk load reports no errors and is searchable."""
        now = datetime.now(timezone.utc).isoformat()
        dataset = [
            {"id": 1, "text": "If I fall, don't bring me back.", "user": "jon", "date": now},
            {"id": 2, "text": "Winter is coming", "user": "ned", "date": now},
            {"id": 3, "text": "A Lannister always pays his debts.", "user": "tyrion", "date": now},
            {"id": 4, "text": "I am the blood of the dragon.", "user": "daenerys", "date": now},
            {
                "id": 5,
                "text": "A girl is Arya Stark of Winterfell. And I'm going home.",
                "user": "arya",
                "date": now,
            },
        ]
        operations = [line for doc in dataset for line in ({"index": {"_index": index}}, doc)]

        response = proxy.bulk(operations=operations, refresh=True)

        assert response["errors"] is False
        assert match_count(proxy, index, "text", "winter") == 1
