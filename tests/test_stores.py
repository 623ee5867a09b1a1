from __future__ import annotations

import json
from pathlib import Path

import pytest

from kartlab.core.combinations import create_combination
from kartlab.core.models import SearchHistoryItem
from kartlab.errors import PersistenceError
from kartlab.io import (
    CollectionStore,
    JsonFileStore,
    MemoryStore,
    combination_from_dict,
    combination_to_dict,
    history_item_from_dict,
    history_item_to_dict,
)


def test_stores_implement_the_collection_contract(tmp_path: Path) -> None:
    assert isinstance(MemoryStore(), CollectionStore)
    assert isinstance(JsonFileStore(tmp_path / "items.json"), CollectionStore)


def test_memory_store_copies_payloads() -> None:
    payload = [{"query": "mario"}]
    store = MemoryStore()
    store.save(payload)
    payload[0]["query"] = "changed"

    loaded = store.load()
    loaded.append({"query": "extra"})

    assert store.load() == [{"query": "mario"}]


def test_json_store_missing_file_loads_empty(tmp_path: Path) -> None:
    assert JsonFileStore(tmp_path / "absent.json").load() == []


def test_json_store_writes_keyed_document(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "history.json"
    store = JsonFileStore(path, key="search_history")

    store.save([{"query": "瑪利歐", "timestamp": 1, "resultCount": 2}])

    document = json.loads(path.read_text(encoding="utf8"))
    assert document["key"] == "search_history"
    assert document["items"][0]["query"] == "瑪利歐"
    assert not path.with_name("history.json.tmp").exists()
    assert store.load() == document["items"]


def test_json_store_accepts_bare_lists(tmp_path: Path) -> None:
    path = tmp_path / "legacy.json"
    path.write_text(json.dumps([{"query": "a"}, "noise"]), encoding="utf8")

    assert JsonFileStore(path).load() == [{"query": "a"}]


@pytest.mark.parametrize(
    "contents",
    [
        pytest.param("{not json", id="malformed"),
        pytest.param(json.dumps({"items": {"query": "a"}}), id="items-not-a-list"),
    ],
)
def test_json_store_rejects_unusable_documents(tmp_path: Path, contents: str) -> None:
    path = tmp_path / "broken.json"
    path.write_text(contents, encoding="utf8")

    with pytest.raises(PersistenceError) as excinfo:
        JsonFileStore(path).load()

    assert excinfo.value.context["path"] == str(path)


def test_json_store_wraps_write_failures(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf8")
    store = JsonFileStore(blocker / "combinations.json")

    with pytest.raises(PersistenceError):
        store.save([])


def test_codecs_preserve_stored_combination(characters, vehicles) -> None:
    combination = create_combination(characters[1], vehicles[1], created_at=7)

    payload = combination_to_dict(combination)

    assert payload["createdAt"] == 7
    assert payload["character"]["localName"] == "Peach"
    assert payload["combinedStats"]["speed.road"] == 3 + 2 + 3
    assert combination_from_dict(payload) == combination


def test_history_codec_uses_published_keys() -> None:
    item = SearchHistoryItem(query="luigi", timestamp=10, result_count=3)

    payload = history_item_to_dict(item)

    assert payload == {"query": "luigi", "timestamp": 10, "resultCount": 3}
    assert history_item_from_dict(payload) == item
    with pytest.raises(ValueError):
        history_item_from_dict({"timestamp": 1})
