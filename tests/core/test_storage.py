import json

import pytest

from recordconfig.core.errors import StorageUnavailableError
from recordconfig.core.storage import (
    IniFileStore,
    JsonFileStore,
    MemoryStore,
    StorageAdapter,
    open_store,
)


def test_missing_file_is_an_empty_document(tmp_path):
    document = JsonFileStore(tmp_path / "absent.json").open_document()
    assert document.section_names() == []
    assert document.get_section("Anything") is None


def test_json_commit_writes_versioned_payload(tmp_path):
    path = tmp_path / "nested" / "config.json"
    store = JsonFileStore(path)
    document = store.open_document()
    section = document.get_or_create_section("Window")
    section.set_entry("Width", "800")
    section.set_entry("Title", "")
    document.commit()

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload == {
        "schema_version": 1,
        "sections": {"Window": {"Width": "800", "Title": ""}},
    }
    assert not path.with_suffix(".json.tmp").exists()


def test_json_reopen_preserves_entry_order(tmp_path):
    store = JsonFileStore(tmp_path / "config.json")
    document = store.open_document()
    section = document.get_or_create_section("Ordered")
    for key in ("b", "a", "c"):
        section.set_entry(key, key.upper())
    document.commit()

    reopened = store.open_document().get_section("Ordered")
    assert reopened.entries() == [("b", "B"), ("a", "A"), ("c", "C")]
    assert len(reopened) == 3


def test_documents_are_snapshots_until_commit(tmp_path):
    store = JsonFileStore(tmp_path / "config.json")
    first = store.open_document()
    first.get_or_create_section("S").set_entry("k", "1")
    assert store.open_document().get_section("S") is None
    first.commit()
    assert store.open_document().get_section("S").get("k") == "1"


@pytest.mark.parametrize(
    "content",
    ["{not json", "[1, 2]", '{"sections": []}', '{"sections": {"S": "flat"}}'],
)
def test_corrupt_json_raises_storage_unavailable(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(StorageUnavailableError) as excinfo:
        JsonFileStore(path).open_document()
    assert excinfo.value.location == str(path)


def test_unwritable_location_raises_storage_unavailable(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    store = JsonFileStore(blocker / "config.json")
    document = store.open_document()
    document.get_or_create_section("S").set_entry("k", "v")
    with pytest.raises(StorageUnavailableError):
        document.commit()


def test_ini_round_trip_preserves_key_case_and_empty_values(tmp_path):
    path = tmp_path / "app.ini"
    store = IniFileStore(path)
    document = store.open_document()
    section = document.get_or_create_section("ExampleConfig")
    section.set_entry("ExampleInt", "3")
    section.set_entry("ExampleString", "")
    section.set_entry("Percent", "50%")
    document.commit()

    text = path.read_text(encoding="utf-8")
    assert "[ExampleConfig]" in text
    reopened = store.open_document().get_section("ExampleConfig")
    assert reopened.entries() == [
        ("ExampleInt", "3"),
        ("ExampleString", ""),
        ("Percent", "50%"),
    ]


def test_corrupt_ini_raises_storage_unavailable(tmp_path):
    path = tmp_path / "app.ini"
    path.write_text("key without section = 1\n", encoding="utf-8")
    with pytest.raises(StorageUnavailableError):
        IniFileStore(path).open_document()


def test_memory_store_counts_commits():
    store = MemoryStore({"S": {"k": "v"}})
    document = store.open_document()
    document.get_or_create_section("S").set_entry("k", "w")
    assert store.snapshot() == {"S": {"k": "v"}}
    document.commit()
    assert store.snapshot() == {"S": {"k": "w"}}
    assert store.commits == 1


def test_open_store_selects_backend_by_suffix(tmp_path):
    assert isinstance(open_store(tmp_path / "a.ini"), IniFileStore)
    assert isinstance(open_store(tmp_path / "a.CFG"), IniFileStore)
    assert isinstance(open_store(tmp_path / "a.json"), JsonFileStore)
    assert isinstance(open_store(tmp_path / "a"), JsonFileStore)


def test_stores_satisfy_adapter_protocol(tmp_path):
    assert isinstance(MemoryStore(), StorageAdapter)
    assert isinstance(JsonFileStore(tmp_path / "a.json"), StorageAdapter)


@pytest.mark.parametrize("store_type, name", [(JsonFileStore, "config.json"), (IniFileStore, "app.ini")])
def test_undecodable_bytes_raise_storage_unavailable(tmp_path, store_type, name):
    path = tmp_path / name
    path.write_bytes(b'{"sections": {"A": {"x": "\xff\xfe"}}}')
    with pytest.raises(StorageUnavailableError) as excinfo:
        store_type(path).open_document()
    assert excinfo.value.location == str(path)


@pytest.mark.parametrize(
    "value",
    ["  padded  ", "\ttabbed", "trailing ", "two\nlines", "windows\r\nline", '"quoted"', '"', "[not a section]"],
)
def test_ini_round_trip_keeps_text_exactly(tmp_path, value):
    store = IniFileStore(tmp_path / "app.ini")
    document = store.open_document()
    section = document.get_or_create_section("Texts")
    section.set_entry("Value", value)
    section.set_entry("After", "plain")
    document.commit()

    reopened = store.open_document().get_section("Texts")
    assert reopened.entries() == [("Value", value), ("After", "plain")]


def test_ini_reads_hand_written_quoted_value(tmp_path):
    path = tmp_path / "app.ini"
    path.write_text('[S]\nk = "  spaced  "\nraw = a "b" c\n', encoding="utf-8")
    section = IniFileStore(path).open_document().get_section("S")
    assert section.get("k") == "  spaced  "
    assert section.get("raw") == 'a "b" c'


def test_failed_replace_removes_temp_file(tmp_path):
    path = tmp_path / "config.json"
    path.mkdir()
    (path / "occupied").write_text("x", encoding="utf-8")
    with pytest.raises(StorageUnavailableError):
        JsonFileStore(path).write({"S": {"k": "v"}})
    assert not (tmp_path / "config.json.tmp").exists()
