import json

import pytest

from cutdeck.core.project import Cut, create_project
from cutdeck.exceptions import DuplicateName, MalformedDocument, StoreUnavailable
from cutdeck.services.store import ProjectStore


def _store(tmp_path, capacity=50):
    return ProjectStore(tmp_path / "projects.json", capacity=capacity)


def test_missing_file_opens_empty(tmp_path):
    store = _store(tmp_path)
    assert store.list() == []
    assert store.find("anything") is None


@pytest.mark.parametrize("content", ["{not json", '{"name": "x"}', "\xff\xfe"])
def test_corrupt_file_opens_empty(tmp_path, content):
    (tmp_path / "projects.json").write_text(content)
    assert _store(tmp_path).list() == []


def test_malformed_records_are_dropped(tmp_path):
    good = create_project("good").to_dict()
    (tmp_path / "projects.json").write_text(json.dumps([good, {"name": "bad"}, good]))
    store = _store(tmp_path)
    assert [p.name for p in store.list()] == ["good"]


def test_upsert_inserts_newest_first_and_persists(tmp_path):
    store = _store(tmp_path)
    store.upsert(create_project("a"))
    store.upsert(create_project("b"))
    assert [p.name for p in store.list()] == ["b", "a"]
    reopened = _store(tmp_path)
    assert reopened.list() == store.list()


def test_upsert_updates_in_place(tmp_path):
    store = _store(tmp_path)
    store.upsert(create_project("a"))
    store.upsert(create_project("b"))
    edited = create_project("a").with_edits(cuts=(Cut(0, 5),))
    store.upsert(edited)
    assert [p.name for p in store.list()] == ["b", "a"]
    assert store.find("a") == edited
    assert len(store) == 2


def test_upsert_is_idempotent(tmp_path):
    store = _store(tmp_path)
    p = create_project("a").with_edits(filters=("grayscale",))
    store.upsert(p)
    before = (tmp_path / "projects.json").read_text()
    store.upsert(p)
    store.upsert(p)
    assert (tmp_path / "projects.json").read_text() == before
    assert store.list() == [p]


def test_capacity_evicts_oldest_only(tmp_path):
    store = _store(tmp_path)
    for i in range(50):
        assert store.upsert(create_project(f"p{i}")) is None
    evicted = store.upsert(create_project("p50"))
    assert evicted.name == "p0"
    assert len(store) == 50
    assert store.find("p50") is not None
    assert store.find("p0") is None
    assert len(json.loads((tmp_path / "projects.json").read_text())) == 50


def test_capacity_one_keeps_newest(tmp_path):
    store = _store(tmp_path, capacity=1)
    store.upsert(create_project("a"))
    store.upsert(create_project("b"))
    assert [p.name for p in store.list()] == ["b"]


def test_delete(tmp_path):
    store = _store(tmp_path)
    store.upsert(create_project("a"))
    assert store.delete("a") is True
    assert store.delete("a") is False
    assert "a" not in store


def test_insert_new_rejects_duplicates(tmp_path):
    store = _store(tmp_path)
    store.insert_new(create_project("a"))
    with pytest.raises(DuplicateName) as info:
        store.insert_new(create_project("a"))
    assert info.value.name == "a"
    assert info.value.code == "DUPLICATE_NAME"


def test_rename_keeps_position_and_contents(tmp_path):
    store = _store(tmp_path)
    store.upsert(create_project("a").with_edits(audio="x.mp3"))
    store.upsert(create_project("b"))
    renamed = store.rename("a", "c")
    assert renamed.name == "c"
    assert [p.name for p in store.list()] == ["b", "c"]
    assert store.find("c").edits.audio == "x.mp3"
    assert store.rename("missing", "z") is None
    with pytest.raises(DuplicateName):
        store.rename("c", "b")
    with pytest.raises(MalformedDocument):
        store.rename("c", "")


def test_unwritable_medium_raises_and_rolls_back(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    store = ProjectStore(blocker / "projects.json")
    assert store.list() == []
    with pytest.raises(StoreUnavailable):
        store.upsert(create_project("a"))
    assert store.list() == []
