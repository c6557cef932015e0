from datetime import datetime, timedelta, timezone

import pytest

from list_distributor.distribution.snapshot import build_snapshot
from list_distributor.errors import (
    DuplicateSnapshotError,
    InvalidSnapshotIdError,
    ParseError,
    SnapshotNotFoundError,
)
from list_distributor.models import Agent, Record
from list_distributor.store import InMemoryDistributionStore, JsonDistributionStore

BASE_TIME = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture(params=["memory", "json"])
def store(request, tmp_path):
    if request.param == "memory":
        return InMemoryDistributionStore()
    return JsonDistributionStore(tmp_path / "snapshots")


def _snapshot(snapshot_id: str, minutes: int, file_name: str = "contacts.csv"):
    return build_snapshot(
        [Record(first_name="Ada", phone="555"), Record(first_name="Bob", phone="556", notes="call")],
        [Agent(id="a1", name="Agent One"), Agent(id="a2", name="Agent Two"), Agent(id="a3", name="Agent Three")],
        file_name,
        clock=lambda: BASE_TIME + timedelta(minutes=minutes),
        id_factory=lambda: snapshot_id,
    )


def test_save_and_get_round_trip(store) -> None:
    snapshot = _snapshot("first", 0)

    store.save(snapshot)

    assert store.get("first") == snapshot


def test_list_summaries_newest_first(store) -> None:
    store.save(_snapshot("older", 0, "old.csv"))
    store.save(_snapshot("newer", 5, "new.xlsx"))

    summaries = store.list_summaries()

    assert [summary.id for summary in summaries] == ["newer", "older"]
    assert summaries[0].file_name == "new.xlsx"
    assert summaries[0].total_records == 2
    assert summaries[0].agent_count == 3


def test_unknown_snapshot_raises_not_found(store) -> None:
    with pytest.raises(SnapshotNotFoundError):
        store.get("missing")
    with pytest.raises(KeyError):
        store.delete("missing")


def test_duplicate_identifier_is_rejected(store) -> None:
    store.save(_snapshot("same", 0))

    with pytest.raises(DuplicateSnapshotError):
        store.save(_snapshot("same", 1))


def test_delete_removes_snapshot(store) -> None:
    store.save(_snapshot("gone", 0))

    store.delete("gone")

    assert store.list_summaries() == []
    with pytest.raises(SnapshotNotFoundError):
        store.get("gone")


def test_json_store_persists_across_instances(tmp_path) -> None:
    directory = tmp_path / "snapshots"
    JsonDistributionStore(directory).save(_snapshot("durable", 0))

    reopened = JsonDistributionStore(directory)

    assert reopened.get("durable").assignments[1].records == (Record(first_name="Bob", phone="556", notes="call"),)
    assert not list(directory.glob(".tmp-*"))


def test_json_store_rejects_path_like_identifiers(tmp_path) -> None:
    store = JsonDistributionStore(tmp_path / "snapshots")

    with pytest.raises(SnapshotNotFoundError):
        store.get("../escape")


def test_json_store_reports_corrupt_documents(tmp_path) -> None:
    directory = tmp_path / "snapshots"
    store = JsonDistributionStore(directory)
    (directory / "broken.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(ParseError):
        store.get("broken")


def test_json_store_lists_readable_snapshots_past_a_corrupt_document(tmp_path, caplog) -> None:
    directory = tmp_path / "snapshots"
    store = JsonDistributionStore(directory)
    store.save(_snapshot("good", 0))
    (directory / "junk.json").write_text("{", encoding="utf-8")

    with caplog.at_level("WARNING", logger="list_distributor.store"):
        summaries = store.list_summaries()

    assert [summary.id for summary in summaries] == ["good"]
    assert "junk.json" in caplog.text


def test_json_store_get_maps_a_vanished_file_to_not_found(tmp_path, monkeypatch) -> None:
    store = JsonDistributionStore(tmp_path / "snapshots")
    store.save(_snapshot("vanishing", 0))

    def vanished(path):
        raise FileNotFoundError(path)

    monkeypatch.setattr(JsonDistributionStore, "_read", staticmethod(vanished))

    with pytest.raises(SnapshotNotFoundError):
        store.get("vanishing")
    assert store.list_summaries() == []


def test_json_store_refuses_identifiers_that_are_not_file_names(tmp_path) -> None:
    store = JsonDistributionStore(tmp_path / "snapshots")

    with pytest.raises(InvalidSnapshotIdError):
        store.save(_snapshot("nested/id", 0))
    assert store.list_summaries() == []
