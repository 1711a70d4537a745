"""Tests for app.config.mock_firestore: the transaction semantics the stores rely on."""

import pytest
from google.api_core import exceptions as gexc

from app.config.firebase import atomic
from app.config.mock_firestore import MockFirestore


@pytest.fixture
def mock_db() -> MockFirestore:
    database = MockFirestore()
    database.collection("teams").document("T1").set({"availability": "available"})
    return database


def _availability(database: MockFirestore, name: str) -> str:
    return database.collection("teams").document(name).get().to_dict()["availability"]


class TestTransactions:
    def test_commit_applies_all_writes(self, mock_db: MockFirestore) -> None:
        def _fn(transaction):
            transaction.update(mock_db.collection("teams").document("T1"), {"availability": "working"})
            transaction.create(mock_db.collection("teams").document("T2"), {"availability": "available"})
            return "done"

        assert atomic(mock_db, _fn) == "done"
        assert _availability(mock_db, "T1") == "working"
        assert mock_db.collection("teams").document("T2").get().exists

    def test_exception_discards_writes(self, mock_db: MockFirestore) -> None:
        def _fn(transaction):
            transaction.update(mock_db.collection("teams").document("T1"), {"availability": "working"})
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            atomic(mock_db, _fn)
        assert _availability(mock_db, "T1") == "available"

    def test_failed_write_discards_whole_batch(self, mock_db: MockFirestore) -> None:
        def _fn(transaction):
            transaction.update(mock_db.collection("teams").document("T1"), {"availability": "working"})
            transaction.update(mock_db.collection("teams").document("missing"), {"availability": "working"})

        with pytest.raises(gexc.NotFound):
            atomic(mock_db, _fn)
        assert _availability(mock_db, "T1") == "available"

    def test_delete(self, mock_db: MockFirestore) -> None:
        atomic(mock_db, lambda t: t.delete(mock_db.collection("teams").document("T1")))
        assert not mock_db.collection("teams").document("T1").get().exists


class TestDocuments:
    def test_create_existing(self, mock_db: MockFirestore) -> None:
        with pytest.raises(gexc.AlreadyExists):
            mock_db.collection("teams").document("T1").create({"availability": "working"})

    def test_reads_are_copies(self, mock_db: MockFirestore) -> None:
        data = mock_db.collection("teams").document("T1").get().to_dict()
        data["availability"] = "working"
        assert _availability(mock_db, "T1") == "available"

    def test_where(self, mock_db: MockFirestore) -> None:
        teams = mock_db.collection("teams")
        teams.document("T2").set({"availability": "working"})
        teams.document("T3").set({"availability": "working"})
        assert [d.id for d in teams.where("availability", "==", "working").stream()] == ["T2", "T3"]

    def test_auto_ids_are_unique(self, mock_db: MockFirestore) -> None:
        reports = mock_db.collection("reports")
        assert reports.document().id != reports.document().id


class TestDocumentIds:
    def test_slash_rejected_when_building_reference(self, mock_db: MockFirestore) -> None:
        with pytest.raises(ValueError):
            mock_db.collection("users").document("a/b")

    @pytest.mark.parametrize("doc_id", [".", "..", "__x__"])
    def test_reserved_ids_rejected_on_write(self, mock_db: MockFirestore, doc_id: str) -> None:
        with pytest.raises(gexc.InvalidArgument):
            mock_db.collection("users").document(doc_id).create({"role": "user"})
        assert list(mock_db.collection("users").stream()) == []

    def test_reserved_id_rejected_on_read(self, mock_db: MockFirestore) -> None:
        with pytest.raises(gexc.InvalidArgument):
            mock_db.collection("teams").document("__T1__").get()

    def test_reserved_id_rejects_whole_transaction(self, mock_db: MockFirestore) -> None:
        def _fn(transaction):
            transaction.update(mock_db.collection("teams").document("T1"), {"availability": "working"})
            transaction.create(mock_db.collection("teams").document(".."), {"availability": "available"})

        with pytest.raises(gexc.InvalidArgument):
            atomic(mock_db, _fn)
        assert _availability(mock_db, "T1") == "available"
