"""
In-process mock database for local development and tests.

Implements the subset of the Firestore client API RoadFix uses:
collection/document references, equality queries and transactions.
Enabled with USE_MOCK_DB=true.

Transactions are serialized by a single lock and their writes are
buffered until commit, so a transaction that raises leaves no trace.
Document ids are checked the way Firestore checks them: "/" fails when
the reference is built, reserved ids fail when the request is made.
"""

import copy
import re
import threading
import uuid
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from google.api_core import exceptions as gexc

_RESERVED_ID = re.compile(r"^__.*__$")


class MockDocumentSnapshot:
    def __init__(self, reference: "MockDocumentReference", data: Optional[Dict]):
        self.reference = reference
        self._data = data

    @property
    def id(self) -> str:
        return self.reference.id

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[Dict]:
        return copy.deepcopy(self._data)


class MockDocumentReference:
    def __init__(self, db: "MockFirestore", collection: str, doc_id: str):
        if not doc_id or "/" in doc_id:
            raise ValueError("A document must have an even number of path elements")
        self._db = db
        self._collection = collection
        self.id = doc_id

    @property
    def path(self) -> str:
        return f"{self._collection}/{self.id}"

    def get(self, transaction: Optional["MockTransaction"] = None) -> MockDocumentSnapshot:
        with self._db._lock:
            self._db._check_id(self)
            data = self._db._docs(self._collection).get(self.id)
            return MockDocumentSnapshot(self, copy.deepcopy(data))

    def set(self, data: Dict) -> None:
        with self._db._lock:
            self._db._check_id(self)
            self._db._apply_set(self, data, False)

    def create(self, data: Dict) -> None:
        with self._db._lock:
            self._db._check_create(self)
            self._db._apply_set(self, data, False)


class MockQuery:
    def __init__(self, db: "MockFirestore", collection: str, filters: Tuple = ()):
        self._db = db
        self._collection = collection
        self._filters = filters

    def where(self, field_path: str, op_string: str, value: Any) -> "MockQuery":
        if op_string != "==":
            raise ValueError(f"Unsupported operator for mock database: {op_string}")
        return MockQuery(self._db, self._collection, self._filters + ((field_path, value),))

    def stream(self) -> Iterator[MockDocumentSnapshot]:
        with self._db._lock:
            items = list(self._db._docs(self._collection).items())

        for doc_id, data in items:
            if all(data.get(field) == value for field, value in self._filters):
                ref = MockDocumentReference(self._db, self._collection, doc_id)
                yield MockDocumentSnapshot(ref, copy.deepcopy(data))


class MockCollectionReference(MockQuery):
    def document(self, doc_id: Optional[str] = None) -> MockDocumentReference:
        return MockDocumentReference(self._db, self._collection, doc_id or uuid.uuid4().hex[:20])


class MockTransaction:
    """Buffers writes; MockFirestore.run_transaction commits them."""

    def __init__(self, db: "MockFirestore"):
        self._db = db
        self._writes: List[Tuple[str, MockDocumentReference, Optional[Dict]]] = []

    def create(self, reference: MockDocumentReference, data: Dict) -> None:
        self._writes.append(("create", reference, copy.deepcopy(data)))

    def update(self, reference: MockDocumentReference, field_updates: Dict) -> None:
        self._writes.append(("update", reference, copy.deepcopy(field_updates)))

    def delete(self, reference: MockDocumentReference) -> None:
        self._writes.append(("delete", reference, None))

    def commit(self) -> None:
        # Validate the whole batch before touching anything
        for kind, ref, _ in self._writes:
            if kind == "create":
                self._db._check_create(ref)
            elif kind == "update":
                self._db._check_update(ref)
            else:
                self._db._check_id(ref)

        for kind, ref, data in self._writes:
            if kind == "delete":
                self._db._docs(ref._collection).pop(ref.id, None)
            else:
                self._db._apply_set(ref, data, kind == "update")
        self._writes = []


class MockFirestore:
    def __init__(self):
        self._lock = threading.RLock()
        self._store: Dict[str, Dict[str, Dict]] = {}

    def _docs(self, collection: str) -> Dict[str, Dict]:
        return self._store.setdefault(collection, {})

    def _check_id(self, ref: MockDocumentReference) -> None:
        if ref.id in (".", "..") or _RESERVED_ID.match(ref.id):
            raise gexc.InvalidArgument(f"Document id is not allowed: {ref.path}")

    def _check_create(self, ref: MockDocumentReference) -> None:
        self._check_id(ref)
        if ref.id in self._docs(ref._collection):
            raise gexc.AlreadyExists(f"Document already exists: {ref.path}")

    def _check_update(self, ref: MockDocumentReference) -> None:
        self._check_id(ref)
        if ref.id not in self._docs(ref._collection):
            raise gexc.NotFound(f"No document to update: {ref.path}")

    def _apply_set(self, ref: MockDocumentReference, data: Dict, merge: bool) -> None:
        docs = self._docs(ref._collection)
        if merge and ref.id in docs:
            docs[ref.id].update(copy.deepcopy(data))
        else:
            docs[ref.id] = copy.deepcopy(data)

    def collection(self, name: str) -> MockCollectionReference:
        return MockCollectionReference(self, name)

    def collections(self) -> List[MockCollectionReference]:
        with self._lock:
            return [MockCollectionReference(self, name) for name in self._store]

    def run_transaction(self, fn: Callable[[MockTransaction], Any]) -> Any:
        """Run fn(transaction) and commit its writes, all or nothing."""
        with self._lock:
            transaction = MockTransaction(self)
            result = fn(transaction)
            transaction.commit()
            return result

    def reset(self) -> None:
        with self._lock:
            self._store.clear()


_mock_db: Optional[MockFirestore] = None


def get_mock_db() -> MockFirestore:
    global _mock_db
    if _mock_db is None:
        _mock_db = MockFirestore()
    return _mock_db
