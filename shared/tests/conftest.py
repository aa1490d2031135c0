"""Shared test fixtures (Firestore client doubles)."""

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest
from google.cloud.firestore import Client


@pytest.fixture()
def firestore_client() -> MagicMock:
    """Firestore client whose collection/document chain is fully mocked."""
    return MagicMock(spec=Client)


@pytest.fixture()
def document_ref(firestore_client: MagicMock) -> MagicMock:
    """The document reference returned for any collection/document lookup."""
    return firestore_client.collection.return_value.document.return_value


@pytest.fixture()
def make_snapshot() -> Callable[[str, dict | None], MagicMock]:
    """Factory for DocumentSnapshot doubles; ``data=None`` means missing."""

    def _make(doc_id: str, data: dict | None) -> MagicMock:
        snapshot = MagicMock()
        snapshot.id = doc_id
        snapshot.exists = data is not None
        snapshot.to_dict.return_value = data
        return snapshot

    return _make
