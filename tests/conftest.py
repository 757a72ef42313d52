"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import math

import pytest

from motogpt.config import Settings
from motogpt.ingestion.embedder import Embedder
from motogpt.store.base import CollectionSpec, VectorStoreBase


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── Fakes for deterministic testing ─────────────────────────────────────


class FakeVectorStore(VectorStoreBase):
    """In-memory store keeping ``{vector, text}`` records per collection."""

    def __init__(self) -> None:
        self.specs: dict[str, CollectionSpec] = {}
        self.records: dict[str, list[dict]] = {}
        self.dropped: list[str] = []
        self._next_id = 0

    async def list_collections(self) -> list[str]:
        return list(self.specs)

    async def drop_collection(self, name: str) -> None:
        self.dropped.append(name)
        self.specs.pop(name, None)
        self.records.pop(name, None)

    async def create_collection(self, name: str, spec: CollectionSpec) -> None:
        if name in self.specs:
            raise RuntimeError(f"collection {name} already exists")
        self.specs[name] = spec
        self.records[name] = []

    async def insert_one(self, collection: str, vector: list[float], text: str) -> str:
        self._next_id += 1
        record_id = f"rec-{self._next_id}"
        self.records[collection].append({"_id": record_id, "vector": vector, "text": text})
        return record_id

    async def count(self, collection: str) -> int:
        return len(self.records[collection])


class FakeEmbedder(Embedder):
    """Returns a length-based vector; can be told to fail on chosen calls.

    Parameters
    ----------
    fail_on:
        Zero-based call numbers that raise ``RuntimeError``.
    bad_vectors:
        Call number → vector returned verbatim instead of a valid one.
    """

    def __init__(
        self,
        dimension: int = 4,
        *,
        fail_on: set[int] | None = None,
        bad_vectors: dict[int, list] | None = None,
    ) -> None:
        super().__init__("fake-embedder", dimension)
        self.fail_on = fail_on or set()
        self.bad_vectors = bad_vectors or {}
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        call = len(self.calls)
        self.calls.append(text)
        if call in self.fail_on:
            raise RuntimeError("rate limited")
        if call in self.bad_vectors:
            return self.bad_vectors[call]
        base = float(len(text))
        vec = [base + i for i in range(self.dimension)]
        norm = math.sqrt(sum(v * v for v in vec))
        return [v / norm for v in vec]


# ── Fixtures ────────────────────────────────────────────────────────────


@pytest.fixture()
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    for var in ("CHUNK_SIZE", "CHUNK_OVERLAP", "EMBEDDING_BACKEND", "SIMILARITY_METRIC"):
        monkeypatch.delenv(var, raising=False)
    return Settings(
        _env_file=None,
        vector_db_collection="motogp",
        vector_db_endpoint="http://localhost:8000",
        vector_db_token="test-token",
        openai_api_key="sk-test",
    )


@pytest.fixture()
def fake_store() -> FakeVectorStore:
    return FakeVectorStore()


@pytest.fixture()
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture()
def embedder_factory() -> type[FakeEmbedder]:
    """The :class:`FakeEmbedder` class, for tests that need a custom one."""
    return FakeEmbedder
