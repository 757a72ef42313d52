"""Chroma implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlparse
from uuid import uuid4

import chromadb
from chromadb.config import DEFAULT_DATABASE, DEFAULT_TENANT

from motogpt.store.base import CollectionSpec, VectorStoreBase

logger = logging.getLogger(__name__)

# Loader metric name → Chroma HNSW space.
_METRIC_MAP = {
    "euclidean": "l2",
    "dot_product": "ip",
    "cosine": "cosine",
}


def parse_endpoint(endpoint: str) -> tuple[str, int, bool]:
    """Split a database URL into ``(host, port, ssl)``.

    A bare ``host[:port]`` is treated as plain HTTP.  The default port is
    443 for ``https`` and Chroma's 8000 otherwise.
    """
    parsed = urlparse(endpoint if "://" in endpoint else f"http://{endpoint}")
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise ValueError(f"Invalid vector database endpoint: {endpoint!r}")
    ssl = parsed.scheme == "https"
    port = parsed.port or (443 if ssl else 8000)
    return parsed.hostname, port, ssl


def to_chroma_space(metric: str) -> str:
    try:
        return _METRIC_MAP[metric]
    except KeyError:
        raise ValueError(f"Unsupported metric: {metric!r}") from None


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store.

    Use :meth:`connect` to build one from connection settings; the
    constructor accepts an already-open ``AsyncClientAPI``.

    Parameters
    ----------
    client:
        Async Chroma client scoped to the target tenant / database.
    """

    def __init__(self, client: Any) -> None:
        self._client = client
        self._collections: dict[str, Any] = {}

    @classmethod
    async def connect(
        cls,
        endpoint: str,
        token: str,
        *,
        namespace: str = DEFAULT_DATABASE,
        tenant: str = DEFAULT_TENANT,
    ) -> ChromaVectorStore:
        """Open an authenticated connection to the Chroma server at *endpoint*.

        *namespace* selects the Chroma database the collection lives in.
        """
        host, port, ssl = parse_endpoint(endpoint)
        logger.info("Connecting to Chroma at %s:%d (database=%s)", host, port, namespace)
        client = await chromadb.AsyncHttpClient(
            host=host,
            port=port,
            ssl=ssl,
            headers={"Authorization": f"Bearer {token}"},
            tenant=tenant,
            database=namespace,
        )
        return cls(client)

    # -- VectorStoreBase overrides --------------------------------------------

    async def list_collections(self) -> list[str]:
        collections = await self._client.list_collections()
        # chromadb < 0.6 returns Collection objects, later versions names
        return [c if isinstance(c, str) else c.name for c in collections]

    async def drop_collection(self, name: str) -> None:
        await self._client.delete_collection(name)
        self._collections.pop(name, None)

    async def create_collection(self, name: str, spec: CollectionSpec) -> None:
        collection = await self._client.create_collection(
            name=name,
            metadata={
                "hnsw:space": to_chroma_space(spec.metric),
                "dimension": spec.dimension,
                "metric": spec.metric,
            },
        )
        self._collections[name] = collection

    async def insert_one(self, collection: str, vector: list[float], text: str) -> str:
        coll = await self._get_collection(collection)
        record_id = uuid4().hex
        await coll.add(ids=[record_id], embeddings=[vector], documents=[text])
        return record_id

    async def count(self, collection: str) -> int:
        coll = await self._get_collection(collection)
        return await coll.count()

    # -- internals ------------------------------------------------------------

    async def _get_collection(self, name: str) -> Any:
        if name not in self._collections:
            self._collections[name] = await self._client.get_collection(name)
        return self._collections[name]
