"""
Store — vector-database access behind a backend-agnostic interface.

Public surface
--------------
- :class:`VectorStoreBase` — abstract backend (subclass for Astra, Pinecone, etc.).
- :class:`ChromaVectorStore` — default Chroma backend.
- :class:`CollectionHandle`, :class:`CollectionSpec` — an initialised collection.
- :func:`initialize_collection` — drop-and-recreate before a load.
"""

from motogpt.store.base import CollectionHandle, CollectionSpec, VectorStoreBase
from motogpt.store.collection import initialize_collection

__all__ = [
    "ChromaVectorStore",
    "CollectionHandle",
    "CollectionSpec",
    "VectorStoreBase",
    "initialize_collection",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import ChromaVectorStore to avoid pulling in chromadb at import time."""
    if name == "ChromaVectorStore":
        from motogpt.store.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
