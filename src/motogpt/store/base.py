"""Abstract base class for vector-store backends.

Adding a new backend (Astra, Pinecone, Qdrant …) only requires
subclassing :class:`VectorStoreBase` and implementing its abstract
methods.  The ingestion pipeline only talks to :class:`CollectionHandle`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import get_args

from motogpt.config import SimilarityMetric
from motogpt.errors import VectorValidationError

SUPPORTED_METRICS: tuple[str, ...] = get_args(SimilarityMetric)


@dataclass(frozen=True)
class CollectionSpec:
    """Vector configuration declared when a collection is created."""

    dimension: int
    metric: str = "dot_product"

    def __post_init__(self) -> None:
        if self.dimension <= 0:
            raise ValueError(f"dimension must be positive, got {self.dimension}")
        if self.metric not in SUPPORTED_METRICS:
            raise ValueError(
                f"Unsupported metric {self.metric!r}; choose from {', '.join(SUPPORTED_METRICS)}"
            )


class VectorStoreBase(ABC):
    """Backend-agnostic vector-store interface.

    All calls are coroutines; the loader awaits them one at a time.
    """

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    async def list_collections(self) -> list[str]:
        """Return the names of every collection in the namespace."""
        ...

    @abstractmethod
    async def drop_collection(self, name: str) -> None:
        """Delete collection *name* and all of its records."""
        ...

    @abstractmethod
    async def create_collection(self, name: str, spec: CollectionSpec) -> None:
        """Create an empty collection configured with *spec*."""
        ...

    @abstractmethod
    async def insert_one(self, collection: str, vector: list[float], text: str) -> str:
        """Insert a single ``{vector, text}`` record and return its id."""
        ...

    @abstractmethod
    async def count(self, collection: str) -> int:
        """Return the number of records stored in *collection*."""
        ...


class CollectionHandle:
    """An initialised collection bound to its store.

    Every insert re-checks the vector width against the declared
    dimension, so a mismatched record never reaches the backend.
    """

    def __init__(self, store: VectorStoreBase, name: str, spec: CollectionSpec) -> None:
        self.store = store
        self.name = name
        self.spec = spec

    @property
    def dimension(self) -> int:
        return self.spec.dimension

    async def insert(self, vector: list[float], text: str) -> str:
        if len(vector) != self.spec.dimension:
            raise VectorValidationError(
                f"Refusing to insert {len(vector)}-dim vector into "
                f"'{self.name}' (dimension {self.spec.dimension})",
                expected=self.spec.dimension,
                actual=len(vector),
            )
        return await self.store.insert_one(self.name, vector, text)

    async def count(self) -> int:
        return await self.store.count(self.name)

    def __repr__(self) -> str:
        return f"CollectionHandle(name={self.name!r}, spec={self.spec!r})"
