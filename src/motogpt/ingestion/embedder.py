"""Embedding backends.

Two interchangeable implementations share the :class:`Embedder` interface:

1. **OpenAI** (default) — hosted ``text-embedding-3-small``, 1536 dims.
   Requires ``OPENAI_API_KEY``.
2. **Local** — ``sentence-transformers/all-MiniLM-L6-v2`` run in-process,
   384 dims.  Weights are loaded once through :meth:`LocalEmbedder.load`.

The collection dimension must match :attr:`Embedder.dimension` of the
backend in use; :func:`validate_vector` enforces it per chunk.
"""

from __future__ import annotations

import asyncio
import logging
import math
from abc import ABC, abstractmethod
from numbers import Real
from typing import TYPE_CHECKING, Any

from langchain_huggingface import HuggingFaceEmbeddings
from langchain_openai import OpenAIEmbeddings

from motogpt.config import EMBEDDING_DIMENSIONS
from motogpt.errors import EmbedderInitError, VectorValidationError

if TYPE_CHECKING:
    from motogpt.config import Settings

logger = logging.getLogger(__name__)


class Embedder(ABC):
    """Backend-agnostic text → vector interface.

    Parameters
    ----------
    name:
        Model identifier, used in log lines.
    dimension:
        Width of every vector this backend produces.
    """

    def __init__(self, name: str, dimension: int) -> None:
        self.name = name
        self.dimension = dimension

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """Return the embedding of a single chunk of *text*."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, dimension={self.dimension})"


class OpenAIEmbedder(Embedder):
    """Hosted embedding API.

    Network failures and rate limits surface as exceptions from
    :meth:`embed`; nothing is retried here.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        *,
        dimension: int = EMBEDDING_DIMENSIONS["openai"],
        client: Any = None,
    ) -> None:
        super().__init__(model, dimension)
        self._client = client or OpenAIEmbeddings(model=model, api_key=api_key, max_retries=0)

    async def embed(self, text: str) -> list[float]:
        vector = await self._client.aembed_query(text)
        return list(vector)


class LocalEmbedder(Embedder):
    """In-process sentence-transformer model.

    Instances are only obtained through :meth:`load`, which owns the
    expensive weight download / initialisation.  Vectors are mean-pooled
    (per the model config) and L2-normalised.
    """

    def __init__(
        self,
        model: HuggingFaceEmbeddings,
        name: str,
        *,
        dimension: int = EMBEDDING_DIMENSIONS["local"],
    ) -> None:
        super().__init__(name, dimension)
        self._model = model

    @classmethod
    async def load(
        cls,
        model_name: str = "sentence-transformers/all-MiniLM-L6-v2",
        *,
        dimension: int = EMBEDDING_DIMENSIONS["local"],
    ) -> LocalEmbedder:
        """Load the model weights off the event loop and return a ready embedder."""
        logger.info("Loading local embedding model %s", model_name)
        model = await asyncio.to_thread(
            HuggingFaceEmbeddings,
            model_name=model_name,
            encode_kwargs={"normalize_embeddings": True},
        )
        logger.info("Local embedding model ready")
        return cls(model, model_name, dimension=dimension)

    async def embed(self, text: str) -> list[float]:
        vector = await self._model.aembed_query(text)
        return [float(x) for x in vector]


async def build_embedder(settings: Settings) -> Embedder:
    """Instantiate the backend selected by ``settings.embedding_backend``.

    Any failure is fatal for the run and re-raised as
    :class:`EmbedderInitError`.
    """
    try:
        if settings.embedding_backend == "local":
            return await LocalEmbedder.load(
                settings.local_embedding_model,
                dimension=settings.embedding_dimension,
            )
        logger.info("Using hosted embedding model %s", settings.openai_embedding_model)
        return OpenAIEmbedder(
            settings.openai_api_key,
            settings.openai_embedding_model,
            dimension=settings.embedding_dimension,
        )
    except Exception as exc:
        logger.exception("Embedder initialisation failed")
        raise EmbedderInitError(
            f"Could not initialise {settings.embedding_backend!r} embedder: {exc}"
        ) from exc


def validate_vector(vector: Any, dimension: int) -> list[float]:
    """Check that *vector* has *dimension* finite numeric elements.

    Returns the vector as a ``list[float]``; raises
    :class:`VectorValidationError` otherwise.
    """
    try:
        values = list(vector)
    except TypeError as exc:
        raise VectorValidationError(f"Embedding is not a sequence: {type(vector).__name__}") from exc

    if len(values) != dimension:
        raise VectorValidationError(
            f"Embedding has {len(values)} dimensions, collection expects {dimension}",
            expected=dimension,
            actual=len(values),
        )
    for i, value in enumerate(values):
        # bool is a Real subclass but never a meaningful coordinate
        if isinstance(value, bool) or not isinstance(value, Real):
            raise VectorValidationError(f"Element {i} is not numeric: {value!r}")
        if not math.isfinite(value):
            raise VectorValidationError(f"Element {i} is not finite: {value!r}")
    return [float(v) for v in values]
