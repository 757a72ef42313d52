"""Loader configuration loaded from environment / .env file."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings

from motogpt.errors import ConfigurationError

EmbeddingBackend = Literal["openai", "local"]
SimilarityMetric = Literal["euclidean", "dot_product", "cosine"]

# Output width of each embedding backend.  A collection built for one
# backend cannot accept vectors from the other.
EMBEDDING_DIMENSIONS: dict[str, int] = {
    "openai": 1536,
    "local": 384,
}

DEFAULT_NAMESPACE = "default_database"


class Settings(BaseSettings):
    """Loader settings, populated from env vars or .env file."""

    # Vector store
    vector_db_namespace: str = Field(
        default=DEFAULT_NAMESPACE,
        description="Logical database the collection lives in",
    )
    vector_db_collection: str = Field(description="Target collection name")
    vector_db_endpoint: str = Field(
        description="Vector database URL, e.g. 'https://vectors.example.com:8000'",
    )
    vector_db_token: str = Field(description="Bearer token for the vector database")
    vector_db_tenant: str = "default_tenant"
    similarity_metric: SimilarityMetric = "dot_product"
    drop_existing_collection: bool = True

    # Embedding
    embedding_backend: EmbeddingBackend = "openai"
    openai_api_key: str = Field(default="", description="Only needed for the openai backend")
    openai_embedding_model: str = "text-embedding-3-small"
    local_embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"

    # Chunking
    chunk_size: int = Field(default=512, gt=0)
    chunk_overlap: int = Field(default=100, ge=0)

    # Browser
    browser_headless: bool = True
    navigation_timeout_ms: int = Field(default=30_000, gt=0)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @field_validator("vector_db_collection", "vector_db_endpoint", "vector_db_token")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @field_validator("vector_db_namespace")
    @classmethod
    def _namespace_fallback(cls, value: str) -> str:
        return value.strip() or DEFAULT_NAMESPACE

    @model_validator(mode="after")
    def _check_consistency(self) -> Settings:
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than "
                f"chunk_size ({self.chunk_size})"
            )
        if self.embedding_backend == "openai" and not self.openai_api_key:
            raise ValueError("OPENAI_API_KEY is required when EMBEDDING_BACKEND=openai")
        return self

    @property
    def embedding_dimension(self) -> int:
        """Vector width produced by the active embedding backend."""
        return EMBEDDING_DIMENSIONS[self.embedding_backend]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, validating them on first use.

    Raises :class:`ConfigurationError` when a required variable is missing
    or the values are inconsistent.
    """
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid loader configuration:\n{exc}") from exc
