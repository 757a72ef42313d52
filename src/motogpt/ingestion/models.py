"""Domain models flowing through the ingestion pipeline.

All of them are transient: a :class:`Page` lives until it has been
chunked, an :class:`EmbeddedChunk` until it has been written.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Page(BaseModel):
    """Plain text extracted from one source URL.

    ``text`` is empty when the fetch failed; callers treat that as a
    soft failure and skip the URL.
    """

    url: str
    text: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


class Chunk(BaseModel):
    """A bounded slice of a page's text.

    ``index`` is the ordinal position within the page and is only used
    for logging; stored records do not carry it.
    """

    url: str
    index: int
    text: str


class EmbeddedChunk(BaseModel):
    """A chunk paired with its embedding, ready for insertion."""

    chunk: Chunk
    vector: list[float]


class ChunkOutcome(BaseModel):
    """Result of pushing one chunk through embed → validate → insert."""

    index: int
    ok: bool
    record_id: str | None = None
    error: str | None = None


class UrlReport(BaseModel):
    """Per-URL tally accumulated over its chunks."""

    url: str
    skipped: bool = False
    outcomes: list[ChunkOutcome] = Field(default_factory=list)

    @property
    def chunk_count(self) -> int:
        return len(self.outcomes)

    @property
    def inserted(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.ok)


class IngestReport(BaseModel):
    """Summary of a whole run."""

    collection: str
    urls: list[UrlReport] = Field(default_factory=list)

    @property
    def inserted(self) -> int:
        return sum(u.inserted for u in self.urls)

    @property
    def failed(self) -> int:
        return sum(u.failed for u in self.urls)

    @property
    def skipped_urls(self) -> list[str]:
        return [u.url for u in self.urls if u.skipped]

    @property
    def ok(self) -> bool:
        """``True`` when at least one record was written."""
        return self.inserted > 0

    def summary(self) -> str:
        return (
            f"Inserted {self.inserted} records into '{self.collection}' "
            f"({self.failed} chunks failed, {len(self.skipped_urls)} URLs skipped)"
        )
