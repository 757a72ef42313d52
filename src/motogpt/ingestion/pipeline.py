"""Sequential fetch → chunk → embed → insert orchestration.

    Init ─► for url: Fetching ─► Chunking ─► for chunk: Embedding ─► Inserting ─► Done

Every external call is awaited before the next one starts; URLs and
chunks are never processed concurrently.  Failure handling by stage:

* initialisation (embedder, store connection, collection) — fatal,
  the exception propagates out of :func:`run`;
* fetch — the URL is skipped with zero chunks;
* embed / validate / insert — only that chunk is lost.
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Sequence

from motogpt.errors import CollectionInitError
from motogpt.ingestion.chunker import chunk_page
from motogpt.ingestion.embedder import Embedder, build_embedder, validate_vector
from motogpt.ingestion.fetcher import fetch_page
from motogpt.ingestion.models import Chunk, ChunkOutcome, EmbeddedChunk, IngestReport, Page, UrlReport
from motogpt.store.collection import initialize_collection

if TYPE_CHECKING:
    from motogpt.config import Settings
    from motogpt.store.base import CollectionHandle, VectorStoreBase

logger = logging.getLogger(__name__)

FetchFn = Callable[[str], Awaitable[Page]]


async def ingest_chunk(
    chunk: Chunk,
    embedder: Embedder,
    collection: CollectionHandle,
) -> ChunkOutcome:
    """Embed, validate and insert one chunk.

    Never raises: any failure is logged with the URL and chunk index and
    reported as a failed :class:`ChunkOutcome`.
    """
    try:
        vector = await embedder.embed(chunk.text)
        embedded = EmbeddedChunk(chunk=chunk, vector=validate_vector(vector, collection.dimension))
        record_id = await collection.insert(embedded.vector, embedded.chunk.text)
    except Exception as exc:
        logger.exception("Chunk %d of %s failed", chunk.index, chunk.url)
        return ChunkOutcome(index=chunk.index, ok=False, error=f"{type(exc).__name__}: {exc}")

    logger.info("Inserted chunk %d of %s as %s", chunk.index, chunk.url, record_id)
    return ChunkOutcome(index=chunk.index, ok=True, record_id=record_id)


async def ingest_url(
    url: str,
    embedder: Embedder,
    collection: CollectionHandle,
    *,
    chunk_size: int = 512,
    chunk_overlap: int = 100,
    fetch: FetchFn = fetch_page,
) -> UrlReport:
    """Fetch *url*, split it, and push every chunk into *collection*.

    An empty fetch result skips the URL.  Chunks are folded one by one
    into the report so a failure never stops the ones after it.
    """
    page = await fetch(url)
    if page.is_empty:
        logger.warning("Skipping %s: no content fetched", url)
        return UrlReport(url=url, skipped=True)

    chunks = chunk_page(page, chunk_size, chunk_overlap)
    logger.info("Split %s into %d chunks", url, len(chunks))

    report = UrlReport(url=url)
    for chunk in chunks:
        report.outcomes.append(await ingest_chunk(chunk, embedder, collection))

    logger.info(
        "Finished %s: %d inserted, %d failed", url, report.inserted, report.failed
    )
    return report


async def connect_store(settings: Settings) -> VectorStoreBase:
    """Open the configured vector database.  Failure is fatal."""
    from motogpt.store.chroma_store import ChromaVectorStore

    try:
        return await ChromaVectorStore.connect(
            settings.vector_db_endpoint,
            settings.vector_db_token,
            namespace=settings.vector_db_namespace,
            tenant=settings.vector_db_tenant,
        )
    except Exception as exc:
        logger.exception("Could not connect to the vector database")
        raise CollectionInitError(f"Vector database unreachable: {exc}") from exc


async def run(
    urls: Sequence[str],
    settings: Settings,
    *,
    store: VectorStoreBase | None = None,
    embedder: Embedder | None = None,
    fetch: FetchFn | None = None,
) -> IngestReport:
    """Load every URL in *urls* into the configured collection.

    *store*, *embedder* and *fetch* default to the configured backends
    and exist mainly so tests can substitute fakes.

    Raises
    ------
    EmbedderInitError, CollectionInitError
        Initialisation failed; nothing was loaded.
    """
    if embedder is None:
        embedder = await build_embedder(settings)
    logger.info("Embedder ready: %r", embedder)

    if store is None:
        store = await connect_store(settings)
    collection = await initialize_collection(
        store,
        settings.vector_db_collection,
        dimension=embedder.dimension,
        metric=settings.similarity_metric,
        drop_existing=settings.drop_existing_collection,
    )

    if fetch is None:
        fetch = functools.partial(
            fetch_page,
            headless=settings.browser_headless,
            timeout_ms=settings.navigation_timeout_ms,
        )

    report = IngestReport(collection=collection.name)
    for url in urls:
        report.urls.append(
            await ingest_url(
                url,
                embedder,
                collection,
                chunk_size=settings.chunk_size,
                chunk_overlap=settings.chunk_overlap,
                fetch=fetch,
            )
        )

    logger.info(report.summary())
    return report
