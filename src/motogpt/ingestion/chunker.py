"""Text chunking strategies."""

from __future__ import annotations

from langchain_text_splitters import RecursiveCharacterTextSplitter

from motogpt.ingestion.models import Chunk, Page

DEFAULT_SEPARATORS = ["\n\n", "\n", ". ", " ", ""]


def split_text(
    text: str,
    chunk_size: int = 512,
    chunk_overlap: int = 100,
) -> list[str]:
    """Split *text* into overlapping chunks for embedding.

    Parameters
    ----------
    text:
        Plain text of a single page.
    chunk_size:
        Maximum number of characters per chunk.
    chunk_overlap:
        Number of overlapping characters between consecutive chunks.
        Must be smaller than *chunk_size*.

    Returns
    -------
    list[str]
        Chunks in page order.  Paragraph, line, sentence and word
        boundaries are preferred over hard character cuts.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if chunk_overlap < 0 or chunk_overlap >= chunk_size:
        raise ValueError(
            f"chunk_overlap must be in [0, chunk_size), got {chunk_overlap} "
            f"with chunk_size={chunk_size}"
        )
    if not text:
        return []

    splitter = RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        length_function=len,
        separators=DEFAULT_SEPARATORS,
    )
    return splitter.split_text(text)


def chunk_page(
    page: Page,
    chunk_size: int = 512,
    chunk_overlap: int = 100,
) -> list[Chunk]:
    """Split a fetched page into indexed :class:`Chunk` objects."""
    return [
        Chunk(url=page.url, index=i, text=piece)
        for i, piece in enumerate(split_text(page.text, chunk_size, chunk_overlap))
    ]
