"""motogpt — load MotoGP reference pages into a vector store for retrieval."""

__version__ = "0.1.0"
