"""
Ingestion — page fetching, chunking, and embedding into the vector store.

This module is responsible for the one-shot pipeline that converts web
pages into embedded chunks stored in a vector database collection.
"""
