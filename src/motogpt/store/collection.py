"""Collection (re)creation before a load."""

from __future__ import annotations

import logging

from motogpt.errors import CollectionInitError
from motogpt.store.base import CollectionHandle, CollectionSpec, VectorStoreBase

logger = logging.getLogger(__name__)


async def initialize_collection(
    store: VectorStoreBase,
    name: str,
    *,
    dimension: int,
    metric: str = "dot_product",
    drop_existing: bool = True,
) -> CollectionHandle:
    """Make sure *name* exists, empty, with the declared vector configuration.

    When *drop_existing* is set, a same-named collection is deleted first
    together with all of its data.  This keeps the dimension in step with
    the embedding backend when it changes between runs.

    Raises
    ------
    CollectionInitError
        If listing, dropping or creating the collection fails.  The run
        cannot continue without it.
    """
    spec = CollectionSpec(dimension=dimension, metric=metric)
    try:
        existing = await store.list_collections()
        if drop_existing and name in existing:
            logger.warning("Dropping existing collection '%s' and all of its records", name)
            await store.drop_collection(name)
        await store.create_collection(name, spec)
    except Exception as exc:
        logger.exception("Failed to create collection '%s'", name)
        raise CollectionInitError(f"Could not create collection '{name}': {exc}") from exc

    logger.info("Created collection '%s' (dimension=%d, metric=%s)", name, dimension, metric)
    return CollectionHandle(store, name, spec)
