"""Translation of data-bank exceptions into the connector fault taxonomy.

Connectors backed by :class:`WeightRepository` wrap every repository call
in :func:`translate_storage_errors`, so the controller sees the same
failure types whichever backend or collaborator raised them.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager

from weightview.core.storage.database import DatabaseError
from weightview.core.storage.encryption import EncryptionError
from weightview.core.storage.repository import RepositoryError
from weightview.domains.weight.connectors import IllegalStoreStateFault, StoreIOFault


@contextmanager
def translate_storage_errors(operation: str) -> Iterator[None]:
    """Re-raise storage exceptions from the block as store faults.

    ``sqlite3.Error`` becomes :class:`StoreIOFault`; database, repository
    and encryption errors become :class:`IllegalStoreStateFault`.
    """
    try:
        yield
    except sqlite3.Error as exc:
        raise StoreIOFault(f"{operation} failed: {exc}") from exc
    except (DatabaseError, RepositoryError, EncryptionError) as exc:
        raise IllegalStoreStateFault(f"{operation} failed: {exc}") from exc
