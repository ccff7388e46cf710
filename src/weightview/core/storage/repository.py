"""Readings repository — CRUD operations for the encrypted data bank.

The repository mediates between stored weight samples and the SQLite
database, using FieldEncryptor to encrypt/decrypt measured values. It also
keeps the set of capabilities the user has granted to this installation.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from datetime import datetime, timezone

from weightview.core.storage.database import ReadingsDatabase
from weightview.core.storage.encryption import FieldEncryptor
from weightview.core.storage.models import StoredWeightSample

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Raised when repository operations fail."""


def to_utc_text(moment: datetime) -> str:
    """Render an aware datetime as fixed-width UTC ISO 8601 text.

    Raises:
        RepositoryError: If ``moment`` carries no UTC offset.
    """
    if moment.tzinfo is None or moment.utcoffset() is None:
        raise RepositoryError(f"Timestamp must be timezone-aware: {moment!r}")
    return moment.astimezone(timezone.utc).isoformat(timespec="microseconds")


class WeightRepository:
    """CRUD repository for encrypted weight samples.

    Usage::

        db = ReadingsDatabase(":memory:")
        db.initialize()
        encryptor = FieldEncryptor(key="...")
        repo = WeightRepository(db, encryptor)

        sample_id = repo.save_sample(72.4, datetime.now().astimezone())
        today = repo.get_samples(since=start_of_day, until=now)
    """

    def __init__(self, database: ReadingsDatabase, encryptor: FieldEncryptor) -> None:
        self._db = database
        self._enc = encryptor

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    # ------------------------------------------------------------------
    # Samples
    # ------------------------------------------------------------------

    def save_sample(
        self,
        value_kg: float,
        time: datetime,
        *,
        sample_id: str | None = None,
    ) -> str:
        """Persist a weight sample with its value encrypted.

        Args:
            value_kg: Measured weight in kilograms.
            time: Aware datetime of the measurement. Its UTC offset is
                stored alongside the instant.
            sample_id: Optional explicit ID; a UUID is generated otherwise.

        Returns:
            The sample ID.
        """
        sid = sample_id or self._new_id()
        offset = time.utcoffset()
        time_utc = to_utc_text(time)

        conn = self._db.connection
        conn.execute(
            """INSERT INTO weight_samples (id, time_utc, zone_offset_seconds, value_enc)
               VALUES (?, ?, ?, ?)""",
            (
                sid,
                time_utc,
                int(offset.total_seconds()) if offset is not None else 0,
                self._enc.encrypt_weight(value_kg),
            ),
        )
        conn.commit()
        logger.info("Saved weight sample %s at %s", sid, time_utc)
        return sid

    def get_sample(self, sample_id: str) -> StoredWeightSample | None:
        """Retrieve a sample by ID, or None if not found."""
        row = self._db.connection.execute(
            "SELECT * FROM weight_samples WHERE id = ?", (sample_id,)
        ).fetchone()
        if row is None:
            return None
        return self._row_to_sample(row)

    def get_samples(
        self,
        *,
        since: datetime,
        until: datetime,
    ) -> list[StoredWeightSample]:
        """Samples with ``since <= time <= until``, oldest first."""
        rows = self._db.connection.execute(
            """SELECT * FROM weight_samples
               WHERE time_utc >= ? AND time_utc <= ?
               ORDER BY time_utc ASC, rowid ASC""",
            (to_utc_text(since), to_utc_text(until)),
        ).fetchall()
        return [self._row_to_sample(row) for row in rows]

    def average_weight(self, *, since: datetime, until: datetime) -> float | None:
        """Mean weight of samples with ``since <= time < until``.

        Values are encrypted, so the mean is computed after decryption
        rather than with SQL ``AVG``.

        Returns:
            The mean in kilograms, or None when no sample falls in range.
        """
        rows = self._db.connection.execute(
            "SELECT value_enc FROM weight_samples WHERE time_utc >= ? AND time_utc < ?",
            (to_utc_text(since), to_utc_text(until)),
        ).fetchall()
        if not rows:
            return None
        values = [self._enc.decrypt_weight(row["value_enc"]) for row in rows]
        return sum(values) / len(values)

    def count_samples(self) -> int:
        """Return total number of stored samples."""
        row = self._db.connection.execute("SELECT COUNT(*) FROM weight_samples").fetchone()
        return row[0]

    def delete_sample(self, sample_id: str) -> bool:
        """Delete a single sample.

        Returns:
            True if a sample was found and deleted, False otherwise.
        """
        conn = self._db.connection
        cursor = conn.execute("DELETE FROM weight_samples WHERE id = ?", (sample_id,))
        conn.commit()
        if cursor.rowcount == 0:
            return False
        logger.info("Deleted weight sample %s", sample_id)
        return True

    # ------------------------------------------------------------------
    # Permission grants
    # ------------------------------------------------------------------

    def grant_capabilities(self, capabilities: Iterable[str]) -> None:
        """Record capabilities as granted (idempotent)."""
        conn = self._db.connection
        conn.executemany(
            "INSERT OR IGNORE INTO permission_grants (capability) VALUES (?)",
            [(capability,) for capability in capabilities],
        )
        conn.commit()

    def revoke_capabilities(self, capabilities: Iterable[str]) -> None:
        """Remove capability grants; unknown capabilities are ignored."""
        conn = self._db.connection
        conn.executemany(
            "DELETE FROM permission_grants WHERE capability = ?",
            [(capability,) for capability in capabilities],
        )
        conn.commit()

    def get_granted_capabilities(self) -> frozenset[str]:
        rows = self._db.connection.execute(
            "SELECT capability FROM permission_grants"
        ).fetchall()
        return frozenset(row[0] for row in rows)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _row_to_sample(self, row) -> StoredWeightSample:
        """Convert a database row to a StoredWeightSample with decrypted value."""
        return StoredWeightSample(
            id=row["id"],
            time_utc=row["time_utc"],
            zone_offset_seconds=row["zone_offset_seconds"],
            value_kg=self._enc.decrypt_weight(row["value_enc"]),
            created_at=row["created_at"],
        )
