"""Persistent reference oracle backed by SQLite.

Records every deployed address in a local database so that repeated runs
in separate processes observe each other's deployments. This is what makes
``idemdeploy deploy`` idempotent from the command line without a network.

Design:
- Append-only: deployed addresses are inserted, never updated or deleted.
- ``address`` is the primary key, so a second deploy to the same address
  fails at the storage layer as well as in ``deploy()``.
- WAL journal mode for concurrent readers.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from idemdeploy.core.hasher import normalize_address, sha256_digest, to_hex
from idemdeploy.oracle.base import AddressOccupiedError, compute_deterministic_address

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

_CREATE_DEPLOYMENTS = """
CREATE TABLE IF NOT EXISTS deployments (
    address        TEXT PRIMARY KEY,
    deployer       TEXT NOT NULL,
    salt           TEXT NOT NULL,
    fingerprint    TEXT NOT NULL,
    payload_size   INTEGER NOT NULL,
    value          INTEGER NOT NULL DEFAULT 0,
    deployed_at    TEXT NOT NULL
);
"""


class SQLiteOracle:
    """SQLite-backed ``DeploymentOracle``.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file. Created if it does not exist.
    deployer:
        Factory address bound into every derived address.
    """

    def __init__(self, db_path: Path, deployer: str) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self.deployer = deployer
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(_CREATE_DEPLOYMENTS)
            conn.commit()

    # ------------------------------------------------------------------
    # DeploymentOracle
    # ------------------------------------------------------------------

    def has_been_deployed(self, address: str) -> bool:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT 1 FROM deployments WHERE address = ?",
                (normalize_address(address),),
            ).fetchone()
        return row is not None

    def compute_deterministic_address(self, salt: bytes, payload: bytes) -> str:
        return compute_deterministic_address(self.deployer, salt, payload)

    def deploy(self, salt: bytes, payload: bytes, value: int = 0) -> str:
        address = self.compute_deterministic_address(salt, payload)
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO deployments
                        (address, deployer, salt, fingerprint, payload_size, value, deployed_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        address,
                        normalize_address(self.deployer),
                        to_hex(salt),
                        to_hex(sha256_digest(payload)),
                        len(payload),
                        value,
                        datetime.now(timezone.utc).isoformat(),
                    ),
                )
                conn.commit()
        except sqlite3.IntegrityError as exc:
            raise AddressOccupiedError(f"Address already occupied: {address}") from exc
        logger.info("Recorded deployment at %s (%d bytes)", address, len(payload))
        return address

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_addresses(self) -> list[str]:
        """Return every recorded address in insertion order."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT address FROM deployments ORDER BY rowid"
            ).fetchall()
        return [r[0] for r in rows]

    def count(self) -> int:
        with self._connect() as conn:
            row = conn.execute("SELECT COUNT(*) FROM deployments").fetchone()
        return row[0]
