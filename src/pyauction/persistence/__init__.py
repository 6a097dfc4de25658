"""Persistence layer for the athlete and franchise stores."""

from __future__ import annotations

import json
import logging
import os
import sqlite3
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

from pydantic import TypeAdapter, ValidationError

from pyauction.errors import InconsistentStateError
from pyauction.models import Athlete, AuctionState, Franchise


logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
ATHLETES_KEY = f"athletes_v{SCHEMA_VERSION}"
FRANCHISES_KEY = f"franchises_v{SCHEMA_VERSION}"

_ATHLETES = TypeAdapter(List[Athlete])
_FRANCHISES = TypeAdapter(List[Franchise])


class StateStore:
    """SQLite-backed key/value store holding the latest auction snapshot."""

    def __init__(self, db_path: Path | str = "pyauction.sqlite"):
        self._use_uri = False
        env_db = os.getenv("PYAUCTION_DB_PATH")
        target = env_db or db_path
        if isinstance(target, str) and target.startswith("file:"):
            self.db_path: Path | str = target
            self._use_uri = True
        else:
            self.db_path = Path(target)
        self._ensure_schema()

    def _fallback_connection(self) -> sqlite3.Connection:
        fallback_dir = Path(tempfile.gettempdir()) / "pyauction-runtime"
        fallback_dir.mkdir(parents=True, exist_ok=True)
        fallback = fallback_dir / "pyauction.sqlite"
        logger.warning("Database %s is not writable, using %s", self.db_path, fallback)
        conn = sqlite3.connect(fallback)
        self.db_path = fallback
        self._use_uri = False
        self._create_schema(conn)
        return conn

    def _connect(self) -> sqlite3.Connection:
        try:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(self.db_path)
            else:
                conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        except (sqlite3.OperationalError, OSError):
            conn = self._fallback_connection()
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS records (
                key TEXT PRIMARY KEY,
                payload_json TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        conn.commit()

    def _get(self, key: str) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute("SELECT payload_json FROM records WHERE key = ?", (key,)).fetchone()
        return row["payload_json"] if row is not None else None

    def _put(self, conn: sqlite3.Connection, key: str, payload: Any) -> None:
        conn.execute(
            """
            INSERT INTO records (key, payload_json, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                payload_json = excluded.payload_json,
                updated_at = excluded.updated_at
            """,
            (key, json.dumps(payload), datetime.now(timezone.utc).isoformat()),
        )

    def _load_records(self, key: str, adapter: TypeAdapter, fallback: list) -> list:
        raw = self._get(key)
        if raw is None:
            return list(fallback)
        try:
            return adapter.validate_python(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.warning("Discarding malformed %s record: %s", key, exc)
            return list(fallback)

    def load_state(self, seed: AuctionState) -> AuctionState:
        """
        Read the stored snapshot, falling back to ``seed`` per record.

        A snapshot whose records load but break the store invariants (for
        example a negative budget or rosters that disagree with sales) is
        replaced by ``seed`` as a whole.
        """
        athletes = self._load_records(ATHLETES_KEY, _ATHLETES, seed.athletes)
        franchises = self._load_records(FRANCHISES_KEY, _FRANCHISES, seed.franchises)
        try:
            state = AuctionState(athletes=athletes, franchises=franchises)
            state.check_invariants()
            for franchise in state.franchises:
                if franchise.budget < 0:
                    raise InconsistentStateError(
                        f"Franchise {franchise.franchise_id} has a negative budget"
                    )
        except InconsistentStateError as exc:
            logger.warning("Stored auction state is inconsistent, using seed data: %s", exc)
            return seed
        return state

    def save_state(self, state: AuctionState) -> None:
        athletes = [athlete.model_dump(mode="json") for athlete in state.athletes]
        franchises = [franchise.model_dump(mode="json") for franchise in state.franchises]
        with self._connect() as conn:
            self._put(conn, ATHLETES_KEY, athletes)
            self._put(conn, FRANCHISES_KEY, franchises)
            conn.commit()
        logger.debug("Saved %d athletes and %d franchises", len(athletes), len(franchises))

    def clear(self) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM records WHERE key IN (?, ?)", (ATHLETES_KEY, FRANCHISES_KEY))
            conn.commit()


__all__ = [
    "ATHLETES_KEY",
    "FRANCHISES_KEY",
    "SCHEMA_VERSION",
    "StateStore",
]
