"""
ProgressStore - Persist completed exercise indices in ~/.pagelab/progress.db.

One record per catalog set, keyed by the set key, holding a JSON list of
completed indices. Storage problems never reach the learner:
- A missing, unreadable or corrupt record loads as an empty set
- Failed writes are logged and dropped
"""

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from pagelab.schemas import ProgressRecord


logger = logging.getLogger(__name__)

DEFAULT_PROGRESS_DIR = Path.home() / ".pagelab"
DEFAULT_PROGRESS_DB = DEFAULT_PROGRESS_DIR / "progress.db"


def _coerce_indices(payload) -> set[int]:
    """Keep only non-negative integers from a decoded payload."""
    if not isinstance(payload, list):
        raise ValueError(f"expected a list of indices, got {type(payload).__name__}")
    return {
        item for item in payload
        if isinstance(item, int) and not isinstance(item, bool) and item >= 0
    }


class ProgressStore:
    """
    Key-value store of completed exercise indices per catalog set.

    Each method opens its own connection so the store can be shared by
    Streamlit reruns without holding a connection open.
    """

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize progress store.

        Args:
            db_path: Path to progress.db (default: ~/.pagelab/progress.db)
        """
        self.db_path = Path(db_path) if db_path else DEFAULT_PROGRESS_DB
        self.available = self._ensure_database()

    def _ensure_database(self) -> bool:
        """Create database and tables if they don't exist."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path))
            try:
                conn.executescript("""
                    CREATE TABLE IF NOT EXISTS progress_records (
                        set_key TEXT PRIMARY KEY,
                        payload TEXT NOT NULL DEFAULT '[]',
                        updated_at TEXT
                    );
                """)
                conn.commit()
            finally:
                conn.close()
        except (OSError, sqlite3.Error) as e:
            logger.warning(f"Progress storage unavailable at {self.db_path}: {e}")
            return False
        return True

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    # -------------------------------------------------------------------------
    # Records
    # -------------------------------------------------------------------------

    def _read_row(self, set_key: str) -> Optional[sqlite3.Row]:
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "SELECT set_key, payload, updated_at FROM progress_records WHERE set_key = ?",
                (set_key,)
            )
            return cursor.fetchone()
        finally:
            conn.close()

    def load(self, set_key: str) -> set[int]:
        """Load completed indices; any storage problem yields an empty set."""
        try:
            row = self._read_row(set_key)
            if row is None:
                return set()
            return _coerce_indices(json.loads(row["payload"]))
        except (sqlite3.Error, ValueError, TypeError) as e:
            logger.warning(f"Ignoring unreadable progress record '{set_key}': {e}")
            return set()

    def get_record(self, set_key: str) -> Optional[ProgressRecord]:
        """Get the full record, or None when absent or unreadable."""
        try:
            row = self._read_row(set_key)
            if row is None:
                return None
            return ProgressRecord(
                set_key=row["set_key"],
                completed=sorted(_coerce_indices(json.loads(row["payload"]))),
                updated_at=datetime.fromisoformat(row["updated_at"]) if row["updated_at"] else None,
            )
        except (sqlite3.Error, ValueError, TypeError) as e:
            logger.warning(f"Ignoring unreadable progress record '{set_key}': {e}")
            return None

    def save(self, set_key: str, indices: Iterable[int]) -> bool:
        """Replace the record for ``set_key``. Returns False if the write failed."""
        payload = json.dumps(sorted(set(indices)))
        now = datetime.now().isoformat()
        try:
            conn = self._get_connection()
            try:
                conn.execute(
                    """INSERT INTO progress_records (set_key, payload, updated_at)
                       VALUES (?, ?, ?)
                       ON CONFLICT(set_key) DO UPDATE SET
                         payload = ?,
                         updated_at = ?""",
                    (set_key, payload, now, payload, now)
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.warning(f"Could not save progress for '{set_key}': {e}")
            return False
        return True

    def delete(self, set_key: str) -> bool:
        """Remove the record for ``set_key``. Returns False if the delete failed."""
        try:
            conn = self._get_connection()
            try:
                conn.execute(
                    "DELETE FROM progress_records WHERE set_key = ?",
                    (set_key,)
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.warning(f"Could not delete progress for '{set_key}': {e}")
            return False
        return True

    def list_set_keys(self) -> list[str]:
        """Keys of all stored records."""
        try:
            conn = self._get_connection()
            try:
                cursor = conn.execute("SELECT set_key FROM progress_records ORDER BY set_key")
                return [row["set_key"] for row in cursor.fetchall()]
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.warning(f"Could not list progress records: {e}")
            return []


def get_completion_stats(completed: Iterable[int], total: int) -> dict:
    """
    Get completion statistics.

    Args:
        completed: Completed indices (entries outside range are ignored)
        total: Number of exercises in the set

    Returns:
        Dictionary with completion stats
    """
    done = len({index for index in completed if 0 <= index < total})
    return {
        "total": total,
        "completed": done,
        "remaining": total - done,
        "completion_percent": round(done / total * 100, 1) if total > 0 else 0,
    }
