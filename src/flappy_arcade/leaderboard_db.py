"""
leaderboard_db.py: Storage layer for the leaderboard.
A small sqlite key-value table holds the leaderboard as one JSON document.
"""

import json
import sqlite3
from typing import Any, List, Optional

from .constants import DB_FILE, LEADERBOARD_KEY, LEADERBOARD_SIZE
from .data_models import Leaderboard, ScoreEntry
from .errors import InvalidName, PersistenceError
from .log import get_logger

logger = get_logger("leaderboard")


class KeyValueStore:
    """Handles all interaction with the SQLite database."""
    def __init__(self, db_file: str = DB_FILE):
        # check_same_thread=False lets the front-end open the store on another thread
        self.conn = sqlite3.connect(db_file, check_same_thread=False)
        try:
            self.setup()
        except sqlite3.Error:
            self.conn.close()
            raise

    def setup(self):
        """Creates the table if it doesn't exist."""
        with self.conn:
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)

    def get(self, key: str) -> Optional[str]:
        cur = self.conn.execute("SELECT value FROM kv_store WHERE key=?", (key,))
        row = cur.fetchone()
        return row[0] if row else None

    def put(self, key: str, value: str):
        """Overwrites the value in a single transaction."""
        with self.conn:
            self.conn.execute("""
                INSERT INTO kv_store (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """, (key, value))

    def close(self):
        self.conn.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


# -------- Decoding --------

class _Rejected(Exception):
    """The document does not match the current record format."""


def _valid_score(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _valid_name(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def decode_records(document: Any) -> List[ScoreEntry]:
    """Current format: a list of {"name": str, "score": int} objects, nothing else."""
    if not isinstance(document, list):
        raise _Rejected("not a list")

    entries = []
    for record in document:
        if not isinstance(record, dict) or set(record) != {"name", "score"}:
            raise _Rejected(f"unexpected record {record!r}")
        if not _valid_name(record["name"]) or not _valid_score(record["score"]):
            raise _Rejected(f"invalid record {record!r}")
        entries.append(ScoreEntry(record["name"], record["score"]))
    return entries


def decode_legacy_records(document: Any) -> List[ScoreEntry]:
    """
    Older boards: flat maps keyed name/username and score/best, with extra
    keys allowed, or [name, score] pairs. Malformed items are skipped.
    """
    if not isinstance(document, list):
        return []

    entries = []
    for record in document:
        if isinstance(record, dict):
            name = record.get("name", record.get("username"))
            score = record.get("score", record.get("best"))
        elif isinstance(record, (list, tuple)) and len(record) == 2:
            name, score = record
        else:
            continue

        if _valid_name(name) and _valid_score(score):
            entries.append(ScoreEntry(name, score))
    return entries


# -------- Store --------

class LeaderboardStore:
    """Ranked, bounded leaderboard persisted under one key."""

    def __init__(self, kv: Optional[KeyValueStore] = None, key: str = LEADERBOARD_KEY,
                 capacity: int = LEADERBOARD_SIZE):
        self.kv = kv if kv is not None else KeyValueStore()
        self.key = key
        self.capacity = capacity
        self.last_entry: Optional[ScoreEntry] = None
        self._leaderboard = self.load()

    @property
    def leaderboard(self) -> Leaderboard:
        return self._leaderboard

    def load(self) -> Leaderboard:
        """Reads the stored board. Absent or unreadable data gives an empty board."""
        empty = Leaderboard(capacity=self.capacity)
        try:
            raw = self.kv.get(self.key)
        except sqlite3.Error as e:
            logger.warning("Could not read leaderboard: %s", e)
            return empty
        if raw is None:
            return empty

        try:
            document = json.loads(raw)
        except (TypeError, ValueError, RecursionError) as e:
            logger.warning("Discarding corrupt leaderboard data: %s", e)
            return empty

        try:
            entries = decode_records(document)
        except _Rejected as e:
            entries = decode_legacy_records(document)
            logger.warning("Leaderboard not in current format (%s); recovered %d legacy entries",
                           e, len(entries))

        return Leaderboard.ranked(entries, self.capacity)

    def save(self, leaderboard: Leaderboard):
        """Serializes the whole board and overwrites the stored copy."""
        payload = json.dumps(leaderboard.to_records())
        try:
            self.kv.put(self.key, payload)
        except sqlite3.Error as e:
            logger.error("Failed to save leaderboard: %s", e)
            raise PersistenceError(f"Could not save leaderboard: {e}") from e
        logger.info("Saved leaderboard with %d entries", len(leaderboard))

    def submit(self, name: str, score: int) -> Leaderboard:
        """
        Adds an entry, keeps the top scores and persists the result.
        The in-memory board only changes if the save succeeds.
        """
        if not isinstance(name, str) or not name.strip():
            raise InvalidName()
        if not _valid_score(score):
            raise ValueError(f"Score must be a non-negative integer, got {score!r}")

        entry = ScoreEntry(name.strip(), score)
        updated = self._leaderboard.insert(entry)
        self.save(updated)
        self._leaderboard = updated
        self.last_entry = entry
        return updated

    def close(self):
        self.kv.close()


def open_store(db_file: str = DB_FILE, key: str = LEADERBOARD_KEY,
               capacity: int = LEADERBOARD_SIZE) -> LeaderboardStore:
    """Opens the store on `db_file`, or on a memory-only database if that file is unusable."""
    try:
        kv = KeyValueStore(db_file)
    except sqlite3.Error as e:
        logger.error("Cannot open %s (%s); scores will not be kept after exit", db_file, e)
        kv = KeyValueStore(":memory:")
    return LeaderboardStore(kv, key=key, capacity=capacity)
