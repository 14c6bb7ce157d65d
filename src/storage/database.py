"""
Database module for storing counted vehicles.

The counter reports each counted vehicle to this store through its event
sink hook. Schema versioning recreates the tables when the layout changes.
"""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
import time
from typing import Any, Dict, List, Optional

from models.count_event import CountEvent

# Schema version - increment when schema changes
EXPECTED_SCHEMA_VERSION = 1


class Database:
    """
    SQLite store for count events.

    Tables:
    - schema_meta: tracks schema version
    - count_events: one row per counted vehicle

    The connection is shared between the frame loop (writes) and the status
    API thread (reads), so every statement runs under a lock.
    """

    def __init__(self, local_database_path: str):
        """
        Initialize the database.

        Args:
            local_database_path: Path to the SQLite database file.
        """
        self.local_database_path = local_database_path
        self.conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()

        # Create directory if it doesn't exist
        db_dir = os.path.dirname(local_database_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        logging.info(f"Database initialized at {local_database_path}")

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self.conn is None:
            self.conn = sqlite3.connect(self.local_database_path, check_same_thread=False)
        return self.conn

    def _get_schema_version(self) -> Optional[int]:
        """Get current schema version from database."""
        try:
            cursor = self._get_connection().cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_meta'"
            )
            if cursor.fetchone() is None:
                return None

            cursor.execute("SELECT schema_version FROM schema_meta LIMIT 1")
            row = cursor.fetchone()
            return row[0] if row else None
        except sqlite3.Error:
            return None

    def _drop_old_tables(self) -> None:
        cursor = self._get_connection().cursor()
        for table in ("count_events", "schema_meta"):
            cursor.execute(f"DROP TABLE IF EXISTS {table}")
        self._get_connection().commit()

    def _create_schema(self) -> None:
        cursor = self._get_connection().cursor()

        cursor.execute("""
            CREATE TABLE schema_meta (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                schema_version INTEGER NOT NULL,
                created_at TEXT NOT NULL DEFAULT (datetime('now'))
            )
        """)

        cursor.execute("""
            CREATE TABLE count_events (
                id INTEGER PRIMARY KEY,
                ts INTEGER NOT NULL,
                track_id INTEGER NOT NULL,
                category TEXT NOT NULL,
                direction TEXT NOT NULL,
                center_x REAL,
                center_y REAL,
                size REAL,
                session_total INTEGER,
                track_age_s REAL,
                observations INTEGER
            )
        """)
        cursor.execute("CREATE INDEX idx_count_events_ts ON count_events(ts)")

        cursor.execute(
            "INSERT INTO schema_meta (id, schema_version) VALUES (1, ?)",
            (EXPECTED_SCHEMA_VERSION,)
        )

        self._get_connection().commit()
        logging.info(f"Created schema version {EXPECTED_SCHEMA_VERSION}")

    def initialize(self) -> None:
        """
        Initialize the database schema.

        If schema_meta is missing or version doesn't match EXPECTED_SCHEMA_VERSION,
        drops the tables and creates a fresh schema.
        """
        with self._lock:
            try:
                current_version = self._get_schema_version()

                if current_version != EXPECTED_SCHEMA_VERSION:
                    if current_version is not None:
                        logging.warning(
                            f"Schema version mismatch: found {current_version}, "
                            f"expected {EXPECTED_SCHEMA_VERSION}. Dropping old tables."
                        )
                    else:
                        logging.info("No schema found, creating fresh database.")

                    self._drop_old_tables()
                    self._create_schema()
                else:
                    logging.info(f"Schema version {current_version} is current")

            except sqlite3.Error as e:
                logging.error(f"Database initialization error: {e}")
                raise

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    def add_count_event(self, event: CountEvent) -> Optional[int]:
        """
        Add a count event to the database.

        Args:
            event: CountEvent from the counter.

        Returns:
            ID of the inserted record, or None on error.
        """
        with self._lock:
            try:
                cursor = self._get_connection().cursor()
                cursor.execute("""
                    INSERT INTO count_events (
                        ts, track_id, category, direction, center_x, center_y,
                        size, session_total, track_age_s, observations
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    int(event.timestamp * 1000),
                    event.track_id,
                    event.category,
                    event.direction,
                    event.center[0],
                    event.center[1],
                    event.size,
                    event.total,
                    event.track_age_s,
                    event.observations,
                ))
                self._get_connection().commit()

                logging.debug(f"Count event added: track={event.track_id}, category={event.category}")
                return cursor.lastrowid

            except sqlite3.Error as e:
                logging.error(f"Error adding count event: {e}")
                return None

    # -------------------------------------------------------------------------
    # Read Operations
    # -------------------------------------------------------------------------

    def get_count_total(
        self,
        start_time: Optional[float] = None,
        end_time: Optional[float] = None,
    ) -> int:
        """
        Get total count of events in a time range.

        Args:
            start_time: Start time as Unix timestamp (default: beginning of time).
            end_time: End time as Unix timestamp (default: no upper bound).
        """
        with self._lock:
            try:
                cursor = self._get_connection().cursor()
                query = "SELECT COUNT(*) FROM count_events WHERE ts >= ?"
                params = [int((start_time or 0) * 1000)]
                if end_time is not None:
                    query += " AND ts <= ?"
                    params.append(int(end_time * 1000))
                cursor.execute(query, params)
                return cursor.fetchone()[0]

            except sqlite3.Error as e:
                logging.error(f"Error getting count total: {e}")
                return 0

    def get_counts_by_category(self, start_time: Optional[float] = None) -> Dict[str, int]:
        """Get counts grouped by vehicle category since start_time."""
        with self._lock:
            try:
                cursor = self._get_connection().cursor()
                cursor.execute(
                    "SELECT category, COUNT(*) FROM count_events WHERE ts >= ? GROUP BY category",
                    (int((start_time or 0) * 1000),)
                )
                return {row[0]: row[1] for row in cursor.fetchall()}

            except sqlite3.Error as e:
                logging.error(f"Error getting counts by category: {e}")
                return {}

    def get_recent_events(self, limit: int = 100) -> List[Dict[str, Any]]:
        """Get the most recent count events, newest first."""
        with self._lock:
            try:
                cursor = self._get_connection().cursor()
                cursor.execute("""
                    SELECT id, ts, track_id, category, direction, center_x, center_y,
                           size, session_total, track_age_s, observations
                    FROM count_events
                    ORDER BY ts DESC, id DESC
                    LIMIT ?
                """, (limit,))

                return [
                    {
                        "id": row[0],
                        "timestamp": row[1] / 1000.0,
                        "track_id": row[2],
                        "category": row[3],
                        "direction": row[4],
                        "center_x": row[5],
                        "center_y": row[6],
                        "size": row[7],
                        "total": row[8],
                        "track_age_s": row[9],
                        "observations": row[10],
                    }
                    for row in cursor.fetchall()
                ]

            except sqlite3.Error as e:
                logging.error(f"Error getting recent events: {e}")
                return []

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def cleanup_old_data(self, retention_days: int = 30) -> int:
        """
        Remove events older than the retention period.

        Returns:
            Number of deleted rows.
        """
        with self._lock:
            try:
                cursor = self._get_connection().cursor()
                cutoff_ms = int((time.time() - retention_days * 86400) * 1000)
                cursor.execute("DELETE FROM count_events WHERE ts < ?", (cutoff_ms,))
                deleted = cursor.rowcount
                self._get_connection().commit()

                if deleted > 0:
                    logging.info(f"Cleaned up {deleted} events older than {retention_days} days")
                return deleted

            except sqlite3.Error as e:
                logging.error(f"Error cleaning up old data: {e}")
                return 0

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            if self.conn is not None:
                self.conn.close()
                self.conn = None
                logging.info("Database connection closed")
