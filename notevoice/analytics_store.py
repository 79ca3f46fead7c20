"""
SQLite-backed storage for writing samples, generation analytics and style confidence.

The style engine is a library: it reads the reference writing sample, the
analytics history and the confidence state through this store, and writes
back every new analytics record, confidence recompute and style evolution.
Every write commits immediately, so a crash never loses a recorded outcome.

Schema (3 tables):
1. user_styles: One row per user. Reference writing sample, learning switch,
   and the cached confidence state (score, category, generation count)
2. writing_analytics: One row per generated note section, plus the user's
   edit, satisfaction rating and style-match score once known
3. style_evolution: Append-only log of writing sample replacements

Both child tables reference user_styles with ON DELETE CASCADE, so deleting
a user removes their history.

Usage:
    with WritingAnalyticsStore(Path("notevoice.db")) as store:
        store.save_writing_sample("user-1", sample_text)
        store.save_analytics(record)
        history = store.list_analytics("user-1")      # oldest first
        df = store.analytics_dataframe("user-1")
"""
import json
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal, Optional

import pandas as pd

from notevoice.models.analytics_models import (
    ConfidenceCategory,
    EditType,
    GenerationAnalyticsRecord,
    StyleConfidenceState,
    StyleEvolutionRecord,
    utc_now,
)


ANALYTICS_COLUMNS = [
    'analytics_id', 'user_id', 'note_id', 'note_section_id', 'original_generated',
    'user_edited_version', 'edit_type', 'confidence_score', 'user_satisfaction_score',
    'feedback_notes', 'tokens_used', 'generation_time_ms', 'style_match_score',
    'created_at', 'updated_at',
]

EDIT_TYPES = ", ".join(f"'{e.value}'" for e in EditType)
CATEGORIES = ", ".join(f"'{c.value}'" for c in ConfidenceCategory)


def _iso(value: datetime) -> str:
    """UTC ISO-8601 with fixed precision, so stored timestamps sort as text."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec='microseconds')


class WritingAnalyticsStore:
    """SQLite-backed storage for the style engine's persistent state.

    A single connection is shared by all callers and guarded by a re-entrant
    lock, so one store can serve several threads.
    """

    def __init__(self, filepath: Path | str):
        """Initialize store and create schema if needed.

        Args:
            filepath: Path to SQLite database file, or ":memory:"
        """
        self.filepath = filepath
        self._lock = threading.RLock()
        self.conn = sqlite3.connect(str(filepath), check_same_thread=False)
        self.conn.row_factory = sqlite3.Row

        self.conn.execute("PRAGMA foreign_keys = ON")

        self._init_schema()

    def _init_schema(self):
        """Create tables if they don't exist."""
        with self._lock:
            self.conn.execute(f"""
                CREATE TABLE IF NOT EXISTS user_styles (
                    user_id TEXT PRIMARY KEY,
                    writing_sample TEXT,
                    sample_updated_at TEXT,
                    learning_enabled INTEGER NOT NULL DEFAULT 1 CHECK(learning_enabled IN (0, 1)),

                    -- Cached confidence state, rebuilt from writing_analytics
                    confidence_score REAL CHECK(confidence_score BETWEEN 0 AND 1),
                    confidence_category TEXT CHECK(confidence_category IN ({CATEGORIES})),
                    total_generations INTEGER NOT NULL DEFAULT 0 CHECK(total_generations >= 0),
                    confidence_updated_at TEXT
                )
            """)

            self.conn.execute(f"""
                CREATE TABLE IF NOT EXISTS writing_analytics (
                    analytics_id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    note_id TEXT NOT NULL,
                    note_section_id TEXT,
                    original_generated TEXT NOT NULL,
                    user_edited_version TEXT,
                    edit_type TEXT CHECK(edit_type IN ({EDIT_TYPES})),
                    confidence_score REAL NOT NULL CHECK(confidence_score BETWEEN 0 AND 1),
                    user_satisfaction_score INTEGER CHECK(user_satisfaction_score BETWEEN 1 AND 5),
                    feedback_notes TEXT CHECK(length(feedback_notes) <= 1000),
                    tokens_used INTEGER CHECK(tokens_used >= 0),
                    generation_time_ms INTEGER CHECK(generation_time_ms >= 0),
                    style_match_score REAL CHECK(style_match_score BETWEEN 0 AND 1),
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY (user_id) REFERENCES user_styles(user_id) ON DELETE CASCADE
                )
            """)

            self.conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_writing_analytics_user
                ON writing_analytics(user_id, created_at)
            """)

            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS style_evolution (
                    evolution_id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    previous_style TEXT,
                    updated_style TEXT NOT NULL,
                    confidence_before REAL CHECK(confidence_before BETWEEN 0 AND 1),
                    confidence_after REAL NOT NULL CHECK(confidence_after BETWEEN 0 AND 1),
                    trigger_reason TEXT NOT NULL CHECK(length(trigger_reason) BETWEEN 1 AND 500),
                    notes_analyzed INTEGER NOT NULL DEFAULT 0,
                    improvement_metrics_json TEXT,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY (user_id) REFERENCES user_styles(user_id) ON DELETE CASCADE
                )
            """)

            self.conn.commit()

    def _ensure_user(self, user_id: str):
        self.conn.execute(
            "INSERT OR IGNORE INTO user_styles (user_id) VALUES (?)",
            (user_id,)
        )

    # ==========================================================================
    # Writing Sample Management
    # ==========================================================================

    def save_writing_sample(self, user_id: str, sample: str):
        """Store (or replace) a user's reference writing sample.

        Args:
            user_id: User identifier
            sample: Reference writing text
        """
        with self._lock:
            self.conn.execute("""
                INSERT INTO user_styles (user_id, writing_sample, sample_updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    writing_sample = excluded.writing_sample,
                    sample_updated_at = excluded.sample_updated_at
            """, (user_id, sample, _iso(utc_now())))
            self.conn.commit()

    def get_writing_sample(self, user_id: str) -> Optional[str]:
        """Return the user's reference writing sample, or None if not set."""
        with self._lock:
            row = self.conn.execute(
                "SELECT writing_sample FROM user_styles WHERE user_id=?",
                (user_id,)
            ).fetchone()
        return row['writing_sample'] if row else None

    def set_learning_enabled(self, user_id: str, enabled: bool):
        """Turn style learning on or off for a user."""
        with self._lock:
            self.conn.execute("""
                INSERT INTO user_styles (user_id, learning_enabled) VALUES (?, ?)
                ON CONFLICT(user_id) DO UPDATE SET learning_enabled = excluded.learning_enabled
            """, (user_id, int(bool(enabled))))
            self.conn.commit()

    def is_learning_enabled(self, user_id: str) -> bool:
        """Return whether style learning is enabled (True for unknown users)."""
        with self._lock:
            row = self.conn.execute(
                "SELECT learning_enabled FROM user_styles WHERE user_id=?",
                (user_id,)
            ).fetchone()
        return bool(row['learning_enabled']) if row else True

    def delete_user(self, user_id: str) -> bool:
        """Delete a user and, by cascade, their analytics and evolution history.

        Returns:
            True if the user existed
        """
        with self._lock:
            cursor = self.conn.execute("DELETE FROM user_styles WHERE user_id=?", (user_id,))
            self.conn.commit()
        return cursor.rowcount > 0

    # ==========================================================================
    # Analytics Management
    # ==========================================================================

    def save_analytics(self, record: GenerationAnalyticsRecord):
        """Save one generation analytics record.

        Creates the user row if needed. Saving a record with an existing
        analytics_id replaces it.

        Args:
            record: Validated analytics record
        """
        with self._lock:
            self._ensure_user(record.user_id)
            self.conn.execute("""
                INSERT OR REPLACE INTO writing_analytics
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                record.analytics_id,
                record.user_id,
                record.note_id,
                record.note_section_id,
                record.original_generated,
                record.user_edited_version,
                record.edit_type.value if record.edit_type else None,
                record.confidence_score,
                record.user_satisfaction_score,
                record.feedback_notes,
                record.tokens_used,
                record.generation_time_ms,
                record.style_match_score,
                _iso(record.created_at),
                _iso(record.updated_at)
            ))
            self.conn.commit()

    def get_analytics(self, analytics_id: str) -> Optional[GenerationAnalyticsRecord]:
        """Retrieve one analytics record by ID, or None if not found."""
        with self._lock:
            row = self.conn.execute(
                "SELECT * FROM writing_analytics WHERE analytics_id=?",
                (analytics_id,)
            ).fetchone()
        return GenerationAnalyticsRecord.model_validate(dict(row)) if row else None

    def list_analytics(self, user_id: str) -> list[GenerationAnalyticsRecord]:
        """All of a user's analytics records, oldest first."""
        with self._lock:
            rows = self.conn.execute("""
                SELECT * FROM writing_analytics
                WHERE user_id=?
                ORDER BY created_at, rowid
            """, (user_id,)).fetchall()
        return [GenerationAnalyticsRecord.model_validate(dict(row)) for row in rows]

    def get_analytics_history(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0
    ) -> list[GenerationAnalyticsRecord]:
        """A page of a user's analytics records, newest first.

        Args:
            user_id: User identifier
            limit: Maximum records to return
            offset: Records to skip
        """
        with self._lock:
            rows = self.conn.execute("""
                SELECT * FROM writing_analytics
                WHERE user_id=?
                ORDER BY created_at DESC, rowid DESC
                LIMIT ? OFFSET ?
            """, (user_id, limit, offset)).fetchall()
        return [GenerationAnalyticsRecord.model_validate(dict(row)) for row in rows]

    def count_analytics(self, user_id: str) -> int:
        """Number of analytics records for a user."""
        with self._lock:
            return self.conn.execute(
                "SELECT COUNT(*) as count FROM writing_analytics WHERE user_id=?",
                (user_id,)
            ).fetchone()['count']

    def attach_feedback(
        self,
        analytics_id: str,
        user_edited_version: Optional[str] = None,
        edit_type: Optional[EditType] = None,
        user_satisfaction_score: Optional[int] = None,
        feedback_notes: Optional[str] = None,
        style_match_score: Optional[float] = None
    ) -> GenerationAnalyticsRecord:
        """Attach the user's edit and rating to an existing record.

        Only arguments that are not None are changed.

        Returns:
            The updated record

        Raises:
            ValueError: If the record doesn't exist or the values are invalid
        """
        updates = {
            'user_edited_version': user_edited_version,
            'edit_type': edit_type,
            'user_satisfaction_score': user_satisfaction_score,
            'feedback_notes': feedback_notes,
            'style_match_score': style_match_score,
        }
        updates = {k: v for k, v in updates.items() if v is not None}

        with self._lock:
            record = self.get_analytics(analytics_id)
            if record is None:
                raise ValueError(f"Analytics record '{analytics_id}' not found.")

            updated = GenerationAnalyticsRecord.model_validate({
                **record.model_dump(), **updates, 'updated_at': utc_now()
            })
            self.save_analytics(updated)
        return updated

    def note_user_ids(self, note_id: str) -> list[str]:
        """Users with analytics records for a note."""
        with self._lock:
            rows = self.conn.execute(
                "SELECT DISTINCT user_id FROM writing_analytics WHERE note_id=? ORDER BY user_id",
                (note_id,)
            ).fetchall()
        return [row['user_id'] for row in rows]

    def delete_note_analytics(self, note_id: str, user_id: Optional[str] = None) -> int:
        """Delete the analytics records for a note.

        The cached confidence state of every affected user is cleared, since
        it no longer reflects their history; it is rebuilt on next read.

        Args:
            note_id: Note whose records to delete
            user_id: Restrict to one user's records; all users if None

        Returns:
            Number of records deleted
        """
        where = "note_id=?"
        params: tuple = (note_id,)
        if user_id is not None:
            where += " AND user_id=?"
            params = (note_id, user_id)

        with self._lock:
            user_ids = [
                row['user_id'] for row in self.conn.execute(
                    f"SELECT DISTINCT user_id FROM writing_analytics WHERE {where}", params
                ).fetchall()
            ]
            cursor = self.conn.execute(f"DELETE FROM writing_analytics WHERE {where}", params)
            self.conn.executemany("""
                UPDATE user_styles
                SET confidence_score=NULL, confidence_category=NULL,
                    total_generations=0, confidence_updated_at=NULL
                WHERE user_id=?
            """, [(uid,) for uid in user_ids])
            self.conn.commit()
        return cursor.rowcount

    # ==========================================================================
    # Confidence State
    # ==========================================================================

    def get_confidence_state(self, user_id: str) -> Optional[StyleConfidenceState]:
        """Return the cached confidence state, or None if never computed."""
        with self._lock:
            row = self.conn.execute("""
                SELECT user_id, confidence_score, confidence_category,
                       total_generations, confidence_updated_at
                FROM user_styles WHERE user_id=?
            """, (user_id,)).fetchone()

        if not row or row['confidence_score'] is None:
            return None

        return StyleConfidenceState(
            user_id=row['user_id'],
            confidence_score=row['confidence_score'],
            category=row['confidence_category'],
            last_updated=row['confidence_updated_at'],
            total_generations=row['total_generations']
        )

    def save_confidence_state(self, state: StyleConfidenceState):
        """Store a user's confidence state, creating the user row if needed."""
        with self._lock:
            self._ensure_user(state.user_id)
            self.conn.execute("""
                UPDATE user_styles
                SET confidence_score=?, confidence_category=?,
                    total_generations=?, confidence_updated_at=?
                WHERE user_id=?
            """, (
                state.confidence_score,
                state.category.value,
                state.total_generations,
                _iso(state.last_updated),
                state.user_id
            ))
            self.conn.commit()

    # ==========================================================================
    # Style Evolution
    # ==========================================================================

    def append_evolution(self, record: StyleEvolutionRecord):
        """Append a style evolution record.

        Raises:
            ValueError: If an evolution with the same ID already exists
        """
        metrics_json = (
            json.dumps(record.improvement_metrics)
            if record.improvement_metrics is not None else None
        )
        with self._lock:
            self._ensure_user(record.user_id)
            try:
                self.conn.execute("""
                    INSERT INTO style_evolution
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    record.evolution_id,
                    record.user_id,
                    record.previous_style,
                    record.updated_style,
                    record.confidence_before,
                    record.confidence_after,
                    record.trigger_reason,
                    record.notes_analyzed,
                    metrics_json,
                    _iso(record.created_at)
                ))
            except sqlite3.IntegrityError as e:
                self.conn.rollback()
                raise ValueError(f"Evolution '{record.evolution_id}' could not be stored: {e}") from e
            self.conn.commit()

    def list_evolution(self, user_id: str) -> list[StyleEvolutionRecord]:
        """A user's style evolution records, newest first."""
        with self._lock:
            rows = self.conn.execute("""
                SELECT * FROM style_evolution
                WHERE user_id=?
                ORDER BY created_at DESC, rowid DESC
            """, (user_id,)).fetchall()

        records = []
        for row in rows:
            data = dict(row)
            metrics_json = data.pop('improvement_metrics_json')
            data['improvement_metrics'] = json.loads(metrics_json) if metrics_json else None
            records.append(StyleEvolutionRecord.model_validate(data))
        return records

    # ==========================================================================
    # Export Methods
    # ==========================================================================

    def analytics_dataframe(self, user_id: Optional[str] = None) -> pd.DataFrame:
        """Export analytics records to a DataFrame.

        Args:
            user_id: Restrict to one user; all users if None

        Returns:
            DataFrame with one row per record and the writing_analytics
            columns; created_at and updated_at are parsed as UTC datetimes
        """
        query = "SELECT * FROM writing_analytics"
        params: tuple = ()
        if user_id is not None:
            query += " WHERE user_id=?"
            params = (user_id,)
        query += " ORDER BY created_at, rowid"

        with self._lock:
            rows = self.conn.execute(query, params).fetchall()

        df = pd.DataFrame([dict(row) for row in rows], columns=ANALYTICS_COLUMNS)
        for column in ('created_at', 'updated_at'):
            df[column] = pd.to_datetime(df[column], utc=True, format='ISO8601')
        return df

    def to_csv(self, output_path: Path, user_id: Optional[str] = None):
        """Export analytics records to CSV file.

        Args:
            output_path: Path to write CSV file
            user_id: Restrict to one user; all users if None
        """
        df = self.analytics_dataframe(user_id)
        df.to_csv(output_path, index=False)

    # ==========================================================================
    # Stats Methods
    # ==========================================================================

    def get_stats(self) -> dict:
        """Get counts across the store.

        Returns:
            Dictionary with:
                - n_users: Users with a row in user_styles
                - n_samples: Users with a writing sample
                - n_analytics: Analytics records
                - n_rated: Analytics records with a satisfaction rating
                - n_evolutions: Style evolution records
        """
        with self._lock:
            def count(query: str) -> int:
                return self.conn.execute(query).fetchone()['count']

            return {
                'n_users': count("SELECT COUNT(*) as count FROM user_styles"),
                'n_samples': count(
                    "SELECT COUNT(*) as count FROM user_styles WHERE writing_sample IS NOT NULL"
                ),
                'n_analytics': count("SELECT COUNT(*) as count FROM writing_analytics"),
                'n_rated': count(
                    "SELECT COUNT(*) as count FROM writing_analytics "
                    "WHERE user_satisfaction_score IS NOT NULL"
                ),
                'n_evolutions': count("SELECT COUNT(*) as count FROM style_evolution"),
            }

    # ==========================================================================
    # Reset Methods
    # ==========================================================================

    def reset(self, scope: Literal['all', 'history', 'evolution_only'] = 'all'):
        """Clear data from the store with hierarchical scope control.

        The data has a clear dependency hierarchy:
            user_styles (base)
              ↓
            writing_analytics, style_evolution (depend on user_styles via FK)

        Args:
            scope: Reset scope controlling which tables to clear:
                - 'all': Delete everything
                - 'history': Keep users and samples, delete analytics and
                  evolutions, and clear the cached confidence state
                - 'evolution_only': Delete only style evolution records

        Warning:
            This operation is irreversible.

        Example:
            >>> store.reset('history')  # Start learning again, keep samples
            >>> store.reset('all')      # Fresh start
        """
        with self._lock:
            if scope == 'all':
                self.conn.execute("DELETE FROM style_evolution")
                self.conn.execute("DELETE FROM writing_analytics")
                self.conn.execute("DELETE FROM user_styles")
            elif scope == 'history':
                self.conn.execute("DELETE FROM style_evolution")
                self.conn.execute("DELETE FROM writing_analytics")
                self.conn.execute("""
                    UPDATE user_styles
                    SET confidence_score=NULL, confidence_category=NULL,
                        total_generations=0, confidence_updated_at=NULL
                """)
            elif scope == 'evolution_only':
                self.conn.execute("DELETE FROM style_evolution")
            else:
                raise ValueError(
                    f"Invalid scope: {scope}. "
                    f"Must be 'all', 'history', or 'evolution_only'"
                )

            self.conn.commit()

    def close(self):
        """Close database connection."""
        with self._lock:
            self.conn.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
