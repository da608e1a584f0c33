"""SQLite database layer for prodigy-levels.

Only the XP total is stored per user. Levels are always recomputed.
"""

import json
import sqlite3
from pathlib import Path

from prodigy_levels.errors import DuplicateUserError, InvalidXPAmountError, UserNotFoundError

DEFAULT_DB_PATH = Path.home() / ".prodigy-levels" / "data.db"


class Database:
    """SQLite database manager with WAL mode."""

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path or DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(self.db_path))
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.conn.execute("PRAGMA foreign_keys=ON")
        self.init_db()

    def init_db(self) -> None:
        """Create tables if they do not exist."""
        self.conn.executescript("""
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                username TEXT NOT NULL UNIQUE,
                email TEXT,
                total_xp INTEGER NOT NULL DEFAULT 0,
                created_at TEXT DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS activity_feed (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                action_type TEXT NOT NULL,
                description TEXT,
                data TEXT,
                created_at TEXT DEFAULT CURRENT_TIMESTAMP
            );
        """)
        self.conn.commit()

    def create_user(self, username: str, email: str | None = None, total_xp: int = 0) -> dict:
        """Insert a new user and return the stored row."""
        if total_xp < 0:
            raise InvalidXPAmountError(total_xp)
        try:
            cursor = self.conn.execute(
                "INSERT INTO users (username, email, total_xp) VALUES (?, ?, ?)",
                (username, email, total_xp),
            )
        except sqlite3.IntegrityError as exc:
            raise DuplicateUserError(username) from exc
        self.conn.commit()
        return self.get_user(cursor.lastrowid)

    def get_user(self, user_id: int) -> dict:
        """Get a user by ID. Raises UserNotFoundError."""
        row = self.conn.execute(
            "SELECT * FROM users WHERE id = ?", (user_id,)
        ).fetchone()
        if row is None:
            raise UserNotFoundError(user_id)
        return dict(row)

    def get_user_by_username(self, username: str) -> dict:
        row = self.conn.execute(
            "SELECT * FROM users WHERE username = ?", (username,)
        ).fetchone()
        if row is None:
            raise UserNotFoundError(username)
        return dict(row)

    def list_users(self) -> list[dict]:
        """Return all users, highest XP first."""
        rows = self.conn.execute(
            "SELECT * FROM users ORDER BY total_xp DESC, username"
        ).fetchall()
        return [dict(row) for row in rows]

    def add_user_xp(self, user_id: int, amount: int) -> tuple[int, int]:
        """Add XP to a user. Returns (old_total, new_total)."""
        if amount < 0:
            raise InvalidXPAmountError(amount)
        user = self.get_user(user_id)
        old_total = user["total_xp"] or 0
        new_total = old_total + amount
        self.conn.execute(
            "UPDATE users SET total_xp = ? WHERE id = ?", (new_total, user_id)
        )
        self.conn.commit()
        return old_total, new_total

    def add_activity(
        self, user_id: int, action_type: str, description: str, data: dict | None = None
    ) -> None:
        """Append an entry to the activity feed."""
        self.conn.execute(
            "INSERT INTO activity_feed (user_id, action_type, description, data) "
            "VALUES (?, ?, ?, ?)",
            (user_id, action_type, description, json.dumps(data) if data is not None else None),
        )
        self.conn.commit()

    def get_activity(self, user_id: int, limit: int = 20) -> list[dict]:
        """Return a user's activity, newest first, with ``data`` decoded."""
        rows = self.conn.execute(
            "SELECT * FROM activity_feed WHERE user_id = ? ORDER BY id DESC LIMIT ?",
            (user_id, limit),
        ).fetchall()
        entries = []
        for row in rows:
            entry = dict(row)
            entry["data"] = json.loads(entry["data"]) if entry["data"] else None
            entries.append(entry)
        return entries

    def close(self) -> None:
        """Close the database connection."""
        self.conn.close()
