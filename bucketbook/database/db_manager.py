import sqlite3

from bucketbook.utils.constants import DB_FILE


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
            if self.db_path != ":memory:":
                self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema and bring older databases up to date."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._migrate_schema(conn)
        conn.commit()

    def _migrate_schema(self, conn: sqlite3.Connection):
        """Idempotent ALTER TABLE for columns added after initial release."""
        cols = {row[1] for row in conn.execute("PRAGMA table_info(transactions)").fetchall()}
        if "tags" not in cols:
            conn.execute("ALTER TABLE transactions ADD COLUMN tags TEXT")
        if "notes" not in cols:
            conn.execute("ALTER TABLE transactions ADD COLUMN notes TEXT")

        cols = {row[1] for row in conn.execute("PRAGMA table_info(recurring_templates)").fetchall()}
        if "tags" not in cols:
            conn.execute("ALTER TABLE recurring_templates ADD COLUMN tags TEXT")
        if "notes" not in cols:
            conn.execute("ALTER TABLE recurring_templates ADD COLUMN notes TEXT")

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS recurring_templates (
                id            TEXT PRIMARY KEY,
                type          TEXT NOT NULL CHECK(type IN ('expense','income','investment')),
                amount        REAL NOT NULL CHECK(amount > 0),
                description   TEXT NOT NULL,
                bucket_id     TEXT,
                tags          TEXT,
                notes         TEXT,
                frequency     TEXT NOT NULL CHECK(frequency IN
                                  ('daily','weekly','fortnightly','monthly','yearly')),
                start_date    TEXT NOT NULL,
                end_date      TEXT,
                last_applied  TEXT,
                created_at    TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS transactions (
                id            TEXT PRIMARY KEY,
                type          TEXT NOT NULL CHECK(type IN ('expense','income','investment')),
                amount        REAL NOT NULL CHECK(amount > 0),
                description   TEXT NOT NULL,
                bucket_id     TEXT,
                date          TEXT NOT NULL,
                is_recurring  INTEGER NOT NULL DEFAULT 0,
                recurring_id  TEXT REFERENCES recurring_templates(id) ON DELETE SET NULL,
                tags          TEXT,
                notes         TEXT,
                created_at    TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at    TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE INDEX IF NOT EXISTS idx_transactions_date         ON transactions(date);
            CREATE INDEX IF NOT EXISTS idx_transactions_recurring_id ON transactions(recurring_id);
            CREATE INDEX IF NOT EXISTS idx_templates_start_date      ON recurring_templates(start_date);
        """)

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
