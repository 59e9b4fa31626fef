import json
from typing import Optional

from bucketbook.database.db_manager import DatabaseManager
from bucketbook.models.transaction import Transaction

_REWRITABLE_FIELDS = ("type", "amount", "description", "bucket_id", "tags", "notes")


def _encode_tags(tags) -> str | None:
    return json.dumps(list(tags)) if tags else None


def _decode_tags(raw) -> list[str]:
    if not raw:
        return []
    try:
        tags = json.loads(raw)
    except ValueError:
        return []
    return [str(t) for t in tags] if isinstance(tags, list) else []


class TransactionDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    @property
    def db(self) -> DatabaseManager:
        return self._db

    def _row_to_model(self, row) -> Transaction:
        return Transaction(
            id=row["id"],
            type=row["type"],
            amount=row["amount"],
            description=row["description"],
            date=row["date"],
            is_recurring=bool(row["is_recurring"]),
            bucket_id=row["bucket_id"],
            recurring_id=row["recurring_id"],
            tags=_decode_tags(row["tags"]),
            notes=row["notes"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def get_all(self) -> list[Transaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM transactions ORDER BY date ASC, created_at ASC"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, tx_id: str) -> Optional[Transaction]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM transactions WHERE id = ?", (tx_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def list_by_recurring_id(self, recurring_id: str, from_date: str | None = None) -> list[Transaction]:
        conn = self._db.get_connection()
        sql = "SELECT * FROM transactions WHERE recurring_id = ?"
        params: list = [recurring_id]
        if from_date:
            sql += " AND date >= ?"
            params.append(from_date)
        rows = conn.execute(sql + " ORDER BY date ASC", params).fetchall()
        return [self._row_to_model(r) for r in rows]

    def list_between(self, from_date: str, to_date: str) -> list[Transaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM transactions WHERE date BETWEEN ? AND ? ORDER BY date ASC",
            (from_date, to_date),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def create(self, tx: Transaction) -> Transaction:
        """Insert without committing; the caller commits the whole batch."""
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO transactions
               (id, type, amount, description, bucket_id, date,
                is_recurring, recurring_id, tags, notes)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                tx.id, tx.type, tx.amount, tx.description, tx.bucket_id, tx.date,
                1 if tx.is_recurring else 0, tx.recurring_id,
                _encode_tags(tx.tags), tx.notes,
            ),
        )
        return self.get_by_id(tx.id)

    def update(self, tx_id: str, **fields) -> Optional[Transaction]:
        """Partial update of payload fields. Dates and links are not rewritable here."""
        unknown = set(fields) - set(_REWRITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
        if not fields:
            return self.get_by_id(tx_id)
        if "tags" in fields:
            fields["tags"] = _encode_tags(fields["tags"])
        assignments = ", ".join(f"{name}=?" for name in fields)
        conn = self._db.get_connection()
        conn.execute(
            f"UPDATE transactions SET {assignments}, updated_at=datetime('now') WHERE id=?",
            (*fields.values(), tx_id),
        )
        conn.commit()
        return self.get_by_id(tx_id)

    def delete(self, tx_id: str):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM transactions WHERE id = ?", (tx_id,))
        conn.commit()

    def delete_by_recurring_id(self, recurring_id: str) -> int:
        """Delete without committing; returns the number of rows removed."""
        conn = self._db.get_connection()
        cursor = conn.execute(
            "DELETE FROM transactions WHERE recurring_id = ?", (recurring_id,)
        )
        return cursor.rowcount
