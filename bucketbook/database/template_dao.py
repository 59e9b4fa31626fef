import json
import logging
from typing import Optional

from bucketbook.database.db_manager import DatabaseManager
from bucketbook.models.recurring_template import Frequency, RecurringTemplate, make_skeleton

logger = logging.getLogger(__name__)


class TemplateDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    @property
    def db(self) -> DatabaseManager:
        return self._db

    def _row_to_model(self, row) -> RecurringTemplate:
        tags = json.loads(row["tags"]) if row["tags"] else []
        return RecurringTemplate(
            id=row["id"],
            skeleton=make_skeleton(
                row["type"],
                row["amount"],
                row["description"],
                bucket_id=row["bucket_id"],
                tags=tags,
                notes=row["notes"],
            ),
            frequency=Frequency(row["frequency"]),
            start_date=row["start_date"],
            end_date=row["end_date"],
            last_applied=row["last_applied"],
            created_at=row["created_at"],
        )

    def _rows_to_models(self, rows) -> list[RecurringTemplate]:
        """Convert rows, dropping (and logging) any the model rejects."""
        templates = []
        for row in rows:
            try:
                templates.append(self._row_to_model(row))
            except ValueError as exc:
                logger.warning("Skipping unreadable recurring template %s: %s", row["id"], exc)
        return templates

    def get_all(self) -> list[RecurringTemplate]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM recurring_templates ORDER BY start_date, description"
        ).fetchall()
        return self._rows_to_models(rows)

    def get_by_id(self, template_id: str) -> Optional[RecurringTemplate]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM recurring_templates WHERE id = ?", (template_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def list_active_or_pending(self, today: str) -> list[RecurringTemplate]:
        """Templates that have not ended as of today (started or not)."""
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT * FROM recurring_templates
               WHERE end_date IS NULL OR end_date = '' OR end_date >= ?
               ORDER BY start_date, description""",
            (today,),
        ).fetchall()
        return self._rows_to_models(rows)

    def create(self, template: RecurringTemplate) -> RecurringTemplate:
        skeleton = template.skeleton
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO recurring_templates
               (id, type, amount, description, bucket_id, tags, notes,
                frequency, start_date, end_date, last_applied)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                template.id, skeleton.type.value, skeleton.amount,
                skeleton.description, skeleton.bucket_id,
                json.dumps(list(skeleton.tags)) if skeleton.tags else None,
                skeleton.notes, Frequency(template.frequency).value,
                template.start_date, template.end_date, template.last_applied,
            ),
        )
        conn.commit()
        return self.get_by_id(template.id)

    def update(self, template: RecurringTemplate) -> RecurringTemplate:
        """Rewrite payload and schedule. The watermark is left as stored."""
        skeleton = template.skeleton
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE recurring_templates SET
               type=?, amount=?, description=?, bucket_id=?, tags=?, notes=?,
               frequency=?, start_date=?, end_date=?
               WHERE id=?""",
            (
                skeleton.type.value, skeleton.amount, skeleton.description,
                skeleton.bucket_id,
                json.dumps(list(skeleton.tags)) if skeleton.tags else None,
                skeleton.notes, Frequency(template.frequency).value,
                template.start_date, template.end_date, template.id,
            ),
        )
        conn.commit()
        return self.get_by_id(template.id)

    def update_watermark(self, template_id: str, last_applied: str):
        """Set last_applied without committing; the caller commits it with its batch."""
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE recurring_templates SET last_applied = ? WHERE id = ?",
            (last_applied, template_id),
        )

    def delete(self, template_id: str):
        """Delete without committing; the caller decides what happens to history first."""
        conn = self._db.get_connection()
        conn.execute("DELETE FROM recurring_templates WHERE id = ?", (template_id,))
