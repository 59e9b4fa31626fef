import logging

from bucketbook.database.db_manager import DatabaseManager
from bucketbook.database.template_dao import TemplateDAO
from bucketbook.database.transaction_dao import TransactionDAO
from bucketbook.services.duplicate_service import DuplicateService
from bucketbook.services.projection_service import ProjectionService
from bucketbook.services.recurring_service import RecurringService
from bucketbook.services.session import RecurrenceSession
from bucketbook.utils.app_config import get_db_path, get_delete_policy, get_log_level
from bucketbook.utils.constants import APP_NAME
from bucketbook.utils.date_helpers import current_month_str, today_str

logger = logging.getLogger(__name__)


class App:
    """Wires storage and services together for a host application."""

    def __init__(self, db_path: str | None = None, notify=None):
        # ── Database ─────────────────────────────────────────────────────────
        self.db = DatabaseManager(db_path or get_db_path())
        self.db.initialize()

        # ── DAOs ─────────────────────────────────────────────────────────────
        self.template_dao = TemplateDAO(self.db)
        self.tx_dao = TransactionDAO(self.db)

        # ── Services ─────────────────────────────────────────────────────────
        self.recurring = RecurringService(
            self.template_dao, self.tx_dao, clock=today_str,
            delete_policy=get_delete_policy(),
        )
        self.projections = ProjectionService(self.template_dao)
        self.duplicates = DuplicateService(self.tx_dao)
        self.session = RecurrenceSession(self.recurring, notify=notify)

    def close(self):
        self.db.close()


def main():
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = App(notify=logger.error)
    try:
        # ── Apply due recurring templates ────────────────────────────────────
        result = app.session.on_data_ready()
        if result is not None:
            logger.info("%s: %d recurring transaction(s) generated", APP_NAME, len(result.created))

        # ── Upcoming month at a glance ───────────────────────────────────────
        for row in app.projections.monthly_totals(current_month_str(), months=1):
            logger.info(
                "Projected %s: income %.2f, expense %.2f, investment %.2f, net %.2f",
                row["month"], row["income"], row["expense"], row["investment"], row["net"],
            )
    finally:
        app.close()


if __name__ == "__main__":
    main()
