import logging
import threading
from typing import Callable

from bucketbook.services.recurring_service import RecurringService
from bucketbook.services.reconciler import ReconcileResult

logger = logging.getLogger(__name__)


class RecurrenceSession:
    """Runs recurring generation at the two moments the host app reports.

    Call ``on_data_ready()`` once the app has loaded its data and
    ``on_resumed()`` whenever it comes back to the foreground. A call that
    arrives while a pass is still running returns None instead of starting a
    second pass. ``notify`` receives one user-facing message per failed
    template.
    """

    def __init__(
        self,
        recurring_service: RecurringService,
        notify: Callable[[str], None] | None = None,
    ):
        self._recurring = recurring_service
        self._notify = notify
        self._lock = threading.Lock()
        self.last_result: ReconcileResult | None = None

    def on_data_ready(self) -> ReconcileResult | None:
        return self._run("data ready")

    def on_resumed(self) -> ReconcileResult | None:
        return self._run("resumed")

    def _run(self, trigger: str) -> ReconcileResult | None:
        if not self._lock.acquire(blocking=False):
            logger.debug("Recurring pass already running; ignoring %s trigger", trigger)
            return None
        try:
            logger.debug("Recurring pass triggered by %s", trigger)
            result = self._recurring.apply_due_templates()
            self.last_result = result
        finally:
            self._lock.release()

        if self._notify:
            for failure in result.failures:
                self._notify(
                    f"Could not generate recurring transactions for template "
                    f"{failure.template_id}: {failure.message}"
                )
        return result
