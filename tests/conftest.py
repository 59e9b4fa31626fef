import pytest

from bucketbook.database.db_manager import DatabaseManager
from bucketbook.database.template_dao import TemplateDAO
from bucketbook.database.transaction_dao import TransactionDAO
from bucketbook.services.recurring_service import RecurringService


@pytest.fixture
def db():
    manager = DatabaseManager(":memory:")
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def template_dao(db):
    return TemplateDAO(db)


@pytest.fixture
def tx_dao(db):
    return TransactionDAO(db)


@pytest.fixture
def service(template_dao, tx_dao):
    return RecurringService(template_dao, tx_dao, clock=lambda: "2024-01-20")
