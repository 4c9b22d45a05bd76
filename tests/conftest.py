import pytest
from django.conf import settings
from django.db import connection
from rest_framework.test import APIClient

from tests.factories.users import AdminUserFactory, UserFactory

ROW_LOCKS_HINT = "set DATABASE_URL=postgres://... to run them"


def pytest_report_header(config):
    if connection.features.has_select_for_update:
        return f"database: {connection.vendor}, row_locks tests enabled"
    return f"database: {connection.vendor}, row_locks tests skipped ({ROW_LOCKS_HINT})"


def pytest_collection_modifyitems(config, items):
    """
    Concurrency tests only mean something on a database with row-level locks.
    """
    if connection.features.has_select_for_update:
        return

    locked = [item for item in items if "row_locks" in item.keywords]
    if locked and settings.TEST_REQUIRE_ROW_LOCKS:
        raise pytest.UsageError(
            f"TEST_REQUIRE_ROW_LOCKS is set but {connection.vendor} has no row-level locks; {ROW_LOCKS_HINT}."
        )

    skip = pytest.mark.skip(reason=f"{connection.vendor} has no row-level locks; {ROW_LOCKS_HINT}")
    for item in locked:
        item.add_marker(skip)


@pytest.fixture
def api_client():
    """
    Fixture to provide an instance of DRF APIClient.
    """
    return APIClient()


@pytest.fixture(autouse=True)
def enable_db_access_for_all_tests(db):
    """
    Automatically enables database access for all tests.
    """
    pass


@pytest.fixture
def campaign_admin():
    return AdminUserFactory(email="moderator@example.com")


@pytest.fixture
def participant():
    return UserFactory(email="participant@example.com")
