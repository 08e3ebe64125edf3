import os
from pathlib import Path

import pytest

from identity.tokens import MemoryTokenStore, SessionContext
from tests.support.marketplace import FakeMarketplace


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture()
def marketplace():
    """A fresh in-memory marketplace API per test."""
    return FakeMarketplace()


@pytest.fixture()
def transport(marketplace):
    return marketplace.client()


@pytest.fixture()
def token_store():
    return MemoryTokenStore()


@pytest.fixture()
def session(token_store):
    return SessionContext(token_store)
