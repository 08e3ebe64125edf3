import pytest
from fastapi.testclient import TestClient

from shared.config import Settings
from storefront.app import create_app
from tests.support.marketplace import BASE_URL


@pytest.fixture()
def app(transport):
    return create_app(
        settings=Settings(api_base_url=BASE_URL, environment="test"),
        transport=transport,
        setup_logging=False,
    )


@pytest.fixture()
def client(app):
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client
