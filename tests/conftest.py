"""
Pytest configuration and fixtures for OAuth relay testing.

This module provides:
- Test settings with a known cookie secret and CORS allowlist
- Tenant registry fixtures for single- and multi-tenant setups
- A scripted provider injected through dependency overrides
- Test client fixtures over HTTPS so Secure cookies round-trip

Test types: Unit, Integration
"""

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from oauth_relay.api.app import create_application
from oauth_relay.config import AppSettings
from test_utils import (
    MockProvider,
    TestTenants,
    acme_env,
    beta_env,
    build_settings,
    install_overrides,
    make_registry,
    open_client,
)


#                         SETTINGS FIXTURES
# ----------------------------------------------------------------------------


@pytest.fixture
def test_settings() -> AppSettings:
    """Settings with COOKIE_SECRET, ALLOWED_ORIGIN and APP_LABELS=acme."""
    return build_settings()


#                         REGISTRY FIXTURES
# ----------------------------------------------------------------------------


@pytest.fixture
def single_registry():
    """Only ``acme`` configured."""
    return make_registry([TestTenants.ACME], **acme_env())


@pytest.fixture
def multi_registry():
    """``acme`` and ``beta-eu`` configured."""
    return make_registry(
        [TestTenants.ACME, TestTenants.BETA], **acme_env(), **beta_env()
    )


@pytest.fixture
def provider() -> MockProvider:
    return MockProvider()


#                         APPLICATION FIXTURES
# ----------------------------------------------------------------------------


@pytest.fixture(scope="function")
def app():
    """
    Create a fresh FastAPI application instance for each test.

    This ensures test isolation by:
    - Creating a new app instance for each test function
    - Clearing all dependency overrides after test completion
    """
    application = create_application()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client(
    app, test_settings, single_registry, provider
) -> Generator[TestClient, None, None]:
    """
    TestClient for a single-tenant relay (``APP_LABELS=acme``).

    Example:
        def test_start_redirects(client, provider):
            response = client.get("/auth/start?app=acme")
            assert response.status_code == 302
    """
    install_overrides(app, test_settings, single_registry, provider)
    with open_client(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def multi_client(
    app, test_settings, multi_registry, provider
) -> Generator[TestClient, None, None]:
    """TestClient for a relay with two tenants configured."""
    install_overrides(app, test_settings, multi_registry, provider)
    with open_client(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
