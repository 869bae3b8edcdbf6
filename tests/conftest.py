"""
Shared test fixtures for the Clarity PPM core.

Provides credential sets for each auth scheme, a recording fake transport,
and isolation of the global config, logger and correlation id.
"""

import pytest

from clarity_ppm_core.client.auth import AuthResolver
from clarity_ppm_core.client.pagination import PaginationWalker
from clarity_ppm_core.client.request_executor import RequestExecutor
from clarity_ppm_core.config import reset_config
from clarity_ppm_core.exceptions import clear_correlation_id
from clarity_ppm_core.schemas.credential_schemas import ClarityCredentials
from clarity_ppm_core.utils.logger import reset_logging

from fakes import HOST, FakeTransport


@pytest.fixture(autouse=True)
def isolate_globals():
    """Reset global config, logger and correlation id around each test."""
    reset_config()
    reset_logging()
    clear_correlation_id()
    yield
    reset_config()
    reset_logging()
    clear_correlation_id()


@pytest.fixture
def api_key_credentials() -> ClarityCredentials:
    return ClarityCredentials(
        host=f"{HOST}/", authType="apiKey", apiKey="jwt-key", clientId="portfolio-sync"
    )


@pytest.fixture
def basic_credentials() -> ClarityCredentials:
    return ClarityCredentials(host=HOST, authType="basic", username="admin", password="secret")


@pytest.fixture
def token_credentials() -> ClarityCredentials:
    return ClarityCredentials(host=HOST, authType="token", username="admin", password="secret")


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def executor(basic_credentials, transport) -> RequestExecutor:
    """Executor using Basic auth over the fake transport."""
    return RequestExecutor(
        lambda: basic_credentials, transport, AuthResolver(basic_credentials, transport)
    )


@pytest.fixture
def walker(executor) -> PaginationWalker:
    return PaginationWalker(executor)
