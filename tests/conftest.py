"""Pytest configuration and fixtures."""

import asyncio
import sys

import pytest
from fastapi.testclient import TestClient

from api.deps import get_clock, get_form_token_config, get_tenant_resolver
from api.tenancy import TenantResolver
from auth.form_tokens import FormTokenIssuer, FormTokenVerifier
from auth.schemas import FormTokenConfig
from main import app

# Fix Windows asyncio event loop
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# 2025-10-09T08:53:20Z
FIXED_NOW = 1_760_000_000

TENANT_A_HOST = "tenant-a.example.com"
TENANT_B_HOST = "tenant-b.example.com"


class FakeClock:
    """Settable clock returning unix seconds."""

    def __init__(self, now: int):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """Clock pinned to FIXED_NOW."""
    return FakeClock(FIXED_NOW)


@pytest.fixture
def token_config():
    """Token configuration with a test secret."""
    return FormTokenConfig(
        secret=b"test-secret-key-0123456789abcdef",
        default_form="generic",
        default_ttl_minutes=30,
    )


@pytest.fixture
def issuer(token_config, clock):
    return FormTokenIssuer(token_config, clock=clock)


@pytest.fixture
def verifier(token_config, clock):
    return FormTokenVerifier(token_config, clock=clock)


@pytest.fixture
def tenant_resolver():
    """Resolver mapping two test hosts to tenants A and B; only A has a slug."""
    return TenantResolver(
        {
            TENANT_A_HOST: "tenant-a",
            TENANT_B_HOST: "tenant-b",
        },
        slugs={"tenant-a": "acme"},
    )


@pytest.fixture
def override_deps(token_config, clock, tenant_resolver):
    """Override token config, clock and tenant resolver for the app."""
    app.dependency_overrides[get_form_token_config] = lambda: token_config
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_tenant_resolver] = lambda: tenant_resolver
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client(override_deps):
    """Test client outside any tenant (host 'testserver')."""
    return TestClient(app)


@pytest.fixture
def client_tenant_a(override_deps):
    """Test client whose requests resolve to tenant A."""
    return TestClient(app, base_url=f"http://{TENANT_A_HOST}")


@pytest.fixture
def client_tenant_b(override_deps):
    """Test client whose requests resolve to tenant B."""
    return TestClient(app, base_url=f"http://{TENANT_B_HOST}")
