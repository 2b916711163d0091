"""Fixtures for API tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from labtrack.api.dependencies import get_monitor, get_store_bundle
from labtrack.api.main import app
from labtrack.application.usage_monitor import UsageDashboardMonitor
from labtrack.application.use_cases import GetUsageInfoUseCase


@pytest.fixture
def monitor(stores) -> UsageDashboardMonitor:
    return UsageDashboardMonitor(use_case=GetUsageInfoUseCase(stores=stores), interval=60)


@pytest.fixture
async def client(stores, monitor):
    """Async client bound to a fresh in-memory store bundle."""
    app.dependency_overrides[get_store_bundle] = lambda: stores
    app.dependency_overrides[get_monitor] = lambda: monitor
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_store_bundle, None)
    app.dependency_overrides.pop(get_monitor, None)
