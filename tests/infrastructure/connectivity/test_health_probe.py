"""Tests for the connectivity probe."""

import httpx
import pytest

from crisiswatch.domain.models.connectivity import ConnectivityState, SessionConnectivity
from crisiswatch.infrastructure.connectivity.health_probe import HealthProbe


@pytest.mark.asyncio
async def test_probe_marks_reachable(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/check"
        return httpx.Response(200, json={"status": "healthy", "backend": True})

    connectivity = SessionConnectivity()
    async with make_client(handler) as client:
        await HealthProbe(connectivity, client=client).probe()

    assert connectivity.state is ConnectivityState.REACHABLE


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(503, json={"status": "unhealthy", "backend": False}),
        httpx.Response(200, json={"status": "healthy"}),
        httpx.Response(200, text="not json"),
    ],
)
async def test_probe_marks_unreachable(make_client, response):
    """Test that anything but a healthy backend marks the session unreachable."""
    connectivity = SessionConnectivity()
    async with make_client(lambda request: response) as client:
        await HealthProbe(connectivity, client=client).probe()

    assert connectivity.is_unreachable
    assert connectivity.reason == "health probe failed"


@pytest.mark.asyncio
async def test_probe_never_raises(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    connectivity = SessionConnectivity()
    async with make_client(handler) as client:
        state = await HealthProbe(connectivity, client=client).probe()

    assert state is connectivity
    assert connectivity.is_unreachable


@pytest.mark.asyncio
async def test_new_probe_can_restore_reachability(make_client):
    connectivity = SessionConnectivity(ConnectivityState.UNREACHABLE)
    async with make_client(lambda request: httpx.Response(200, json={"backend": True})) as client:
        await HealthProbe(connectivity, client=client).probe()

    assert connectivity.state is ConnectivityState.REACHABLE
    assert connectivity.reason is None
