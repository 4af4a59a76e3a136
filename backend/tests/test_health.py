"""Tests for the health check endpoint."""

from datetime import datetime

import pytest


@pytest.mark.asyncio
async def test_health_reports_ok_and_connected(test_client, mock_store):
    response = await test_client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["database"] == "connected"
    assert datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00"))
    mock_store.ping.assert_awaited_once()


@pytest.mark.asyncio
async def test_health_stays_ok_when_store_unreachable(test_client, mock_store):
    mock_store.ping.return_value = False

    response = await test_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["database"] == "disconnected"
