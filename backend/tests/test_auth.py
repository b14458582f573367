"""Tests for API key authentication."""

import pytest

from formschema.config import settings


@pytest.mark.asyncio
async def test_missing_api_key(unauthenticated_client):
    response = await unauthenticated_client.get("/api/hierarchy/services")
    assert response.status_code == 401
    assert response.json()["detail"] == "Missing API key"


@pytest.mark.asyncio
async def test_invalid_api_key(unauthenticated_client):
    response = await unauthenticated_client.get(
        "/api/hierarchy/services",
        headers={"X-API-Key": settings.api_key + "-wrong"},
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid API key"


@pytest.mark.asyncio
async def test_valid_api_key(unauthenticated_client):
    response = await unauthenticated_client.get(
        "/api/hierarchy/services",
        headers={"X-API-Key": settings.api_key},
    )
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_health_is_public(unauthenticated_client):
    response = await unauthenticated_client.get("/health")
    assert response.status_code == 200
