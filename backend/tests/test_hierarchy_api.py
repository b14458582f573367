"""Tests for hierarchy API routes."""

import uuid

import pytest


@pytest.mark.asyncio
async def test_create_and_browse(client):
    response = await client.post("/api/hierarchy/services", json={"name": "Grocery"})
    assert response.status_code == 201
    service_id = response.json()["id"]

    response = await client.post(
        f"/api/hierarchy/services/{service_id}/categories",
        json={"name": "Produce", "description": "Fresh produce"},
    )
    assert response.status_code == 201
    category_id = response.json()["id"]
    assert response.json()["service_type_id"] == service_id

    response = await client.post(
        f"/api/hierarchy/categories/{category_id}/subcategories",
        json={"name": "Fruit"},
    )
    assert response.status_code == 201

    response = await client.get(f"/api/hierarchy/services/{service_id}/tree")
    assert response.status_code == 200
    tree = response.json()
    assert tree["name"] == "Grocery"
    assert tree["categories"][0]["name"] == "Produce"
    assert tree["categories"][0]["subcategories"][0]["name"] == "Fruit"

    response = await client.get("/api/hierarchy/services")
    assert [s["name"] for s in response.json()] == ["Grocery"]


@pytest.mark.asyncio
async def test_category_under_missing_service(client):
    response = await client.post(
        f"/api/hierarchy/services/{uuid.uuid4()}/categories",
        json={"name": "Orphan"},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_blank_name_rejected(client):
    response = await client.post("/api/hierarchy/services", json={"name": ""})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_duplicate_service_type_conflict(client):
    await client.post("/api/hierarchy/services", json={"name": "Grocery"})
    response = await client.post("/api/hierarchy/services", json={"name": "Grocery"})
    assert response.status_code == 409
