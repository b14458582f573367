"""Tests for form resolution API routes."""

import uuid

import pytest


@pytest.mark.asyncio
async def test_resolve(client, hierarchy, default_fields, make_attribute, bind):
    color = await make_attribute("color")
    await bind(hierarchy.service, color, is_required=True, display_order=1000)

    response = await client.get(
        "/api/forms/resolve",
        params={"service_id": str(hierarchy.service_id), "category_id": str(hierarchy.category_id)},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 5
    names = [f["name"] for f in data["fields"]]
    assert names == ["product_name", "product_description", "price", "vendor", "color"]
    color_field = data["fields"][-1]
    assert color_field["inherited_from"] == "service"
    assert color_field["is_direct"] is False
    assert color_field["is_required"] is True


@pytest.mark.asyncio
async def test_resolve_invalid_context(client, hierarchy):
    response = await client.get(
        "/api/forms/resolve",
        params={"service_id": str(hierarchy.service_id), "category_id": str(hierarchy.other_category_id)},
    )
    assert response.status_code == 400
    assert "does not belong" in response.json()["detail"]


@pytest.mark.asyncio
async def test_resolve_unknown_service(client, hierarchy):
    response = await client.get("/api/forms/resolve", params={"service_id": str(uuid.uuid4())})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_resolve_requires_service(client):
    response = await client.get("/api/forms/resolve")
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_preview_hides_invisible_fields(client, hierarchy, default_fields, make_attribute, bind):
    secret = await make_attribute("internal_code")
    await bind(hierarchy.service, secret, is_visible=False, display_order=1000)

    response = await client.get("/api/forms/preview", params={"service_id": str(hierarchy.service_id)})

    assert response.status_code == 200
    data = response.json()
    assert "internal_code" not in [f["name"] for f in data["fields"]]
    assert data["total_fields"] == 5
    assert data["visible_fields"] == 4
    assert data["hidden_fields"] == 1
    assert data["required_fields"] == 0


@pytest.mark.asyncio
async def test_breakdown(client, hierarchy, make_attribute, bind):
    color = await make_attribute("color")
    await bind(hierarchy.subcategory, color, display_order=1000)

    response = await client.get(
        "/api/forms/breakdown",
        params={
            "service_id": str(hierarchy.service_id),
            "category_id": str(hierarchy.category_id),
            "subcategory_id": str(hierarchy.subcategory_id),
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["service"] == []
    assert data["category"] == []
    assert [c["attribute_name"] for c in data["subcategory"]] == ["color"]
