"""Tests for level configuration and config API routes."""

import uuid

import pytest


def level_url(level) -> str:
    return f"/api/levels/{level.kind.value}/{level.id}"


@pytest.mark.asyncio
async def test_add_list_delete(client, hierarchy, make_attribute):
    color = await make_attribute("color")
    size = await make_attribute("size")
    base = level_url(hierarchy.category)

    response = await client.post(f"{base}/configs", json={"attribute_ids": [str(color), str(size), str(color)]})
    assert response.status_code == 200
    outcome = response.json()
    assert outcome["operation"] == "add_attributes"
    assert outcome["succeeded_count"] == 2
    assert outcome["skipped"][0]["reason"] == "duplicate_in_request"

    response = await client.get(f"{base}/configs")
    assert [(c["attribute_name"], c["display_order"]) for c in response.json()] == [
        ("color", 1000),
        ("size", 1001),
    ]

    response = await client.post(f"{base}/configs/delete", json={"attribute_ids": [str(size)]})
    assert response.status_code == 200
    assert response.json()["succeeded"] == [str(size)]

    response = await client.get(f"{base}/configs")
    assert [c["attribute_name"] for c in response.json()] == ["color"]


@pytest.mark.asyncio
async def test_unknown_level_kind(client, hierarchy):
    response = await client.get(f"/api/levels/tenant/{hierarchy.service_id}/configs")
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_unknown_level_id(client, hierarchy):
    response = await client.get(f"/api/levels/category/{uuid.uuid4()}/configs")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete_all_protected_forbidden(client, hierarchy, make_attribute, bind):
    sku = await make_attribute("sku")
    await bind(hierarchy.service, sku, display_order=1000, is_deletable=False)

    response = await client.post(
        f"{level_url(hierarchy.service)}/configs/delete",
        json={"attribute_ids": [str(sku)]},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_reorder(client, hierarchy, make_attribute, bind):
    first = await bind(hierarchy.service, await make_attribute("color"), display_order=1000)
    second = await bind(hierarchy.service, await make_attribute("size"), display_order=1001)
    base = level_url(hierarchy.service)

    response = await client.put(f"{base}/configs/order", json={"config_ids": [str(second), str(first)]})
    assert response.status_code == 200

    response = await client.get(f"{base}/configs")
    assert [c["attribute_name"] for c in response.json()] == ["size", "color"]


@pytest.mark.asyncio
async def test_reorder_foreign_config_rejected(client, hierarchy, make_attribute, bind):
    foreign = await bind(hierarchy.category, await make_attribute("color"), display_order=1000)
    response = await client.put(
        f"{level_url(hierarchy.service)}/configs/order",
        json={"config_ids": [str(foreign)]},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_toggle_default_field_materializes(client, hierarchy, default_fields):
    response = await client.put(
        f"{level_url(hierarchy.category)}/attributes/{default_fields['price']}/required",
        json={"value": True},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["materialized"] is True
    assert body["config"]["is_required"] is True
    assert body["config"]["display_order"] == 999


@pytest.mark.asyncio
async def test_toggle_unbound_custom_attribute(client, hierarchy, make_attribute):
    color = await make_attribute("color")
    response = await client.put(
        f"{level_url(hierarchy.category)}/attributes/{color}/visible",
        json={"value": False},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_customize_default_field(client, hierarchy, default_fields):
    response = await client.put(
        f"{level_url(hierarchy.subcategory)}/defaults/vendor",
        json={"override_label": "Grower"},
    )
    assert response.status_code == 200
    assert response.json()["override_label"] == "Grower"
    assert response.json()["attribute_name"] == "vendor"


@pytest.mark.asyncio
async def test_override_and_permissions(client, hierarchy, make_attribute, bind):
    config_id = await bind(hierarchy.service, await make_attribute("color"), display_order=1000)

    response = await client.patch(f"/api/configs/{config_id}", json={"override_label": "Colour"})
    assert response.status_code == 200
    assert response.json()["override_label"] == "Colour"

    response = await client.patch(f"/api/configs/{config_id}/permissions", json={"is_editable": False})
    assert response.status_code == 200
    assert response.json()["is_editable"] is False

    response = await client.patch(f"/api/configs/{config_id}", json={"override_label": "Hue"})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_override_unknown_config(client):
    response = await client.patch(f"/api/configs/{uuid.uuid4()}", json={"override_label": "x"})
    assert response.status_code == 404
