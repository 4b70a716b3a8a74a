"""Tests for droplet, droplet action, image and size tools/resources."""

import json

import pytest


@pytest.mark.asyncio
async def test_droplet_create(fake_api, call_tool):
    fake_api.add("POST", "/droplets", status=202, json_body={"droplet": {"id": 3164444, "name": "web-1"}})

    result = await call_tool("digitalocean-droplet-create", {
        "name": "web-1",
        "size": "s-1vcpu-1gb",
        "image_id": 12345,
        "region": "nyc3",
        "backup": True,
        "tags": ["web"],
    })

    assert not result.isError
    assert json.loads(result.content[0].text) == {"id": 3164444, "name": "web-1"}
    assert fake_api.last_json() == {
        "name": "web-1",
        "size": "s-1vcpu-1gb",
        "image": 12345,
        "region": "nyc3",
        "backups": True,
        "monitoring": False,
        "tags": ["web"],
    }


@pytest.mark.asyncio
async def test_droplet_create_api_error(fake_api, call_tool):
    fake_api.add("POST", "/droplets", status=422,
                 json_body={"id": "unprocessable_entity", "message": "size is invalid"})

    result = await call_tool("digitalocean-droplet-create", {
        "name": "web-1", "size": "bogus", "image_id": 1, "region": "nyc3",
    })

    assert result.isError
    assert result.content[0].text.startswith("api error")
    assert "size is invalid" in result.content[0].text


@pytest.mark.asyncio
async def test_droplet_get_and_delete(fake_api, call_tool):
    fake_api.add("GET", "/droplets/42", json_body={"droplet": {"id": 42, "status": "active"}})
    fake_api.add("DELETE", "/droplets/42", status=204)

    result = await call_tool("digitalocean-droplet-get", {"droplet_id": 42})
    assert json.loads(result.content[0].text) == {"id": 42, "status": "active"}

    result = await call_tool("digitalocean-droplet-delete", {"droplet_id": 42})
    assert result.content[0].text == "Droplet deleted successfully"
    assert fake_api.last_request.method == "DELETE"


@pytest.mark.asyncio
async def test_droplet_get_requires_id(fake_api, call_tool):
    result = await call_tool("digitalocean-droplet-get", {"droplet_id": 0})

    assert result.isError
    assert result.content[0].text == "Droplet ID is required"
    assert fake_api.requests == []


@pytest.mark.asyncio
async def test_droplet_list_filters_fields(fake_api, call_tool):
    fake_api.add("GET", "/droplets", json_body={"droplets": [
        {"id": 1, "name": "a", "status": "active", "internal_field": "x"},
    ]})

    result = await call_tool("digitalocean-droplet-list")

    droplets = json.loads(result.content[0].text)
    assert droplets[0]["id"] == 1
    assert droplets[0]["name"] == "a"
    assert "internal_field" not in droplets[0]
    assert fake_api.last_request.url.params["per_page"] == "50"


@pytest.mark.asyncio
async def test_droplet_get_action_validation(fake_api, call_tool):
    result = await call_tool("digitalocean-droplet-get-action", {"droplet_id": 1, "action_id": 0})

    assert result.isError
    assert result.content[0].text == "Action ID is required"
    assert fake_api.requests == []


@pytest.mark.asyncio
async def test_droplet_neighbors_and_kernels(fake_api, call_tool):
    fake_api.add("GET", "/droplets/5/neighbors", json_body={"droplets": [{"id": 6}]})
    fake_api.add("GET", "/droplets/5/kernels", json_body={"kernels": [{"id": 7515, "name": "DO-recovery"}]})

    result = await call_tool("digitalocean-droplet-get-neighbors", {"droplet_id": 5})
    assert json.loads(result.content[0].text) == [{"id": 6}]

    result = await call_tool("digitalocean-droplet-get-kernels", {"droplet_id": 5})
    assert json.loads(result.content[0].text) == [{"id": 7515, "name": "DO-recovery"}]
    assert fake_api.last_request.url.params["per_page"] == "100"


@pytest.mark.asyncio
@pytest.mark.parametrize("tool, action_type", [
    ("digitalocean-droplet-action-power-cycle", "power_cycle"),
    ("digitalocean-droplet-action-power-off", "power_off"),
    ("digitalocean-droplet-action-shutdown", "shutdown"),
    ("digitalocean-droplet-action-enable-backups", "enable_backups"),
    ("digitalocean-droplet-enable-private-net", "enable_private_networking"),
])
async def test_simple_droplet_actions(fake_api, call_tool, tool, action_type):
    fake_api.add("POST", "/droplets/9/actions", status=201,
                 json_body={"action": {"id": 1, "type": action_type, "status": "in-progress"}})

    result = await call_tool(tool, {"droplet_id": 9})

    assert not result.isError
    assert fake_api.last_json() == {"type": action_type}
    assert json.loads(result.content[0].text)["type"] == action_type


@pytest.mark.asyncio
async def test_resize_sends_disk_flag(fake_api, call_tool):
    fake_api.add("POST", "/droplets/9/actions", status=201, json_body={"action": {"id": 2, "type": "resize"}})

    await call_tool("digitalocean-droplet-action-resize",
                    {"droplet_id": 9, "size": "s-2vcpu-2gb", "resize_disk": True})

    assert fake_api.last_json() == {"type": "resize", "size": "s-2vcpu-2gb", "disk": True}


@pytest.mark.asyncio
async def test_change_kernel_and_snapshot(fake_api, call_tool):
    fake_api.add("POST", "/droplets/9/actions", status=201, json_body={"action": {"id": 3}})

    await call_tool("digitalocean-droplet-action-change-kernel", {"droplet_id": 9, "kernel_id": 7515})
    assert fake_api.last_json() == {"type": "change_kernel", "kernel": 7515}

    await call_tool("digitalocean-droplet-action-snapshot", {"droplet_id": 9, "name": "nightly"})
    assert fake_api.last_json() == {"type": "snapshot", "name": "nightly"}


@pytest.mark.asyncio
async def test_image_list_only_distributions(fake_api, call_tool):
    fake_api.add("GET", "/images", json_body={"images": [
        {"id": 1, "name": "24.04 x64", "distribution": "Ubuntu", "type": "base", "regions": ["nyc3"]},
    ]})

    result = await call_tool("digitalocean-image-list")

    assert json.loads(result.content[0].text) == [
        {"id": 1, "name": "24.04 x64", "distribution": "Ubuntu", "type": "base"},
    ]
    assert fake_api.last_request.url.params["type"] == "distribution"


@pytest.mark.asyncio
async def test_size_list(fake_api, call_tool):
    fake_api.add("GET", "/sizes", json_body={"sizes": [{"slug": "s-1vcpu-1gb", "price_monthly": 6.0}]})

    result = await call_tool("digitalocean-size-list")

    sizes = json.loads(result.content[0].text)
    assert sizes[0]["slug"] == "s-1vcpu-1gb"
    assert sizes[0]["price_monthly"] == 6.0


@pytest.mark.asyncio
async def test_droplet_resources(fake_api, read_resource):
    fake_api.add("GET", "/droplets/42", json_body={"droplet": {"id": 42}})
    fake_api.add("GET", "/droplets/42/actions/7", json_body={"action": {"id": 7}})
    fake_api.add("GET", "/images/99", json_body={"image": {"id": 99}})

    assert json.loads(await read_resource("droplets://42")) == {"id": 42}
    assert json.loads(await read_resource("droplets://42/actions/7")) == {"id": 7}
    assert json.loads(await read_resource("images://99")) == {"id": 99}


@pytest.mark.asyncio
async def test_static_image_resource_wins_over_template(fake_api, read_resource):
    fake_api.add("GET", "/images", json_body={"images": [{"id": 1}]})

    assert json.loads(await read_resource("images://distribution")) == [{"id": 1}]
    assert fake_api.last_request.url.params["type"] == "distribution"


@pytest.mark.asyncio
async def test_droplet_resource_invalid_id(fake_api, read_resource):
    with pytest.raises(Exception):
        await read_resource("droplets://abc")
    assert fake_api.requests == []


@pytest.mark.asyncio
async def test_droplet_resource_api_error(fake_api, read_resource):
    with pytest.raises(Exception, match="error fetching droplet"):
        await read_resource("droplets://404")
