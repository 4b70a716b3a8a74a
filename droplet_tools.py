"""
DigitalOcean droplet tools and resources.

Capabilities:
- Droplet lifecycle (create, get, list, delete)
- Droplet actions (power, resize, rebuild, rename, snapshots, backups, kernels)
- Neighbors, kernels and private networking
- Distribution image and size listings

Resources:
    droplets://{id}
    droplets://{id}/actions/{action_id}
    images://distribution
    images://{id}
    sizes://all
"""

import logging
from typing import Any, Dict, List, Optional

from fastmcp.exceptions import ToolError
from pydantic import Field

from app.core.digitalocean import DigitalOceanClient
from app.core.extractor import (
    InvalidURIError, extract_droplet_and_action_from_uri, extract_numeric_id_from_uri,
)
from app.core.tooling import (
    API_ERRORS, api_error, destructive, page_options, read_only, resource_error,
    to_json, tool_annotations,
)

logger = logging.getLogger(__name__)

DROPLET_FIELDS = (
    "id", "name", "memory", "vcpus", "disk", "region", "image", "size", "size_slug",
    "backup_ids", "next_backup_window", "snapshot_ids", "features", "locked", "status",
    "networks", "created_at", "kernel", "tags", "volume_ids", "vpc_uuid",
)
IMAGE_FIELDS = ("id", "name", "distribution", "type")
SIZE_FIELDS = (
    "slug", "available", "price_monthly", "price_hourly", "memory", "vcpus", "disk",
    "transfer", "regions",
)

# Droplet actions that take no parameters besides the droplet ID:
# (tool suffix, API action type, title, description)
SIMPLE_DROPLET_ACTIONS = (
    ("power-cycle", "power_cycle", "Power Cycle Droplet", "Power cycle a droplet (hard reboot)."),
    ("power-on", "power_on", "Power On Droplet", "Power on a droplet."),
    ("power-off", "power_off", "Power Off Droplet", "Power off a droplet (hard shutdown)."),
    ("shutdown", "shutdown", "Shutdown Droplet", "Gracefully shut down a droplet."),
    ("enable-ipv6", "enable_ipv6", "Enable Droplet IPv6", "Enable IPv6 networking on a droplet."),
    ("enable-backups", "enable_backups", "Enable Droplet Backups", "Enable backups on a droplet."),
    ("disable-backups", "disable_backups", "Disable Droplet Backups", "Disable backups on a droplet."),
)


def pick_fields(item: Dict[str, Any], fields) -> Dict[str, Any]:
    """Keep only the given keys of an API object, in order."""
    return {field: item.get(field) for field in fields}


def register_droplet_tools(mcp, client: DigitalOceanClient):
    """Register droplet, droplet action, image and size tools with the MCP server."""

    async def post_droplet_action(droplet_id: int, body: Dict[str, Any]) -> str:
        try:
            data = await client.post(f"/droplets/{droplet_id}/actions", json_body=body)
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data.get("action", {}))

    # =========================================================================
    # DROPLETS
    # =========================================================================

    @mcp.tool(name="digitalocean-droplet-create", annotations=tool_annotations("Create Droplet"))
    async def digitalocean_droplet_create(
        name: str = Field(..., description="Name of the droplet"),
        size: str = Field(..., description="Slug of the droplet size (e.g., s-1vcpu-1gb)"),
        image_id: int = Field(..., description="ID of the image to use"),
        region: str = Field(..., description="Slug of the region (e.g., nyc3)"),
        backup: bool = Field(default=False, description="Whether to enable backups"),
        monitoring: bool = Field(default=False, description="Whether to enable monitoring"),
        tags: Optional[List[str]] = Field(default=None, description="Tags to apply to the droplet"),
    ) -> str:
        """Create a new droplet from an image ID in the given region and size."""
        body = {
            "name": name,
            "size": size,
            "image": image_id,
            "region": region,
            "backups": backup,
            "monitoring": monitoring,
        }
        if tags:
            body["tags"] = tags
        try:
            data = await client.post("/droplets", json_body=body)
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data.get("droplet", {}))

    @mcp.tool(name="digitalocean-droplet-delete", annotations=destructive("Delete Droplet"))
    async def digitalocean_droplet_delete(
        droplet_id: int = Field(..., description="ID of the droplet to delete"),
    ) -> str:
        """Delete a droplet. This cannot be undone."""
        try:
            await client.delete(f"/droplets/{droplet_id}")
        except API_ERRORS as e:
            raise api_error(e) from e
        return "Droplet deleted successfully"

    @mcp.tool(name="digitalocean-droplet-get", annotations=read_only("Get Droplet"))
    async def digitalocean_droplet_get(
        droplet_id: int = Field(..., description="Droplet ID"),
    ) -> str:
        """Get a droplet by its ID."""
        if not droplet_id:
            raise ToolError("Droplet ID is required")
        try:
            data = await client.get(f"/droplets/{droplet_id}")
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data.get("droplet", {}))

    @mcp.tool(name="digitalocean-droplet-list", annotations=read_only("List Droplets"))
    async def digitalocean_droplet_list(
        page: int = Field(default=1, description="Page number"),
        per_page: int = Field(default=50, description="Items per page"),
    ) -> str:
        """List all droplets for the user. Supports pagination."""
        try:
            data = await client.get("/droplets", params=page_options(page, per_page, 50))
        except API_ERRORS as e:
            raise api_error(e) from e
        droplets = [pick_fields(d, DROPLET_FIELDS) for d in data.get("droplets", [])]
        return to_json(droplets)

    @mcp.tool(name="digitalocean-droplet-get-neighbors", annotations=read_only("Get Droplet Neighbors"))
    async def digitalocean_droplet_get_neighbors(
        droplet_id: int = Field(..., description="ID of the droplet"),
    ) -> str:
        """List droplets that share the same physical hardware as this droplet."""
        try:
            data = await client.get(f"/droplets/{droplet_id}/neighbors")
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data.get("droplets", []))

    @mcp.tool(name="digitalocean-droplet-get-kernels", annotations=read_only("Get Droplet Kernels"))
    async def digitalocean_droplet_get_kernels(
        droplet_id: int = Field(..., description="ID of the droplet"),
        page: int = Field(default=1, description="Page number"),
        per_page: int = Field(default=100, description="Items per page"),
    ) -> str:
        """List kernels available to a droplet."""
        try:
            data = await client.get(f"/droplets/{droplet_id}/kernels",
                                    params=page_options(page, per_page, 100))
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data.get("kernels", []))

    @mcp.tool(name="digitalocean-droplet-enable-private-net",
              annotations=tool_annotations("Enable Droplet Private Networking", idempotent=True))
    async def digitalocean_droplet_enable_private_net(
        droplet_id: int = Field(..., description="ID of the droplet"),
    ) -> str:
        """Enable private networking on a droplet."""
        return await post_droplet_action(droplet_id, {"type": "enable_private_networking"})

    @mcp.tool(name="digitalocean-droplet-get-action", annotations=read_only("Get Droplet Action"))
    async def digitalocean_droplet_get_action(
        droplet_id: int = Field(..., description="Droplet ID"),
        action_id: int = Field(..., description="Action ID"),
    ) -> str:
        """Get a droplet action by droplet ID and action ID."""
        if not droplet_id:
            raise ToolError("Droplet ID is required")
        if not action_id:
            raise ToolError("Action ID is required")
        try:
            data = await client.get(f"/droplets/{droplet_id}/actions/{action_id}")
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data.get("action", {}))

    # =========================================================================
    # DROPLET ACTIONS
    # =========================================================================

    def register_simple_action(suffix: str, action_type: str, title: str, description: str):
        async def droplet_action(
            droplet_id: int = Field(..., description="ID of the droplet"),
        ) -> str:
            return await post_droplet_action(droplet_id, {"type": action_type})

        droplet_action.__name__ = f"digitalocean_droplet_action_{action_type}"
        mcp.tool(
            name=f"digitalocean-droplet-action-{suffix}",
            description=description,
            annotations=tool_annotations(title),
        )(droplet_action)

    for suffix, action_type, title, description in SIMPLE_DROPLET_ACTIONS:
        register_simple_action(suffix, action_type, title, description)

    @mcp.tool(name="digitalocean-droplet-action-restore",
              annotations=tool_annotations("Restore Droplet", destructive=True))
    async def digitalocean_droplet_action_restore(
        droplet_id: int = Field(..., description="ID of the droplet to restore"),
        image_id: int = Field(..., description="ID of the backup or snapshot image"),
    ) -> str:
        """Restore a droplet from a backup or snapshot image."""
        return await post_droplet_action(droplet_id, {"type": "restore", "image": image_id})

    @mcp.tool(name="digitalocean-droplet-action-resize", annotations=tool_annotations("Resize Droplet"))
    async def digitalocean_droplet_action_resize(
        droplet_id: int = Field(..., description="ID of the droplet to resize"),
        size: str = Field(..., description="Slug of the new size (e.g., s-1vcpu-1gb)"),
        resize_disk: bool = Field(default=False, description="Whether to resize the disk (permanent)"),
    ) -> str:
        """Resize a droplet. The droplet must be powered off."""
        return await post_droplet_action(droplet_id, {"type": "resize", "size": size, "disk": resize_disk})

    @mcp.tool(name="digitalocean-droplet-action-rebuild",
              annotations=tool_annotations("Rebuild Droplet", destructive=True))
    async def digitalocean_droplet_action_rebuild(
        droplet_id: int = Field(..., description="ID of the droplet to rebuild"),
        image_id: int = Field(..., description="ID of the image to rebuild from"),
    ) -> str:
        """Rebuild a droplet from an image. All data on the droplet is lost."""
        return await post_droplet_action(droplet_id, {"type": "rebuild", "image": image_id})

    @mcp.tool(name="digitalocean-droplet-action-rename", annotations=tool_annotations("Rename Droplet"))
    async def digitalocean_droplet_action_rename(
        droplet_id: int = Field(..., description="ID of the droplet to rename"),
        name: str = Field(..., description="New name for the droplet"),
    ) -> str:
        """Rename a droplet."""
        return await post_droplet_action(droplet_id, {"type": "rename", "name": name})

    @mcp.tool(name="digitalocean-droplet-action-change-kernel",
              annotations=tool_annotations("Change Droplet Kernel"))
    async def digitalocean_droplet_action_change_kernel(
        droplet_id: int = Field(..., description="ID of the droplet"),
        kernel_id: int = Field(..., description="ID of the kernel to switch to"),
    ) -> str:
        """Change the kernel of a droplet."""
        return await post_droplet_action(droplet_id, {"type": "change_kernel", "kernel": kernel_id})

    @mcp.tool(name="digitalocean-droplet-action-snapshot", annotations=tool_annotations("Snapshot Droplet"))
    async def digitalocean_droplet_action_snapshot(
        droplet_id: int = Field(..., description="ID of the droplet"),
        name: str = Field(..., description="Name for the snapshot"),
    ) -> str:
        """Take a snapshot of a droplet."""
        return await post_droplet_action(droplet_id, {"type": "snapshot", "name": name})

    # =========================================================================
    # IMAGES & SIZES
    # =========================================================================

    @mcp.tool(name="digitalocean-image-list", annotations=read_only("List Distribution Images"))
    async def digitalocean_image_list(
        page: int = Field(default=1, description="Page number"),
        per_page: int = Field(default=50, description="Items per page"),
    ) -> str:
        """List all available distribution images. Supports pagination."""
        params = page_options(page, per_page, 50)
        params["type"] = "distribution"
        try:
            data = await client.get("/images", params=params)
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json([pick_fields(i, IMAGE_FIELDS) for i in data.get("images", [])])

    @mcp.tool(name="digitalocean-image-get", annotations=read_only("Get Image"))
    async def digitalocean_image_get(
        image_id: int = Field(..., description="Image ID"),
    ) -> str:
        """Get a specific image by its numeric ID."""
        if not image_id:
            raise ToolError("Image ID is required")
        try:
            data = await client.get(f"/images/{image_id}")
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data.get("image", {}))

    @mcp.tool(name="digitalocean-size-list", annotations=read_only("List Droplet Sizes"))
    async def digitalocean_size_list(
        page: int = Field(default=1, description="Page number"),
        per_page: int = Field(default=50, description="Items per page"),
    ) -> str:
        """List all available droplet sizes with pricing. Supports pagination."""
        try:
            data = await client.get("/sizes", params=page_options(page, per_page, 50))
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json([pick_fields(s, SIZE_FIELDS) for s in data.get("sizes", [])])


def register_droplet_resources(mcp, client: DigitalOceanClient):

    @mcp.resource("droplets://{droplet_id}", name="droplet", mime_type="application/json",
                  description="Returns information about a droplet")
    async def droplet_resource(droplet_id: str) -> str:
        try:
            droplet = extract_numeric_id_from_uri(f"droplets://{droplet_id}")
        except InvalidURIError as e:
            raise resource_error("droplet", e) from e
        try:
            data = await client.get(f"/droplets/{droplet}")
        except API_ERRORS as e:
            raise resource_error("droplet", e) from e
        return to_json(data.get("droplet", {}))

    @mcp.resource("droplets://{droplet_id}/actions/{action_id}", name="droplet-action",
                  mime_type="application/json", description="Returns information about a droplet action")
    async def droplet_action_resource(droplet_id: str, action_id: str) -> str:
        try:
            droplet, action = extract_droplet_and_action_from_uri(
                f"droplets://{droplet_id}/actions/{action_id}")
        except InvalidURIError as e:
            raise resource_error("droplet action", e) from e
        try:
            data = await client.get(f"/droplets/{droplet}/actions/{action}")
        except API_ERRORS as e:
            raise resource_error("droplet action", e) from e
        return to_json(data.get("action", {}))

    @mcp.resource("images://distribution", name="distribution-images", mime_type="application/json",
                  description="All available distribution images")
    async def distribution_images_resource() -> str:
        try:
            data = await client.get("/images", params={"page": 1, "per_page": 200, "type": "distribution"})
        except API_ERRORS as e:
            raise resource_error("distribution images", e) from e
        return to_json(data.get("images", []))

    @mcp.resource("images://{image_id}", name="image", mime_type="application/json",
                  description="Returns information about an image")
    async def image_resource(image_id: str) -> str:
        try:
            image = extract_numeric_id_from_uri(f"images://{image_id}")
        except InvalidURIError as e:
            raise resource_error("image", e) from e
        try:
            data = await client.get(f"/images/{image}")
        except API_ERRORS as e:
            raise resource_error("image", e) from e
        return to_json(data.get("image", {}))

    @mcp.resource("sizes://all", name="sizes", mime_type="application/json",
                  description="All available droplet sizes")
    async def sizes_resource() -> str:
        try:
            data = await client.get("/sizes", params={"page": 1, "per_page": 200})
        except API_ERRORS as e:
            raise resource_error("sizes", e) from e
        return to_json(data.get("sizes", []))
