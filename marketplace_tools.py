"""DigitalOcean Marketplace (1-Click application) tools."""

import logging
from typing import List, Optional

from fastmcp.exceptions import ToolError
from pydantic import Field

from app.core.digitalocean import DigitalOceanClient
from app.core.tooling import API_ERRORS, api_error, read_only, to_json, tool_annotations

logger = logging.getLogger(__name__)

DEFAULT_ONE_CLICK_TYPE = "droplet"


def register_marketplace_tools(mcp, client: DigitalOceanClient):
    """Register 1-Click application tools with the MCP server."""

    @mcp.tool(name="digitalocean-1-click-list", annotations=read_only("List 1-Click Apps"))
    async def digitalocean_1_click_list(
        type: Optional[str] = Field(
            default=None,
            description="Type of 1-click apps to list (e.g., 'droplet', 'kubernetes'). Defaults to 'droplet'",
        ),
    ) -> str:
        """List available 1-Click applications from the DigitalOcean Marketplace."""
        one_click_type = type or DEFAULT_ONE_CLICK_TYPE
        try:
            data = await client.get("/1-clicks", params={"type": one_click_type})
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json({"apps": data.get("1_clicks", []), "type": one_click_type})

    @mcp.tool(name="digitalocean-1-click-install-kubernetes",
              annotations=tool_annotations("Install Kubernetes 1-Click Apps"))
    async def digitalocean_1_click_install_kubernetes(
        cluster_uuid: str = Field(..., description="UUID of the Kubernetes cluster to install apps on"),
        app_slugs: List[str] = Field(..., description="App slugs to install"),
    ) -> str:
        """Install 1-Click applications on a Kubernetes cluster."""
        if not cluster_uuid.strip():
            raise ToolError("cluster_uuid cannot be empty")
        if not app_slugs:
            raise ToolError("app_slugs cannot be empty")
        body = {"addon_slugs": app_slugs, "cluster_uuid": cluster_uuid}
        try:
            data = await client.post("/1-clicks/kubernetes", json_body=body)
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data)
