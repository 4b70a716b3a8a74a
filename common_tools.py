"""
Region tools and resources.

Regions are needed by almost every other service, so this group is always
registered regardless of the --services selection.
"""

import logging

from pydantic import Field

from app.core.digitalocean import DigitalOceanClient
from app.core.tooling import API_ERRORS, api_error, page_options, read_only, resource_error, to_json

logger = logging.getLogger(__name__)


def register_common_tools(mcp, client: DigitalOceanClient):
    """Register region tools with the MCP server."""

    @mcp.tool(name="digitalocean-region-list", annotations=read_only("List DigitalOcean Regions"))
    async def digitalocean_region_list(
        page: int = Field(default=1, description="Page number"),
        per_page: int = Field(default=50, description="Items per page"),
    ) -> str:
        """List DigitalOcean datacenter regions with their features and available sizes."""
        try:
            data = await client.get("/regions", params=page_options(page, per_page, 50))
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data.get("regions", []))


def register_common_resources(mcp, client: DigitalOceanClient):

    @mcp.resource("regions://all", name="regions", mime_type="application/json",
                  description="All DigitalOcean regions")
    async def regions_resource() -> str:
        try:
            data = await client.get("/regions", params={"page": 1, "per_page": 200})
        except API_ERRORS as e:
            raise resource_error("regions", e) from e
        return to_json(data.get("regions", []))
