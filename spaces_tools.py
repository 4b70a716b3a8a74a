"""
DigitalOcean Spaces tools and resources.

Capabilities:
- Spaces access keys (create, update, delete)
- CDN endpoints (create, get, list, delete, cache flush)

Resources:
    spaces-keys://all
    spaces-keys://{access_key}
    cdn://{id}
"""

import logging
from typing import List, Optional

from fastmcp.exceptions import ResourceError, ToolError
from pydantic import Field

from app.core.digitalocean import DigitalOceanClient
from app.core.extractor import InvalidURIError, extract_string_id_from_uri
from app.core.tooling import (
    API_ERRORS, api_error, destructive, page_options, read_only, resource_error,
    to_json, tool_annotations,
)

logger = logging.getLogger(__name__)

SPACES_KEYS = "/spaces/keys"
CDN_ENDPOINTS = "/cdn/endpoints"


def register_spaces_tools(mcp, client: DigitalOceanClient):
    """Register Spaces key and CDN tools with the MCP server."""

    # =========================================================================
    # SPACES KEYS
    # =========================================================================

    @mcp.tool(name="digitalocean-spaces-key-create", annotations=tool_annotations("Create Spaces Key"))
    async def digitalocean_spaces_key_create(
        name: str = Field(..., description="Name for the Spaces key"),
    ) -> str:
        """Create a Spaces access key with full access to all buckets.

        The secret key is only returned once, in this response.
        """
        body = {"name": name, "grants": [{"bucket": "", "permission": "fullaccess"}]}
        try:
            data = await client.post(SPACES_KEYS, json_body=body)
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data.get("key", {}))

    @mcp.tool(name="digitalocean-spaces-key-update",
              annotations=tool_annotations("Update Spaces Key", idempotent=True))
    async def digitalocean_spaces_key_update(
        access_key: str = Field(..., description="Access key ID of the Spaces key to update"),
        name: str = Field(..., description="New name for the Spaces key"),
    ) -> str:
        """Rename a Spaces access key."""
        try:
            data = await client.put(f"{SPACES_KEYS}/{access_key}", json_body={"name": name})
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data.get("key", {}))

    @mcp.tool(name="digitalocean-spaces-key-delete", annotations=destructive("Delete Spaces Key"))
    async def digitalocean_spaces_key_delete(
        access_key: str = Field(..., description="Access key ID of the Spaces key to delete"),
    ) -> str:
        """Revoke and delete a Spaces access key."""
        try:
            await client.delete(f"{SPACES_KEYS}/{access_key}")
        except API_ERRORS as e:
            raise api_error(e) from e
        return "Spaces key deleted successfully"

    # =========================================================================
    # CDN
    # =========================================================================

    @mcp.tool(name="digitalocean-cdn-get", annotations=read_only("Get CDN Endpoint"))
    async def digitalocean_cdn_get(
        cdn_id: str = Field(..., description="ID of the CDN"),
    ) -> str:
        """Get CDN endpoint information by ID."""
        if not cdn_id:
            raise ToolError("CDN ID is required")
        try:
            data = await client.get(f"{CDN_ENDPOINTS}/{cdn_id}")
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data.get("endpoint", {}))

    @mcp.tool(name="digitalocean-cdn-list", annotations=read_only("List CDN Endpoints"))
    async def digitalocean_cdn_list(
        page: int = Field(default=1, description="Page number"),
        per_page: int = Field(default=20, description="Items per page"),
    ) -> str:
        """List CDN endpoints with pagination."""
        try:
            data = await client.get(CDN_ENDPOINTS, params=page_options(page, per_page, 20))
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data.get("endpoints", []))

    @mcp.tool(name="digitalocean-cdn-create", annotations=tool_annotations("Create CDN Endpoint"))
    async def digitalocean_cdn_create(
        origin: str = Field(..., description="Origin of the CDN, e.g. my-space.nyc3.digitaloceanspaces.com"),
        ttl: int = Field(..., description="Time-to-live for the CDN cache, in seconds"),
        custom_domain: Optional[str] = Field(default=None, description="Custom domain for the CDN"),
    ) -> str:
        """Create a CDN endpoint in front of a Spaces origin."""
        body = {"origin": origin, "ttl": ttl}
        if custom_domain:
            body["custom_domain"] = custom_domain
        try:
            data = await client.post(CDN_ENDPOINTS, json_body=body)
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data.get("endpoint", {}))

    @mcp.tool(name="digitalocean-cdn-delete", annotations=destructive("Delete CDN Endpoint"))
    async def digitalocean_cdn_delete(
        cdn_id: str = Field(..., description="ID of the CDN to delete"),
    ) -> str:
        """Delete a CDN endpoint."""
        try:
            await client.delete(f"{CDN_ENDPOINTS}/{cdn_id}")
        except API_ERRORS as e:
            raise api_error(e) from e
        return "CDN deleted successfully"

    @mcp.tool(name="digitalocean-cdn-flush-cache",
              annotations=tool_annotations("Flush CDN Cache", destructive=True, idempotent=True))
    async def digitalocean_cdn_flush_cache(
        cdn_id: str = Field(..., description="ID of the CDN"),
        files: List[str] = Field(..., description="File paths to flush from the cache; '*' flushes everything"),
    ) -> str:
        """Purge cached content from a CDN endpoint."""
        try:
            await client.delete(f"{CDN_ENDPOINTS}/{cdn_id}/cache", json_body={"files": files})
        except API_ERRORS as e:
            raise api_error(e) from e
        return "CDN cache flushed successfully"


def register_spaces_resources(mcp, client: DigitalOceanClient):

    @mcp.resource("spaces-keys://all", name="spaces-keys", mime_type="application/json",
                  description="Returns list of all Spaces keys")
    async def spaces_keys_resource() -> str:
        try:
            data = await client.get(SPACES_KEYS)
        except API_ERRORS as e:
            raise resource_error("Spaces keys", e) from e
        return to_json(data.get("keys", []))

    @mcp.resource("spaces-keys://{access_key}", name="spaces-key", mime_type="application/json",
                  description="Returns Spaces key information")
    async def spaces_key_resource(access_key: str) -> str:
        try:
            key_id = extract_string_id_from_uri(f"spaces-keys://{access_key}")
        except InvalidURIError as e:
            raise resource_error("Spaces key", e) from e
        if not key_id:
            raise ResourceError("AccessKey cannot be empty")
        try:
            data = await client.get(f"{SPACES_KEYS}/{key_id}")
        except API_ERRORS as e:
            raise resource_error("Spaces key", e) from e
        return to_json(data.get("key", {}))

    @mcp.resource("cdn://{cdn_id}", name="cdn", mime_type="application/json",
                  description="Returns CDN information")
    async def cdn_resource(cdn_id: str) -> str:
        try:
            endpoint = extract_string_id_from_uri(f"cdn://{cdn_id}")
        except InvalidURIError as e:
            raise resource_error("CDN", e) from e
        try:
            data = await client.get(f"{CDN_ENDPOINTS}/{endpoint}")
        except API_ERRORS as e:
            raise resource_error("CDN", e) from e
        return to_json(data.get("endpoint", {}))
