"""
DigitalOcean account tools and resources.

Capabilities:
- Account information
- Account action history
- Balance, billing history and invoices
- SSH key management (create, get, list, delete)
"""

import logging

from fastmcp.exceptions import ToolError
from pydantic import Field

from app.core.digitalocean import DigitalOceanClient
from app.core.extractor import InvalidURIError, extract_numeric_id_from_uri
from app.core.tooling import (
    API_ERRORS, api_error, destructive, page_options, read_only, resource_error,
    to_json, tool_annotations,
)

logger = logging.getLogger(__name__)


def _invoice_summary(data: dict) -> dict:
    return {
        "invoices": data.get("invoices", []),
        "invoice_preview": data.get("invoice_preview"),
    }


def register_account_tools(mcp, client: DigitalOceanClient):
    """Register account, action, billing and SSH key tools with the MCP server."""

    # =========================================================================
    # ACCOUNT
    # =========================================================================

    @mcp.tool(name="digitalocean-account-get-information",
              annotations=read_only("Get DigitalOcean Account Information"))
    async def digitalocean_account_get_information() -> str:
        """Get account information such as email, droplet limit and status."""
        try:
            data = await client.get("/account")
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data.get("account", {}))

    # =========================================================================
    # ACTIONS
    # =========================================================================

    @mcp.tool(name="digitalocean-action-get", annotations=read_only("Get Action"))
    async def digitalocean_action_get(
        action_id: int = Field(..., description="Action ID"),
    ) -> str:
        """Get a specific account action by ID."""
        if not action_id:
            raise ToolError("Action ID is required")
        try:
            data = await client.get(f"/actions/{action_id}")
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data.get("action", {}))

    @mcp.tool(name="digitalocean-action-list", annotations=read_only("List Actions"))
    async def digitalocean_action_list(
        page: int = Field(default=1, description="Page number"),
        per_page: int = Field(default=30, description="Items per page"),
    ) -> str:
        """List account actions with pagination."""
        try:
            data = await client.get("/actions", params=page_options(page, per_page, 30))
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data.get("actions", []))

    # =========================================================================
    # BILLING
    # =========================================================================

    @mcp.tool(name="digitalocean-balance-get", annotations=read_only("Get Balance"))
    async def digitalocean_balance_get() -> str:
        """Get the current balance, month-to-date usage and account balance."""
        try:
            data = await client.get("/customers/my/balance")
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data)

    @mcp.tool(name="digitalocean-billing-history-list", annotations=read_only("List Billing History"))
    async def digitalocean_billing_history_list(
        page: int = Field(default=1, description="Page number"),
        per_page: int = Field(default=30, description="Items per page"),
    ) -> str:
        """List billing history entries (invoices, payments, credits)."""
        try:
            data = await client.get("/customers/my/billing_history",
                                    params=page_options(page, per_page, 30))
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data.get("billing_history", []))

    @mcp.tool(name="digitalocean-invoice-list", annotations=read_only("List Invoices"))
    async def digitalocean_invoice_list(
        page: int = Field(default=1, description="Page number"),
        per_page: int = Field(default=30, description="Items per page"),
    ) -> str:
        """List invoices and the preview of the current month's invoice."""
        try:
            data = await client.get("/customers/my/invoices", params=page_options(page, per_page, 30))
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(_invoice_summary(data))

    # =========================================================================
    # SSH KEYS
    # =========================================================================

    @mcp.tool(name="digitalocean-key-create",
              annotations=tool_annotations("Create SSH Key"))
    async def digitalocean_key_create(
        name: str = Field(..., description="Name of the SSH key"),
        public_key: str = Field(..., description="Public key content"),
    ) -> str:
        """Add a new SSH public key to the account."""
        if not name or not public_key:
            raise ToolError("Name and public key are required")
        try:
            data = await client.post("/account/keys", json_body={"name": name, "public_key": public_key})
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data.get("ssh_key", {}))

    @mcp.tool(name="digitalocean-key-delete", annotations=destructive("Delete SSH Key"))
    async def digitalocean_key_delete(
        key_id: int = Field(..., description="ID of the SSH key to delete"),
    ) -> str:
        """Delete an SSH key from the account."""
        try:
            await client.delete(f"/account/keys/{key_id}")
        except API_ERRORS as e:
            raise api_error(e) from e
        return "SSH key deleted successfully"

    @mcp.tool(name="digitalocean-key-get", annotations=read_only("Get SSH Key"))
    async def digitalocean_key_get(
        key_id: int = Field(..., description="ID of the SSH key"),
    ) -> str:
        """Get a specific SSH key by ID."""
        if not key_id:
            raise ToolError("Key ID is required")
        try:
            data = await client.get(f"/account/keys/{key_id}")
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data.get("ssh_key", {}))

    @mcp.tool(name="digitalocean-key-list", annotations=read_only("List SSH Keys"))
    async def digitalocean_key_list(
        page: int = Field(default=1, description="Page number"),
        per_page: int = Field(default=30, description="Items per page"),
    ) -> str:
        """List SSH keys on the account."""
        try:
            data = await client.get("/account/keys", params=page_options(page, per_page, 30))
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json(data.get("ssh_keys", []))


def register_account_resources(mcp, client: DigitalOceanClient):
    """Register account resources: account://, actions://, balance://, billing://, invoice://, keys://"""

    @mcp.resource("account://current", name="account", mime_type="application/json",
                  description="Current account information")
    async def account_resource() -> str:
        try:
            data = await client.get("/account")
        except API_ERRORS as e:
            raise resource_error("account", e) from e
        return to_json(data.get("account", {}))

    @mcp.resource("balance://current", name="balance", mime_type="application/json",
                  description="Current balance of the account")
    async def balance_resource() -> str:
        try:
            data = await client.get("/customers/my/balance")
        except API_ERRORS as e:
            raise resource_error("balance", e) from e
        return to_json(data)

    @mcp.resource("actions://{action_id}", name="action", mime_type="application/json",
                  description="Returns information about an account action")
    async def action_resource(action_id: str) -> str:
        try:
            action = extract_numeric_id_from_uri(f"actions://{action_id}")
        except InvalidURIError as e:
            raise resource_error("action", e) from e
        try:
            data = await client.get(f"/actions/{action}")
        except API_ERRORS as e:
            raise resource_error("action", e) from e
        return to_json(data.get("action", {}))

    @mcp.resource("billing://{last}", name="billing-history", mime_type="application/json",
                  description="Billing history for the last n entries")
    async def billing_resource(last: str) -> str:
        try:
            per_page = extract_numeric_id_from_uri(f"billing://{last}")
        except InvalidURIError as e:
            raise resource_error("billing history", e) from e
        try:
            data = await client.get("/customers/my/billing_history",
                                    params=page_options(1, per_page, 30))
        except API_ERRORS as e:
            raise resource_error("billing history", e) from e
        return to_json(data.get("billing_history", []))

    @mcp.resource("invoice://{last}", name="invoices", mime_type="application/json",
                  description="Invoices for the last n months")
    async def invoice_resource(last: str) -> str:
        try:
            per_page = extract_numeric_id_from_uri(f"invoice://{last}")
        except InvalidURIError as e:
            raise resource_error("invoices", e) from e
        try:
            data = await client.get("/customers/my/invoices", params=page_options(1, per_page, 30))
        except API_ERRORS as e:
            raise resource_error("invoices", e) from e
        return to_json(_invoice_summary(data))

    @mcp.resource("keys://{key_id}", name="ssh-key", mime_type="application/json",
                  description="Returns information about an SSH key")
    async def key_resource(key_id: str) -> str:
        try:
            key = extract_numeric_id_from_uri(f"keys://{key_id}")
        except InvalidURIError as e:
            raise resource_error("SSH key", e) from e
        try:
            data = await client.get(f"/account/keys/{key}")
        except API_ERRORS as e:
            raise resource_error("SSH key", e) from e
        return to_json(data.get("ssh_key", {}))
