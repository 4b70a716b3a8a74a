"""
DigitalOcean monitoring tools.

Capabilities:
- Uptime checks (create, get, state, list, update, delete)
- Uptime check alerts
- Monitoring alert policies for droplet, load balancer and database metrics
"""

import logging
from typing import Any, Dict, List, Optional

from fastmcp.exceptions import ToolError
from pydantic import BaseModel, Field

from app.core.digitalocean import DigitalOceanClient
from app.core.tooling import (
    API_ERRORS, api_error, destructive, page_options, read_only, to_json, tool_annotations,
)

logger = logging.getLogger(__name__)

UPTIME_CHECKS = "/uptime/checks"
ALERT_POLICIES = "/monitoring/alerts"

ALERT_POLICY_TYPES = """Type of the alert policy. Available types:
Droplet metrics: v1/insights/droplet/load_1, v1/insights/droplet/load_5, v1/insights/droplet/load_15,
v1/insights/droplet/cpu, v1/insights/droplet/memory_utilization, v1/insights/droplet/disk_utilization,
v1/insights/droplet/disk_read_rate, v1/insights/droplet/disk_write_rate,
v1/insights/droplet/public_outbound_bandwidth, v1/insights/droplet/public_inbound_bandwidth
Load Balancer metrics: v1/insights/lbaas/avg_cpu_utilization, v1/insights/lbaas/connection_utilization,
v1/insights/lbaas/droplet_health, v1/insights/lbaas/tls_connections_per_second_utilization
Database metrics: v1/insights/database/cpu, v1/insights/database/memory_utilization,
v1/insights/database/disk_utilization"""


class SlackDetails(BaseModel):
    channel: str = Field(..., description="Slack channel (e.g., '#alerts')")
    url: str = Field(..., description="Slack webhook URL")


class AlertNotifications(BaseModel):
    email: List[str] = Field(default_factory=list, description="Email addresses to notify")
    slack: List[SlackDetails] = Field(default_factory=list, description="Slack webhooks to notify")


def uptime_check_body(name: str, check_type: str, target: str, regions: Optional[List[str]],
                      enabled: bool) -> Dict[str, Any]:
    body = {"name": name, "type": check_type, "target": target, "enabled": enabled}
    if regions:
        body["regions"] = regions
    return body


def uptime_alert_body(name: str, alert_type: str, threshold: Optional[int], comparison: Optional[str],
                      period: str, emails: Optional[List[str]],
                      slack_details: Optional[List[SlackDetails]]) -> Dict[str, Any]:
    body = {
        "name": name,
        "type": alert_type,
        "period": period,
        "notifications": {
            "email": emails or [],
            "slack": [s.model_dump() for s in slack_details or []],
        },
    }
    if threshold is not None:
        body["threshold"] = threshold
    if comparison:
        body["comparison"] = comparison
    return body


def alert_policy_body(alert_type: str, description: str, compare: str, value: float, window: str,
                      entities: Optional[List[str]], tags: Optional[List[str]],
                      alerts: Optional[AlertNotifications], enabled: bool) -> Dict[str, Any]:
    alerts = alerts or AlertNotifications()
    return {
        "type": alert_type,
        "description": description,
        "compare": compare,
        "value": value,
        "window": window,
        "entities": entities or [],
        "tags": tags or [],
        "alerts": alerts.model_dump(),
        "enabled": enabled,
    }


def register_insights_tools(mcp, client: DigitalOceanClient):
    """Register uptime check and alert policy tools with the MCP server."""

    async def call(method: str, endpoint: str, key: Optional[str] = None,
                   params: Optional[Dict[str, Any]] = None, body: Any = None) -> Any:
        try:
            data = await client.request(method, endpoint, params=params, json_body=body)
        except API_ERRORS as e:
            raise api_error(e) from e
        return (data or {}).get(key) if key else data

    def require(value: str, message: str):
        if not value:
            raise ToolError(message)

    # =========================================================================
    # UPTIME CHECKS
    # =========================================================================

    @mcp.tool(name="digitalocean-uptimecheck-get", annotations=read_only("Get Uptime Check"))
    async def digitalocean_uptimecheck_get(
        check_id: str = Field(..., description="ID of the uptime check"),
    ) -> str:
        """Get uptime check information by ID."""
        require(check_id, "UptimeCheck ID is required")
        return to_json(await call("GET", f"{UPTIME_CHECKS}/{check_id}", "uptime_check"))

    @mcp.tool(name="digitalocean-uptimecheck-get-state", annotations=read_only("Get Uptime Check State"))
    async def digitalocean_uptimecheck_get_state(
        check_id: str = Field(..., description="ID of the uptime check"),
    ) -> str:
        """Get the current state (up/down per region) of an uptime check."""
        require(check_id, "UptimeCheck ID is required")
        return to_json(await call("GET", f"{UPTIME_CHECKS}/{check_id}/state", "state"))

    @mcp.tool(name="digitalocean-uptimecheck-list", annotations=read_only("List Uptime Checks"))
    async def digitalocean_uptimecheck_list(
        page: int = Field(default=1, description="Page number"),
        per_page: int = Field(default=20, description="Items per page"),
    ) -> str:
        """List uptime checks with pagination."""
        return to_json(await call("GET", UPTIME_CHECKS, "uptime_checks",
                                  params=page_options(page, per_page, 20)))

    @mcp.tool(name="digitalocean-uptimecheck-create", annotations=tool_annotations("Create Uptime Check"))
    async def digitalocean_uptimecheck_create(
        name: str = Field(..., description="Name of the uptime check"),
        check_type: str = Field(..., description="Type of the uptime check: HTTPS, HTTP or PING"),
        target: str = Field(..., description="Endpoint to check"),
        regions: Optional[List[str]] = Field(
            default=None, description="Regions to run the check from: us_east, us_west, eu_west, se_asia"),
        enabled: bool = Field(default=True, description="Whether the check is enabled"),
    ) -> str:
        """Create a new uptime check."""
        body = uptime_check_body(name, check_type, target, regions, enabled)
        return to_json(await call("POST", UPTIME_CHECKS, "uptime_check", body=body))

    @mcp.tool(name="digitalocean-uptimecheck-update",
              annotations=tool_annotations("Update Uptime Check", idempotent=True))
    async def digitalocean_uptimecheck_update(
        check_id: str = Field(..., description="ID of the uptime check"),
        name: str = Field(..., description="Name of the uptime check"),
        check_type: str = Field(..., description="Type of the uptime check: HTTPS, HTTP or PING"),
        target: str = Field(..., description="Endpoint to check"),
        regions: Optional[List[str]] = Field(
            default=None, description="Regions to run the check from: us_east, us_west, eu_west, se_asia"),
        enabled: bool = Field(default=True, description="Whether the check is enabled"),
    ) -> str:
        """Update an existing uptime check."""
        require(check_id, "UptimeCheck ID is required")
        body = uptime_check_body(name, check_type, target, regions, enabled)
        return to_json(await call("PUT", f"{UPTIME_CHECKS}/{check_id}", "uptime_check", body=body))

    @mcp.tool(name="digitalocean-uptimecheck-delete", annotations=destructive("Delete Uptime Check"))
    async def digitalocean_uptimecheck_delete(
        check_id: str = Field(..., description="ID of the uptime check to delete"),
    ) -> str:
        """Delete an uptime check and its alerts."""
        require(check_id, "UptimeCheck ID is required")
        await call("DELETE", f"{UPTIME_CHECKS}/{check_id}")
        return "UptimeCheck deleted successfully"

    # =========================================================================
    # UPTIME CHECK ALERTS
    # =========================================================================

    @mcp.tool(name="digitalocean-uptimecheck-alert-get", annotations=read_only("Get Uptime Check Alert"))
    async def digitalocean_uptimecheck_alert_get(
        check_id: str = Field(..., description="A unique identifier for a check"),
        alert_id: str = Field(..., description="A unique identifier for an alert"),
    ) -> str:
        """Get an uptime check alert by check ID and alert ID."""
        require(check_id, "Uptime CheckID is required")
        require(alert_id, "UptimeCheck AlertID is required")
        return to_json(await call("GET", f"{UPTIME_CHECKS}/{check_id}/alerts/{alert_id}", "alert"))

    @mcp.tool(name="digitalocean-uptimecheck-alert-list", annotations=read_only("List Uptime Check Alerts"))
    async def digitalocean_uptimecheck_alert_list(
        check_id: str = Field(..., description="A unique identifier for a check"),
        page: int = Field(default=1, description="Page number"),
        per_page: int = Field(default=20, description="Items per page"),
    ) -> str:
        """List the alerts of an uptime check with pagination."""
        require(check_id, "Uptime CheckID is required")
        return to_json(await call("GET", f"{UPTIME_CHECKS}/{check_id}/alerts", "alerts",
                                  params=page_options(page, per_page, 20)))

    @mcp.tool(name="digitalocean-uptimecheck-alert-create",
              annotations=tool_annotations("Create Uptime Check Alert"))
    async def digitalocean_uptimecheck_alert_create(
        check_id: str = Field(..., description="A unique identifier for a check"),
        name: str = Field(..., description="Name of the alert"),
        alert_type: str = Field(..., description="Alert type: latency, down, down_global or ssl_expiry"),
        period: str = Field(..., description="Period the threshold must be exceeded: 2m, 3m, 5m, 10m, 15m, 30m, 1h"),
        emails: Optional[List[str]] = Field(default=None, description="Email addresses to notify"),
        slack_details: Optional[List[SlackDetails]] = Field(default=None, description="Slack channels to notify"),
        threshold: Optional[int] = Field(default=None, description="Threshold at which the alert triggers"),
        comparison: Optional[str] = Field(default=None, description="Comparison operator: greater_than or less_than"),
    ) -> str:
        """Create an alert on an uptime check."""
        require(check_id, "Uptime CheckID is required")
        body = uptime_alert_body(name, alert_type, threshold, comparison, period, emails, slack_details)
        return to_json(await call("POST", f"{UPTIME_CHECKS}/{check_id}/alerts", "alert", body=body))

    @mcp.tool(name="digitalocean-uptimecheck-alert-update",
              annotations=tool_annotations("Update Uptime Check Alert", idempotent=True))
    async def digitalocean_uptimecheck_alert_update(
        check_id: str = Field(..., description="A unique identifier for a check"),
        alert_id: str = Field(..., description="A unique identifier for an alert"),
        name: str = Field(..., description="Name of the alert"),
        alert_type: str = Field(..., description="Alert type: latency, down, down_global or ssl_expiry"),
        period: str = Field(..., description="Period the threshold must be exceeded: 2m, 3m, 5m, 10m, 15m, 30m, 1h"),
        emails: Optional[List[str]] = Field(default=None, description="Email addresses to notify"),
        slack_details: Optional[List[SlackDetails]] = Field(default=None, description="Slack channels to notify"),
        threshold: Optional[int] = Field(default=None, description="Threshold at which the alert triggers"),
        comparison: Optional[str] = Field(default=None, description="Comparison operator: greater_than or less_than"),
    ) -> str:
        """Update an alert on an uptime check."""
        require(check_id, "Uptime CheckID is required")
        require(alert_id, "UptimeCheck AlertID is required")
        body = uptime_alert_body(name, alert_type, threshold, comparison, period, emails, slack_details)
        return to_json(await call("PUT", f"{UPTIME_CHECKS}/{check_id}/alerts/{alert_id}", "alert", body=body))

    @mcp.tool(name="digitalocean-uptimecheck-alert-delete",
              annotations=destructive("Delete Uptime Check Alert"))
    async def digitalocean_uptimecheck_alert_delete(
        check_id: str = Field(..., description="A unique identifier for a check"),
        alert_id: str = Field(..., description="A unique identifier for an alert"),
    ) -> str:
        """Delete an alert from an uptime check."""
        require(check_id, "Uptime CheckID is required")
        require(alert_id, "UptimeCheck AlertID is required")
        await call("DELETE", f"{UPTIME_CHECKS}/{check_id}/alerts/{alert_id}")
        return "UptimeCheck alert deleted successfully"

    # =========================================================================
    # ALERT POLICIES
    # =========================================================================

    @mcp.tool(name="digitalocean-alert-policy-get", annotations=read_only("Get Alert Policy"))
    async def digitalocean_alert_policy_get(
        uuid: str = Field(..., description="UUID of the alert policy"),
    ) -> str:
        """Get alert policy information by UUID."""
        require(uuid, "Alert Policy UUID is required")
        return to_json(await call("GET", f"{ALERT_POLICIES}/{uuid}", "policy"))

    @mcp.tool(name="digitalocean-alert-policy-list", annotations=read_only("List Alert Policies"))
    async def digitalocean_alert_policy_list(
        page: int = Field(default=1, description="Page number for pagination (starts from 1)"),
        per_page: int = Field(default=20, description="Number of items per page (1-200)"),
    ) -> str:
        """List all alert policies in the account with pagination."""
        return to_json(await call("GET", ALERT_POLICIES, "policies", params=page_options(page, per_page, 20)))

    @mcp.tool(name="digitalocean-alert-policy-create", annotations=tool_annotations("Create Alert Policy"))
    async def digitalocean_alert_policy_create(
        alert_type: str = Field(..., description=ALERT_POLICY_TYPES),
        description: str = Field(..., description="Human-readable description of the alert policy"),
        compare: str = Field(..., description="Comparison operator: 'GreaterThan' or 'LessThan'"),
        value: float = Field(..., description="Threshold value for the alert (e.g., 80 for 80% CPU)"),
        window: str = Field(..., description="Time window for the alert: '5m', '10m', '30m', '1h'"),
        entities: Optional[List[str]] = Field(default=None, description="Resource IDs to monitor (e.g., droplet IDs)"),
        tags: Optional[List[str]] = Field(default=None, description="Monitor resources carrying these tags"),
        alerts: Optional[AlertNotifications] = Field(default=None, description="Alert notification settings"),
        enabled: bool = Field(default=True, description="Whether the alert policy is enabled"),
    ) -> str:
        """Create a monitoring alert policy."""
        body = alert_policy_body(alert_type, description, compare, value, window, entities, tags, alerts, enabled)
        return to_json(await call("POST", ALERT_POLICIES, "policy", body=body))

    @mcp.tool(name="digitalocean-alert-policy-update",
              annotations=tool_annotations("Update Alert Policy", idempotent=True))
    async def digitalocean_alert_policy_update(
        uuid: str = Field(..., description="UUID of the alert policy to update"),
        alert_type: str = Field(..., description=ALERT_POLICY_TYPES),
        description: str = Field(..., description="Human-readable description of the alert policy"),
        compare: str = Field(..., description="Comparison operator: 'GreaterThan' or 'LessThan'"),
        value: float = Field(..., description="Threshold value for the alert (e.g., 80 for 80% CPU)"),
        window: str = Field(..., description="Time window for the alert: '5m', '10m', '30m', '1h'"),
        entities: Optional[List[str]] = Field(default=None, description="Resource IDs to monitor (e.g., droplet IDs)"),
        tags: Optional[List[str]] = Field(default=None, description="Monitor resources carrying these tags"),
        alerts: Optional[AlertNotifications] = Field(default=None, description="Alert notification settings"),
        enabled: bool = Field(default=True, description="Whether the alert policy is enabled"),
    ) -> str:
        """Replace the configuration of a monitoring alert policy."""
        require(uuid, "Alert Policy UUID is required")
        body = alert_policy_body(alert_type, description, compare, value, window, entities, tags, alerts, enabled)
        return to_json(await call("PUT", f"{ALERT_POLICIES}/{uuid}", "policy", body=body))

    @mcp.tool(name="digitalocean-alert-policy-delete", annotations=destructive("Delete Alert Policy"))
    async def digitalocean_alert_policy_delete(
        uuid: str = Field(..., description="UUID of the alert policy to delete"),
    ) -> str:
        """Delete a monitoring alert policy permanently."""
        require(uuid, "Alert Policy UUID is required")
        await call("DELETE", f"{ALERT_POLICIES}/{uuid}")
        return "Alert Policy deleted successfully"
