"""Shared helpers for tool and resource handlers."""

import json
import logging
from typing import Any, Dict, Optional

import httpx
from fastmcp.exceptions import ResourceError, ToolError

from app.core.digitalocean import DigitalOceanAPIError

logger = logging.getLogger(__name__)

# Failures raised by DigitalOceanClient calls
API_ERRORS = (DigitalOceanAPIError, httpx.HTTPError)


def to_json(data: Any) -> str:
    """Marshal an API payload to indented JSON.

    Serialization errors are not caught here; they propagate to the caller.
    """
    return json.dumps(data, indent=2)


def api_error(exc: Exception) -> ToolError:
    """Wrap an upstream failure as a tool error, keeping the original message."""
    logger.debug(f"DigitalOcean API call failed: {exc}")
    return ToolError(f"api error: {exc}")


def resource_error(what: str, exc: Exception) -> ResourceError:
    return ResourceError(f"error fetching {what}: {exc}")


def page_options(page: Optional[int], per_page: Optional[int],
                 default_per_page: int, default_page: int = 1) -> Dict[str, int]:
    """Build list query params, falling back to defaults for missing or non-positive values."""
    if not page or page <= 0:
        page = default_page
    if not per_page or per_page <= 0:
        per_page = default_per_page
    return {"page": page, "per_page": per_page}


def tool_annotations(title: str, read_only: bool = False, destructive: bool = False,
                     idempotent: bool = False) -> Dict[str, Any]:
    return {
        "title": title,
        "readOnlyHint": read_only,
        "destructiveHint": destructive,
        "idempotentHint": idempotent,
        "openWorldHint": True,
    }


def read_only(title: str) -> Dict[str, Any]:
    return tool_annotations(title, read_only=True, idempotent=True)


def destructive(title: str) -> Dict[str, Any]:
    return tool_annotations(title, destructive=True, idempotent=True)

