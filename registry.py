"""
Service registry.

Maps each --services name to the functions that register its tools and
resources on the FastMCP server. Region tools are always registered.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from account_tools import register_account_resources, register_account_tools
from app.core.config import ConfigurationError
from app.core.digitalocean import DigitalOceanClient
from common_tools import register_common_resources, register_common_tools
from droplet_tools import register_droplet_resources, register_droplet_tools
from insights_tools import register_insights_tools
from marketplace_tools import register_marketplace_tools
from networking_tools import register_networking_resources, register_networking_tools
from spaces_tools import register_spaces_resources, register_spaces_tools

logger = logging.getLogger(__name__)

Registrar = Callable[..., None]

SERVICES: Dict[str, Tuple[Registrar, ...]] = {
    "accounts": (register_account_tools, register_account_resources),
    "droplets": (register_droplet_tools, register_droplet_resources),
    "networking": (register_networking_tools, register_networking_resources),
    "spaces": (register_spaces_tools, register_spaces_resources),
    "insights": (register_insights_tools,),
    "marketplace": (register_marketplace_tools,),
}

SUPPORTED_SERVICES = list(SERVICES)

COMMON: Tuple[Registrar, ...] = (register_common_tools, register_common_resources)


def validate_services(services: Optional[List[str]]) -> List[str]:
    """Return the services to load; an empty selection means all of them."""
    if not services:
        logger.warning("no services specified, loading all supported services")
        return list(SUPPORTED_SERVICES)
    for service in services:
        if service not in SERVICES:
            raise ConfigurationError(
                f"unsupported service: {service}, supported service are: {', '.join(SUPPORTED_SERVICES)}"
            )
    # keep order, drop duplicates
    return list(dict.fromkeys(services))


def register(mcp, client: DigitalOceanClient, services: Optional[List[str]] = None) -> List[str]:
    """Register the selected services (plus the common region tools) on the server."""
    selected = validate_services(services)
    for registrar in COMMON:
        registrar(mcp, client)
    for service in selected:
        for registrar in SERVICES[service]:
            registrar(mcp, client)
        logger.debug(f"registered {service} tools")
    return selected
