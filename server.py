#!/usr/bin/env python3
"""
mcp-digitalocean - MCP server for the DigitalOcean API.

Exposes DigitalOcean account, droplet, networking, Spaces, monitoring and
Marketplace operations as MCP tools and resources.

Environment Variables:
    DO_TOKEN: DigitalOcean API personal access token (required)
    DIGITALOCEAN_API_TOKEN: Alternative name for the token
    GCP_PROJECT_ID / GOOGLE_CLOUD_PROJECT: Enables Secret Manager lookups
    MCP_API_KEY: API key required on the HTTP transport
    PORT: HTTP port (default 8000)
"""

import os
import sys
import argparse
import logging
from typing import List, Optional

from fastmcp import FastMCP
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from app.core.auth import APIKeyMiddleware
from app.core.config import (
    MCP_NAME, MCP_VERSION, ConfigurationError, configure_logging, parse_services,
    resolve_api_token,
)
from app.core.digitalocean import DigitalOceanClient
from registry import SUPPORTED_SERVICES, register

logger = logging.getLogger(__name__)


def create_server(client: DigitalOceanClient, services: Optional[List[str]] = None) -> FastMCP:
    """Build the FastMCP server with the selected services registered."""
    mcp = FastMCP(MCP_NAME, version=MCP_VERSION)
    loaded = register(mcp, client, services)
    logger.info(f"Loaded services: {', '.join(loaded)}")

    # Health check endpoint (HTTP transport only)
    @mcp.custom_route("/health", methods=["GET"])
    async def health(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok", "service": MCP_NAME, "version": MCP_VERSION})

    return mcp


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog=MCP_NAME, description="MCP server for the DigitalOcean API")
    parser.add_argument("--log-level", default="info", choices=["debug", "info", "warn", "error"],
                        help="Log level")
    parser.add_argument("--services", default="",
                        help=f"Comma-separated list of services to activate: {','.join(SUPPORTED_SERVICES)}")
    parser.add_argument("--digitalocean-api-token", default=None,
                        help="DigitalOcean API token (defaults to $DO_TOKEN)")
    parser.add_argument("--transport", default="stdio", choices=["stdio", "http"],
                        help="MCP transport")
    parser.add_argument("--host", default="0.0.0.0", help="HTTP bind address")
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")), help="HTTP port")
    return parser.parse_args(argv)


def run_http(mcp: FastMCP, host: str, port: int, log_level: str) -> None:
    import uvicorn

    app = mcp.http_app(middleware=[Middleware(APIKeyMiddleware)])
    logger.info(f"Starting {MCP_NAME} {MCP_VERSION} on {host}:{port}")
    uvicorn.run(
        app,
        host=host,
        port=port,
        timeout_keep_alive=5,
        access_log=False,
        log_level="warning" if log_level == "warn" else log_level,
    )


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        token = resolve_api_token(args.digitalocean_api_token)
        client = DigitalOceanClient(token)
        mcp = create_server(client, parse_services(args.services))
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    if args.transport == "http":
        run_http(mcp, args.host, args.port, args.log_level)
    else:
        mcp.run()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Shutting down")
