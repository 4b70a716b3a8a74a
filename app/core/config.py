import os
import sys
import logging
from typing import List, Optional

logger = logging.getLogger(__name__)

MCP_NAME = "mcp-digitalocean"
MCP_VERSION = "1.0.5"
USER_AGENT = f"{MCP_NAME}/{MCP_VERSION}"

TOKEN_ENV_VARS = ("DO_TOKEN", "DIGITALOCEAN_API_TOKEN")
TOKEN_SECRET_ID = "DO_TOKEN"

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class ConfigurationError(Exception):
    """Raised when the server cannot start with the given configuration."""


def configure_logging(level: str = "info") -> None:
    """Send logs to stderr; stdout carries the stdio MCP stream."""
    logging.basicConfig(
        level=LOG_LEVELS.get(level.lower(), logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )


def gcp_project_id() -> Optional[str]:
    # GCP_PROJECT_ID is set explicitly in Cloud Run, GOOGLE_CLOUD_PROJECT by the SDK
    return os.getenv("GCP_PROJECT_ID") or os.getenv("GOOGLE_CLOUD_PROJECT")


def get_secret_sync(secret_id: str, timeout_seconds: float = 5.0) -> Optional[str]:
    """Read the latest version of a secret from Google Secret Manager.

    Args:
        secret_id: The ID of the secret to read
        timeout_seconds: Timeout for the Secret Manager API call (default 5 seconds)

    Returns None when no GCP project is configured or the lookup fails.
    """
    project_id = gcp_project_id()
    if not project_id:
        return None
    try:
        from google.cloud import secretmanager

        client = secretmanager.SecretManagerServiceClient()
        name = f"projects/{project_id}/secrets/{secret_id}/versions/latest"

        response = client.access_secret_version(
            request={"name": name},
            timeout=timeout_seconds
        )
        return response.payload.data.decode("UTF-8")
    except Exception as e:
        logger.warning(f"Failed to read secret {secret_id} from Secret Manager: {e}")
        return None


def clean_token(token: Optional[str]) -> str:
    """Strip whitespace and surrounding single quotes left by shell quoting."""
    if not token:
        return ""
    return token.strip().strip("'")


def resolve_api_token(explicit: Optional[str] = None) -> str:
    """Find the DigitalOcean API token.

    Lookup order: explicit value (CLI flag), DO_TOKEN, DIGITALOCEAN_API_TOKEN,
    then the DO_TOKEN secret in Secret Manager.

    Raises:
        ConfigurationError: if no token is found anywhere.
    """
    token = clean_token(explicit)
    if token:
        return token

    for env_var in TOKEN_ENV_VARS:
        token = clean_token(os.getenv(env_var))
        if token:
            return token

    token = clean_token(get_secret_sync(TOKEN_SECRET_ID))
    if token:
        logger.info("DigitalOcean API token loaded from Secret Manager")
        return token

    raise ConfigurationError(
        "DigitalOcean API token not provided. Use --digitalocean-api-token flag "
        "or set the DO_TOKEN environment variable"
    )


def parse_services(value: Optional[str]) -> List[str]:
    """Split the --services flag into normalised service names."""
    if not value:
        return []
    return [s.strip().lower() for s in value.split(",") if s.strip()]
