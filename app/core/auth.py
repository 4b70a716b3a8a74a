import os
import logging
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import PlainTextResponse

from app.core.config import get_secret_sync

logger = logging.getLogger(__name__)


class APIKeyMiddleware(BaseHTTPMiddleware):
    """Require an API key on the HTTP transport.

    The key may be sent as the ``api_key`` query parameter, an ``X-API-Key``
    header or a Bearer token. When no key is configured all requests pass.
    """

    PUBLIC_PATHS = {"/health"}

    def __init__(self, app, api_key: Optional[str] = None):
        super().__init__(app)
        # Secret Manager lookup is deferred to the first request
        self._api_key = api_key or os.getenv("MCP_API_KEY")
        self._key_loaded = self._api_key is not None
        if self._api_key:
            logger.info("API key authentication enabled for MCP endpoints")

    @property
    def api_key(self) -> Optional[str]:
        if not self._key_loaded:
            self._api_key = get_secret_sync("MCP_API_KEY")
            self._key_loaded = True
            if self._api_key:
                logger.info("API key loaded from Secret Manager")
            else:
                logger.warning("No MCP_API_KEY configured - endpoints are unprotected!")
        return self._api_key

    @staticmethod
    def provided_key(request) -> str:
        auth = request.headers.get("Authorization", "")
        bearer = auth[len("Bearer "):] if auth.startswith("Bearer ") else ""
        return (
            request.query_params.get("api_key")
            or request.headers.get("X-API-Key")
            or bearer
        )

    async def dispatch(self, request, call_next):
        path = request.url.path

        if path in self.PUBLIC_PATHS or not self.api_key:
            return await call_next(request)

        if self.provided_key(request) != self.api_key:
            client_host = request.client.host if request.client else "unknown"
            logger.warning(f"Unauthorized request to {path} from {client_host}")
            return PlainTextResponse("Unauthorized - Invalid or missing API key", status_code=401)

        return await call_next(request)
