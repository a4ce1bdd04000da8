"""
HTTP access to the Toggl Track API.

Every tool reaches the upstream API through TogglClient.execute, which builds
the authenticated request, performs exactly one call and normalizes failures
into the errors defined in toggl_mcp.errors.
"""

import base64
import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

import httpx

from .config import TogglSettings
from .errors import ConfigurationError, TransportError, UpstreamError

logger = logging.getLogger(__name__)

JSONValue = Union[Dict[str, Any], List[Any], str, int, float, bool, None]

# Toggl answers a successful DELETE with an empty body.
DELETE_ACKNOWLEDGEMENT: Dict[str, str] = {"message": "Time entry deleted successfully"}
MAX_ERROR_BODY_CHARS = 500


def basic_auth_header(token: str) -> str:
    """Return the HTTP Basic value Toggl expects: '<token>:api_token', base64-encoded."""
    credentials = f"{token}:api_token".encode("utf-8")
    return "Basic " + base64.b64encode(credentials).decode("ascii")


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def clean_params(params: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Drop unset query parameters and render the rest the way Toggl reads them."""
    return {
        key: _query_value(value)
        for key, value in (params or {}).items()
        if value is not None
    }


class TogglClient:
    """Request executor bound to one set of settings."""

    def __init__(
        self,
        settings: TogglSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self._transport = transport

    def _get_headers(self) -> Dict[str, str]:
        if not self.settings.api_token:
            raise ConfigurationError(
                "TOGGL_API_TOKEN environment variable is not set. "
                "Find your token under Profile settings at track.toggl.com"
            )
        return {
            "Authorization": basic_auth_header(self.settings.api_token),
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def url(self, path: str) -> str:
        return f"{self.settings.base_url}{path}"

    async def execute(
        self,
        path: str,
        method: str = "GET",
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> JSONValue:
        """
        Perform one authenticated request against the Toggl API.

        Args:
            path: API path below the base URL (e.g. '/me/time_entries')
            method: HTTP method
            body: JSON body, sent only when not None
            params: Query parameters; None values are dropped

        Returns:
            The decoded JSON payload, or DELETE_ACKNOWLEDGEMENT for deletions

        Raises:
            ConfigurationError: No API token is configured
            TransportError: The request could not be completed
            UpstreamError: Non-2xx status or a body that is not JSON
        """
        method = method.upper()
        headers = self._get_headers()
        url = self.url(path)
        query = clean_params(params)

        logger.debug("%s %s params=%s", method, url, query)
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.timeout, transport=self._transport
            ) as client:
                response = await client.request(
                    method,
                    url,
                    headers=headers,
                    params=query,
                    json=body,
                )
        except httpx.TimeoutException as e:
            logger.warning("%s %s timed out", method, url)
            raise TransportError(
                f"Request to Toggl timed out after {self.settings.timeout}s"
            ) from e
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise TransportError(
                f"Could not reach Toggl API: {type(e).__name__}: {e}"
            ) from e

        if not response.is_success:
            logger.warning("%s %s returned %s", method, url, response.status_code)
            raise UpstreamError(
                response.status_code,
                response.reason_phrase,
                response.text[:MAX_ERROR_BODY_CHARS],
            )

        if method == "DELETE":
            return dict(DELETE_ACKNOWLEDGEMENT)

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise UpstreamError(
                response.status_code,
                response.reason_phrase,
                response.text[:MAX_ERROR_BODY_CHARS],
                detail="Toggl API returned a response that is not valid JSON",
            ) from e
