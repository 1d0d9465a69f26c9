# chat_pickers/Tenor/tenor_client.py
# Description: Default transport for the GIF picker, talking to the Tenor v2 API
#
# Every failure (network, non-success status, unusable body) leaves this module
# as a TenorAPIError carrying a human readable message.

from __future__ import annotations
from typing import Any, Dict, Mapping, Optional

import httpx
from loguru import logger

from ..config import get_picker_setting, get_tenor_api_key

logger = logger.bind(module="tenor_client")

ALLOWED_ENDPOINTS = frozenset({"featured", "search"})


class TenorAPIError(Exception):
    """A Tenor request failed; the message is suitable for display."""
    pass


class TenorResponseError(TenorAPIError):
    """Tenor answered, but with a body we cannot use."""
    pass


class TenorClient:
    """Async client for the Tenor featured and search endpoints.

    Instances are callable with ``(endpoint, params)`` so they can be handed
    to the search controller as its transport.
    """

    def __init__(self,
                 api_key: Optional[str] = None,
                 base_url: Optional[str] = None,
                 client_key: Optional[str] = None,
                 timeout: Optional[float] = None,
                 locale: Optional[str] = None,
                 content_filter: Optional[str] = None,
                 media_filter: Optional[str] = None):
        self.api_key = api_key or get_tenor_api_key()
        self.base_url = base_url or get_picker_setting("tenor", "base_url", "https://tenor.googleapis.com/v2/")
        self.client_key = client_key or get_picker_setting("tenor", "client_key", "chat_pickers")
        self.timeout = float(timeout or get_picker_setting("tenor", "timeout", 15.0))
        self.locale = locale or get_picker_setting("tenor", "locale", "")
        self.content_filter = content_filter or get_picker_setting("tenor", "content_filter", "")
        self.media_filter = media_filter or get_picker_setting("tenor", "media_filter", "")
        self._client: Optional[httpx.AsyncClient] = None

        if not self.api_key:
            logger.warning("Tenor client initialized without an API key; requests will fail")

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Accept": "application/json", "User-Agent": "chat-pickers-gif-picker"},
                timeout=self.timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "TenorClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def build_params(self, params: Mapping[str, str]) -> Dict[str, str]:
        """Caller parameters first, then the account-wide ones they did not set."""
        query = dict(params)
        extras = (
            ("key", self.api_key),
            ("client_key", self.client_key),
            ("locale", self.locale),
            ("contentfilter", self.content_filter),
            ("media_filter", self.media_filter),
        )
        for name, value in extras:
            if value and name not in query:
                query[name] = value
        return query

    async def fetch(self, endpoint: str, params: Mapping[str, str]) -> Dict[str, Any]:
        """
        Request one page from ``endpoint``.

        Args:
            endpoint: "featured" or "search"
            params: Ordered query parameters (limit, pos, q)

        Returns:
            The decoded JSON object

        Raises:
            TenorAPIError: On any failure
        """
        if endpoint not in ALLOWED_ENDPOINTS:
            raise TenorAPIError(f"Unsupported Tenor endpoint: {endpoint}")
        if not self.api_key:
            raise TenorAPIError("Tenor API key is not configured")

        logger.debug(f"Requesting Tenor {endpoint} with params {sorted(params)}")
        try:
            response = await self.client.get(endpoint, params=self.build_params(params))
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"Tenor {endpoint} request returned HTTP {status}")
            raise TenorAPIError(f"Tenor request failed (HTTP {status})") from e
        except httpx.HTTPError as e:
            detail = str(e) or e.__class__.__name__
            logger.error(f"Tenor {endpoint} request failed: {detail}")
            raise TenorAPIError(f"Tenor request failed: {detail}") from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Tenor {endpoint} response is not valid JSON: {e}")
            raise TenorResponseError("Tenor returned an unexpected response") from e

        if not isinstance(data, dict):
            logger.error(f"Tenor {endpoint} response is a {type(data).__name__}, expected an object")
            raise TenorResponseError("Tenor returned an unexpected response")
        return data

    async def __call__(self, endpoint: str, params: Mapping[str, str]) -> Dict[str, Any]:
        return await self.fetch(endpoint, params)

#
# End of tenor_client.py
#######################################################################################################################
