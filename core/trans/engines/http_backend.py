"""Shared aiohttp plumbing for REST-based translation backends."""

from __future__ import annotations

import json
from json import JSONDecodeError
from typing import TYPE_CHECKING, Any

import aiohttp

from core.trans.interface import BackendAPIError, BackendInterface, BackendRateLimitError
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging


__all__: list[str] = ["HttpBackend"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class HttpBackend(BackendInterface):
    """Base class for backends that talk JSON over HTTPS.

    Holds a lazily created aiohttp session and maps HTTP failures onto the backend exception hierarchy:
    429 becomes BackendRateLimitError, any other non-2xx status, timeout or connection problem
    becomes BackendAPIError.
    """

    def __init__(self) -> None:
        super().__init__()
        self.__session: aiohttp.ClientSession | None = None
        self._closed: bool = False

    @staticmethod
    def fetch_backend_name() -> str:
        return ""

    @property
    def _session(self) -> aiohttp.ClientSession:
        """Return the current session, creating a new one if none is open."""
        if self.__session is None or self.__session.closed:
            self.__session = aiohttp.ClientSession()
        return self.__session

    @property
    def timeout(self) -> float:
        return self.config.BACKENDS.TIMEOUT

    @staticmethod
    def _build_body_preview(body: str, limit: int = 300) -> str:
        body_preview: str = body.strip().replace("\n", "\\n")
        if len(body_preview) > limit:
            return f"{body_preview[:limit]}..."
        return body_preview

    async def _post_json(self, url: str, payload: dict[str, Any], headers: dict[str, str]) -> dict[str, Any]:
        """POST a JSON payload and decode the JSON response.

        Args:
            url (str): Endpoint URL.
            payload (dict[str, Any]): Request body.
            headers (dict[str, str]): Request headers.

        Returns:
            dict[str, Any]: Decoded response body.

        Raises:
            BackendRateLimitError: On HTTP 429.
            BackendAPIError: On other HTTP errors, timeouts, connection failures or undecodable bodies.
        """
        msg: str
        try:
            async with self._session.post(
                url,
                json=payload,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                body: str = await response.text()
                if response.status == 429:
                    msg = f"{self.backend_name} rate limit exceeded (HTTP 429): {self._build_body_preview(body)}"
                    raise BackendRateLimitError(msg)
                if response.status >= 300:
                    msg = (
                        f"{self.backend_name} API error (HTTP {response.status} {response.reason}): "
                        f"{self._build_body_preview(body)}"
                    )
                    raise BackendAPIError(msg)
        except TimeoutError:
            msg = f"{self.backend_name} API request timed out after {self.timeout:.1f} sec"
            raise BackendAPIError(msg) from None
        except aiohttp.ClientError as err:
            msg = f"{self.backend_name} API connection failed: {err}"
            raise BackendAPIError(msg) from err

        try:
            decoded: Any = json.loads(body)
        except JSONDecodeError as err:
            msg = f"{self.backend_name} API returned invalid JSON: {self._build_body_preview(body)}"
            raise BackendAPIError(msg) from err
        if not isinstance(decoded, dict):
            msg = f"{self.backend_name} API returned an unexpected payload type: {type(decoded).__name__}"
            raise BackendAPIError(msg)
        return decoded

    async def close(self) -> None:
        logger.debug("'%s': 'termination process'", self.__class__.__name__)
        self._closed = True
        if self.__session is not None and not self.__session.closed:
            await self.__session.close()
        self.__session = None
