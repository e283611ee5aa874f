import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class BoardConfigError(Exception):
    pass


class HttpBoardConfigFetcher:
    def __init__(
        self,
        url: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._timeout = httpx.Timeout(timeout_seconds)
        self._transport = transport

    async def fetch_board_config(self) -> dict[str, Any]:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.get(self._url)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise BoardConfigError(
                    f"Board config request failed: HTTP {exc.response.status_code}"
                ) from exc
            except httpx.HTTPError as exc:
                raise BoardConfigError(f"Board config unreachable: {exc}") from exc

        try:
            config = response.json()
        except ValueError as exc:
            raise BoardConfigError("Board config is not valid JSON") from exc

        if not isinstance(config, dict):
            raise BoardConfigError("Board config must be a JSON object")

        logger.info("Board config loaded from %s (%d keys)", self._url, len(config))
        return config
