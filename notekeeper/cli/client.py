"""
Procedure Client for CLI.

Async client for calling the backend procedure set over the batched
HTTP transport. All requests include X-Frontend-ID: cli header for log
routing.

Usage:
    client = RPCClient()
    note = await client.mutate("notes.create", {"title": "t", "content": "c"})
    page, tags = await client.batch_query([
        ("notes.getAll", {"page": 1, "limit": 10}),
        ("notes.getTags", None),
    ])
"""

import json
from typing import Any

import httpx

from notekeeper.backend.core.config import get_app_config, get_server_base_url
from notekeeper.backend.core.logging import get_logger, log_with_source

logger = get_logger(__name__)


class RPCError(Exception):
    """Error item returned by the backend for a procedure call."""

    def __init__(self, message: str, code: str, path: str | None = None) -> None:
        self.message = message
        self.code = code
        self.path = path
        super().__init__(message)


def _unwrap(item: dict[str, Any], path: str) -> Any:
    """Return the data of a result item, raise RPCError for an error item."""
    if "error" in item:
        error = item["error"]
        data = error.get("data") or {}
        raise RPCError(
            error.get("message", "Unknown error"),
            data.get("code", "INTERNAL_SERVER_ERROR"),
            data.get("path", path),
        )
    return item["result"]["data"]


class RPCClient:
    """
    HTTP client for the procedure transport.

    Features:
    - Automatic base URL and procedure prefix from settings
    - Batched queries in a single round trip
    - X-Frontend-ID header for log routing
    - Error items surfaced as RPCError with the server's message
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        rpc_path: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Backend base URL. If None, reads from config/settings/application.yaml.
            timeout: Request timeout in seconds. If None, reads from config/settings/application.yaml.
            rpc_path: Procedure prefix. If None, reads `rpc.path` from application.yaml.
            transport: Optional httpx transport (tests mount the ASGI app or a mock here)
        """
        if base_url is None or timeout is None or rpc_path is None:
            try:
                config_base_url, config_timeout = get_server_base_url()
                config_rpc_path = get_app_config().application.rpc.path
            except (RuntimeError, FileNotFoundError, ValueError) as e:
                raise RuntimeError(
                    "Could not determine server URL from config/settings/application.yaml"
                ) from e
            base_url = base_url or config_base_url
            timeout = timeout if timeout is not None else config_timeout
            rpc_path = rpc_path or config_rpc_path

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.rpc_path = "/" + rpc_path.strip("/")
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"X-Frontend-ID": "cli"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "RPCClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _send(
        self,
        method: str,
        paths: list[str],
        inputs: list[Any],
    ) -> list[Any]:
        """Send one batched request and unwrap every item in order."""
        client = await self._get_client()
        url = f"{self.rpc_path}/{','.join(paths)}"
        batch_input = {
            str(index): value
            for index, value in enumerate(inputs)
            if value is not None
        }

        log_with_source(
            logger,
            "cli",
            "debug",
            "Procedure request",
            method=method,
            paths=paths,
        )

        try:
            if method == "GET":
                params = {"batch": "1"}
                if batch_input:
                    params["input"] = json.dumps(batch_input)
                response = await client.get(url, params=params)
            else:
                response = await client.post(url, params={"batch": "1"}, json=batch_input)
        except httpx.HTTPError as e:
            log_with_source(
                logger,
                "cli",
                "error",
                "Procedure request failed",
                method=method,
                paths=paths,
                error=str(e),
            )
            raise

        log_with_source(
            logger,
            "cli",
            "debug",
            "Procedure response",
            method=method,
            paths=paths,
            status_code=response.status_code,
        )

        try:
            items = response.json()
        except ValueError as e:
            raise RPCError(
                f"Unexpected response ({response.status_code})",
                "INTERNAL_SERVER_ERROR",
            ) from e
        if not isinstance(items, list) or len(items) != len(paths):
            raise RPCError(
                f"Unexpected response ({response.status_code})",
                "INTERNAL_SERVER_ERROR",
            )
        return items

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Plain GET against the backend (health endpoints)."""
        client = await self._get_client()
        log_with_source(logger, "cli", "debug", "API request", method="GET", path=path)
        return await client.get(path, **kwargs)

    async def query(self, path: str, input: Any = None) -> Any:
        """Call a query procedure."""
        items = await self._send("GET", [path], [input])
        return _unwrap(items[0], path)

    async def mutate(self, path: str, input: Any = None) -> Any:
        """Call a mutation procedure."""
        items = await self._send("POST", [path], [input])
        return _unwrap(items[0], path)

    async def batch_query(self, calls: list[tuple[str, Any]]) -> list[Any]:
        """
        Call several query procedures in one request.

        Args:
            calls: (path, input) pairs

        Returns:
            Result data in call order

        Raises:
            RPCError: For the first call that returned an error item
        """
        paths = [path for path, _ in calls]
        items = await self._send("GET", paths, [value for _, value in calls])
        return [_unwrap(item, path) for item, path in zip(items, paths)]


# Module-level client instance
_client: RPCClient | None = None


def get_rpc_client() -> RPCClient:
    """Get or create the client singleton."""
    global _client
    if _client is None:
        _client = RPCClient()
    return _client


async def close_rpc_client() -> None:
    """Close the client singleton."""
    global _client
    if _client:
        await _client.close()
        _client = None
