"""
Async JSON-RPC client

Provides a JSON-RPC 2.0 interface over httpx with:
- Multiple endpoint fallback
- Rate limit detection
- Request timeout management

Every transport failure is normalized into RpcError. Retrying is left to
the caller's RetryPolicy so backoff happens in exactly one place.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, List, Optional, Union
from dataclasses import dataclass

import httpx

from ..errors import RpcError, ConfigurationError
from ..config import get_config

logger = logging.getLogger(__name__)


@dataclass
class RpcClientConfig:
    """
    RPC client runtime configuration

    Allows per-client overrides while pulling defaults from the global
    config (pyro_sdk.config.RpcConfig).

    Usage:
        # Use all defaults from environment
        client = AsyncRpcClient(endpoint)

        # Override specific settings
        config = RpcClientConfig(timeout_seconds=60, commitment="finalized")
        client = AsyncRpcClient(endpoint, config=config)
    """
    timeout_seconds: float = None
    commitment: str = None

    def __post_init__(self):
        """Apply defaults from global config for any unset values"""
        if self.timeout_seconds is None:
            self.timeout_seconds = get_config().rpc.timeout_seconds
        if self.commitment is None:
            self.commitment = get_config().rpc.commitment


class AsyncRpcClient:
    """
    Async JSON-RPC client with endpoint fallback

    Each call tries the active endpoint once. On failure the client rotates
    to the next endpoint and tries again, until every endpoint has been
    tried once; then the last RpcError is raised.

    Usage:
        async with AsyncRpcClient("https://api.devnet.solana.com") as rpc:
            slot = await rpc.call("getSlot", [])
    """

    def __init__(
        self,
        endpoint: Union[str, List[str]],
        config: Optional[RpcClientConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize RPC client

        Args:
            endpoint: RPC endpoint URL or list of URLs (for fallback)
            config: RPC configuration options
            http_client: Pre-built httpx client (custom transport, proxies)
        """
        self._endpoints = [endpoint] if isinstance(endpoint, str) else list(endpoint)
        if not self._endpoints or not all(self._endpoints):
            raise ConfigurationError.missing("RPC endpoint")

        self._config = config or RpcClientConfig()
        self._current_endpoint_idx = 0
        self._owns_client = http_client is None
        self._client: Optional[httpx.AsyncClient] = http_client
        self._request_ids = itertools.count(1)

    @property
    def endpoint(self) -> str:
        """Current active endpoint"""
        return self._endpoints[self._current_endpoint_idx]

    @property
    def endpoints(self) -> List[str]:
        return list(self._endpoints)

    @property
    def commitment(self) -> str:
        """Default commitment level"""
        return self._config.commitment

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout_seconds,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    def _rotate_endpoint(self):
        """Rotate to next endpoint on failure"""
        if len(self._endpoints) > 1:
            self._current_endpoint_idx = (self._current_endpoint_idx + 1) % len(self._endpoints)
            logger.info(f"Rotating to RPC endpoint: {self.endpoint}")

    async def _post(self, endpoint: str, body: dict, timeout: float) -> Any:
        client = self._get_client()
        try:
            response = await client.post(endpoint, json=body, timeout=timeout)
        except httpx.TimeoutException as e:
            raise RpcError.timeout(endpoint, timeout) from e
        except httpx.RequestError as e:
            raise RpcError.connection_failed(endpoint, e) from e

        if response.status_code == 429:
            raise RpcError.rate_limited(endpoint)
        if response.status_code >= 400:
            raise RpcError.http_status(endpoint, response.status_code)

        try:
            result = response.json()
        except ValueError as e:
            raise RpcError.invalid_response(f"body is not JSON ({e})", endpoint) from e

        if not isinstance(result, dict):
            raise RpcError.invalid_response("expected a JSON object", endpoint)

        if "error" in result and result["error"] is not None:
            error = result["error"]
            if isinstance(error, dict):
                error_msg = error.get("message", str(error))
                rpc_error = RpcError(f"RPC error: {error_msg}", endpoint=endpoint)
                # Preserve RPC error code in details for debugging
                rpc_error.details["rpc_error_code"] = error.get("code")
                rpc_error.details["rpc_error_data"] = error.get("data")
            else:
                rpc_error = RpcError(f"RPC error: {error}", endpoint=endpoint)
            raise rpc_error

        return result.get("result")

    async def call(
        self,
        method: str,
        params: List[Any],
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Make JSON-RPC call

        Args:
            method: RPC method name
            params: RPC parameters
            timeout: Optional timeout override

        Returns:
            RPC result

        Raises:
            RpcError: When every endpoint failed
        """
        body = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": method,
            "params": params,
        }
        timeout_val = timeout or self._config.timeout_seconds

        last_error: Optional[RpcError] = None
        for _ in range(len(self._endpoints)):
            endpoint = self.endpoint
            try:
                return await self._post(endpoint, body, timeout_val)
            except RpcError as e:
                last_error = e
                logger.debug(f"{method} failed on {endpoint}: {e}")
                self._rotate_endpoint()

        raise last_error or RpcError("All RPC endpoints failed")

    async def close(self):
        """Close HTTP client"""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
