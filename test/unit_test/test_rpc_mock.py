"""
Test RPC Client with Mocks

Tests for AsyncRpcClient behavior against an httpx.MockTransport.
"""

import json
import unittest

import httpx

from pyro_sdk.errors import ConfigurationError, ErrorCode, RpcError
from pyro_sdk.infra import AsyncRpcClient, RpcClientConfig


def make_client(handler, endpoints="https://rpc-a.example.com", **config):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AsyncRpcClient(endpoints, config=RpcClientConfig(**config), http_client=http_client)


class TestRpcClientConfig(unittest.TestCase):

    def test_defaults_from_global_config(self):
        config = RpcClientConfig()
        self.assertGreater(config.timeout_seconds, 0)
        self.assertIn(config.commitment, ("processed", "confirmed", "finalized"))

    def test_override(self):
        config = RpcClientConfig(timeout_seconds=60.0, commitment="finalized")
        self.assertEqual(config.timeout_seconds, 60.0)
        self.assertEqual(config.commitment, "finalized")

    def test_missing_endpoint(self):
        with self.assertRaises(ConfigurationError):
            AsyncRpcClient([])
        with self.assertRaises(ConfigurationError):
            AsyncRpcClient("")


class TestAsyncRpcClient(unittest.IsolatedAsyncioTestCase):

    async def test_call_sends_json_rpc_body(self):
        seen = []

        def handler(request):
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": 1234})

        async with make_client(handler) as rpc:
            result = await rpc.call("getSlot", [{"commitment": "finalized"}])
            await rpc.call("getSlot", [])

        self.assertEqual(result, 1234)
        self.assertEqual(seen[0]["method"], "getSlot")
        self.assertEqual(seen[0]["params"], [{"commitment": "finalized"}])
        self.assertEqual(seen[0]["jsonrpc"], "2.0")
        # Request ids increase per call
        self.assertEqual([body["id"] for body in seen], [1, 2])

    async def test_json_rpc_error_body(self):
        def handler(request):
            return httpx.Response(200, json={
                "jsonrpc": "2.0",
                "id": 1,
                "error": {"code": -32005, "message": "Node is behind", "data": {"numSlotsBehind": 12}},
            })

        rpc = make_client(handler)
        with self.assertRaises(RpcError) as ctx:
            await rpc.call("getSignatureStatuses", [["sig"]])

        self.assertIn("Node is behind", ctx.exception.message)
        self.assertEqual(ctx.exception.details["rpc_error_code"], -32005)
        self.assertEqual(ctx.exception.details["rpc_error_data"], {"numSlotsBehind": 12})
        self.assertTrue(ctx.exception.recoverable)

    async def test_rate_limited(self):
        rpc = make_client(lambda request: httpx.Response(429, text="slow down"))

        with self.assertRaises(RpcError) as ctx:
            await rpc.call("getSlot", [])

        self.assertEqual(ctx.exception.code, ErrorCode.RPC_RATE_LIMITED)

    async def test_http_error(self):
        rpc = make_client(lambda request: httpx.Response(502, text="bad gateway"))

        with self.assertRaises(RpcError) as ctx:
            await rpc.call("getSlot", [])

        self.assertEqual(ctx.exception.code, ErrorCode.RPC_HTTP_ERROR)
        self.assertEqual(ctx.exception.status_code, 502)

    async def test_non_json_body(self):
        rpc = make_client(lambda request: httpx.Response(200, text="<html>maintenance</html>"))

        with self.assertRaises(RpcError) as ctx:
            await rpc.call("getSlot", [])

        self.assertEqual(ctx.exception.code, ErrorCode.RPC_INVALID_RESPONSE)

    async def test_transport_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("read timed out", request=request)

        rpc = make_client(handler, timeout_seconds=5.0)
        with self.assertRaises(RpcError) as ctx:
            await rpc.call("getSlot", [])

        self.assertEqual(ctx.exception.code, ErrorCode.RPC_TIMEOUT)

    async def test_connection_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        rpc = make_client(handler)
        with self.assertRaises(RpcError) as ctx:
            await rpc.call("getSlot", [])

        self.assertEqual(ctx.exception.code, ErrorCode.RPC_CONNECTION_FAILED)
        self.assertIsInstance(ctx.exception.original_error, httpx.ConnectError)

    async def test_endpoint_fallback(self):
        """A failing endpoint rotates to the next one within the same call"""
        hosts = []

        def handler(request):
            hosts.append(request.url.host)
            if request.url.host == "rpc-a.example.com":
                return httpx.Response(503)
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "ok"})

        rpc = make_client(handler, ["https://rpc-a.example.com", "https://rpc-b.example.com"])
        result = await rpc.call("getHealth", [])

        self.assertEqual(result, "ok")
        self.assertEqual(hosts, ["rpc-a.example.com", "rpc-b.example.com"])
        self.assertEqual(rpc.endpoint, "https://rpc-b.example.com")

    async def test_all_endpoints_fail(self):
        hosts = []

        def handler(request):
            hosts.append(request.url.host)
            return httpx.Response(500)

        rpc = make_client(handler, ["https://rpc-a.example.com", "https://rpc-b.example.com"])
        with self.assertRaises(RpcError):
            await rpc.call("getHealth", [])

        # Each endpoint tried exactly once
        self.assertEqual(hosts, ["rpc-a.example.com", "rpc-b.example.com"])

    async def test_close_keeps_injected_client_open(self):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        rpc = AsyncRpcClient("https://rpc-a.example.com", http_client=http_client)

        await rpc.close()

        self.assertFalse(http_client.is_closed)
        await http_client.aclose()


if __name__ == "__main__":
    unittest.main()
