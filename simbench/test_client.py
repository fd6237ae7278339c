"""
Unit tests for the JSON-RPC clients
"""
import asyncio
import json
import unittest
from unittest.mock import Mock

import aiohttp
import requests

from simbench.client import RpcClient, build_simulate_request, parse_rpc_response
from simbench.client_async import AsyncRpcClient
from simbench.exceptions import RpcResponseError, RpcTransportError
from simbench.transaction import build_invalid_transaction, encode_transaction

SANITIZE_ERROR_BODY = json.dumps({
    "jsonrpc": "2.0",
    "error": {
        "code": -32602,
        "message": "invalid transaction: Transaction failed to sanitize accounts offsets correctly",
    },
    "id": 1,
})

SIM_RESULT_BODY = json.dumps({
    "jsonrpc": "2.0",
    "result": {"context": {"slot": 1}, "value": {"err": None, "logs": []}},
    "id": 1,
})


class TestBuildSimulateRequest(unittest.TestCase):

    def test_payload_shape(self):
        tx = build_invalid_transaction()
        payload = build_simulate_request(tx)
        self.assertEqual(payload["jsonrpc"], "2.0")
        self.assertEqual(payload["method"], "simulateTransaction")
        self.assertEqual(payload["params"][0], encode_transaction(tx))
        self.assertEqual(payload["params"][1], {"encoding": "base64", "sigVerify": False})

    def test_commitment_included_when_set(self):
        payload = build_simulate_request(build_invalid_transaction(), commitment="processed")
        self.assertEqual(payload["params"][1]["commitment"], "processed")


class TestParseRpcResponse(unittest.TestCase):

    def test_error_object_raises_response_error(self):
        with self.assertRaises(RpcResponseError) as ctx:
            parse_rpc_response(200, SANITIZE_ERROR_BODY)
        self.assertEqual(ctx.exception.code, -32602)
        self.assertTrue(ctx.exception.message.startswith("invalid transaction"))
        self.assertEqual(ctx.exception.request, "simulateTransaction")

    def test_error_object_wins_over_http_status(self):
        with self.assertRaises(RpcResponseError):
            parse_rpc_response(400, SANITIZE_ERROR_BODY)

    def test_result_returned(self):
        result = parse_rpc_response(200, SIM_RESULT_BODY)
        self.assertEqual(result["value"]["err"], None)

    def test_rate_limited(self):
        with self.assertRaises(RpcTransportError) as ctx:
            parse_rpc_response(429, "Too many requests")
        self.assertEqual(ctx.exception.status, 429)

    def test_malformed_body(self):
        with self.assertRaises(RpcTransportError):
            parse_rpc_response(200, "<html>gateway</html>")
        with self.assertRaises(RpcTransportError):
            parse_rpc_response(200, json.dumps({"jsonrpc": "2.0", "id": 1}))


class TestRpcClient(unittest.TestCase):
    """Test the blocking client against a mocked requests session"""

    def make_client(self, status=200, text=SANITIZE_ERROR_BODY, side_effect=None):
        session = Mock()
        if side_effect is not None:
            session.request.side_effect = side_effect
        else:
            session.request.return_value = Mock(status_code=status, text=text)
        return RpcClient("http://rpc.test", timeout=5, session=session), session

    def test_posts_json_rpc(self):
        client, session = self.make_client(text=SIM_RESULT_BODY)
        client.simulate_transaction(build_invalid_transaction())

        args, kwargs = session.request.call_args
        self.assertEqual(args, ('POST', "http://rpc.test"))
        self.assertEqual(kwargs["timeout"], 5)
        self.assertEqual(json.loads(kwargs["data"])["method"], "simulateTransaction")

    def test_rpc_error_raised(self):
        client, _ = self.make_client()
        with self.assertRaises(RpcResponseError):
            client.simulate_transaction(build_invalid_transaction())

    def test_network_error_wrapped(self):
        client, _ = self.make_client(side_effect=requests.exceptions.ConnectTimeout("slow"))
        with self.assertRaises(RpcTransportError) as ctx:
            client.simulate_transaction(build_invalid_transaction())
        self.assertIn("ConnectTimeout", ctx.exception.message)

    def test_pool_sized_to_workers(self):
        """More workers than the requests default pool get their own connections"""
        client = RpcClient("https://rpc.test", pool_size=32)
        self.assertEqual(client.session.get_adapter("https://rpc.test")._pool_maxsize, 32)
        self.assertEqual(client.session.get_adapter("http://rpc.test")._pool_maxsize, 32)
        client.close()

    def test_small_pool_keeps_default_adapter(self):
        client = RpcClient("https://rpc.test", pool_size=1)
        self.assertEqual(client.session.get_adapter("https://rpc.test")._pool_maxsize, 10)
        client.close()


class FakeResponse:
    def __init__(self, status, body):
        self.status = status
        self.body = body

    async def text(self):
        return self.body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    def __init__(self, status=200, body=SANITIZE_ERROR_BODY, error=None):
        self.status = status
        self.body = body
        self.error = error
        self.posts = []
        self.closed = False

    def post(self, url, headers=None, data=None):
        if self.error is not None:
            raise self.error
        self.posts.append((url, json.loads(data)))
        return FakeResponse(self.status, self.body)

    async def close(self):
        self.closed = True


class TestAsyncRpcClient(unittest.IsolatedAsyncioTestCase):
    """Test the asyncio client against a fake aiohttp session"""

    async def test_rpc_error_raised(self):
        session = FakeSession()
        client = AsyncRpcClient("http://rpc.test", session=session)
        with self.assertRaises(RpcResponseError) as ctx:
            await client.simulate_transaction(build_invalid_transaction())
        self.assertEqual(ctx.exception.code, -32602)
        self.assertEqual(session.posts[0][0], "http://rpc.test")
        self.assertEqual(session.posts[0][1]["method"], "simulateTransaction")

    async def test_result_returned(self):
        client = AsyncRpcClient("http://rpc.test", session=FakeSession(body=SIM_RESULT_BODY))
        result = await client.simulate_transaction(build_invalid_transaction())
        self.assertIn("value", result)

    async def test_client_error_wrapped(self):
        session = FakeSession(error=aiohttp.ClientConnectionError("refused"))
        client = AsyncRpcClient("http://rpc.test", session=session)
        with self.assertRaises(RpcTransportError):
            await client.simulate_transaction(build_invalid_transaction())

    async def test_timeout_wrapped(self):
        client = AsyncRpcClient("http://rpc.test", session=FakeSession(error=asyncio.TimeoutError()))
        with self.assertRaises(RpcTransportError):
            await client.simulate_transaction(build_invalid_transaction())

    async def test_close_releases_session(self):
        session = FakeSession()
        async with AsyncRpcClient("http://rpc.test", session=session) as client:
            pass
        self.assertTrue(session.closed)
        self.assertIsNone(client.session)

    async def test_close_without_session_is_noop(self):
        client = AsyncRpcClient("http://rpc.test")
        await client.close()
        self.assertIsNone(client.session)


if __name__ == '__main__':
    unittest.main()
