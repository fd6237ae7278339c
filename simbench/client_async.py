import asyncio
import json
import logging

import aiohttp

from .client import JSON_HEADERS, SIMULATE_TRANSACTION, build_simulate_request, parse_rpc_response
from .exceptions import RpcTransportError

logger = logging.getLogger('simbench.client_async')


class AsyncRpcClient:
    """
    Non-blocking counterpart of RpcClient

    The aiohttp session is created on first use so that it binds to the loop
    that actually runs the simulations.
    """

    def __init__(self, endpoint, timeout=30.0, commitment=None, session=None):
        self.endpoint = endpoint
        self.timeout = timeout
        self.commitment = commitment
        self.session = session

    def _get_session(self):
        if self.session is None:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self.session = aiohttp.ClientSession(timeout=timeout)
        return self.session

    async def simulate_transaction(self, tx):
        payload = build_simulate_request(tx, self.commitment)
        session = self._get_session()
        try:
            async with session.post(self.endpoint, headers=JSON_HEADERS,
                                    data=json.dumps(payload)) as resp:
                status = resp.status
                body = await resp.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RpcTransportError(f"{type(e).__name__}: {e}", request=SIMULATE_TRANSACTION)

        logger.debug(f"simulateTransaction -> HTTP {status}")
        return parse_rpc_response(status, body)

    async def close(self):
        if self.session is not None:
            await self.session.close()
            self.session = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
