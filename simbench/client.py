"""
Minimal JSON-RPC client for the simulateTransaction call

Shared request building and response decoding live here together with the
synchronous client; the asyncio client is in client_async.
"""
import json
import logging

import requests
from requests.adapters import DEFAULT_POOLSIZE as DEFAULT_POOL_SIZE, HTTPAdapter

from .exceptions import RpcResponseError, RpcTransportError
from .transaction import encode_transaction

logger = logging.getLogger('simbench.client')

SIMULATE_TRANSACTION = 'simulateTransaction'
JSON_HEADERS = {'Content-Type': 'application/json'}


def build_simulate_request(tx, commitment=None):
    """Build the JSON-RPC payload for a simulateTransaction call"""
    config = {"encoding": "base64", "sigVerify": False}
    if commitment:
        config["commitment"] = commitment
    return {
        "jsonrpc": "2.0",
        "id": 1,
        "method": SIMULATE_TRANSACTION,
        "params": [encode_transaction(tx), config],
    }


def parse_rpc_response(status, body, request=SIMULATE_TRANSACTION):
    """
    Decode an RPC reply

    Args:
        status: HTTP status code
        body: Response body text
        request: RPC method name, attached to raised errors

    Returns:
        The decoded ``result`` member

    Raises:
        RpcResponseError: body carries a JSON-RPC error object
        RpcTransportError: anything else that is not a successful reply
    """
    try:
        payload = json.loads(body)
    except ValueError:
        payload = None

    if isinstance(payload, dict) and isinstance(payload.get('error'), dict):
        error = payload['error']
        raise RpcResponseError(error.get('code'), error.get('message', ''),
                               data=error.get('data'), request=request)

    if not 200 <= status < 300:
        raise RpcTransportError(body[:200] if body else 'empty response',
                                status=status, request=request)

    if not isinstance(payload, dict) or 'result' not in payload:
        raise RpcTransportError('malformed JSON-RPC response: ' + (body[:200] if body else ''),
                                status=status, request=request)

    return payload['result']


class RpcClient:
    """Blocking client; one requests.Session shared by every worker thread"""

    def __init__(self, endpoint, timeout=30.0, commitment=None, session=None, pool_size=None):
        """
        Args:
            pool_size: Connections kept per host; set to the worker count so
                no worker thread waits for or reopens a connection
        """
        self.endpoint = endpoint
        self.timeout = timeout
        self.commitment = commitment
        if session is None:
            session = requests.Session()
            if pool_size and pool_size > DEFAULT_POOL_SIZE:
                adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
                session.mount("http://", adapter)
                session.mount("https://", adapter)
        self.session = session

    def simulate_transaction(self, tx):
        payload = build_simulate_request(tx, self.commitment)
        try:
            response = self.session.request('POST', self.endpoint, headers=JSON_HEADERS,
                                            data=json.dumps(payload), timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise RpcTransportError(f"{type(e).__name__}: {e}", request=SIMULATE_TRANSACTION)

        logger.debug(f"simulateTransaction -> HTTP {response.status_code}")
        return parse_rpc_response(response.status_code, response.text)

    def close(self):
        self.session.close()
