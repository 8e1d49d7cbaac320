"""
Unit tests for RpcClient

Real httpx client over httpx.MockTransport: envelope unwrapping, CSRF token
handling and the mapping of remote failures to our exceptions.
"""

from typing import Callable

import httpx
import orjson
import pytest

from src.platform.constant.remote_method import GET_CSRF_TOKEN, RPC_BASE
from src.platform.exception.exceptions import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RemoteServiceError,
    ServiceUnavailableError,
)
from src.platform.http.rpc_client import RpcClient, build_rpc_client


CSRF_PATH = f'{RPC_BASE}/{GET_CSRF_TOKEN}'
CSRF_HEADER = 'X-Frappe-CSRF-Token'


def _json(status_code: int, body: dict) -> httpx.Response:
    return httpx.Response(status_code, content=orjson.dumps(body))


def _server_messages(message: str) -> str:
    return orjson.dumps([orjson.dumps({'message': message}).decode()]).decode()


class RemoteStub:
    """Serves the CSRF token endpoint and delegates every other path to `handle`."""

    def __init__(self, handle: Callable[[httpx.Request], httpx.Response]) -> None:
        self.handle = handle
        self.token_fetches = 0
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == CSRF_PATH:
            self.token_fetches += 1
            return _json(200, {'message': f'token-{self.token_fetches}'})
        self.requests.append(request)
        return self.handle(request)


def _client(stub: RemoteStub) -> RpcClient:
    return build_rpc_client(base_url='http://booking.test', transport=httpx.MockTransport(stub))


@pytest.mark.unit
class TestRpcClient:
    @pytest.mark.asyncio
    async def test_query_unwraps_message_and_drops_none_params(self) -> None:
        stub = RemoteStub(lambda request: _json(200, {'message': ['A1', 'A2']}))
        client = _client(stub)

        result = await client.query('app.api.booked', schedule_id='SCH-0001', search=None)

        assert result == ['A1', 'A2']
        request = stub.requests[0]
        assert request.method == 'GET'
        assert request.url.path == f'{RPC_BASE}/app.api.booked'
        assert dict(request.url.params) == {'schedule_id': 'SCH-0001'}
        assert CSRF_HEADER not in request.headers
        assert stub.token_fetches == 0

    @pytest.mark.asyncio
    async def test_command_carries_cached_csrf_token(self) -> None:
        stub = RemoteStub(lambda request: _json(200, {'message': {'success': True}}))
        client = _client(stub)

        await client.command('app.api.lock', {'seats': ['A1']})
        await client.command('app.api.lock', {'seats': ['A2']})

        assert stub.token_fetches == 1
        assert [request.headers[CSRF_HEADER] for request in stub.requests] == [
            'token-1',
            'token-1',
        ]
        assert orjson.loads(stub.requests[0].content) == {'seats': ['A1']}

    @pytest.mark.asyncio
    async def test_rejected_token_is_refreshed_once(self) -> None:
        def handle(request: httpx.Request) -> httpx.Response:
            if request.headers[CSRF_HEADER] == 'token-1':
                return _json(400, {'exc_type': 'CSRFTokenError'})
            return _json(200, {'message': 'ok'})

        stub = RemoteStub(handle)
        client = _client(stub)

        assert await client.command('app.api.lock') == 'ok'
        assert stub.token_fetches == 2
        assert len(stub.requests) == 2

    @pytest.mark.asyncio
    async def test_second_rejection_is_a_transport_failure(self) -> None:
        stub = RemoteStub(lambda request: _json(400, {'exc_type': 'CSRFTokenError'}))
        client = _client(stub)

        with pytest.raises(ServiceUnavailableError):
            await client.command('app.api.lock')

        assert len(stub.requests) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'status_code,body,error',
        [
            (500, {}, ServiceUnavailableError),
            (503, {'exc_type': 'ValidationError'}, ServiceUnavailableError),
            (401, {}, AuthenticationError),
            (403, {'exc_type': 'PermissionError'}, ForbiddenError),
            (404, {'exc_type': 'DoesNotExistError'}, NotFoundError),
            (409, {}, ConflictError),
            (417, {'exc_type': 'ValidationError'}, RemoteServiceError),
        ],
    )
    async def test_failure_mapping(self, status_code: int, body: dict, error: type) -> None:
        client = _client(RemoteStub(lambda request: _json(status_code, body)))

        with pytest.raises(error):
            await client.query('app.api.anything')

    @pytest.mark.asyncio
    async def test_server_message_is_surfaced(self) -> None:
        body = {'exc_type': 'ValidationError', '_server_messages': _server_messages('Seat A1 gone')}
        client = _client(RemoteStub(lambda request: _json(417, body)))

        with pytest.raises(RemoteServiceError) as exc_info:
            await client.command('app.api.lock')

        assert exc_info.value.message == 'Seat A1 gone'
        assert exc_info.value.status_code == 422

    @pytest.mark.asyncio
    async def test_connection_failure(self) -> None:
        def handle(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError('connection refused', request=request)

        client = _client(RemoteStub(handle))

        with pytest.raises(ServiceUnavailableError):
            await client.query('app.api.anything')

    @pytest.mark.asyncio
    async def test_undecodable_body(self) -> None:
        client = _client(RemoteStub(lambda request: httpx.Response(200, content=b'<html>')))

        with pytest.raises(ServiceUnavailableError):
            await client.query('app.api.anything')

    @pytest.mark.asyncio
    async def test_reset_session_drops_cookies_and_token(self) -> None:
        stub = RemoteStub(lambda request: _json(200, {'message': 'ok'}))
        client = _client(stub)
        await client.command('app.api.lock')
        client.http_client.cookies.set('sid', 'abc')

        client.reset_session()
        await client.command('app.api.lock')

        assert not client.http_client.cookies
        assert stub.token_fetches == 2
        await client.aclose()
