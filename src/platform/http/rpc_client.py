"""
RPC client for the Remote Booking Service

The remote side exposes whitelisted functions at `/api/method/<dotted.name>`
and wraps every successful payload as `{"message": ...}`. Failures carry an
`exc_type` and a JSON-encoded `_server_messages` list.

Error mapping:
- connect/read failures, timeouts, 5xx, undecodable bodies → ServiceUnavailableError
- 401 / AuthenticationError → AuthenticationError
- 403 / PermissionError → ForbiddenError
- 404 / DoesNotExistError → NotFoundError
- 409 → ConflictError
- any other 4xx → RemoteServiceError (422)
"""

from typing import Any, Optional

import httpx
import orjson
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.constant.remote_method import GET_CSRF_TOKEN, RPC_BASE
from src.platform.exception.exceptions import (
    AuthenticationError,
    ConflictError,
    CustomBaseError,
    ForbiddenError,
    NotFoundError,
    RemoteServiceError,
    ServiceUnavailableError,
)
from src.platform.http.csrf_token_cache import CsrfTokenCache
from src.platform.logging.loguru_io import Logger


CSRF_EXC_TYPE = 'CSRFTokenError'


class CsrfTokenRejectedError(RemoteServiceError):
    def __init__(self) -> None:
        super().__init__('CSRF token rejected', 400)


def _server_message(body: dict[str, Any]) -> Optional[str]:
    raw = body.get('_server_messages')
    if raw:
        try:
            messages = orjson.loads(raw)
            first = messages[0]
            if isinstance(first, str):
                first = orjson.loads(first)
            return first.get('message') if isinstance(first, dict) else str(first)
        except (orjson.JSONDecodeError, IndexError, TypeError, AttributeError):
            return str(raw)
    for key in ('exception', 'message'):
        if isinstance(body.get(key), str):
            return body[key]
    return None


def _decode(response: httpx.Response) -> dict[str, Any]:
    if not response.content:
        return {}
    try:
        body = orjson.loads(response.content)
    except orjson.JSONDecodeError:
        raise ServiceUnavailableError()
    if not isinstance(body, dict):
        raise ServiceUnavailableError()
    return body


def _raise_for_failure(response: httpx.Response, body: dict[str, Any]) -> None:
    status_code = response.status_code
    if status_code < 400:
        return
    exc_type = body.get('exc_type') or ''
    message = _server_message(body) or response.reason_phrase or 'Remote service error'

    if status_code >= 500:
        raise ServiceUnavailableError()
    if exc_type == CSRF_EXC_TYPE:
        raise CsrfTokenRejectedError()
    if status_code == 401 or exc_type == 'AuthenticationError':
        raise AuthenticationError(message)
    if status_code == 403 or exc_type == 'PermissionError':
        raise ForbiddenError(message)
    if status_code == 404 or exc_type == 'DoesNotExistError':
        raise NotFoundError(message)
    if status_code == 409:
        raise ConflictError(message)
    raise RemoteServiceError(message, 422)


class RpcClient:
    """Calls whitelisted remote methods; mutating calls carry the CSRF token."""

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        csrf_cache: Optional[CsrfTokenCache] = None,
        csrf_header_name: str = settings.CSRF_HEADER_NAME,
    ) -> None:
        self.http_client = http_client
        self.csrf_cache = csrf_cache
        self.csrf_header_name = csrf_header_name
        self.tracer = trace.get_tracer(__name__)

    async def query(self, method: str, **params: Any) -> Any:
        """Read-only call (GET); no CSRF token."""
        clean_params = {key: value for key, value in params.items() if value is not None}
        return await self._send('GET', method, params=clean_params)

    async def command(self, method: str, payload: Optional[dict[str, Any]] = None) -> Any:
        """State-mutating call (POST) with the cached CSRF token, refreshed once on rejection."""
        headers = {self.csrf_header_name: await self._csrf_token()}
        try:
            return await self._send('POST', method, json=payload or {}, headers=headers)
        except CsrfTokenRejectedError:
            Logger.base.warning(f'🔑 [RPC] CSRF token rejected for {method}, refreshing once')
            if self.csrf_cache is not None:
                self.csrf_cache.invalidate()
            headers = {self.csrf_header_name: await self._csrf_token()}
            try:
                return await self._send('POST', method, json=payload or {}, headers=headers)
            except CsrfTokenRejectedError:
                raise ServiceUnavailableError()

    async def command_without_csrf(self, method: str, payload: Optional[dict[str, Any]] = None) -> Any:
        """POST for calls made before a session exists (login)."""
        return await self._send('POST', method, json=payload or {})

    async def fetch_csrf_token(self) -> str:
        token = await self.query(GET_CSRF_TOKEN)
        if not isinstance(token, str) or not token:
            raise ServiceUnavailableError()
        return token

    def reset_session(self) -> None:
        """Forget the remote session: cookies and the CSRF token bound to it."""
        self.http_client.cookies.clear()
        if self.csrf_cache is not None:
            self.csrf_cache.invalidate()

    async def aclose(self) -> None:
        await self.http_client.aclose()

    async def _csrf_token(self) -> str:
        if self.csrf_cache is None:
            return ''
        try:
            return await self.csrf_cache.get()
        except CustomBaseError as e:
            Logger.base.warning(f'🔑 [RPC] CSRF token fetch failed: {e}')
            raise ServiceUnavailableError()

    async def _send(
        self,
        verb: str,
        method: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        with self.tracer.start_as_current_span(
            'rpc.call', attributes={'rpc.method': method, 'http.method': verb}
        ) as span:
            try:
                response = await self.http_client.request(
                    verb, f'{RPC_BASE}/{method}', params=params, json=json, headers=headers
                )
            except httpx.TimeoutException:
                Logger.base.warning(f'⏱️ [RPC] Timeout calling {method}')
                raise ServiceUnavailableError()
            except httpx.HTTPError as e:
                Logger.base.warning(f'📡 [RPC] Transport error calling {method}: {e}')
                raise ServiceUnavailableError()

            span.set_attribute('http.status_code', response.status_code)
            body = _decode(response)
            _raise_for_failure(response, body)
            return body.get('message')


def build_rpc_client(
    *,
    base_url: str = settings.BOOKING_SERVICE_URL,
    timeout: float = settings.HTTP_TIMEOUT_SECONDS,
    csrf_ttl_seconds: float = settings.CSRF_TOKEN_TTL_SECONDS,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RpcClient:
    """One client per storefront session: its own cookie jar and its own CSRF token."""
    http_client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)
    rpc_client = RpcClient(http_client=http_client)
    rpc_client.csrf_cache = CsrfTokenCache(
        fetch_token=rpc_client.fetch_csrf_token, ttl_seconds=csrf_ttl_seconds
    )
    return rpc_client
