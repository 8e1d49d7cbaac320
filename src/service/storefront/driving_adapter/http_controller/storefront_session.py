"""
Storefront Session

One StorefrontSession per browser session (identified by the session
cookie). It owns everything that is per-user on the remote side: the httpx
client with its cookie jar, the CSRF token cache, the gateway on top of
them, the booking flow in progress and the gate client.
"""

import secrets
import time
from typing import Callable, Optional

import anyio
from anyio.abc import TaskGroup, TaskStatus

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import NotFoundError
from src.platform.http.rpc_client import RpcClient, build_rpc_client
from src.platform.logging.loguru_io import Logger
from src.service.storefront.app.command.booking_orchestrator import BookingOrchestrator
from src.service.storefront.app.command.entry_verification_client import (
    EntryVerificationClient,
)
from src.service.storefront.app.interface.i_booking_service_gateway import (
    IBookingServiceGateway,
)
from src.service.storefront.driven_adapter.booking_service_gateway_impl import (
    BookingServiceGatewayImpl,
)


class HttpNavigator:
    """Records a login redirect for the controller to turn into a 303."""

    def __init__(self, *, login_path: str = settings.LOGIN_PATH) -> None:
        self.login_path = login_path
        self.location: Optional[str] = None
        self.redirect_count = 0

    def redirect_to_login(self) -> None:
        self.location = self.login_path
        self.redirect_count += 1


class StorefrontSession:
    def __init__(
        self,
        *,
        session_id: str,
        gateway: IBookingServiceGateway,
        rpc_client: Optional[RpcClient] = None,
    ) -> None:
        self.session_id = session_id
        self.gateway = gateway
        self.rpc_client = rpc_client
        self.user: Optional[str] = None
        self.booking: Optional[BookingOrchestrator] = None
        self.task_group: Optional[TaskGroup] = None
        self.last_seen = 0.0
        self.navigator = HttpNavigator()
        self.gate = EntryVerificationClient(gateway=gateway, navigator=self.navigator)

    async def start_booking(
        self, *, event_id: str, schedule_id: str, task_group: Optional[TaskGroup] = None
    ) -> BookingOrchestrator:
        """Replace any flow in progress (its locks are released) with a new one."""
        await self.end_booking()
        booking = BookingOrchestrator(
            gateway=self.gateway, event_id=event_id, schedule_id=schedule_id
        )
        await booking.start()
        self.booking = booking
        self.task_group = task_group
        if task_group is not None:
            await task_group.start(booking.poll_locked_seats)
        return booking

    def require_booking(self) -> BookingOrchestrator:
        if self.booking is None:
            raise NotFoundError('No booking in progress')
        self.booking.touch()
        if self.task_group is not None:
            self.booking.resume_polling(self.task_group)
        return self.booking

    async def end_booking(self) -> None:
        if self.booking is not None:
            booking, self.booking = self.booking, None
            await booking.close()

    async def login(self, *, usr: str, pwd: str) -> str:
        await self.end_booking()
        message = await self.gateway.login(usr=usr, pwd=pwd)
        self.user = usr
        self._reset_gate()
        return message

    async def logout(self) -> None:
        await self.end_booking()
        try:
            await self.gateway.logout()
        finally:
            self.user = None
            self._reset_gate()

    async def aclose(self) -> None:
        await self.end_booking()
        if self.rpc_client is not None:
            await self.rpc_client.aclose()

    def _reset_gate(self) -> None:
        self.navigator = HttpNavigator()
        self.gate = EntryVerificationClient(gateway=self.gateway, navigator=self.navigator)


def build_storefront_session(session_id: str) -> StorefrontSession:
    rpc_client = build_rpc_client()
    return StorefrontSession(
        session_id=session_id,
        gateway=BookingServiceGatewayImpl(rpc_client=rpc_client),
        rpc_client=rpc_client,
    )


class StorefrontSessionRegistry:
    """
    In-memory map of session cookie → StorefrontSession

    Sessions not seen for `idle_timeout` seconds are closed by the idle
    sweeper (their held seats are released and their HTTP client closed).
    """

    def __init__(
        self,
        *,
        session_factory: Callable[[str], StorefrontSession] = build_storefront_session,
        idle_timeout: float = settings.SESSION_IDLE_TIMEOUT_SECONDS,
        sweep_interval: float = settings.SESSION_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.session_factory = session_factory
        self.idle_timeout = idle_timeout
        self.sweep_interval = sweep_interval
        self.clock = clock
        self.task_group: Optional[TaskGroup] = None  # set by main.py lifespan
        self._sessions: dict[str, StorefrontSession] = {}

    def get(self, session_id: Optional[str]) -> Optional[StorefrontSession]:
        if not session_id:
            return None
        session = self._sessions.get(session_id)
        if session is not None:
            session.last_seen = self.clock()
        return session

    def create(self) -> StorefrontSession:
        session_id = secrets.token_urlsafe(32)
        session = self.session_factory(session_id)
        session.last_seen = self.clock()
        self._sessions[session_id] = session
        Logger.base.info(f'🧾 [SESSION] Created storefront session ({len(self._sessions)} active)')
        return session

    async def discard(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is not None:
            await session.aclose()

    async def sweep_idle(self) -> int:
        """Close every session idle for longer than `idle_timeout`; returns how many."""
        now = self.clock()
        idle = [
            session_id
            for session_id, session in self._sessions.items()
            if now - session.last_seen > self.idle_timeout
        ]
        for session_id in idle:
            await self.discard(session_id)
        if idle:
            Logger.base.info(
                f'🧹 [SESSION] Closed {len(idle)} idle session(s) ({len(self._sessions)} active)'
            )
        return len(idle)

    async def run_idle_sweeper(
        self, *, task_status: TaskStatus[None] = anyio.TASK_STATUS_IGNORED
    ) -> None:
        task_status.started()
        while True:
            await anyio.sleep(self.sweep_interval)
            await self.sweep_idle()

    async def aclose(self) -> None:
        for session_id in list(self._sessions):
            await self.discard(session_id)
        Logger.base.info('🧾 [SESSION] All storefront sessions closed')

    def __len__(self) -> int:
        return len(self._sessions)
