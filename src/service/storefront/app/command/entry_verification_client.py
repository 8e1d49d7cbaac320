"""
Entry Verification Client

Gate-side ticket check. The scanner is only ever shown after the staff
access check succeeds; any failure of that check counts as denied and
redirects to login once.

Each scan forwards the decoded QR text verbatim. The Remote Booking Service
decides; this client only renders the decision and returns to scanning.
Only one verification is in flight at a time; scans arriving meanwhile are
dropped, not queued.
"""

from typing import Optional

from opentelemetry import trace

from src.platform.exception.exceptions import CustomBaseError, ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.storefront_metrics import metrics
from src.service.storefront.app.dto.verification_result import VerificationResult
from src.service.storefront.app.interface.i_booking_service_gateway import (
    IBookingServiceGateway,
)
from src.service.storefront.app.interface.i_navigator import INavigator
from src.service.storefront.domain.enum.gate_state import GateState


class EntryVerificationClient:
    def __init__(self, *, gateway: IBookingServiceGateway, navigator: INavigator) -> None:
        self.gateway = gateway
        self.navigator = navigator
        self.state = GateState.CHECKING_ACCESS
        self.access_granted = False
        self.last_result: Optional[VerificationResult] = None
        self.last_error = ''
        self._in_flight = False
        self.tracer = trace.get_tracer(__name__)

    @property
    def scanner_active(self) -> bool:
        return self.access_granted and self.state != GateState.REDIRECTED

    @Logger.io
    async def check_access(self) -> bool:
        """Fail closed: errors count as denied."""
        if self.access_granted:
            return True
        if self.state == GateState.REDIRECTED:
            return False

        try:
            granted = await self.gateway.check_staff_access()
        except CustomBaseError as e:
            Logger.base.warning(f'🚪 [GATE] Access check failed, denying: {e}')
            granted = False

        if not granted:
            self.state = GateState.REDIRECTED
            self.navigator.redirect_to_login()
            Logger.base.info('🚪 [GATE] Scanner access denied, redirected to login')
            return False

        self.access_granted = True
        self.state = GateState.SCANNING
        return True

    async def decode_and_verify(self, raw_payload: str) -> Optional[VerificationResult]:
        """
        Forward one scan to the Remote Booking Service

        Returns:
            The server's decision, or None when another scan is still in flight

        Raises:
            ForbiddenError: the scanner was never granted
            ServiceUnavailableError: the verify call failed; gate shows NETWORK_ERROR
        """
        if not self.access_granted:
            raise ForbiddenError('Ticket scanner access required')
        if self._in_flight:
            metrics.record_verification(outcome='dropped')
            Logger.base.info('📷 [GATE] Scan dropped, verification already in flight')
            return None

        self._in_flight = True
        self.state = GateState.VERIFYING
        self.last_result = None
        self.last_error = ''
        try:
            with self.tracer.start_as_current_span('gate.verify_entry'):
                result = await self.gateway.verify_entry(qr_string=raw_payload)
        except CustomBaseError as e:
            self.state = GateState.NETWORK_ERROR
            self.last_error = e.message
            metrics.record_verification(outcome='network_error')
            raise
        finally:
            self._in_flight = False

        self.last_result = result
        self.state = GateState.SHOWING_RESULT
        metrics.record_verification(outcome=result.decision.value)
        Logger.base.info(f'📷 [GATE] Entry {result.decision.value}: {result.message}')
        return result

    def reset(self) -> None:
        """Back to scanning with nothing retained; calling it twice is harmless."""
        if not self.access_granted:
            return
        self.state = GateState.SCANNING
        self.last_result = None
        self.last_error = ''
