"""
Test Configuration

This module provides:
- Test environment variables, set before any application module is imported
- A fixed Remote Booking Service URL so no test ever reaches a real backend

Architecture:
- Unit tests (test/**/unit/): stub gateway, no HTTP at all
- Integration tests: real httpx clients over httpx.MockTransport, or the
  FastAPI app through TestClient with the gateway replaced
"""

# =============================================================================
# Environment setup MUST happen before any other imports: settings and the
# log sinks are built at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['BOOKING_SERVICE_URL'] = 'http://booking.test'
    os.environ['BOOKING_API_APP'] = 'chavara_booking'
    os.environ['DEBUG'] = 'true'
    os.environ.setdefault('DEPLOY_ENV', 'test')
    os.environ.setdefault('LOCK_POLL_INTERVAL_SECONDS', '0.01')


_early_setup_test_environment()
