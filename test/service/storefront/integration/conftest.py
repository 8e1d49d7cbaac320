"""
API test configuration

The test app with the real DI container, where the per-session gateway and
the catalog gateway are replaced by one in-memory Remote Booking Service.
"""

from collections.abc import Generator

from dependency_injector import providers
from fastapi.testclient import TestClient
import pytest

from src.platform.config.di import container
from src.service.storefront.driving_adapter.http_controller.storefront_session import (
    StorefrontSession,
    StorefrontSessionRegistry,
)
from test.service.storefront.fake_booking_service import FakeBookingServiceGateway, make_event
from test.test_main import app


@pytest.fixture
def fake_gateway() -> FakeBookingServiceGateway:
    return FakeBookingServiceGateway(events=[make_event()], booked={'A5'})


@pytest.fixture
def session_registry(fake_gateway: FakeBookingServiceGateway) -> StorefrontSessionRegistry:
    return StorefrontSessionRegistry(
        session_factory=lambda session_id: StorefrontSession(
            session_id=session_id, gateway=fake_gateway
        )
    )


@pytest.fixture
def client(
    fake_gateway: FakeBookingServiceGateway, session_registry: StorefrontSessionRegistry
) -> Generator[TestClient, None, None]:
    with (
        container.session_registry.override(providers.Object(session_registry)),
        container.catalog_gateway.override(providers.Object(fake_gateway)),
        TestClient(app) as test_client,
    ):
        yield test_client
