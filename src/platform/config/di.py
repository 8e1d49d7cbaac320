"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.http.rpc_client import build_rpc_client
from src.service.storefront.driven_adapter.booking_service_gateway_impl import (
    BookingServiceGatewayImpl,
)
from src.service.storefront.driven_adapter.qr.ticket_qr_renderer import TicketQrRenderer
from src.service.storefront.driving_adapter.http_controller.storefront_session import (
    StorefrontSessionRegistry,
    build_storefront_session,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Anonymous RPC client for public catalog reads (no per-user cookies)
    catalog_rpc_client = providers.Singleton(
        build_rpc_client,
        base_url=config_service.provided.BOOKING_SERVICE_URL,
        timeout=config_service.provided.HTTP_TIMEOUT_SECONDS,
        csrf_ttl_seconds=config_service.provided.CSRF_TOKEN_TTL_SECONDS,
    )
    catalog_gateway = providers.Singleton(BookingServiceGatewayImpl, rpc_client=catalog_rpc_client)

    # Per-browser sessions (each builds its own RPC client and gateway)
    session_registry = providers.Singleton(
        StorefrontSessionRegistry, session_factory=providers.Object(build_storefront_session)
    )

    ticket_qr_renderer = providers.Singleton(TicketQrRenderer)


container = Container()


def setup() -> None:
    container.config_service()


async def cleanup() -> None:
    await container.session_registry().aclose()
    await container.catalog_rpc_client().aclose()
    container.reset_singletons()
