"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.storefront.app.query import list_events_use_case
from src.service.storefront.driving_adapter.http_controller import ticket_controller
from src.service.storefront.driving_adapter.http_controller.auth import session_auth


WIRE_MODULES: list[ModuleType] = [
    list_events_use_case,
    session_auth,
    ticket_controller,
]
