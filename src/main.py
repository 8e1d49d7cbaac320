"""
Production FastAPI Application

Storefront backend-for-frontend: per-browser booking flows against the
Remote Booking Service, with locked-seat polling in the background.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.di import cleanup, container, setup
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Storefront] Starting up...')

    # Setup OpenTelemetry tracing (exports only when an OTLP endpoint is configured)
    tracing = TracingConfig(service_name='storefront-bff')
    tracing.setup()
    tracing.instrument_httpx()
    Logger.base.info('📊 [Storefront] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    setup()
    Logger.base.info('🔌 [Storefront] Dependency injection wired')

    # Locked-seat polling loops and the idle session sweeper run in this task group
    async with anyio.create_task_group() as tg:
        registry = container.session_registry()
        registry.task_group = tg
        await tg.start(registry.run_idle_sweeper)
        Logger.base.info(
            f'🧹 [Storefront] Idle session sweeper running every {registry.sweep_interval}s'
        )
        Logger.base.info('✅ [Storefront] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Storefront] Shutting down...')
        # Release held seats before the polling loops are cancelled
        with anyio.CancelScope(shield=True):
            await cleanup()
        Logger.base.info('🔓 [Storefront] Sessions closed, seat locks released')
        registry.task_group = None
        tg.cancel_scope.cancel()

    tracing.shutdown()
    Logger.base.info('📊 [Storefront] Tracing shutdown complete')

    container.unwire()

    Logger.base.info('👋 [Storefront] Shutdown complete')


app = create_app(
    lifespan=lifespan,
    description='Venue Ticketing Storefront - Seat locks, booking flow and gate verification',
)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
