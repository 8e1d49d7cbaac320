from datetime import date
from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.storefront.app.interface.i_booking_service_gateway import (
    IBookingServiceGateway,
)
from src.service.storefront.domain.entity.event_entity import Event


class ListEventsUseCase:
    def __init__(self, gateway: IBookingServiceGateway) -> None:
        self.gateway = gateway

    @classmethod
    @inject
    def depends(
        cls,
        gateway: IBookingServiceGateway = Depends(Provide[Container.catalog_gateway]),
    ) -> Self:
        return cls(gateway=gateway)

    @Logger.io
    async def list_events(self, *, search: Optional[str] = None) -> List[Event]:
        """Published events with their schedules, optionally filtered by title"""
        search = search.strip() if search else None
        Logger.base.info(f'📋 [LIST_EVENTS] Loading events (search={search!r})')

        events = await self.gateway.list_events(search=search or None)

        Logger.base.info(f'✅ [LIST_EVENTS] Found {len(events)} events')
        return events

    @Logger.io
    async def get_event(self, *, event_id: str) -> Event:
        return await self.gateway.get_event(event_id=event_id)

    @Logger.io
    async def events_on(self, *, day: date) -> List[Event]:
        """Calendar view: events with at least one show on `day`"""
        events = await self.gateway.list_events()
        return [event for event in events if event.has_show_on(day)]

    @Logger.io
    async def event_dates(self, *, year: int, month: int) -> List[date]:
        """Days of the month that have at least one show, for calendar highlighting"""
        events = await self.gateway.list_events()
        days = {
            schedule.show_date
            for event in events
            for schedule in event.schedules
            if schedule.show_date.year == year and schedule.show_date.month == month
        }
        return sorted(days)
