from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from src.platform.logging.loguru_io import Logger
from src.service.storefront.app.query.list_events_use_case import ListEventsUseCase
from src.service.storefront.driving_adapter.http_controller.schema.event_schema import (
    CalendarDayResponse,
    CalendarMonthResponse,
    EventResponse,
)


router = APIRouter()


@router.get('', response_model=List[EventResponse])
@Logger.io
async def list_events(
    search: Optional[str] = None,
    use_case: ListEventsUseCase = Depends(ListEventsUseCase.depends),
) -> List[EventResponse]:
    events = await use_case.list_events(search=search)
    return [EventResponse.from_entity(event) for event in events]


@router.get('/calendar/{day}', response_model=CalendarDayResponse)
@Logger.io
async def list_events_on_day(
    day: date,
    use_case: ListEventsUseCase = Depends(ListEventsUseCase.depends),
) -> CalendarDayResponse:
    events = await use_case.events_on(day=day)
    return CalendarDayResponse(day=day, events=[EventResponse.from_entity(e) for e in events])


@router.get('/calendar', response_model=CalendarMonthResponse)
@Logger.io
async def list_show_dates(
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    use_case: ListEventsUseCase = Depends(ListEventsUseCase.depends),
) -> CalendarMonthResponse:
    show_dates = await use_case.event_dates(year=year, month=month)
    return CalendarMonthResponse(year=year, month=month, show_dates=show_dates)


@router.get('/{event_id}', response_model=EventResponse)
@Logger.io
async def get_event(
    event_id: str,
    use_case: ListEventsUseCase = Depends(ListEventsUseCase.depends),
) -> EventResponse:
    event = await use_case.get_event(event_id=event_id)
    return EventResponse.from_entity(event)
