from datetime import date, time
from typing import List, Optional

from pydantic import BaseModel

from src.service.storefront.domain.entity.event_entity import Event, Schedule


class RowPricingResponse(BaseModel):
    row_from: str
    row_to: str
    price: int


class ScheduleResponse(BaseModel):
    id: str
    show_date: date
    show_time: time
    slot_capacity: int
    status: str
    is_open: bool
    row_pricing: List[RowPricingResponse]

    @classmethod
    def from_entity(cls, schedule: Schedule) -> 'ScheduleResponse':
        return cls(
            id=schedule.id,
            show_date=schedule.show_date,
            show_time=schedule.show_time,
            slot_capacity=schedule.slot_capacity,
            status=schedule.status,
            is_open=schedule.is_open,
            row_pricing=[
                RowPricingResponse(row_from=p.row_from, row_to=p.row_to, price=p.price)
                for p in schedule.row_pricing
            ],
        )


class EventResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'id': 'EVT-0001',
                'title': 'Classical Evening',
                'description': '<p>An evening of Carnatic music</p>',
                'image': '/files/classical.jpg',
                'venue': 'Main Hall',
                'max_capacity': 450,
                'status': 'Published',
                'start_date': '2026-11-01',
                'end_date': '2026-11-03',
                'day': 'Saturday',
                'price': 300,
                'schedules': [],
            }
        },
    }

    id: str
    title: str
    description: str
    image: str
    venue: str
    max_capacity: int
    status: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    day: str
    price: int
    schedules: List[ScheduleResponse] = []

    @classmethod
    def from_entity(cls, event: Event) -> 'EventResponse':
        return cls(
            id=event.id,
            title=event.title,
            description=event.description,
            image=event.image,
            venue=event.venue,
            max_capacity=event.max_capacity,
            status=event.status,
            start_date=event.start_date,
            end_date=event.end_date,
            day=event.day,
            price=event.price,
            schedules=[ScheduleResponse.from_entity(s) for s in event.schedules],
        )


class CalendarDayResponse(BaseModel):
    day: date
    events: List[EventResponse]


class CalendarMonthResponse(BaseModel):
    year: int
    month: int
    show_dates: List[date]
