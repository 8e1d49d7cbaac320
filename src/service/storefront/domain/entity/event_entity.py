from datetime import date, time
from typing import Optional

import attrs

from src.platform.exception.exceptions import NotFoundError
from src.service.storefront.domain.value_object.row_pricing import RowPricingTable


def _validate_non_empty_string(instance: object, attribute: attrs.Attribute, value: str) -> None:
    if not value or not value.strip():
        raise ValueError(f'Event {attribute.name} cannot be empty')


@attrs.define(frozen=True)
class Schedule:
    id: str = attrs.field(validator=_validate_non_empty_string)
    event_id: str
    show_date: date
    show_time: time
    slot_capacity: int = 0
    status: str = 'Open'
    row_pricing: RowPricingTable = attrs.field(factory=RowPricingTable)

    @property
    def is_open(self) -> bool:
        return self.status.strip().lower() == 'open'


@attrs.define(frozen=True)
class Event:
    id: str = attrs.field(validator=_validate_non_empty_string)
    title: str
    description: str = ''
    image: str = '/placeholder-event.jpg'
    venue: str = 'TBA'
    max_capacity: int = 0
    status: str = ''
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    day: str = ''
    price: int = 0
    schedules: tuple[Schedule, ...] = attrs.field(factory=tuple, converter=tuple)

    def get_schedule(self, schedule_id: str) -> Schedule:
        for schedule in self.schedules:
            if schedule.id == schedule_id:
                return schedule
        raise NotFoundError(f'Schedule {schedule_id} not found for event {self.id}')

    def has_show_on(self, day: date) -> bool:
        return any(schedule.show_date == day for schedule in self.schedules)
