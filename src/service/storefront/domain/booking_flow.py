"""
Booking Flow State Machine

SELECTING_SEATS → REVIEWING_TERMS → ENTERING_DETAILS → SUBMITTING → CONFIRMED | FAILED

FAILED is transient: it hands control back to ENTERING_DETAILS (retry by the
user) or to SELECTING_SEATS (seats were lost and must be re-picked).
ENTERING_DETAILS is only reachable through an explicit terms acceptance.
"""

from typing import Mapping

import attrs

from src.service.storefront.domain.domain_errors import InvalidStepTransitionError
from src.service.storefront.domain.enum.booking_step import BookingStep


ALLOWED_TRANSITIONS: Mapping[BookingStep, frozenset[BookingStep]] = {
    BookingStep.SELECTING_SEATS: frozenset({BookingStep.REVIEWING_TERMS}),
    BookingStep.REVIEWING_TERMS: frozenset(
        {BookingStep.ENTERING_DETAILS, BookingStep.SELECTING_SEATS}
    ),
    BookingStep.ENTERING_DETAILS: frozenset({BookingStep.SUBMITTING, BookingStep.SELECTING_SEATS}),
    BookingStep.SUBMITTING: frozenset({BookingStep.CONFIRMED, BookingStep.FAILED}),
    BookingStep.FAILED: frozenset({BookingStep.ENTERING_DETAILS, BookingStep.SELECTING_SEATS}),
    BookingStep.CONFIRMED: frozenset(),
}


@attrs.define
class BookingFlow:
    step: BookingStep = BookingStep.SELECTING_SEATS
    terms_accepted: bool = False
    history: list[BookingStep] = attrs.field(factory=lambda: [BookingStep.SELECTING_SEATS])

    def transition(self, target: BookingStep) -> None:
        if target not in ALLOWED_TRANSITIONS[self.step]:
            raise InvalidStepTransitionError(self.step.value, target.value)
        if target == BookingStep.ENTERING_DETAILS and not self.terms_accepted:
            raise InvalidStepTransitionError(self.step.value, target.value)
        if target == BookingStep.SELECTING_SEATS:
            self.terms_accepted = False
        self.step = target
        self.history.append(target)

    def accept_terms(self) -> None:
        if self.step != BookingStep.REVIEWING_TERMS:
            raise InvalidStepTransitionError(self.step.value, BookingStep.ENTERING_DETAILS.value)
        self.terms_accepted = True
        self.transition(BookingStep.ENTERING_DETAILS)

    def require(self, *steps: BookingStep) -> None:
        if self.step not in steps:
            raise InvalidStepTransitionError(self.step.value, '/'.join(s.value for s in steps))

    @property
    def is_finished(self) -> bool:
        return self.step == BookingStep.CONFIRMED
