"""Entry verification outcome DTO."""

import attrs

from src.service.storefront.domain.enum.gate_state import GateDecision


@attrs.define(frozen=True)
class VerificationResult:
    """
    One-shot result of a gate scan. A denial is a normal outcome, not an error.

    customer, seats and event are only filled in when entry is granted.
    """

    success: bool
    message: str = ''
    customer: str = ''
    seats: tuple[str, ...] = attrs.field(factory=tuple, converter=tuple)
    event: str = ''

    @property
    def decision(self) -> GateDecision:
        return GateDecision.GRANTED if self.success else GateDecision.DENIED
