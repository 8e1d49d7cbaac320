"""User-facing notification DTO."""

import uuid

import attrs

from src.service.storefront.domain.enum.notification_kind import NotificationKind


@attrs.define(frozen=True)
class Notification:
    """
    A dismissible message with an actionable next step.

    Raised for every non-fatal error path of the booking flow so nothing
    fails silently.
    """

    kind: NotificationKind
    message: str
    seats: tuple[str, ...] = attrs.field(factory=tuple, converter=tuple)
    action: str = ''
    id: str = attrs.field(factory=lambda: uuid.uuid4().hex)
