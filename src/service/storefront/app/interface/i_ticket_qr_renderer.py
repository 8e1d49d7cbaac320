from typing import Protocol


class ITicketQrRenderer(Protocol):
    """Turns an opaque QR payload into a scannable image."""

    def render_png(self, payload: str) -> bytes: ...
