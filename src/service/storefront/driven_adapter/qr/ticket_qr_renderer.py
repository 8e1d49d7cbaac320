import io

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from src.service.storefront.app.interface.i_ticket_qr_renderer import ITicketQrRenderer


class TicketQrRenderer(ITicketQrRenderer):
    def __init__(self, *, box_size: int = 10, border: int = 4) -> None:
        self.box_size = box_size
        self.border = border

    def render_png(self, payload: str) -> bytes:
        qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, box_size=self.box_size, border=self.border)
        qr.add_data(payload)
        qr.make(fit=True)
        image = qr.make_image(fill_color='black', back_color='white')

        buffer = io.BytesIO()
        image.save(buffer, format='PNG')
        return buffer.getvalue()
