from typing import List, Optional

from pydantic import BaseModel

from src.service.storefront.app.dto.verification_result import VerificationResult


class ScanRequest(BaseModel):
    qr_string: str

    class Config:
        json_schema_extra = {'example': {'qr_string': 'BKG-0001:1762000000:9f2c...'}}


class GateStatusResponse(BaseModel):
    state: str
    scanner_active: bool


class VerificationResponse(BaseModel):
    decision: str
    success: bool
    message: str
    customer: str = ''
    seats: List[str] = []
    event: str = ''

    @classmethod
    def from_result(cls, result: VerificationResult) -> 'VerificationResponse':
        return cls(
            decision=result.decision.value,
            success=result.success,
            message=result.message,
            customer=result.customer,
            seats=list(result.seats),
            event=result.event,
        )


class ScanResponse(BaseModel):
    state: str
    dropped: bool = False
    result: Optional[VerificationResponse] = None
