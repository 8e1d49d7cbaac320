from decimal import Decimal
from pathlib import Path
from typing import Annotated, List

import orjson
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Venue Ticketing Storefront'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production
    LOG_DIR: Path = _PROJECT_ROOT / 'logs'

    # CORS
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = []  # comma-separated or a JSON list

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and v.startswith('['):
            return orjson.loads(v)
        elif isinstance(v, str):
            return [i.strip() for i in v.split(',') if i.strip()]
        elif isinstance(v, list):
            return v
        return []

    # Remote Booking Service (RPC over HTTP)
    BOOKING_SERVICE_URL: str = 'http://localhost:8000'
    BOOKING_API_APP: str = 'chavara_booking'  # Dotted method prefix on the remote side
    HTTP_TIMEOUT_SECONDS: float = 10.0
    CSRF_TOKEN_TTL_SECONDS: float = 3600.0
    CSRF_HEADER_NAME: str = 'X-Frappe-CSRF-Token'

    # Seat locks
    LOCK_POLL_INTERVAL_SECONDS: float = 10.0
    SEAT_LOCK_TTL_SECONDS: int = 300  # Server-side TTL, shown to the user as 5:00

    # Pricing
    CONVENIENCE_FEE_RATE: Decimal = Decimal('0.12')
    FEE_GST_RATE: Decimal = Decimal('0.18')  # GST portion contained inside the fee

    # Customer details
    MIN_PHONE_DIGITS: int = 10

    # Storefront sessions
    SESSION_COOKIE_NAME: str = 'storefront_session'
    LOGIN_PATH: str = '/login'
    SESSION_IDLE_TIMEOUT_SECONDS: float = 600.0  # Past the seat lock TTL
    SESSION_SWEEP_INTERVAL_SECONDS: float = 60.0


settings = Settings()  # type: ignore
