from typing import Optional

from pydantic import BaseModel, SecretStr


class LoginRequest(BaseModel):
    usr: str
    pwd: SecretStr

    class Config:
        json_schema_extra = {'example': {'usr': 'gate.staff@example.com', 'pwd': 'P@ssw0rd'}}


class SessionResponse(BaseModel):
    message: str
    user: Optional[str] = None
