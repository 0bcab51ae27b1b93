from typing import Optional
from pydantic import BaseModel, field_validator


class SignupRequest(BaseModel):
    email: str = ""
    password: str = ""
    name: Optional[str] = None

    @field_validator("password")
    @classmethod
    def reject_nul_bytes(cls, value: str) -> str:
        # bcrypt cannot hash passwords containing NUL
        if "\x00" in value:
            raise ValueError("Password must not contain NUL characters")
        return value


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""
