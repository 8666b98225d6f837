# cybertaxi/schemas/auth.py
from pydantic import BaseModel, Field, field_validator
from decimal import Decimal
from typing import Optional
import re

USERNAME_PATTERN = r"^[A-Za-z0-9_-]{3,50}$"
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72             # bcrypt only hashes the first 72 bytes
MAX_BANK_BALANCE = Decimal("9999999999.99")   # players.bank_balance NUMERIC(12,2)


def check_password_bytes(v: str) -> str:
    if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return v


class SignupRequest(BaseModel):
    username: str = Field(..., pattern=USERNAME_PATTERN)
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    bank_balance: Optional[Decimal] = Field(None, ge=0, le=MAX_BANK_BALANCE, decimal_places=2)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        if not EMAIL_RE.match(v):
            raise ValueError("Invalid email address")
        return v.lower()

    @field_validator("password")
    @classmethod
    def check_password(cls, v):
        return check_password_bytes(v)


class LoginRequest(BaseModel):
    player_id: int
    password: str


class UsernameLoginRequest(BaseModel):
    username: str
    password: str


class ResetPasswordRequest(BaseModel):
    username: str
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)

    @field_validator("new_password")
    @classmethod
    def check_new_password(cls, v):
        return check_password_bytes(v)
