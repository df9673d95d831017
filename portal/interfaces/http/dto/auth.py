from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# Field formats are checked by the register/login use cases so that the first
# offending field is reported; these models only fix the body's shape.
_REQUEST_CONFIG = ConfigDict(
    validate_by_name=True,
    validate_by_alias=True,
    coerce_numbers_to_str=True,
    extra="ignore",
)


class RegisterRequestDTO(BaseModel):
    username: str | None = None
    password: str | None = None
    id_number: str | None = Field(None, alias="idNumber")
    account_number: str | None = Field(None, alias="accountNumber")
    confirm_password: str | None = Field(None, alias="confirmPassword")
    name: str | None = None

    model_config = _REQUEST_CONFIG


class LoginRequestDTO(BaseModel):
    username: str | None = None
    password: str | None = None

    model_config = _REQUEST_CONFIG


class AuthSuccessDTO(BaseModel):
    message: str
    token: str


class AccountSummaryDTO(BaseModel):
    id: int
    username: str
    created_at: datetime = Field(serialization_alias="createdAt")
