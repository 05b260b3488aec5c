"""Pydantic models describing the August API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AugustBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SessionResponse(AugustBaseModel):
    user_id: str | None = Field(default=None, alias="userId")


class UnverifiedUserResponse(AugustBaseModel):
    id: str

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value


class PinEntry(AugustBaseModel):
    user_id: str = Field(alias="userID")
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    pin: str | None = None
    state: str | None = None
    access_type: str | None = Field(default=None, alias="accessType")
    access_times: str | None = Field(default=None, alias="accessTimes")
    slot: int | None = None

    @field_validator("user_id", "pin", mode="before")
    @classmethod
    def _coerce_str(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value
