"""Pydantic models describing the Guesty API payloads."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class GuestyBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class AuthResponse(GuestyBaseModel):
    token: str


class GuestPayload(GuestyBaseModel):
    full_name: str | None = Field(default=None, alias="fullName")
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    phone: str | None = None
    email: str | None = None

    _normalize_names = field_validator("full_name", "first_name", "last_name", mode="before")(
        _blank_to_none
    )


class ListingPayload(GuestyBaseModel):
    nickname: str | None = None
    title: str | None = None


class MoneyPayload(GuestyBaseModel):
    currency: str | None = None
    total_paid: Decimal | None = Field(default=None, alias="totalPaid")
    host_payout: Decimal | None = Field(default=None, alias="hostPayout")


class ReservationPayload(GuestyBaseModel):
    id: str = Field(alias="_id")
    status: str | None = None
    check_in: AwareDatetime = Field(alias="checkIn")
    check_out: AwareDatetime = Field(alias="checkOut")
    check_in_date_localized: date | None = Field(default=None, alias="checkInDateLocalized")
    check_out_date_localized: date | None = Field(default=None, alias="checkOutDateLocalized")
    confirmation_code: str | None = Field(default=None, alias="confirmationCode")
    listing_id: str | None = Field(default=None, alias="listingId")
    guest: GuestPayload = Field(default_factory=GuestPayload)
    listing: ListingPayload | None = None
    money: MoneyPayload | None = None


class ReservationsResponse(GuestyBaseModel):
    results: list[ReservationPayload]
    count: int
    limit: int | None = None
    skip: int | None = None
