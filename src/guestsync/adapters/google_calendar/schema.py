"""Pydantic models for the Google Calendar v3 event resources we touch."""

from __future__ import annotations

from datetime import date

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field


class CalendarBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class EventTime(CalendarBaseModel):
    date_time: AwareDatetime | None = Field(default=None, alias="dateTime")
    all_day: date | None = Field(default=None, alias="date")
    time_zone: str | None = Field(default=None, alias="timeZone")


class ExtendedProperties(CalendarBaseModel):
    private: dict[str, str] = Field(default_factory=dict)
    shared: dict[str, str] = Field(default_factory=dict)


class EventResource(CalendarBaseModel):
    id: str
    status: str | None = None
    summary: str | None = None
    location: str | None = None
    description: str | None = None
    start: EventTime | None = None
    end: EventTime | None = None
    extended_properties: ExtendedProperties = Field(
        default_factory=ExtendedProperties, alias="extendedProperties"
    )


class EventsResponse(CalendarBaseModel):
    items: list[EventResource] = Field(default_factory=list)
    next_page_token: str | None = Field(default=None, alias="nextPageToken")
