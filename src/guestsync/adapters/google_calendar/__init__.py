"""Public interface for the Google Calendar adapter."""

from __future__ import annotations

from .client import GoogleCalendarAPIError, GoogleCalendarClient
from .translator import event_body, event_to_record

__all__ = [
    "GoogleCalendarAPIError",
    "GoogleCalendarClient",
    "event_body",
    "event_to_record",
]
