"""Public interface for the August adapter."""

from __future__ import annotations

from .client import AugustAPIError, AugustClient
from .schema import PinEntry
from .translator import format_access_times, parse_access_times, parse_pin_listing

__all__ = [
    "AugustAPIError",
    "AugustClient",
    "PinEntry",
    "format_access_times",
    "parse_access_times",
    "parse_pin_listing",
]
