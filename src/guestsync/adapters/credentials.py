"""Explicit session credentials for vendor API clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class Credential:
    """Headers that authenticate a session against one vendor.

    Authentication calls return a new ``Credential``; nothing mutates one in place.
    """

    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def is_anonymous(self) -> bool:
        return not self.headers

    def merged(self, extra: Mapping[str, str]) -> Credential:
        return Credential(headers={**self.headers, **extra})


ANONYMOUS = Credential()
