"""
Core types for the Fauna client.

This module defines the data structures shared by the cache, the context
stack and the transaction builder:
- Reference and Resource aliases
- Method enum for HTTP-style verbs
- Response record decoded from the wire
- Pointer/Stored cache entries (the two shapes a cache slot can take)
- Helper for generating time-ordered identifiers
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Union

from uuid6 import uuid7

Reference = str
Resource = dict[str, Any]

# Listing and stream classes are never point-cached.
UNCACHEABLE_CLASSES: frozenset[str] = frozenset({"resources", "events"})


def generate_id(prefix: str = "") -> str:
    """Generate a time-ordered unique ID using UUID7.

    Args:
        prefix: Optional prefix for the ID (e.g., "txn").

    Returns:
        A unique ID string, optionally prefixed.
    """
    uid = str(uuid7())
    return f"{prefix}_{uid}" if prefix else uid


class Method(str, Enum):
    """HTTP-style methods an action or request can use."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


@dataclass(frozen=True)
class Response:
    """Decoded result of a transport call.

    `resource` is the primary payload; `references` holds resources the
    service returned alongside it (expanded or related resources).
    """

    resource: Resource | None = None
    references: dict[Reference, Resource] = field(default_factory=dict)

    @classmethod
    def from_body(cls, body: Mapping[str, Any] | None) -> Response:
        """Build a response from a decoded JSON body."""
        if not body:
            return cls()
        return cls(
            resource=body.get("resource"),
            references=dict(body.get("references") or {}),
        )

    @property
    def is_cacheable(self) -> bool:
        """True when the primary resource may be stored under its refs."""
        if self.resource is None:
            return False
        return self.resource.get("class") not in UNCACHEABLE_CLASSES


@dataclass(frozen=True)
class Pointer:
    """Cache entry for a non-canonical ref: points at the canonical ref."""

    ref: Reference


@dataclass(frozen=True)
class Stored:
    """Cache entry holding a resource under its canonical ref."""

    resource: Resource


CacheEntry = Union[Pointer, Stored]
