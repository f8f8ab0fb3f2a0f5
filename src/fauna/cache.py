"""
Reference-indirection cache in front of a transport.

Every response updates the cache: a requested ref maps to the resource's
canonical ref, the canonical ref holds the resource, and side-loaded
references are merged in as-is. Entries are removed only by an explicit
delete of that exact ref.
"""

from __future__ import annotations

from typing import Any, Mapping

from fauna.connection import Transport
from fauna.exceptions import InvalidTransaction
from fauna.logging import get_logger
from fauna.types import CacheEntry, Method, Pointer, Reference, Resource, Response, Stored

logger = get_logger(__name__)


class Cache:
    """Per-context resource cache wrapping one transport.

    Not safe for concurrent mutation; each context owns its own cache.
    """

    def __init__(self, connection: Transport) -> None:
        if connection is None:
            raise ValueError("Connection cannot be None")
        self.connection = connection
        self._entries: dict[Reference, CacheEntry] = {}

    def __contains__(self, ref: object) -> bool:
        return ref in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(
        self,
        ref: Reference,
        query: Mapping[str, Any] | None = None,
        pagination: Mapping[str, Any] | None = None,
    ) -> Resource | None:
        """Return the resource at `ref`, fetching it on a miss.

        A pointer entry resolves one hop to its canonical ref. If the
        canonical entry is gone the lookup counts as a miss.

        Hits return the cached dict itself, not a copy: every caller shares
        it, so mutating the result changes what later lookups see.
        """
        resource = self._lookup(ref)
        if resource is not None:
            logger.debug("Cache hit", ref=ref)
            return resource

        logger.debug("Cache miss", ref=ref)
        params = {**(query or {}), **(pagination or {})}
        response = self.connection.get(ref, params)
        self._update(ref, response)
        return response.resource

    def post(self, ref: Reference, data: Mapping[str, Any]) -> Resource | None:
        response = self.connection.post(ref, data)
        self._update(ref, response)
        return response.resource

    def put(self, ref: Reference, data: Mapping[str, Any]) -> Resource | None:
        response = self.connection.put(ref, data)
        if response.resource is None:
            return None
        self._update(ref, response)
        return response.resource

    def patch(self, ref: Reference, data: Mapping[str, Any]) -> Resource | None:
        response = self.connection.patch(ref, data)
        if response.resource is None:
            return None
        self._update(ref, response)
        return response.resource

    def delete(self, ref: Reference, data: Mapping[str, Any]) -> None:
        self.connection.delete(ref, data)
        self._evict(ref)

    def post_transaction(self, data: Mapping[str, Any]) -> Resource | None:
        """Submit a compiled transaction and cache the last action's result.

        Only the final action is reflected in the cache: a trailing DELETE
        evicts its path, anything else caches the response under its path.

        Raises:
            InvalidTransaction: If `data` has no actions.
        """
        actions = data.get("actions") or []
        if not actions:
            raise InvalidTransaction("Transaction must include at least one action")

        response = self.connection.post_transaction(data)

        last = actions[-1]
        if last["method"] == Method.DELETE:
            self._evict(last["path"])
            return None

        if response.resource is None:
            return None
        # TODO: resolve "$N" variable paths against the response before caching
        self._update(last["path"], response)
        return response.resource

    def _lookup(self, ref: Reference) -> Resource | None:
        entry = self._entries.get(ref)
        if isinstance(entry, Pointer):
            entry = self._entries.get(entry.ref)
        if isinstance(entry, Stored):
            return entry.resource
        return None

    def _evict(self, ref: Reference) -> None:
        if self._entries.pop(ref, None) is not None:
            logger.debug("Evicted cache entry", ref=ref)

    def _update(self, ref: Reference, response: Response) -> None:
        resource = response.resource
        if resource is not None and response.is_cacheable:
            canonical = resource.get("ref")
            if canonical is None:
                self._entries[ref] = Stored(resource)
            else:
                # Written first so a self-pointer is overwritten by the resource
                self._entries[ref] = Pointer(canonical)
                self._entries[canonical] = Stored(resource)

        for reference, referenced in response.references.items():
            self._entries[reference] = Stored(referenced)
