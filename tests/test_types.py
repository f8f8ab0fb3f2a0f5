"""
Tests for core types and the exception hierarchy.
"""

from __future__ import annotations

from fauna.exceptions import FaunaError, NoContextError, NotFound, TransportError
from fauna.types import Method, Pointer, Response, Stored, generate_id


class TestResponse:
    """Tests for Response decoding."""

    def test_from_empty_body(self) -> None:
        assert Response.from_body(None) == Response()
        assert Response.from_body({}) == Response()

    def test_null_references_become_empty(self) -> None:
        response = Response.from_body({"resource": {"class": "users"}, "references": None})

        assert response.resource == {"class": "users"}
        assert response.references == {}

    def test_cacheability_by_class(self) -> None:
        assert Response(resource={"class": "users", "ref": "users/1"}).is_cacheable
        assert not Response(resource={"class": "resources"}).is_cacheable
        assert not Response(resource={"class": "events"}).is_cacheable
        assert not Response().is_cacheable


class TestCacheEntries:
    def test_entries_are_distinct_variants(self) -> None:
        assert Pointer("users/1") != Stored({"ref": "users/1"})
        assert Pointer("users/1") == Pointer("users/1")


class TestHelpers:
    def test_generate_id_prefix(self) -> None:
        assert generate_id("txn").startswith("txn_")
        assert "_" not in generate_id()

    def test_method_compares_to_wire_string(self) -> None:
        assert Method.DELETE == "DELETE"
        assert Method("PATCH") is Method.PATCH


class TestExceptions:
    def test_str_includes_context(self) -> None:
        error = NotFound("GET users/1 returned 404", context={"status_code": 404})

        assert str(error) == "GET users/1 returned 404 (status_code=404)"
        assert isinstance(error, TransportError)
        assert isinstance(error, FaunaError)

    def test_str_without_context(self) -> None:
        assert str(NoContextError("no context")) == "no context"
        assert repr(NoContextError("x")) == "NoContextError('x', context={})"
