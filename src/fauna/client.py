"""
Execution context stack and module-level operations.

Operations always target the cache on top of the current stack. The stack
lives in a ContextVar, so each thread (and each asyncio task, starting from
a snapshot of its creator's stack) sees its own contexts.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Callable, Generator, Mapping

from fauna.cache import Cache
from fauna.connection import Transport
from fauna.exceptions import NoContextError
from fauna.logging import get_logger, log_context
from fauna.types import Reference, Resource

if TYPE_CHECKING:
    from fauna.transaction import Transaction

logger = get_logger(__name__)

_stack_var: ContextVar[tuple[Cache, ...]] = ContextVar("fauna_context_stack", default=())


@contextmanager
def context(connection: Transport) -> Generator[Cache, None, None]:
    """Run the enclosed block with a fresh cache bound to `connection`.

    The previous stack is restored when the block exits, whether it
    returns normally or raises.

    Args:
        connection: Transport the new cache reads and writes through.

    Yields:
        The cache made active for the block.
    """
    cache = Cache(connection)
    token = _stack_var.set(_stack_var.get() + (cache,))
    logger.debug("Entered context", depth=len(_stack_var.get()))
    try:
        with log_context(domain=getattr(connection, "domain", None)):
            yield cache
    finally:
        _stack_var.reset(token)
        logger.debug("Exited context", depth=len(_stack_var.get()))


def push_context(connection: Transport) -> Cache:
    """Push a new cache for `connection` without a scope; pair with pop_context()."""
    cache = Cache(connection)
    _stack_var.set(_stack_var.get() + (cache,))
    return cache


def pop_context() -> Cache | None:
    """Discard the top context, returning its cache (None if the stack is empty)."""
    stack = _stack_var.get()
    if not stack:
        return None
    _stack_var.set(stack[:-1])
    return stack[-1]


def reset_context() -> None:
    """Drop every context on the current stack."""
    _stack_var.set(())


def current() -> Cache:
    """Return the active cache.

    Raises:
        NoContextError: If no context has been entered.
    """
    stack = _stack_var.get()
    if not stack:
        raise NoContextError(
            "You must be within a fauna.client.context() block to perform operations."
        )
    return stack[-1]


def get(
    ref: Reference,
    query: Mapping[str, Any] | None = None,
    pagination: Mapping[str, Any] | None = None,
) -> Resource | None:
    return current().get(ref, query or {}, pagination or {})


def post(ref: Reference, data: Mapping[str, Any] | None = None) -> Resource | None:
    return current().post(ref, data or {})


def put(ref: Reference, data: Mapping[str, Any] | None = None) -> Resource | None:
    return current().put(ref, data or {})


def patch(ref: Reference, data: Mapping[str, Any] | None = None) -> Resource | None:
    return current().patch(ref, data or {})


def delete(ref: Reference, data: Mapping[str, Any] | None = None) -> None:
    current().delete(ref, data or {})


def post_transaction(data: Mapping[str, Any]) -> Resource | None:
    return current().post_transaction(data)


def transaction(
    build: Callable[[Transaction], Any] | None = None,
    params: Mapping[str, Any] | None = None,
) -> Resource | None:
    """Build and execute a transaction in one call.

    Example:
        def build(t):
            user = t.post("users", {"data": {"name": "Ada"}})
            t.post("posts", {"data": {"author": f"${{{user}.ref}}"}})

        fauna.client.transaction(build)
    """
    from fauna.transaction import Transaction

    txn = Transaction()
    if build is not None:
        build(txn)
    return txn.execute(params)
