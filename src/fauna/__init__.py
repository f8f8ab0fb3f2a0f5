"""Fauna - resource-caching and transaction-batching client for the Fauna REST API."""

__version__ = "0.2.0"

from fauna.cache import Cache
from fauna.client import context, current
from fauna.connection import Connection, Transport
from fauna.exceptions import (
    BadRequest,
    FaunaError,
    Invalid,
    InvalidTransaction,
    NoContextError,
    NotFound,
    TransactionBadRequest,
    TransportError,
)
from fauna.transaction import Transaction, escape
from fauna.types import Method, Response

__all__ = [
    "__version__",
    "BadRequest",
    "Cache",
    "Connection",
    "FaunaError",
    "Invalid",
    "InvalidTransaction",
    "Method",
    "NoContextError",
    "NotFound",
    "Response",
    "Transaction",
    "TransactionBadRequest",
    "Transport",
    "TransportError",
    "context",
    "current",
    "escape",
]
