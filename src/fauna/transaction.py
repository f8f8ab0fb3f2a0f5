"""
Transaction builder.

A Transaction is an ordered list of actions submitted as one atomic batch.
Each builder call returns the action's index, which later actions can use
as a server-side variable (`${0.ref}` refers to the result of action 0).

Literal `$` characters in action data are escaped by doubling so the
service does not read them as variables:
- default mode leaves `$` alone when it is followed by `{`
- strict mode escapes every `$`
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping

from fauna import client
from fauna.exceptions import BadRequest, InvalidTransaction, TransactionBadRequest
from fauna.logging import get_logger, log_context
from fauna.types import Method, Resource, generate_id

logger = get_logger(__name__)

_UNBRACED_DOLLAR = re.compile(r"\$(?!\{)")


def escape(value: Any, strict: bool = False) -> Any:
    """Escape `$` in every string leaf of `value`.

    Mappings and sequences are rebuilt with escaped values; keys and
    non-string leaves are returned unchanged.

    Args:
        value: A string, mapping, list/tuple or any other leaf.
        strict: Escape every `$`, including `${...}` variable references.

    Returns:
        The escaped copy of `value`.
    """
    if isinstance(value, str):
        if strict:
            return value.replace("$", "$$")
        return _UNBRACED_DOLLAR.sub("$$", value)
    if isinstance(value, Mapping):
        return {key: escape(item, strict) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [escape(item, strict) for item in value]
    return value


@dataclass
class ActionBody:
    """The recognized sections of an action body.

    Only `data` is escaped; the other sections are sent verbatim.
    """

    data: Any = None
    constraints: Any = None
    references: Any = None
    permissions: Any = None

    @classmethod
    def from_mapping(cls, body: Mapping[str, Any] | None) -> ActionBody:
        """Keep the recognized sections of `body`, dropping any other key."""
        if not body:
            return cls()
        return cls(
            data=body.get("data"),
            constraints=body.get("constraints"),
            references=body.get("references"),
            permissions=body.get("permissions"),
        )

    @property
    def is_empty(self) -> bool:
        return (
            self.data is None
            and self.constraints is None
            and self.references is None
            and self.permissions is None
        )

    def compile(self) -> dict[str, Any]:
        compiled: dict[str, Any] = {}
        if self.data is not None:
            compiled["data"] = escape(self.data)
        if self.constraints is not None:
            compiled["constraints"] = self.constraints
        if self.references is not None:
            compiled["references"] = self.references
        if self.permissions is not None:
            compiled["permissions"] = self.permissions
        return compiled


@dataclass
class Action:
    """One method/path/body step of a transaction."""

    method: Method
    path: str
    body: ActionBody

    def compile(self) -> dict[str, Any]:
        compiled: dict[str, Any] = {"method": self.method.value, "path": self.path}
        if not self.body.is_empty:
            compiled["body"] = self.body.compile()
        return compiled


class Transaction:
    """Ordered batch of actions plus parameters, executed through the active context.

    Example:
        txn = Transaction()
        user = txn.post("users", {"data": {"name": "Ada"}})
        txn.post("posts", {"data": {"author": f"${{{user}.ref}}"}})
        txn.execute()
    """

    def __init__(self, params: Mapping[str, Any] | None = None) -> None:
        self.actions: list[Action] = []
        self.params: dict[str, Any] = dict(params or {})
        self.transaction_id = generate_id("txn")

    def __len__(self) -> int:
        return len(self.actions)

    def get(self, path: str, body: Mapping[str, Any] | None = None) -> int:
        return self._add(Method.GET, path, body)

    def post(self, path: str, body: Mapping[str, Any] | None = None) -> int:
        return self._add(Method.POST, path, body)

    def put(self, path: str, body: Mapping[str, Any] | None = None) -> int:
        return self._add(Method.PUT, path, body)

    def patch(self, path: str, body: Mapping[str, Any] | None = None) -> int:
        return self._add(Method.PATCH, path, body)

    def delete(self, path: str, body: Mapping[str, Any] | None = None) -> int:
        return self._add(Method.DELETE, path, body)

    def _add(self, method: Method, path: str, body: Mapping[str, Any] | None) -> int:
        self.actions.append(Action(method, path, ActionBody.from_mapping(body)))
        return len(self.actions) - 1

    def compile(self, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Compile the batch request body.

        Args:
            params: Execution parameters; they win over stored params on collision.

        Returns:
            `{"actions": [...], "params": {...}}`, with params omitted when empty.
        """
        merged = {**self.params, **(params or {})}
        body: dict[str, Any] = {"actions": [action.compile() for action in self.actions]}
        if merged:
            body["params"] = merged
        return body

    def execute(self, params: Mapping[str, Any] | None = None) -> Resource | None:
        """Submit the transaction through the active context.

        Returns:
            The last action's resource, or None if it was a DELETE or returned nothing.

        Raises:
            InvalidTransaction: If no actions were added (nothing is sent).
            TransactionBadRequest: If the service rejects the batch.
            NoContextError: If called outside a client context.
        """
        if not self.actions:
            raise InvalidTransaction(
                "Transaction must include at least one action",
                context={"transaction_id": self.transaction_id},
            )

        body = self.compile(params)

        with log_context(transaction_id=self.transaction_id):
            logger.info("Submitting transaction", actions=len(self.actions))
            try:
                return client.post_transaction(body)
            except BadRequest as e:
                logger.warning("Transaction rejected", error=e.message)
                raise TransactionBadRequest(e.message, context=e.context) from e
