"""Tool registry: maps tool names to their declaration and handler."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from jsonschema import Draft202012Validator, SchemaError
from jsonschema.exceptions import best_match

from toolcall_bridge._exceptions import (
    DuplicateNameError,
    InvalidArgumentsError,
    UnknownToolError,
)
from toolcall_bridge.types import ToolDeclaration, ToolHandler

__all__ = ["ToolRegistry"]

logger = logging.getLogger(__name__)


class ToolRegistry:
    """
    Registry of callable tools.

    Registration is expected to finish before the registry is handed to a
    loop; afterwards it is only read, so one registry can back several
    conversations.
    """

    def __init__(self) -> None:
        # dicts keep insertion order, which gives declarations() a stable order
        self._declarations: dict[str, ToolDeclaration] = {}
        self._handlers: dict[str, ToolHandler] = {}
        self._validators: dict[str, Draft202012Validator] = {}

    def register(self, declaration: ToolDeclaration, handler: ToolHandler) -> None:
        """Register *handler* under ``declaration.name``.

        Raises:
            DuplicateNameError: if the name is already registered.
            ValueError: if the parameter schema itself is not valid JSON schema.
        """
        name = declaration.name
        if name in self._declarations:
            raise DuplicateNameError(name)
        if not callable(handler):
            raise TypeError(f"handler for {name!r} is not callable")
        try:
            Draft202012Validator.check_schema(declaration.parameters)
        except SchemaError as exc:
            raise ValueError(f"Invalid parameter schema for {name!r}: {exc.message}") from exc

        self._declarations[name] = declaration
        self._handlers[name] = handler
        self._validators[name] = Draft202012Validator(declaration.parameters)
        logger.debug("Registered tool %s", name)

    def tool(
        self,
        name: Optional[str] = None,
        *,
        description: str = "",
        parameters: Optional[dict[str, Any]] = None,
    ) -> Callable[[ToolHandler], ToolHandler]:
        """Decorator form of :meth:`register`.

        Example::

            @registry.tool(description="Add two numbers", parameters=schema)
            def addTwoNumbers(a: float, b: float) -> float:
                return a + b
        """

        def decorator(func: ToolHandler) -> ToolHandler:
            declaration = ToolDeclaration(
                name=name or func.__name__,
                description=description or (func.__doc__ or "").strip(),
                parameters=parameters or {"type": "object", "properties": {}},
            )
            self.register(declaration, func)
            return func

        return decorator

    def resolve(self, name: str) -> ToolHandler:
        try:
            return self._handlers[name]
        except KeyError:
            raise UnknownToolError(name) from None

    def declaration(self, name: str) -> ToolDeclaration:
        try:
            return self._declarations[name]
        except KeyError:
            raise UnknownToolError(name) from None

    def declarations(self) -> list[ToolDeclaration]:
        return list(self._declarations.values())

    def names(self) -> list[str]:
        return list(self._declarations)

    def validate_arguments(self, name: str, arguments: Any) -> None:
        """Check *arguments* against the declared parameter schema.

        Raises:
            UnknownToolError: if *name* is not registered.
            InvalidArgumentsError: on the first schema violation.
        """
        try:
            validator = self._validators[name]
        except KeyError:
            raise UnknownToolError(name) from None

        if not isinstance(arguments, dict):
            raise InvalidArgumentsError(
                name, f"expected an object, got {type(arguments).__name__}"
            )
        first = best_match(validator.iter_errors(arguments))
        if first is not None:
            where = ".".join(str(p) for p in first.path) or "<root>"
            raise InvalidArgumentsError(name, f"{where}: {first.message}")

    def __contains__(self, name: object) -> bool:
        return name in self._declarations

    def __len__(self) -> int:
        return len(self._declarations)

    def __repr__(self) -> str:
        return f"ToolRegistry(tools={self.names()!r})"
