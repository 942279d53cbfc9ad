"""Query assembly for generated GraphQL clients.

Generated selectors and operation builders call into this module at runtime
to render GraphQL argument literals and selection sets, and to assemble the
final request document:

    query { user(id: "123") { id name } }
"""

import json
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, TypeVar, Union
from uuid import UUID


class OperationType(Enum):
    """GraphQL operation kinds supported by generated builders."""
    QUERY = "query"
    MUTATION = "mutation"


class ArgumentKind(Enum):
    """How an argument value is rendered as a GraphQL literal."""
    STRING = "string"   # String and ID: always quoted
    INPUT = "input"     # Input objects: rendered by their own to_graphql()
    ENUM = "enum"       # Wire value, unquoted
    SCALAR = "scalar"   # Everything else: natural literal form


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def graphql_literal(value: Any) -> str:
    """Render a Python value as a GraphQL literal, recursing into containers."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value) if isinstance(value.value, str) else value.name
    if hasattr(value, "to_graphql"):
        return value.to_graphql()
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, (int, Decimal)):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, (datetime, date, time)):
        return _quote(value.isoformat())
    if isinstance(value, UUID):
        return _quote(str(value))
    if isinstance(value, Mapping):
        items = ", ".join(f"{k}: {graphql_literal(v)}" for k, v in value.items())
        return f"{{{items}}}"
    if isinstance(value, (list, tuple, set, frozenset)):
        return "[" + ", ".join(graphql_literal(v) for v in value) + "]"
    return _quote(str(value))


def encode(value: Any, kind: ArgumentKind = ArgumentKind.SCALAR) -> str:
    """Encode one argument value according to its declared kind."""
    if value is None:
        return "null"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(encode(v, kind) for v in value) + "]"
    if kind is ArgumentKind.STRING:
        return _quote(value.value if isinstance(value, Enum) else str(value))
    if kind is ArgumentKind.ENUM:
        return graphql_literal(value) if isinstance(value, Enum) else str(value)
    if kind is ArgumentKind.INPUT and hasattr(value, "to_graphql"):
        return value.to_graphql()
    return graphql_literal(value)


def encode_arguments(arguments: Iterable[tuple[str, Any, ArgumentKind]]) -> str:
    """Render ``name: value`` pairs joined by ", " in the given order."""
    return ", ".join(f"{name}: {encode(value, kind)}" for name, value, kind in arguments)


ArgsClause = Union[str, Sequence[tuple[str, str]], None]


def _args_clause(args: ArgsClause) -> str:
    if not args:
        return ""
    if isinstance(args, str):
        return args if args.startswith("(") else f"({args})"
    return "(" + ", ".join(f"{name}: {encoded}" for name, encoded in args) + ")"


def assemble(
    operation: Union[OperationType, str],
    field_name: str,
    args: ArgsClause = None,
    selection: str = "",
) -> str:
    """Assemble a request document for a single root field.

    Args:
        operation: "query" or "mutation"
        field_name: The root field to request
        args: Encoded arguments, as ``(name, literal)`` pairs or a rendered
            clause. No parentheses are emitted when empty.
        selection: Rendered selection set, e.g. ``{ id name }``. Omitted
            when empty (scalar-returning fields).
    """
    op = OperationType(operation).value
    document = f"{op} {{ {field_name}{_args_clause(args)}"
    if selection:
        document += f" {selection}"
    return document + " }"


S = TypeVar("S", bound="Selector")


class Selector:
    """Base class for generated field selectors.

    Fields render in the order they were first selected. Re-selecting a
    field keeps its position and replaces its arguments and sub-selection.
    """

    def __init__(self):
        self._selections: dict[str, tuple[str, Optional[str]]] = {}

    def _select(self: S, field_name: str, arguments: str = "") -> S:
        self._selections[field_name] = (arguments, None)
        return self

    def _select_nested(
        self: S,
        field_name: str,
        selector_class: type["Selector"],
        selector: Callable[[Any], Any],
        arguments: str = "",
    ) -> S:
        self._selections[field_name] = (arguments, render_selection(selector_class, selector))
        return self

    @property
    def selected_fields(self) -> list[str]:
        return list(self._selections)

    def build(self) -> str:
        """Build the GraphQL selection set string."""
        if not self._selections:
            return "{ __typename }"
        parts = []
        for name, (arguments, nested) in self._selections.items():
            rendered = name + (f"({arguments})" if arguments else "")
            if nested is not None:
                rendered += f" {nested}"
            parts.append(rendered)
        return "{ " + " ".join(parts) + " }"

    def __str__(self) -> str:
        return self.build()


def render_selection(selector_class: type[Selector], selector: Callable[[Any], Any]) -> str:
    """Run a selection callback against a fresh selector and render it.

    The callback may return the selector (for chained calls) or None.
    """
    instance = selector_class()
    result = selector(instance)
    if isinstance(result, Selector):
        instance = result
    return instance.build()


def field_arguments(arguments: Iterable[tuple[str, Any, ArgumentKind]]) -> str:
    """Encode selector field arguments, skipping ones left as None."""
    return encode_arguments((n, v, k) for n, v, k in arguments if v is not None)
