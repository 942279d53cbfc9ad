"""Executable operations produced by generated operation builders.

An ExecutableOperation carries everything needed to assemble one request
document. Sending it is delegated to a Transport supplied by the caller.
"""

import logging
from typing import Any, Generic, Mapping, Optional, Protocol, TypeVar, runtime_checkable

from pydantic import TypeAdapter

from .errors import GraphQLError
from .query_builder import OperationType, assemble

logger = logging.getLogger(__name__)

D = TypeVar("D")


@runtime_checkable
class Transport(Protocol):
    """Protocol for sending GraphQL documents.

    Implement this protocol to plug in an HTTP client.

    Example:
        class HttpxTransport:
            def __init__(self, url: str):
                self.client = httpx.Client(base_url=url)

            def execute(self, document: str) -> dict:
                response = self.client.post("", json={"query": document})
                response.raise_for_status()
                return response.json()
    """

    def execute(self, document: str) -> Mapping[str, Any]:
        """Send a request document and return the decoded JSON response."""
        ...


class ExecutableOperation(Generic[D]):
    """A fully built query or mutation for a single root field."""

    def __init__(
        self,
        transport: Optional[Transport],
        operation_type: OperationType,
        field_name: str,
        args: Optional[str],
        selection: str,
        response_type: Any,
    ):
        self.transport = transport
        self.operation_type = operation_type
        self.field_name = field_name
        self.args = args
        self.selection = selection
        self.response_type = response_type

    @property
    def query(self) -> str:
        """The assembled GraphQL request document."""
        return assemble(self.operation_type, self.field_name, self.args, self.selection)

    def execute(self) -> D:
        """Send the document and decode the root field of the response.

        Raises:
            GraphQLError: If the response contains errors
        """
        if self.transport is None:
            raise RuntimeError(f"No transport configured for {self.field_name}")

        document = self.query
        logger.debug("Executing %s", document)
        result = self.transport.execute(document)

        if result.get("errors"):
            error_messages = "; ".join(e.get("message", str(e)) for e in result["errors"])
            raise GraphQLError(f"GraphQL errors: {error_messages}", result["errors"])

        data = result.get("data") or {}
        return TypeAdapter(self.response_type).validate_python(data.get(self.field_name))

    def __str__(self) -> str:
        return self.query

    def __repr__(self) -> str:
        return f"ExecutableOperation({self.query!r})"
