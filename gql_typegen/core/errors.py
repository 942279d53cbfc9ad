"""Exception hierarchy for gql-typegen.

Schema errors abort a generation run. Builder and enum errors are raised by
generated code at runtime and are local to the caller.
"""

from pathlib import Path
from typing import Any


class GqlTypegenError(Exception):
    """Base class for all gql-typegen errors."""


class SchemaError(GqlTypegenError):
    """The schema could not be turned into a type registry."""


class SchemaSyntaxError(SchemaError):
    """Schema text could not be parsed."""

    def __init__(self, detail: str, source_name: str | None = None):
        self.detail = detail
        self.source_name = source_name
        where = f" in {source_name}" if source_name else ""
        super().__init__(f"Invalid GraphQL schema{where}: {detail}")


class DuplicateTypeName(SchemaError):
    """Two top-level definitions share a name."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"Duplicate type definition: {type_name}")


class RequiredFieldMissing(GqlTypegenError, ValueError):
    """A non-null input field was not set before build()."""

    def __init__(self, type_name: str, field_name: str):
        self.type_name = type_name
        self.field_name = field_name
        super().__init__(f"{type_name}.{field_name} is required")


class UnknownEnumValue(GqlTypegenError, ValueError):
    """A wire value does not match any declared enum constant."""

    def __init__(self, enum_name: str, value: Any):
        self.enum_name = enum_name
        self.value = value
        super().__init__(f"Unknown {enum_name}: {value!r}")


class ArtifactWriteFailure(GqlTypegenError):
    """A generated artifact could not be written to disk."""

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to write {path}: {cause}")


class InvalidTemplateOutput(GqlTypegenError):
    """A template rendered source that is not valid Python."""

    def __init__(self, artifact_name: str, template_name: str, cause: SyntaxError):
        self.artifact_name = artifact_name
        self.template_name = template_name
        super().__init__(
            f"Generated invalid Python for {artifact_name}: {cause}\n"
            f"Template: {template_name}"
        )


class GraphQLError(GqlTypegenError):
    """Exception raised for GraphQL errors in a response."""

    def __init__(self, message: str, errors: list[dict[str, Any]]):
        self.message = message
        self.errors = errors
        super().__init__(message)
