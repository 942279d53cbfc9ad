"""Runtime base classes for generated value types, input types and enums."""

from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict

from .errors import RequiredFieldMissing, UnknownEnumValue
from .query_builder import graphql_literal


def _freeze(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, dict):
        return tuple(sorted((k, _freeze(v)) for k, v in value.items()))
    return value


class GraphQLObject(BaseModel):
    """Base class for generated object types.

    Instances are immutable. Equality and hashing cover every field in
    declaration order; payloads decode with ``model_validate`` using the
    GraphQL field names.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def __hash__(self) -> int:
        return hash((type(self),) + tuple(_freeze(v) for v in self.__dict__.values()))

    @classmethod
    def graphql_field_names(cls) -> list[str]:
        """GraphQL field names in declaration order."""
        return [info.alias or name for name, info in cls.model_fields.items()]


class GraphQLInput(GraphQLObject):
    """Base class for generated input types."""

    def to_graphql(self) -> str:
        """Render this value as a GraphQL input object literal."""
        parts = [
            f"{info.alias or name}: {graphql_literal(getattr(self, name))}"
            for name, info in type(self).model_fields.items()
        ]
        return "{" + ", ".join(parts) + "}"


class InputBuilder:
    """Base class for generated input builders.

    Setters record values; ``build()`` checks every required field and
    constructs a fresh input each time it is called.
    """

    _target: ClassVar[type[GraphQLInput]]
    _required: ClassVar[tuple[str, ...]] = ()

    def __init__(self, **values: Any):
        self._values: dict[str, Any] = dict(values)

    def _set(self, name: str, value: Any):
        self._values[name] = value
        return self

    def build(self) -> GraphQLInput:
        fields = self._target.model_fields
        for name in self._required:
            if self._values.get(name) is None:
                raise RequiredFieldMissing(self._target.__name__, fields[name].alias or name)
        return self._target(**{name: self._values.get(name) for name in fields})


class GraphQLEnum(str, Enum):
    """Base class for generated enums; member values are wire strings."""

    @classmethod
    def _missing_(cls, value: object):
        raise UnknownEnumValue(cls.__name__, value)

    @classmethod
    def from_graphql(cls, value: str):
        """Look up the member for a wire value."""
        return cls(value)

    @property
    def graphql_value(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value
