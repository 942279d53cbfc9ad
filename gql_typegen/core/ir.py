"""Intermediate Representation (IR) for GraphQL schemas.

This module defines the normalized type registry that every generator reads.
Type references keep the full named/list/non-null tree so nullability and
list nesting survive into generated annotations.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Union

from .errors import DuplicateTypeName

ROOT_TYPE_NAMES = ("Query", "Mutation", "Subscription")


@dataclass(frozen=True)
class NamedType:
    """Reference to a type by name, e.g. ``User``."""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ListType:
    """List wrapper, e.g. ``[User]``."""
    of_type: "TypeRef"

    def __str__(self) -> str:
        return f"[{self.of_type}]"


@dataclass(frozen=True)
class NonNullType:
    """Non-null wrapper, e.g. ``User!``."""
    of_type: "TypeRef"

    def __post_init__(self):
        if isinstance(self.of_type, NonNullType):
            raise ValueError(f"NonNull cannot wrap another NonNull: {self.of_type}!")

    def __str__(self) -> str:
        return f"{self.of_type}!"


TypeRef = Union[NamedType, ListType, NonNullType]


def base_type_name(type_ref: TypeRef) -> str:
    """Return the innermost named type of a reference."""
    while not isinstance(type_ref, NamedType):
        type_ref = type_ref.of_type
    return type_ref.name


@dataclass(frozen=True)
class IRArgument:
    """Represents an argument to a field or operation."""
    name: str
    type: TypeRef
    description: str | None = None
    default_value: str | None = None  # GraphQL literal text

    @property
    def is_required(self) -> bool:
        return isinstance(self.type, NonNullType)


@dataclass(frozen=True)
class IRField:
    """Represents a field in a GraphQL object or input type."""
    name: str
    type: TypeRef
    description: str | None = None
    arguments: tuple[IRArgument, ...] = ()

    @property
    def type_name(self) -> str:
        return base_type_name(self.type)

    @property
    def is_required(self) -> bool:
        return isinstance(self.type, NonNullType)


@dataclass(frozen=True)
class IRObjectType:
    """Represents a GraphQL object type (or interface)."""
    name: str
    fields: tuple[IRField, ...]
    description: str | None = None
    interfaces: tuple[str, ...] = ()
    is_interface: bool = False


@dataclass(frozen=True)
class IRInputType:
    """Represents a GraphQL input object type."""
    name: str
    fields: tuple[IRField, ...]
    description: str | None = None


@dataclass(frozen=True)
class IREnumValue:
    """Represents a single value in a GraphQL enum."""
    name: str
    description: str | None = None


@dataclass(frozen=True)
class IREnum:
    """Represents a GraphQL enum type."""
    name: str
    values: tuple[IREnumValue, ...]
    description: str | None = None


@dataclass(frozen=True)
class IRScalar:
    """Represents a GraphQL scalar type."""
    name: str
    description: str | None = None


TypeDefinition = Union[IRObjectType, IRInputType, IREnum, IRScalar]


@dataclass(frozen=True)
class TypeRegistry:
    """Complete, read-only representation of one parsed schema.

    Use :meth:`build` to construct one; it rejects duplicate names.
    """
    definitions: Mapping[str, TypeDefinition] = field(default_factory=dict)
    query_type_name: str = "Query"
    mutation_type_name: str = "Mutation"
    subscription_type_name: str = "Subscription"

    @classmethod
    def build(
        cls,
        definitions: list[TypeDefinition],
        *,
        query_type_name: str = "Query",
        mutation_type_name: str = "Mutation",
        subscription_type_name: str = "Subscription",
    ) -> "TypeRegistry":
        by_name: dict[str, TypeDefinition] = {}
        for definition in definitions:
            if definition.name in by_name:
                raise DuplicateTypeName(definition.name)
            by_name[definition.name] = definition
        return cls(
            definitions=MappingProxyType(by_name),
            query_type_name=query_type_name,
            mutation_type_name=mutation_type_name,
            subscription_type_name=subscription_type_name,
        )

    def __contains__(self, name: str) -> bool:
        return name in self.definitions

    def __len__(self) -> int:
        return len(self.definitions)

    def get(self, name: str) -> TypeDefinition | None:
        """Look up a definition by name."""
        return self.definitions.get(name)

    @property
    def root_type_names(self) -> set[str]:
        return {self.query_type_name, self.mutation_type_name, self.subscription_type_name}

    def is_root(self, name: str) -> bool:
        return name in self.root_type_names

    @property
    def object_types(self) -> list[IRObjectType]:
        """Object types and interfaces, excluding operation roots."""
        return [
            d for d in self.definitions.values()
            if isinstance(d, IRObjectType) and not self.is_root(d.name)
        ]

    @property
    def input_types(self) -> list[IRInputType]:
        return [d for d in self.definitions.values() if isinstance(d, IRInputType)]

    @property
    def enums(self) -> list[IREnum]:
        return [d for d in self.definitions.values() if isinstance(d, IREnum)]

    @property
    def scalars(self) -> list[IRScalar]:
        return [d for d in self.definitions.values() if isinstance(d, IRScalar)]

    @property
    def query_type(self) -> IRObjectType | None:
        definition = self.definitions.get(self.query_type_name)
        return definition if isinstance(definition, IRObjectType) else None

    @property
    def mutation_type(self) -> IRObjectType | None:
        definition = self.definitions.get(self.mutation_type_name)
        return definition if isinstance(definition, IRObjectType) else None

    def without(self, names: set[str]) -> "TypeRegistry":
        """Return a copy of this registry with the given definitions removed."""
        return TypeRegistry(
            definitions=MappingProxyType(
                {k: v for k, v in self.definitions.items() if k not in names}
            ),
            query_type_name=self.query_type_name,
            mutation_type_name=self.mutation_type_name,
            subscription_type_name=self.subscription_type_name,
        )
