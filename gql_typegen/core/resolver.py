"""Resolve schema type references into Python type descriptors.

Named types that are not scalars resolve by naming convention into the
generated ``type`` or ``input`` package. Nothing here looks at generated
artifacts, so self-referential and mutually recursive types resolve without
ordering constraints.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from .ir import (
    IREnum,
    IRInputType,
    IRObjectType,
    ListType,
    NamedType,
    NonNullType,
    TypeRef,
    TypeRegistry,
    base_type_name,
)
from .scalars import FALLBACK_SCALAR, STRING_SCALARS, PythonType, ScalarRegistry

ROOT_REFERENCE = PythonType("Any", "typing")

logger = logging.getLogger(__name__)

TYPE_PACKAGE = "type"
INPUT_PACKAGE = "input"
QUERY_PACKAGE = "query"
MUTATION_PACKAGE = "mutation"

# Names bound at module level in generated modules; generated classes avoid them
RUNTIME_NAMES = frozenset({
    "annotations", "TYPE_CHECKING", "Callable", "List", "Optional", "Field",
    "GraphQLObject", "GraphQLInput", "InputBuilder", "GraphQLEnum",
    "ArgumentKind", "OperationType", "Selector", "field_arguments", "render_selection",
    "ExecutableOperation", "Transport", "builtins",
})


class TypeKind(Enum):
    """What a named type resolves to."""
    SCALAR = "scalar"
    ENUM = "enum"
    OBJECT = "object"
    INPUT = "input"


@dataclass(frozen=True)
class ResolvedType:
    """A type reference resolved for code generation."""
    type_name: str
    python_type: PythonType
    kind: TypeKind
    nullable: bool
    is_list: bool
    annotation: str

    @property
    def is_scalar_like(self) -> bool:
        """Scalars and enums are leaves in a selection set."""
        return self.kind in (TypeKind.SCALAR, TypeKind.ENUM)

    @property
    def is_string(self) -> bool:
        return self.type_name in STRING_SCALARS

    @property
    def argument_kind(self) -> str:
        """Name of the runtime ArgumentKind used to encode values of this type."""
        if self.kind is TypeKind.SCALAR:
            return "STRING" if self.is_string else "SCALAR"
        return self.kind.name


class TypeResolver:
    """Maps TypeRefs to ResolvedTypes for one generation run."""

    def __init__(self, registry: TypeRegistry, scalars: ScalarRegistry, namespace: str):
        self.registry = registry
        self.scalars = scalars
        self.namespace = namespace
        self._warned: set[str] = set()
        self.reserved_names = RUNTIME_NAMES | scalars.python_names() | {ROOT_REFERENCE.name}

    def class_name(self, type_name: str) -> str:
        """Python class name for a generated type.

        A type named like a module-level name of the generated code, e.g.
        ``Field`` or ``Optional``, gets a trailing underscore.
        """
        return f"{type_name}_" if type_name in self.reserved_names else type_name

    def package(self, sub_package: str) -> str:
        """Full module path of a generated sub-package, e.g. "myapi.type"."""
        return f"{self.namespace}.{sub_package}"

    def resolve(self, type_ref: TypeRef) -> ResolvedType:
        """Resolve a type reference; pure apart from a one-time warning."""
        name = base_type_name(type_ref)
        python_type, kind = self.resolve_name(name)
        return ResolvedType(
            type_name=name,
            python_type=python_type,
            kind=kind,
            nullable=not isinstance(type_ref, NonNullType),
            is_list=isinstance(_strip_non_null(type_ref), ListType),
            annotation=render_annotation(type_ref, python_type.name),
        )

    def resolve_name(self, name: str) -> tuple[PythonType, TypeKind]:
        """Resolve the innermost named type."""
        mapped = self.scalars.get(name)
        if mapped is not None:
            return mapped, TypeKind.SCALAR

        definition = self.registry.get(name)
        if isinstance(definition, IRObjectType) and self.registry.is_root(name):
            # Roots have no generated value type or selector
            return ROOT_REFERENCE, TypeKind.SCALAR
        if isinstance(definition, (IRObjectType, IREnum)):
            kind = TypeKind.ENUM if isinstance(definition, IREnum) else TypeKind.OBJECT
            return PythonType(self.class_name(name), self.package(TYPE_PACKAGE)), kind
        if isinstance(definition, IRInputType):
            return PythonType(self.class_name(name), self.package(INPUT_PACKAGE)), TypeKind.INPUT

        if name not in self._warned:
            self._warned.add(name)
            logger.warning("No mapping for scalar %s; using %s", name, FALLBACK_SCALAR.name)
        return FALLBACK_SCALAR, TypeKind.SCALAR

    def kind_of(self, name: str) -> TypeKind:
        return self.resolve_name(name)[1]


def _strip_non_null(type_ref: TypeRef) -> TypeRef:
    return type_ref.of_type if isinstance(type_ref, NonNullType) else type_ref


def render_annotation(type_ref: TypeRef, python_name: str, nullable: bool = True) -> str:
    """Render a Python annotation, e.g. ``[User!]`` -> ``Optional[List[User]]``."""
    if isinstance(type_ref, NonNullType):
        return render_annotation(type_ref.of_type, python_name, nullable=False)
    if isinstance(type_ref, ListType):
        annotation = f"List[{render_annotation(type_ref.of_type, python_name)}]"
    elif isinstance(type_ref, NamedType):
        annotation = python_name
    else:
        raise TypeError(f"Expected a TypeRef, got {type(type_ref).__name__}")
    return f"Optional[{annotation}]" if nullable else annotation
