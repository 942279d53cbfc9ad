"""GraphQL schema parser using graphql-core.

Parses schema definition language text (or introspection JSON) and produces
a :class:`TypeRegistry`.
"""

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any

from graphql import (
    DocumentNode,
    EnumTypeDefinitionNode,
    EnumTypeExtensionNode,
    GraphQLSyntaxError,
    InputObjectTypeDefinitionNode,
    InputObjectTypeExtensionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    ListTypeNode,
    NamedTypeNode,
    NonNullTypeNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    OperationType,
    ScalarTypeDefinitionNode,
    SchemaDefinitionNode,
    TypeNode,
    build_client_schema,
    parse,
    print_ast,
    print_schema,
)

from .errors import DuplicateTypeName, SchemaSyntaxError
from .ir import (
    IRArgument,
    IREnum,
    IREnumValue,
    IRField,
    IRInputType,
    IRObjectType,
    IRScalar,
    ListType,
    NamedType,
    NonNullType,
    TypeDefinition,
    TypeRef,
    TypeRegistry,
)

logger = logging.getLogger(__name__)

SCHEMA_SUFFIXES = (".graphql", ".graphqls", ".gql")

_EXTENSION_NODES = (
    ObjectTypeExtensionNode,
    InterfaceTypeExtensionNode,
    InputObjectTypeExtensionNode,
    EnumTypeExtensionNode,
)


def load_schema(path: str | Path) -> str:
    """Read schema text from a file, a directory of files, or introspection JSON."""
    path = Path(path)
    if path.is_dir():
        files = sorted(
            p for p in path.rglob("*") if p.is_file() and p.suffix in SCHEMA_SUFFIXES
        )
        return "\n\n".join(p.read_text() for p in files)
    if path.suffix == ".json":
        return _introspection_to_sdl(path)
    return path.read_text()


def _introspection_to_sdl(path: Path) -> str:
    """Convert an introspection query result into SDL text."""
    try:
        result: dict[str, Any] = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise SchemaSyntaxError(str(e), path.name) from e
    if "data" in result:
        result = result["data"]
    if "__schema" not in result:
        raise SchemaSyntaxError("introspection result has no __schema", path.name)
    return print_schema(build_client_schema(result))


class SchemaParser:
    """Parses GraphQL schema text into a type registry."""

    def __init__(self):
        self._definitions: dict[str, TypeDefinition] = {}
        self._roots: dict[OperationType, str] = {}

    def parse_path(self, path: str | Path) -> TypeRegistry:
        """Load and parse a schema file, directory or introspection result."""
        path = Path(path)
        return self.parse(load_schema(path), source_name=path.name)

    def parse(self, source: str, source_name: str | None = None) -> TypeRegistry:
        """Parse schema text and return the complete registry."""
        try:
            document = parse(source)
        except GraphQLSyntaxError as e:
            raise SchemaSyntaxError(e.message, source_name) from e

        self._definitions = {}
        self._roots = {
            OperationType.QUERY: "Query",
            OperationType.MUTATION: "Mutation",
            OperationType.SUBSCRIPTION: "Subscription",
        }
        self._process_document(document, source_name)
        registry = TypeRegistry.build(
            list(self._definitions.values()),
            query_type_name=self._roots[OperationType.QUERY],
            mutation_type_name=self._roots[OperationType.MUTATION],
            subscription_type_name=self._roots[OperationType.SUBSCRIPTION],
        )
        logger.debug("Parsed %d type definitions", len(registry))
        return registry

    def _process_document(self, document: DocumentNode, source_name: str | None):
        """Register definitions first, then merge extensions into them."""
        extensions = []
        for definition in document.definitions:
            if isinstance(definition, _EXTENSION_NODES):
                extensions.append(definition)
            elif isinstance(definition, SchemaDefinitionNode):
                for op in definition.operation_types:
                    self._roots[op.operation] = op.type.name.value
            else:
                parsed = self._process_definition(definition)
                if parsed is not None:
                    self._register(parsed)

        for extension in extensions:
            self._merge_extension(extension, source_name)

    def _register(self, definition: TypeDefinition):
        if definition.name in self._definitions:
            raise DuplicateTypeName(definition.name)
        self._definitions[definition.name] = definition

    def _process_definition(self, node) -> TypeDefinition | None:
        description = node.description.value if getattr(node, "description", None) else None
        if isinstance(node, ScalarTypeDefinitionNode):
            return IRScalar(name=node.name.value, description=description)
        if isinstance(node, EnumTypeDefinitionNode):
            return IREnum(
                name=node.name.value,
                values=self._process_enum_values(node.values),
                description=description,
            )
        if isinstance(node, (ObjectTypeDefinitionNode, InterfaceTypeDefinitionNode)):
            return IRObjectType(
                name=node.name.value,
                fields=self._process_fields(node.fields),
                description=description,
                interfaces=tuple(i.name.value for i in node.interfaces or ()),
                is_interface=isinstance(node, InterfaceTypeDefinitionNode),
            )
        if isinstance(node, InputObjectTypeDefinitionNode):
            return IRInputType(
                name=node.name.value,
                fields=self._process_fields(node.fields),
                description=description,
            )
        # Unions and directives have no generated counterpart
        return None

    def _merge_extension(self, node, source_name: str | None):
        """Merge an ``extend`` definition into its base definition."""
        name = node.name.value
        existing = self._definitions.get(name)
        if existing is None:
            raise SchemaSyntaxError(f"Cannot extend undefined type {name}", source_name)

        if isinstance(node, EnumTypeExtensionNode) and isinstance(existing, IREnum):
            merged = self._merge_members(name, existing.values, self._process_enum_values(node.values))
            self._definitions[name] = dataclasses.replace(existing, values=merged)
        elif isinstance(existing, (IRObjectType, IRInputType)) and not isinstance(
            node, EnumTypeExtensionNode
        ):
            merged = self._merge_members(name, existing.fields, self._process_fields(node.fields))
            self._definitions[name] = dataclasses.replace(existing, fields=merged)
        else:
            raise SchemaSyntaxError(
                f"Cannot extend {type(existing).__name__} {name} with {node.kind}", source_name
            )

    @staticmethod
    def _merge_members(type_name: str, existing: tuple, additions: tuple) -> tuple:
        names = {m.name for m in existing}
        merged = list(existing)
        for member in additions:
            if member.name in names:
                logger.warning("Ignoring duplicate member %s.%s in extension", type_name, member.name)
                continue
            names.add(member.name)
            merged.append(member)
        return tuple(merged)

    @staticmethod
    def _process_enum_values(value_nodes) -> tuple[IREnumValue, ...]:
        return tuple(
            IREnumValue(
                name=v.name.value,
                description=v.description.value if v.description else None,
            )
            for v in value_nodes or ()
        )

    def _process_fields(self, field_nodes) -> tuple[IRField, ...]:
        """Process field (or input value) definitions into IRField tuples."""
        fields = []
        for node in field_nodes or ():
            args = tuple(
                IRArgument(
                    name=arg_node.name.value,
                    type=self.convert_type(arg_node.type),
                    description=arg_node.description.value if arg_node.description else None,
                    default_value=print_ast(arg_node.default_value)
                    if arg_node.default_value is not None
                    else None,
                )
                for arg_node in getattr(node, "arguments", None) or ()
            )
            fields.append(
                IRField(
                    name=node.name.value,
                    type=self.convert_type(node.type),
                    description=node.description.value if node.description else None,
                    arguments=args,
                )
            )
        return tuple(fields)

    @classmethod
    def convert_type(cls, type_node: TypeNode) -> TypeRef:
        """Convert a graphql-core type node into a TypeRef tree."""
        if isinstance(type_node, NonNullTypeNode):
            return NonNullType(cls.convert_type(type_node.type))
        if isinstance(type_node, ListTypeNode):
            return ListType(cls.convert_type(type_node.type))
        if not isinstance(type_node, NamedTypeNode):
            raise TypeError(f"Expected NamedTypeNode, got {type(type_node).__name__}")
        return NamedType(type_node.name.value)


def parse_schema(source: str, source_name: str | None = None) -> TypeRegistry:
    """Parse schema text into a registry."""
    return SchemaParser().parse(source, source_name)
