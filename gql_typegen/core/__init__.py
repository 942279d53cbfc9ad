"""Core modules for GraphQL code generation."""

from .artifacts import ArtifactKind, GeneratedArtifact
from .config import GeneratorConfig
from .errors import (
    ArtifactWriteFailure,
    DuplicateTypeName,
    GqlTypegenError,
    GraphQLError,
    InvalidTemplateOutput,
    RequiredFieldMissing,
    SchemaError,
    SchemaSyntaxError,
    UnknownEnumValue,
)
from .executor import ExecutableOperation, Transport
from .generator import CodeGenerator, GenerationResult
from .generators import (
    EnumGenerator,
    FieldSelectorGenerator,
    InputTypeGenerator,
    OperationBuilderGenerator,
    OperationRootGenerator,
    ValueTypeGenerator,
)
from .hooks import (
    AddHeaderHook,
    FilterTypesHook,
    HookRunner,
    PostGenerateHook,
    PreGenerateHook,
)
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
    TypeRegistry,
)
from .models import GraphQLEnum, GraphQLInput, GraphQLObject, InputBuilder
from .parser import SchemaParser, load_schema, parse_schema
from .query_builder import (
    ArgumentKind,
    OperationType,
    Selector,
    assemble,
    encode,
    encode_arguments,
)
from .resolver import ResolvedType, TypeKind, TypeResolver
from .scalars import DEFAULT_SCALARS, PythonType, ScalarRegistry

__all__ = [
    # Config
    "GeneratorConfig",
    # Errors
    "GqlTypegenError",
    "SchemaError",
    "SchemaSyntaxError",
    "DuplicateTypeName",
    "RequiredFieldMissing",
    "UnknownEnumValue",
    "ArtifactWriteFailure",
    "InvalidTemplateOutput",
    "GraphQLError",
    # IR types
    "IRArgument",
    "IREnum",
    "IREnumValue",
    "IRField",
    "IRInputType",
    "IRObjectType",
    "IRScalar",
    "NamedType",
    "ListType",
    "NonNullType",
    "TypeRegistry",
    # Parser
    "SchemaParser",
    "load_schema",
    "parse_schema",
    # Scalars and resolution
    "DEFAULT_SCALARS",
    "PythonType",
    "ScalarRegistry",
    "ResolvedType",
    "TypeKind",
    "TypeResolver",
    # Generation
    "ArtifactKind",
    "GeneratedArtifact",
    "CodeGenerator",
    "GenerationResult",
    "ValueTypeGenerator",
    "InputTypeGenerator",
    "EnumGenerator",
    "FieldSelectorGenerator",
    "OperationRootGenerator",
    "OperationBuilderGenerator",
    # Hooks
    "PreGenerateHook",
    "PostGenerateHook",
    "AddHeaderHook",
    "FilterTypesHook",
    "HookRunner",
    # Runtime
    "ArgumentKind",
    "OperationType",
    "Selector",
    "assemble",
    "encode",
    "encode_arguments",
    "ExecutableOperation",
    "Transport",
    "GraphQLObject",
    "GraphQLInput",
    "GraphQLEnum",
    "InputBuilder",
]
