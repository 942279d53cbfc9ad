"""Artifact generators.

Each generator turns one schema definition into one GeneratedArtifact by
rendering a Jinja2 template. Generators never touch the filesystem and never
look at each other's output; cross references are derived from names only.

Template lookup order:
1. User's template directory (if provided)
2. Package default templates

Available templates to override:
    - value_type.py.j2 - Value types (object types and interfaces)
    - input_type.py.j2 - Input types and their builders
    - enum.py.j2 - Enums
    - selector.py.j2 - Field selectors
    - operation_root.py.j2 - QueryRoot / MutationRoot
    - operation_builder.py.j2 - Per-field query/mutation builders
    - package_init.py.j2 - Sub-package __init__ modules
"""

import ast
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from .artifacts import ArtifactKind, GeneratedArtifact
from .errors import InvalidTemplateOutput
from .ir import IRArgument, IREnum, IRField, IRInputType, IRObjectType
from .query_builder import OperationType
from .resolver import (
    INPUT_PACKAGE,
    MUTATION_PACKAGE,
    QUERY_PACKAGE,
    TYPE_PACKAGE,
    ResolvedType,
    TypeKind,
    TypeResolver,
    render_annotation,
)
from .scalars import PythonType

logger = logging.getLogger(__name__)


def snake_case(name: str) -> str:
    """Convert PascalCase or camelCase to snake_case."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def safe_docstring(text: Optional[str]) -> str:
    """Escape text for use in docstrings."""
    if not text:
        return ""
    text = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if text.endswith('"'):
        text += " "
    return text


def safe_comment(text: Optional[str]) -> str:
    """Collapse text onto one line, safe inside a comment or a docstring."""
    if not text:
        return ""
    text = text.replace("\n", " ").replace("\r", "")
    text = text.replace("**", "").replace("*", "")
    text = re.sub(r"\s+", " ", text)
    if len(text) > 120:
        text = text[:117] + "..."
    return safe_docstring(text.strip())


# Python reserved keywords that cannot be used as identifiers
PYTHON_KEYWORDS = {
    'False', 'None', 'True', 'and', 'as', 'assert', 'async', 'await',
    'break', 'class', 'continue', 'def', 'del', 'elif', 'else', 'except',
    'finally', 'for', 'from', 'global', 'if', 'import', 'in', 'is',
    'lambda', 'nonlocal', 'not', 'or', 'pass', 'raise', 'return', 'try',
    'while', 'with', 'yield'
}

# Attributes of the runtime base classes, and module-level helpers called from
# generated method bodies, that generated members and parameters must not shadow
RESERVED_NAMES = {
    'self', 'build', 'builder', 'to_builder', 'to_graphql', 'select',
    'selector', 'selected_fields', 'transport', 'graphql_field_names',
    'copy', 'dict', 'json', 'schema', 'schema_json', 'construct', 'validate',
    'fields', 'parse_obj', 'parse_raw', 'parse_file', 'from_orm',
    'update_forward_refs', 'field_arguments', 'render_selection', 'builtins',
}

# Names an enum member cannot take
RESERVED_ENUM_MEMBERS = {'name', 'value', 'graphql_value', 'from_graphql', 'mro'}


def safe_param_name(name: str) -> str:
    """Make a parameter name safe for Python by suffixing keywords with underscore."""
    if name in PYTHON_KEYWORDS:
        return f"{name}_"
    return name


def python_name(name: str) -> str:
    """Python attribute/method/parameter name for a GraphQL field or argument.

    Example:
        python_name("firstName")  # "first_name"
        python_name("from")       # "from_"
        python_name("json")       # "json_"
    """
    result = snake_case(name)
    if result.startswith("_"):
        # pydantic treats underscore names as private attributes
        return result.lstrip("_") + "_"
    if result in PYTHON_KEYWORDS or result in RESERVED_NAMES or result.startswith("model_"):
        return f"{result}_"
    return result


def enum_member_name(name: str) -> str:
    """Python member name for a GraphQL enum value; the wire value is unchanged."""
    if name.startswith("_"):
        return f"V{name}"
    if name in PYTHON_KEYWORDS or name in RESERVED_ENUM_MEMBERS:
        return f"{name}_"
    return name


def module_name(class_name: str) -> str:
    """File stem for a generated class, e.g. ``UserSelector`` -> ``user_selector``."""
    return safe_param_name(snake_case(class_name))


def selector_class_name(type_name: str) -> str:
    return f"{type_name}Selector"


def operation_class_name(field_name: str, operation_type: OperationType) -> str:
    """Builder class for a root field, e.g. ``createUser`` -> ``CreateUserMutation``."""
    suffix = "Query" if operation_type is OperationType.QUERY else "Mutation"
    return field_name[:1].upper() + field_name[1:] + suffix


def operation_package(operation_type: OperationType) -> str:
    return QUERY_PACKAGE if operation_type is OperationType.QUERY else MUTATION_PACKAGE


def root_class_name(operation_type: OperationType) -> str:
    return "QueryRoot" if operation_type is OperationType.QUERY else "MutationRoot"


def create_environment(template_dir: Optional[Path] = None) -> Environment:
    """Build the Jinja2 environment shared by all generators.

    Templates in template_dir take precedence over the built-in templates.
    """
    loaders = []
    if template_dir:
        template_path = Path(template_dir)
        if template_path.is_dir():
            loaders.append(FileSystemLoader(str(template_path)))
        else:
            logger.warning("Template directory %s does not exist; using defaults", template_path)
    loaders.append(PackageLoader("gql_typegen", "templates"))

    env = Environment(
        loader=ChoiceLoader(loaders),
        autoescape=select_autoescape(),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["snake_case"] = snake_case
    env.filters["repr"] = repr
    env.filters["safe_docstring"] = safe_docstring
    env.filters["safe_comment"] = safe_comment
    env.filters["safe_param"] = safe_param_name
    env.filters["python_name"] = python_name
    return env


def render_source(env: Environment, template_name: str, artifact_name: str, context: dict[str, Any]) -> str:
    """Render a template and check the result parses as Python."""
    template = env.get_template(template_name)
    content = template.render(context)
    try:
        ast.parse(content)
    except SyntaxError as e:
        raise InvalidTemplateOutput(artifact_name, template_name, e) from e
    return content


class ImportCollector:
    """Collects the import statements of one generated module.

    Generated classes are imported relative to the module's own package when
    they live there, and from their package otherwise. Imports of generated
    classes can be deferred to a ``TYPE_CHECKING`` block; scalar types are
    always imported at runtime since pydantic needs them to build models.
    """

    def __init__(self, package: str, own_name: str | None = None):
        self.package = package
        self.own_name = own_name
        self.runtime: set[str] = set()
        self.type_checking: set[str] = set()

    def add(self, resolved: ResolvedType, *, type_checking: bool = True):
        python_type = resolved.python_type
        if python_type.module is None or python_type.name == self.own_name:
            return
        if resolved.kind is TypeKind.SCALAR:
            self.runtime.add(python_type.import_statement)
        else:
            (self.type_checking if type_checking else self.runtime).add(self._statement(python_type))

    def add_alias(self, python_type: PythonType) -> str:
        """Import a scalar type under a private name and return that name."""
        alias = f"_{python_type.name}"
        self.runtime.add(f"from {python_type.module} import {python_type.name} as {alias}")
        return alias

    def add_statement(self, statement: str):
        self.runtime.add(statement)

    def _statement(self, python_type: PythonType) -> str:
        if python_type.module == self.package:
            return f"from .{module_name(python_type.name)} import {python_type.name}"
        return python_type.import_statement

    def context(self) -> dict[str, list[str]]:
        return {
            "imports": sorted(self.runtime),
            "type_checking_imports": sorted(self.type_checking - self.runtime),
        }


@dataclass
class ArgumentContext:
    """Template view of one field argument."""
    graphql_name: str
    python_name: str
    annotation: str
    required: bool
    kind: str
    description: str | None = None
    default_value: str | None = None


@dataclass
class FieldContext:
    """Template view of one field."""
    graphql_name: str
    python_name: str
    annotation: str
    required: bool
    resolved: ResolvedType
    description: str | None = None
    arguments: list[ArgumentContext] = field(default_factory=list)
    selector_name: str | None = None
    selector_module: str | None = None

    @property
    def alias(self) -> bool:
        return self.graphql_name != self.python_name

    @property
    def is_nested(self) -> bool:
        return self.selector_name is not None

    @property
    def required_arguments(self) -> list[ArgumentContext]:
        return [a for a in self.arguments if a.required]

    @property
    def optional_arguments(self) -> list[ArgumentContext]:
        return [a for a in self.arguments if not a.required]


def argument_context(argument: IRArgument, resolver: TypeResolver, imports: ImportCollector) -> ArgumentContext:
    resolved = resolver.resolve(argument.type)
    imports.add(resolved)
    kind = resolved.argument_kind
    return ArgumentContext(
        graphql_name=argument.name,
        python_name=python_name(argument.name),
        annotation=resolved.annotation,
        required=argument.is_required,
        kind="SCALAR" if kind == "OBJECT" else kind,
        description=argument.description,
        default_value=argument.default_value,
    )


def field_context(
    ir_field: IRField,
    resolver: TypeResolver,
    imports: ImportCollector,
    *,
    type_checking: bool = True,
    with_arguments: bool = False,
    import_type: bool = True,
) -> FieldContext:
    resolved = resolver.resolve(ir_field.type)
    if import_type:
        imports.add(resolved, type_checking=type_checking)
    context = FieldContext(
        graphql_name=ir_field.name,
        python_name=python_name(ir_field.name),
        annotation=resolved.annotation,
        required=ir_field.is_required,
        resolved=resolved,
        description=ir_field.description,
    )
    if with_arguments:
        context.arguments = [argument_context(a, resolver, imports) for a in ir_field.arguments]
    if resolved.kind is TypeKind.OBJECT:
        context.selector_name = selector_class_name(resolved.type_name)
        context.selector_module = module_name(context.selector_name)
    return context


def unshadow_annotations(fields: list[FieldContext], ir_fields: tuple[IRField, ...], imports: ImportCollector):
    """Rename scalar types whose name is also a field name.

    pydantic evaluates ``date: Optional[date]`` against the class namespace,
    where ``date`` is the field default, so the type is imported as ``_date``.
    Builtins such as ``float`` are spelled ``builtins.float`` instead.
    """
    names = {f.python_name for f in fields}
    for context, ir_field in zip(fields, ir_fields):
        python_type = context.resolved.python_type
        if context.resolved.kind is not TypeKind.SCALAR or python_type.name not in names:
            continue
        if python_type.module:
            type_name = imports.add_alias(python_type)
        else:
            imports.add_statement("import builtins")
            type_name = f"builtins.{python_type.name}"
        context.annotation = render_annotation(ir_field.type, type_name)


class ArtifactGenerator:
    """Base class for the six artifact generators.

    Subclasses set ``kind``, ``template_name`` and ``package`` and implement
    ``generate(definition, resolver)``.
    """

    kind: ArtifactKind
    template_name: str
    package: str

    def __init__(self, env: Environment):
        self.env = env

    def _render(self, resolver: TypeResolver, name: str, context: dict[str, Any]) -> GeneratedArtifact:
        namespace = resolver.package(self.package)
        source = render_source(
            self.env,
            self.template_name,
            f"{namespace}.{name}",
            {"namespace": resolver.namespace, "package": namespace, **context},
        )
        logger.debug("Generated %s %s", self.kind.value, name)
        return GeneratedArtifact(
            kind=self.kind,
            namespace=namespace,
            name=name,
            module_name=module_name(name),
            source=source,
        )


class ValueTypeGenerator(ArtifactGenerator):
    """Generates a frozen pydantic model for an object type or interface."""

    kind = ArtifactKind.VALUE
    template_name = "value_type.py.j2"
    package = TYPE_PACKAGE

    def generate(self, definition: IRObjectType, resolver: TypeResolver) -> GeneratedArtifact:
        class_name = resolver.class_name(definition.name)
        imports = ImportCollector(resolver.package(TYPE_PACKAGE), class_name)
        fields = [field_context(f, resolver, imports) for f in definition.fields]
        unshadow_annotations(fields, definition.fields, imports)
        return self._render(resolver, class_name, {
            "type": definition,
            "class_name": class_name,
            "fields": fields,
            **imports.context(),
        })


class InputTypeGenerator(ArtifactGenerator):
    """Generates an input model with ``to_graphql()`` and an optional builder."""

    kind = ArtifactKind.INPUT
    template_name = "input_type.py.j2"
    package = INPUT_PACKAGE

    def __init__(self, env: Environment, generate_builders: bool = True):
        super().__init__(env)
        self.generate_builders = generate_builders

    def generate(self, definition: IRInputType, resolver: TypeResolver) -> GeneratedArtifact:
        class_name = resolver.class_name(definition.name)
        imports = ImportCollector(resolver.package(INPUT_PACKAGE), class_name)
        fields = [field_context(f, resolver, imports) for f in definition.fields]
        unshadow_annotations(fields, definition.fields, imports)
        return self._render(resolver, class_name, {
            "type": definition,
            "class_name": class_name,
            "fields": fields,
            "required_fields": [f for f in fields if f.required],
            "generate_builders": self.generate_builders,
            **imports.context(),
        })


class EnumGenerator(ArtifactGenerator):
    """Generates a strict ``GraphQLEnum`` for an enum type."""

    kind = ArtifactKind.ENUM
    template_name = "enum.py.j2"
    package = TYPE_PACKAGE

    def generate(self, definition: IREnum, resolver: TypeResolver) -> GeneratedArtifact:
        values = [
            {"name": v.name, "member_name": enum_member_name(v.name), "description": v.description}
            for v in definition.values
        ]
        class_name = resolver.class_name(definition.name)
        return self._render(resolver, class_name, {
            "type": definition,
            "class_name": class_name,
            "values": values,
        })


class FieldSelectorGenerator(ArtifactGenerator):
    """Generates the field selector for an object type.

    Object-typed fields take a callback receiving the nested selector. The
    nested selector class is imported inside the method body, so selectors of
    mutually recursive types never import each other at module load.
    """

    kind = ArtifactKind.SELECTOR
    template_name = "selector.py.j2"
    package = QUERY_PACKAGE

    def generate(self, definition: IRObjectType, resolver: TypeResolver) -> GeneratedArtifact:
        class_name = selector_class_name(definition.name)
        imports = ImportCollector(resolver.package(QUERY_PACKAGE), class_name)
        fields = []
        for ir_field in definition.fields:
            context = field_context(ir_field, resolver, imports, with_arguments=True, import_type=False)
            if context.is_nested and context.selector_name != class_name:
                imports.type_checking.add(f"from .{context.selector_module} import {context.selector_name}")
            fields.append(context)
        return self._render(resolver, class_name, {
            "type": definition,
            "class_name": class_name,
            "value_type": resolver.class_name(definition.name),
            "fields": fields,
            **imports.context(),
        })


class OperationRootGenerator(ArtifactGenerator):
    """Generates ``QueryRoot`` or ``MutationRoot`` with one method per root field."""

    kind = ArtifactKind.ROOT
    template_name = "operation_root.py.j2"

    def __init__(self, env: Environment, operation_type: OperationType):
        super().__init__(env)
        self.operation_type = operation_type
        self.package = operation_package(operation_type)

    def generate(self, definition: IRObjectType, resolver: TypeResolver) -> GeneratedArtifact:
        class_name = root_class_name(self.operation_type)
        imports = ImportCollector(resolver.package(self.package), class_name)
        operations = []
        for ir_field in definition.fields:
            builder = operation_class_name(ir_field.name, self.operation_type)
            imports.add_statement(f"from .{module_name(builder)} import {builder}")
            operations.append({
                "field": field_context(ir_field, resolver, imports, with_arguments=True, import_type=False),
                "builder_name": builder,
            })
        return self._render(resolver, class_name, {
            "type": definition,
            "class_name": class_name,
            "operation_type": self.operation_type.name,
            "operation": self.operation_type.value,
            "operations": operations,
            **imports.context(),
        })


class OperationBuilderGenerator(ArtifactGenerator):
    """Generates the builder for one root field.

    The builder holds the transport and argument values; ``select()`` renders
    the selection and returns an ``ExecutableOperation``.
    """

    kind = ArtifactKind.OPERATION_BUILDER
    template_name = "operation_builder.py.j2"

    def __init__(self, env: Environment, operation_type: OperationType):
        super().__init__(env)
        self.operation_type = operation_type
        self.package = operation_package(operation_type)

    def generate(self, definition: IRField, resolver: TypeResolver) -> GeneratedArtifact:
        class_name = operation_class_name(definition.name, self.operation_type)
        imports = ImportCollector(resolver.package(self.package), class_name)
        # The response annotation is evaluated at runtime by select()
        context = field_context(definition, resolver, imports, type_checking=False, with_arguments=True)
        if context.is_nested:
            selector_package = resolver.package(QUERY_PACKAGE)
            imports.add_statement(
                f"from {selector_package}.{context.selector_module} import {context.selector_name}"
            )
        return self._render(resolver, class_name, {
            "field": context,
            "class_name": class_name,
            "operation_type": self.operation_type.name,
            "operation": self.operation_type.value,
            **imports.context(),
        })
