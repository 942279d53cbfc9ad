"""Orchestrates a generation run.

Walks the type registry in a fixed order, hands each definition to the
matching artifact generator and writes the resulting modules, plus the
package ``__init__`` modules that tie them together, under the output
directory.

Example:
    config = GeneratorConfig(namespace="myapi.client", output_directory=Path("src"))
    result = CodeGenerator(config).generate_from_path("schema.graphql")
    print(result.artifact_count, result.output_directory)

Order of emitted artifacts:
1. Object types (value type, then selector, per type)
2. Input types
3. Enums
4. Query root, then one builder per query field
5. Mutation root, then one builder per mutation field
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from .artifacts import ArtifactKind, GeneratedArtifact
from .config import GeneratorConfig
from .errors import ArtifactWriteFailure
from .generators import (
    EnumGenerator,
    FieldSelectorGenerator,
    InputTypeGenerator,
    OperationBuilderGenerator,
    OperationRootGenerator,
    ValueTypeGenerator,
    create_environment,
    render_source,
)
from .hooks import HookRunner
from .ir import IRObjectType, TypeRegistry
from .parser import load_schema, parse_schema
from .query_builder import OperationType
from .resolver import INPUT_PACKAGE, MUTATION_PACKAGE, QUERY_PACKAGE, TYPE_PACKAGE, TypeResolver
from .scalars import ScalarRegistry

logger = logging.getLogger(__name__)

_PACKAGE_DOCSTRINGS = {
    TYPE_PACKAGE: "Generated value types and enums.",
    INPUT_PACKAGE: "Generated input types.",
    QUERY_PACKAGE: "Generated selectors, query builders and the query root.",
    MUTATION_PACKAGE: "Generated mutation builders and the mutation root.",
}


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one generation run."""
    artifacts: tuple[GeneratedArtifact, ...]
    output_directory: Path
    files_written: int = 0

    @property
    def artifact_count(self) -> int:
        return len(self.artifacts)


class CodeGenerator:
    """Generates a typed client package from a GraphQL schema.

    A fresh TypeRegistry and TypeResolver are built for every run; the
    generator itself only holds configuration and the template environment,
    so one instance can be reused across runs.

    Example:
        hooks = HookRunner()
        hooks.add_post_hook(AddHeaderHook("# Copyright 2024 My Company"))
        generator = CodeGenerator(config, hooks)
        artifacts = generator.generate_artifacts(parse_schema(sdl))
        generator.write(artifacts)
    """

    def __init__(self, config: GeneratorConfig, hooks: Optional[HookRunner] = None):
        self.config = config
        self.hooks = hooks or HookRunner()
        self.scalars = ScalarRegistry(config.scalar_mappings)
        self.env = create_environment(config.template_dir)

        self.value_types = ValueTypeGenerator(self.env)
        self.input_types = InputTypeGenerator(self.env, config.generate_input_builders)
        self.enums = EnumGenerator(self.env)
        self.selectors = FieldSelectorGenerator(self.env)
        self.roots = {op: OperationRootGenerator(self.env, op) for op in OperationType}
        self.builders = {op: OperationBuilderGenerator(self.env, op) for op in OperationType}

    def generate(self, source: str, source_name: Optional[str] = None) -> GenerationResult:
        """Parse schema text, generate every artifact and write them out."""
        return self._run(parse_schema(source, source_name))

    def generate_from_path(self, path: str | Path) -> GenerationResult:
        """Like :meth:`generate`, loading the schema from a file or directory."""
        return self._run(parse_schema(load_schema(path), str(path)))

    def _run(self, registry: TypeRegistry) -> GenerationResult:
        logger.info(
            "Generating %s into %s (%d definitions)",
            self.config.namespace, self.config.output_directory, len(registry),
        )
        artifacts = self.generate_artifacts(registry)
        files_written = self.write(artifacts)
        logger.info(
            "Wrote %d artifacts (%d files) to %s",
            len(artifacts), files_written, self.config.output_directory,
        )
        return GenerationResult(
            artifacts=tuple(artifacts),
            output_directory=self.config.output_directory,
            files_written=files_written,
        )

    def resolver(self, registry: TypeRegistry) -> TypeResolver:
        return TypeResolver(registry, self.scalars, self.config.namespace)

    def generate_artifacts(self, registry: TypeRegistry) -> list[GeneratedArtifact]:
        """Generate every artifact for a registry, in orchestration order.

        Pre-generation hooks run on the registry first; post-generation hooks
        run on each artifact afterwards. Nothing is written to disk.
        """
        registry = self.hooks.run_pre_hooks(registry)
        resolver = self.resolver(registry)
        artifacts: list[GeneratedArtifact] = []

        for object_type in registry.object_types:
            artifacts.append(self.value_types.generate(object_type, resolver))
            artifacts.append(self.selectors.generate(object_type, resolver))
        for input_type in registry.input_types:
            artifacts.append(self.input_types.generate(input_type, resolver))
        for enum in registry.enums:
            artifacts.append(self.enums.generate(enum, resolver))
        artifacts.extend(self._operations(registry.query_type, OperationType.QUERY, resolver))
        artifacts.extend(self._operations(registry.mutation_type, OperationType.MUTATION, resolver))

        return [self.hooks.run_post_hooks(artifact) for artifact in artifacts]

    def _operations(
        self,
        root: Optional[IRObjectType],
        operation_type: OperationType,
        resolver: TypeResolver,
    ) -> Iterable[GeneratedArtifact]:
        if root is None:
            logger.debug("No %s root type; skipping", operation_type.value)
            return
        yield self.roots[operation_type].generate(root, resolver)
        builder = self.builders[operation_type]
        for field in root.fields:
            yield builder.generate(field, resolver)

    def write(self, artifacts: Iterable[GeneratedArtifact]) -> int:
        """Write artifacts and package ``__init__`` modules; return the file count.

        Raises:
            ArtifactWriteFailure: If any file cannot be written
        """
        artifacts = list(artifacts)
        files = {artifact.relative_path: artifact.source for artifact in artifacts}
        files.update(self._package_inits(artifacts))

        for relative_path, content in files.items():
            path = self.config.output_directory / relative_path
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(content, encoding="utf-8")
            except OSError as e:
                raise ArtifactWriteFailure(path, e) from e
            logger.debug("Wrote %s", path)
        return len(files)

    def _package_inits(self, artifacts: list[GeneratedArtifact]) -> dict[Path, str]:
        """Render ``__init__`` modules for the namespace and each sub-package."""
        namespace = self.config.namespace
        base = Path(*namespace.split("."))
        by_package: dict[str, list[GeneratedArtifact]] = defaultdict(list)
        for artifact in artifacts:
            by_package[artifact.namespace].append(artifact)

        type_package = f"{namespace}.{TYPE_PACKAGE}"
        enum_names = [a.name for a in by_package[type_package] if a.kind is ArtifactKind.ENUM]

        inits: dict[Path, str] = {}
        for sub_package, docstring in _PACKAGE_DOCSTRINGS.items():
            package = f"{namespace}.{sub_package}"
            members = by_package.get(package)
            if not members:
                continue
            names = [a.name for a in members]
            models = [a.name for a in members if a.kind in (ArtifactKind.VALUE, ArtifactKind.INPUT)]
            namespace_imports = []
            namespace_names = list(names)
            if sub_package == INPUT_PACKAGE and enum_names:
                # Input fields may reference enums from the type package
                namespace_imports.append(f"from {type_package} import {', '.join(enum_names)}")
                namespace_names.extend(enum_names)
            exports = list(names)
            if sub_package == INPUT_PACKAGE and self.config.generate_input_builders:
                exports.extend(f"{name}Builder" for name in names)

            inits[base / sub_package / "__init__.py"] = render_source(
                self.env, "package_init.py.j2", f"{package}.__init__", {
                    "docstring": docstring,
                    "artifacts": members,
                    "generate_builders": self.config.generate_input_builders,
                    "models": models,
                    "namespace_imports": namespace_imports,
                    "namespace_names": namespace_names,
                    "exports": exports,
                },
            )

        inits[base / "__init__.py"] = render_source(
            self.env, "namespace_init.py.j2", f"{namespace}.__init__", {
                "namespace": namespace,
                "has_query": any(a.name == "QueryRoot" and a.kind is ArtifactKind.ROOT for a in artifacts),
                "has_mutation": any(a.name == "MutationRoot" and a.kind is ArtifactKind.ROOT for a in artifacts),
            },
        )
        return inits
