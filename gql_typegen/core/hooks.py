"""Generation hooks for customizing code generation.

Provides protocols for pre- and post-generation hooks that can replace
the type registry before generation or transform each generated artifact
after.

Example usage:
    from gql_typegen.core.hooks import PreGenerateHook, PostGenerateHook

    # Pre-generation hook to drop internal types
    class DropInternalTypes(PreGenerateHook):
        def pre_generate(self, registry):
            return registry.without({n for n in registry.definitions if n.startswith("_")})

    # Post-generation hook to add headers
    class AddLicenseHeader(PostGenerateHook):
        def post_generate(self, artifact):
            header = "# Copyright 2024 My Company\\n\\n"
            return dataclasses.replace(artifact, source=header + artifact.source)
"""

import logging
from dataclasses import replace
from typing import Iterable, Protocol, runtime_checkable

from .artifacts import GeneratedArtifact
from .ir import TypeRegistry

logger = logging.getLogger(__name__)


@runtime_checkable
class PreGenerateHook(Protocol):
    """Protocol for pre-generation hooks.

    Pre-generation hooks receive the type registry before code generation
    and return the registry to generate from. Registries are immutable, so
    hooks build a new one (see ``TypeRegistry.without``).
    """

    def pre_generate(self, registry: TypeRegistry) -> TypeRegistry:
        """Called before code generation.

        Args:
            registry: The parsed schema

        Returns:
            The registry to use for generation
        """
        ...


@runtime_checkable
class PostGenerateHook(Protocol):
    """Protocol for post-generation hooks.

    Post-generation hooks receive each generated artifact before it is
    written to disk and return the artifact to write.

    Example:
        class FormatWithBlack(PostGenerateHook):
            def post_generate(self, artifact: GeneratedArtifact) -> GeneratedArtifact:
                import black
                source = black.format_str(artifact.source, mode=black.FileMode())
                return dataclasses.replace(artifact, source=source)
    """

    def post_generate(self, artifact: GeneratedArtifact) -> GeneratedArtifact:
        """Called after code generation for each artifact."""
        ...


class AddHeaderHook:
    """Prefix every generated module with a fixed header, e.g. a license notice.

    A blank line always separates the header from the module body.
    """

    def __init__(self, header: str):
        self.header = header.rstrip("\n") + "\n\n"

    def post_generate(self, artifact: GeneratedArtifact) -> GeneratedArtifact:
        return replace(artifact, source=self.header + artifact.source)


class FilterTypesHook:
    """Drop definitions whose name fails a prefix/suffix test.

    Operation roots always survive. A field whose type was dropped resolves
    like an unmapped scalar.

    Example:
        # Keep only Stripe* types, minus their *Connection wrappers
        hook = FilterTypesHook(include_prefix="Stripe", exclude_suffix="Connection")
    """

    def __init__(
        self,
        exclude_prefix: str | None = None,
        exclude_suffix: str | None = None,
        include_prefix: str | None = None,
        include_suffix: str | None = None,
    ):
        self.exclude_prefix = exclude_prefix
        self.exclude_suffix = exclude_suffix
        self.include_prefix = include_prefix
        self.include_suffix = include_suffix

    def keeps(self, type_name: str) -> bool:
        """Whether a definition named ``type_name`` passes every configured test."""
        excluded = (
            (self.exclude_prefix and type_name.startswith(self.exclude_prefix))
            or (self.exclude_suffix and type_name.endswith(self.exclude_suffix))
        )
        included = (
            (not self.include_prefix or type_name.startswith(self.include_prefix))
            and (not self.include_suffix or type_name.endswith(self.include_suffix))
        )
        return included and not excluded

    def pre_generate(self, registry: TypeRegistry) -> TypeRegistry:
        dropped = {
            name for name in registry.definitions
            if not (registry.is_root(name) or self.keeps(name))
        }
        if dropped:
            logger.debug("Filtering out %d definitions: %s", len(dropped), ", ".join(sorted(dropped)))
        return registry.without(dropped)


class HookRunner:
    """Applies registered hooks in registration order."""

    def __init__(
        self,
        pre_hooks: Iterable[PreGenerateHook] = (),
        post_hooks: Iterable[PostGenerateHook] = (),
    ):
        self.pre_hooks: list[PreGenerateHook] = list(pre_hooks)
        self.post_hooks: list[PostGenerateHook] = list(post_hooks)

    def add_pre_hook(self, hook: PreGenerateHook):
        self.pre_hooks.append(hook)

    def add_post_hook(self, hook: PostGenerateHook):
        self.post_hooks.append(hook)

    def run_pre_hooks(self, registry: TypeRegistry) -> TypeRegistry:
        for hook in self.pre_hooks:
            registry = hook.pre_generate(registry)
        return registry

    def run_post_hooks(self, artifact: GeneratedArtifact) -> GeneratedArtifact:
        for hook in self.post_hooks:
            artifact = hook.post_generate(artifact)
        return artifact
