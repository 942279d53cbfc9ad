"""Generated artifacts: one emitted Python module per schema element."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ArtifactKind(Enum):
    VALUE = "value"
    INPUT = "input"
    ENUM = "enum"
    SELECTOR = "selector"
    ROOT = "root"
    OPERATION_BUILDER = "operation_builder"


@dataclass(frozen=True)
class GeneratedArtifact:
    """An emitted module.

    Attributes:
        kind: Which generator produced it
        namespace: Package the module lives in, e.g. "myapi.type"
        name: The main class defined by the module, e.g. "User"
        module_name: File stem, e.g. "user"
        source: The Python source text
    """
    kind: ArtifactKind
    namespace: str
    name: str
    module_name: str
    source: str

    @property
    def module(self) -> str:
        return f"{self.namespace}.{self.module_name}"

    @property
    def relative_path(self) -> Path:
        """Path of the module relative to the output directory."""
        return Path(*self.namespace.split("."), f"{self.module_name}.py")
