"""Generator configuration."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .scalars import PythonType


class GeneratorConfig(BaseModel):
    """Options for one generation run.

    Attributes:
        namespace: Root package for generated code, e.g. "myapi.client"
        output_directory: Directory the namespace package is written under
        scalar_mappings: GraphQL scalar name -> dotted Python type path
        generate_input_builders: Emit builder classes for input types
        template_dir: Optional directory whose templates override the defaults
    """

    model_config = ConfigDict(frozen=True)

    namespace: str
    output_directory: Path = Path("generated")
    scalar_mappings: dict[str, str] = Field(default_factory=dict)
    generate_input_builders: bool = True
    template_dir: Path | None = None

    @field_validator("namespace")
    @classmethod
    def _check_namespace(cls, value: str) -> str:
        parts = value.split(".")
        if not all(part.isidentifier() for part in parts):
            raise ValueError(f"namespace must be a dotted Python identifier: {value!r}")
        return value

    @field_validator("scalar_mappings")
    @classmethod
    def _check_scalar_mappings(cls, value: dict[str, str]) -> dict[str, str]:
        for target in value.values():
            PythonType.parse(target)
        return value

    @property
    def package_directory(self) -> Path:
        """Directory holding the generated namespace package."""
        return self.output_directory.joinpath(*self.namespace.split("."))
