"""Scalar mappings for GraphQL code generation.

Maps GraphQL scalar names to the Python types used in generated code.

Example usage:
    from gql_typegen.core.scalars import PythonType, ScalarRegistry

    # Built-in mappings plus overrides for this run
    registry = ScalarRegistry({"Money": "decimal.Decimal"})
    registry.get("Money").import_statement  # "from decimal import Decimal"
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class PythonType:
    """A Python type referenced by generated code.

    Attributes:
        name: The type name as written in annotations (e.g., "datetime")
        module: The module to import it from, or None for builtins
    """
    name: str
    module: str | None = None

    @classmethod
    def parse(cls, path: str) -> "PythonType":
        """Parse a dotted path like "datetime.datetime"; bare names are builtins."""
        module, _, name = path.rpartition(".")
        if not name or not name.isidentifier():
            raise ValueError(f"Invalid Python type path: {path!r}")
        return cls(name=name, module=module or None)

    @property
    def import_statement(self) -> str | None:
        """The import needed for this type, or None for builtins."""
        if self.module is None:
            return None
        return f"from {self.module} import {self.name}"

    @property
    def qualified_name(self) -> str:
        return f"{self.module}.{self.name}" if self.module else self.name


# Process-wide defaults; never mutated. Overrides go into a ScalarRegistry copy.
DEFAULT_SCALARS: Mapping[str, PythonType] = MappingProxyType({
    "ID": PythonType("str"),
    "String": PythonType("str"),
    "Int": PythonType("int"),
    "Float": PythonType("float"),
    "Boolean": PythonType("bool"),
    "DateTime": PythonType("datetime", "datetime"),
    "Date": PythonType("date", "datetime"),
    "Time": PythonType("time", "datetime"),
    "UUID": PythonType("UUID", "uuid"),
    "BigDecimal": PythonType("Decimal", "decimal"),
    "Long": PythonType("int"),
    "URL": PythonType("str"),
    "JSON": PythonType("Any", "typing"),
})

# Type used for scalars with no mapping
FALLBACK_SCALAR = PythonType("str")

STRING_SCALARS = frozenset({"ID", "String"})


class ScalarRegistry:
    """Registry of scalar mappings for one generation run.

    Starts from DEFAULT_SCALARS and merges user overrides on top.

    Example:
        registry = ScalarRegistry({"DateTime": "pendulum.DateTime"})

        python_type = registry.get("DateTime")
        if python_type:
            python_type.name  # "DateTime"
    """

    def __init__(self, overrides: Mapping[str, str | PythonType] | None = None):
        self._mappings: dict[str, PythonType] = dict(DEFAULT_SCALARS)
        for scalar_name, target in (overrides or {}).items():
            self.register(scalar_name, target)

    def register(self, scalar_name: str, target: str | PythonType):
        """Register (or replace) the mapping for a scalar type."""
        if isinstance(target, str):
            target = PythonType.parse(target)
        self._mappings[scalar_name] = target

    def get(self, scalar_name: str) -> PythonType | None:
        """Get the mapping for a scalar type, or None if not registered."""
        return self._mappings.get(scalar_name)

    def has(self, scalar_name: str) -> bool:
        """Check if a mapping is registered for a scalar type."""
        return scalar_name in self._mappings

    def __contains__(self, scalar_name: str) -> bool:
        return self.has(scalar_name)

    def python_names(self) -> set[str]:
        """Names the mapped Python types are imported under."""
        return {t.name for t in self._mappings.values()}
