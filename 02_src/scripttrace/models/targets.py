"""Instrumentation target models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class InstrumentationTarget:
    """A method to bracket with a trace session.

    ``type_name`` is an import path, ``"package.module:Outer.Inner"`` for a
    class or plain ``"package.module"`` for module-level functions.
    """

    type_name: str
    method_name: str

    @classmethod
    def parse(cls, spec: str) -> "InstrumentationTarget":
        """Build a target from ``"module:Class.method"`` or ``"module:function"``."""
        module_path, sep, attr_path = spec.strip().partition(":")
        if not sep or not module_path or not attr_path:
            raise ValueError(f"Invalid instrumentation target: {spec!r}")

        owner_path, _, method_name = attr_path.rpartition(".")
        if not method_name:
            raise ValueError(f"Invalid instrumentation target: {spec!r}")

        type_name = f"{module_path}:{owner_path}" if owner_path else module_path
        return cls(type_name=type_name, method_name=method_name)

    @property
    def module_path(self) -> str:
        return self.type_name.partition(":")[0]

    @property
    def owner_path(self) -> str:
        """Dotted attribute path of the owner inside its module ("" for the module)."""
        return self.type_name.partition(":")[2]

    def __str__(self) -> str:
        sep = "." if self.owner_path else ":"
        return f"{self.type_name}{sep}{self.method_name}"
