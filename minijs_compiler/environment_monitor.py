from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .environment import Environment
from .values import render_value


@dataclass(frozen=True)
class EnvironmentSnapshot:
    """
    A read-only, acyclic picture of an environment chain for display.
    Depth 0 is the scope the snapshot was taken from; each enclosing scope is one deeper.
    """
    depth: int
    scope_label: str
    variables: Dict[str, str] = field(default_factory=dict)
    enclosing: Optional['EnvironmentSnapshot'] = None

    def to_obj(self) -> Dict[str, Any]:
        """Converts the snapshot into plain dicts, ready for json.dumps."""
        return {
            "depth": self.depth,
            "name": self.scope_label,
            "variables": dict(self.variables),
            "enclosing": self.enclosing.to_obj() if self.enclosing is not None else None,
        }


def scope_label(environment: Environment) -> str:
    # Block scopes are numbered by how far they sit from the global scope.
    level = sum(1 for _ in environment.chain()) - 1
    return "Global Scope" if level == 0 else f"Scope {level}"


def snapshot_environment(environment: Environment, depth: int = 0) -> EnvironmentSnapshot:
    """Serializes an environment and its enclosing environments."""
    enclosing = None
    if environment.enclosing is not None:
        enclosing = snapshot_environment(environment.enclosing, depth + 1)

    variables = {name: render_value(value) for name, value in environment.values.items()}
    return EnvironmentSnapshot(depth, scope_label(environment), variables, enclosing)


def format_environment(snapshot: Optional[EnvironmentSnapshot]) -> str:
    """Renders a snapshot as an indented listing, one scope per paragraph."""
    if snapshot is None:
        return "// No environment data available"

    lines = []
    current: Optional[EnvironmentSnapshot] = snapshot
    while current is not None:
        indent = "  " * current.depth
        if lines:
            lines.append("")
        lines.append(f"{indent}{current.scope_label}:")
        for name, rendered in current.variables.items():
            lines.append(f"{indent}  {name}: {rendered}")
        current = current.enclosing
    return "\n".join(lines)
