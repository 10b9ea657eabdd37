"""Declaration model shared by the collector and the emitter."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Parameter:
    """A function parameter as written in the declaration."""

    name: str
    type: str


@dataclass(frozen=True)
class DeclarationRecord:
    """One stubbed free function or instance method.

    ``owner`` is the class name for methods and ``None`` for free functions.
    Records are immutable once built; ``parameters`` keeps declaration order.
    """

    name: str
    return_type: str
    returns_void: bool
    owner: str | None = None
    parameters: tuple[Parameter, ...] = ()

    def prefix(self, stub_name: str) -> str:
        """Naming prefix for this record's state variables."""
        return self.owner if self.owner is not None else stub_name

    def qualified_name(self) -> str:
        if self.owner is None:
            return self.name
        return f"{self.owner}::{self.name}"


@dataclass
class Collection:
    """Run-scoped result of one collector pass.

    Both lists are append-only and keep the order in which declarations were
    met during the depth-first walk.
    """

    declarations: list[DeclarationRecord] = field(default_factory=list)
    namespaces: list[str] = field(default_factory=list)
