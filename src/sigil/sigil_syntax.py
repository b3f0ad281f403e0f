"""Sigil surface syntax tree - the input to the desugarer.

These nodes are produced by a parser (outside this package) and describe a
program with explicit variable bindings and explicit block scopes:

- Var: a name reference
- Atom: a literal symbolic constant
- String: a literal text constant
- Binding: introduces a fresh name (`:x`, or `::f` for a two-level binding)
- Block: an explicit scope `{ item, item, ... }`
- Call: a function or macro application `f(arg, ...)`

Every node carries an optional source offset, used only to translate
errors back to a line and column.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


class SigilConsumeKind(Enum):
    """Which scope a binding is attached to."""
    SCOPE = "scope"     # Binds over the following items of the enclosing block
    BLOCK = "block"     # Binds inside an explicit block argument of the same call


@dataclass(frozen=True)
class SigilSynNode(ABC):
    """
    Abstract base class for all Sigil syntax nodes.

    Nodes are immutable.  The source position is keyword-only so variants can
    be built positionally.
    """
    position: int | None = field(default=None, kw_only=True, compare=False)

    @abstractmethod
    def describe(self) -> str:
        """Render the node in surface syntax for error messages."""


@dataclass(frozen=True)
class SigilSynVar(SigilSynNode):
    """A name reference."""
    name: str

    def describe(self) -> str:
        return self.name


@dataclass(frozen=True)
class SigilSynAtom(SigilSynNode):
    """A literal symbolic constant."""
    text: str

    def describe(self) -> str:
        return f"'{self.text}"


@dataclass(frozen=True)
class SigilSynString(SigilSynNode):
    """A literal text constant."""
    text: str

    def describe(self) -> str:
        escaped = self.text.replace('\\', '\\\\').replace('"', '\\"').replace('\n', '\\n')
        return f'"{escaped}"'


@dataclass(frozen=True)
class SigilSynBinding(SigilSynNode):
    """
    Introduces a fresh name.

    `level` is the number of scopes the name stays visible across: 1 for an
    ordinary binding, more for bindings that must also be seen by their own
    definition body (self and mutual recursion).
    """
    name: str
    level: int = 1
    consume: SigilConsumeKind = SigilConsumeKind.SCOPE

    def __post_init__(self) -> None:
        if self.level < 1:
            raise ValueError(f"Binding level must be at least 1, got {self.level} for '{self.name}'")

    def describe(self) -> str:
        return ":" * self.level + self.name


@dataclass(frozen=True)
class SigilSynBlock(SigilSynNode):
    """An explicit scope: an ordered, possibly empty, sequence of items."""
    items: Tuple[SigilSynNode, ...] = ()

    def is_empty(self) -> bool:
        """Check if the block has no items."""
        return len(self.items) == 0

    def describe(self) -> str:
        if self.is_empty():
            return "{}"

        return "{ " + ", ".join(item.describe() for item in self.items) + " }"


@dataclass(frozen=True)
class SigilSynCall(SigilSynNode):
    """A function or macro application."""
    callee: SigilSynNode
    args: Tuple[SigilSynNode, ...] = ()

    def describe(self) -> str:
        return f"{self.callee.describe()}({', '.join(arg.describe() for arg in self.args)})"
