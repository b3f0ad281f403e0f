"""Lexical environment and pending-bindings queue for the Sigil desugarer.

The lexical environment is a stack of in-scope names.  Position 0 from the
top of the stack is de Bruijn index 0, so resolving a name is a scan from the
most recently pushed entry downwards: the innermost match wins.

Bindings are not pushed onto the environment where they are written.  They
are first queued as pending and only attached when the enclosing block opens
the next scope (the following block item, or an explicit block argument).
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple


class SigilVarKind(Enum):
    """How calls to a name are desugared."""
    ORDINARY = "ordinary"   # Arguments are evaluated
    MACRO = "macro"         # Arguments are wrapped as structural tags


@dataclass(frozen=True)
class SigilVarEntry:
    """
    An environment entry.

    Unnamed entries are placeholders for scopes that bind nothing; they take
    up a de Bruijn slot but never match a lookup.
    """
    name: str | None
    kind: SigilVarKind = SigilVarKind.ORDINARY

    def __repr__(self) -> str:
        label = self.name if self.name is not None else "_"
        return f"SigilVarEntry({label}, {self.kind.value})"


@dataclass(frozen=True)
class SigilPendingBinding:
    """A binding that has been desugared but not yet attached to a scope."""
    name: str
    level: int = 1
    kind: SigilVarKind = SigilVarKind.ORDINARY

    def descend(self) -> Optional['SigilPendingBinding']:
        """Return the copy that stays pending for the next scope, if the level allows one."""
        if self.level <= 1:
            return None

        return replace(self, level=self.level - 1)


class SigilLexicalEnvironment:
    """Stack of in-scope names with strict push/pop discipline."""

    def __init__(self) -> None:
        self._entries: List[SigilVarEntry] = []

    def push(self, name: str | None, kind: SigilVarKind = SigilVarKind.ORDINARY) -> None:
        """Push a new innermost entry."""
        self._entries.append(SigilVarEntry(name, kind))

    def push_placeholder(self) -> None:
        """Push an unnamed entry for a scope that binds nothing."""
        self._entries.append(SigilVarEntry(None))

    def pop(self, count: int = 1) -> None:
        """
        Pop the `count` innermost entries.

        Raises:
            IndexError: If fewer than `count` entries are in scope
        """
        if count > len(self._entries):
            raise IndexError(f"Cannot pop {count} entries from an environment of depth {len(self._entries)}")

        del self._entries[len(self._entries) - count:]

    def _find(self, name: str) -> Optional[Tuple[int, SigilVarEntry]]:
        for index, entry in enumerate(reversed(self._entries)):
            if entry.name == name:
                return index, entry

        return None

    def resolve(self, name: str) -> Optional[int]:
        """
        Resolve a name to a de Bruijn index.

        Args:
            name: Name to look up

        Returns:
            The index of the innermost entry with this name, or None
        """
        found = self._find(name)
        return found[0] if found is not None else None

    def classify(self, name: str) -> Optional[SigilVarKind]:
        """Return the kind of the innermost entry with this name, or None."""
        found = self._find(name)
        return found[1].kind if found is not None else None

    def names(self) -> List[str]:
        """Get all named entries, innermost first."""
        return [entry.name for entry in reversed(self._entries) if entry.name is not None]

    def dump(self) -> str:
        """Dump the environment for debugging, one entry per line, innermost first."""
        lines = []
        for index, entry in enumerate(reversed(self._entries)):
            label = entry.name if entry.name is not None else "_"
            lines.append(f"#{index}: {label} ({entry.kind.value})")

        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SigilVarEntry]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"SigilLexicalEnvironment(depth={len(self._entries)})"


class SigilPendingQueue:
    """FIFO queue of bindings waiting for the next scope to be opened."""

    def __init__(self) -> None:
        self._entries: List[SigilPendingBinding] = []

    def add(self, binding: SigilPendingBinding) -> None:
        """Queue a binding at the back."""
        self._entries.append(binding)

    def prepend(self, bindings: Iterable[SigilPendingBinding]) -> None:
        """Put bindings back in front of those queued since."""
        self._entries[:0] = list(bindings)

    def take_all(self) -> List[SigilPendingBinding]:
        """Remove and return every queued binding, oldest first."""
        taken = self._entries
        self._entries = []
        return taken

    def clear(self) -> None:
        """Discard every queued binding."""
        self._entries = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SigilPendingBinding]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"SigilPendingQueue({[(b.name, b.level) for b in self._entries]})"
