"""Literal pool for the Sigil desugarer.

Atoms, text literals and binding names are interned into small indices that
SigilIRLit and SigilIREffect nodes refer to.  Indices are assigned in
first-seen order and never change once assigned.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple


@dataclass(frozen=True)
class SigilLiteral:
    """A literal pool entry.  Atoms and text literals with the same text are distinct."""
    text: str
    is_string: bool = False

    def describe(self) -> str:
        if self.is_string:
            escaped = self.text.replace('\\', '\\\\').replace('"', '\\"').replace('\n', '\\n')
            return f'"{escaped}"'

        return self.text


class SigilLiteralPool:
    """Append-only, deduplicated sequence of literals."""

    def __init__(self) -> None:
        self._entries: List[SigilLiteral] = []
        self._indices: Dict[SigilLiteral, int] = {}

    def intern(self, text: str, is_string: bool = False) -> int:
        """
        Intern a literal.

        Args:
            text: Literal text
            is_string: True for a text literal, False for an atom or binding name

        Returns:
            The index of the existing entry, or of the newly appended one
        """
        literal = SigilLiteral(text, is_string)
        index = self._indices.get(literal)
        if index is not None:
            return index

        index = len(self._entries)
        self._entries.append(literal)
        self._indices[literal] = index
        return index

    def index_of(self, text: str, is_string: bool = False) -> int | None:
        """Return the index of a literal without interning it."""
        return self._indices.get(SigilLiteral(text, is_string))

    def get(self, index: int) -> SigilLiteral:
        """Get the literal at an index (raises IndexError if out of range)."""
        return self._entries[index]

    def texts(self) -> Tuple[str, ...]:
        """Return the literal texts in index order."""
        return tuple(entry.text for entry in self._entries)

    def entries(self) -> Tuple[SigilLiteral, ...]:
        """Return a snapshot of all entries in index order."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SigilLiteral]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"SigilLiteralPool({[entry.describe() for entry in self._entries]})"
