"""Result of desugaring a whole Sigil program."""

from dataclasses import dataclass
from typing import Tuple

from sigil.sigil_ir import SigilIRAbs, SigilIRExpr
from sigil.sigil_literal_pool import SigilLiteral


@dataclass(frozen=True)
class SigilDesugarResult:
    """
    A desugared program.

    `expr` is always an abstraction: the top-level block opens one scope like
    any other block.  Hosts apply it to an ignored argument, or take `body`
    directly.  The outermost `globals_count` de Bruijn slots refer to the
    host-provided globals, outermost first.
    """
    expr: SigilIRAbs
    literals: Tuple[SigilLiteral, ...]
    globals_count: int = 0

    @property
    def body(self) -> SigilIRExpr:
        """The program body under the top-level abstraction."""
        return self.expr.body

    def literal_texts(self) -> Tuple[str, ...]:
        """Literal texts in index order."""
        return tuple(literal.text for literal in self.literals)

    def describe(self) -> str:
        """Render the IR and its literal pool for debugging."""
        pool = ", ".join(f"{i}={literal.describe()}" for i, literal in enumerate(self.literals))
        return f"{self.expr.describe()}\nliterals: [{pool}]"
