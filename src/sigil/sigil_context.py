"""Desugaring context - the only mutable state of one desugar run.

A context bundles the literal pool, the lexical environment and the
pending-bindings queue.  It is created empty for each top-level desugar call,
threaded through every recursive step, and discarded afterwards, so separate
runs never share state.
"""

from typing import List, Sequence, Tuple

from sigil.sigil_builtins import SigilBuiltinRegistry
from sigil.sigil_config import SigilConfig
from sigil.sigil_environment import (
    SigilLexicalEnvironment, SigilPendingBinding, SigilPendingQueue, SigilVarKind
)
from sigil.sigil_literal_pool import SigilLiteralPool


# Structural tags used to wrap macro arguments.  Interned straight after nil
# so every run assigns them the same indices.
VALUE_TAG = "Value"
BINDING_TAG = "Binding"
CALL_TAG = "Call"
CONS_TAG = "Cons"


class SigilContext:
    """Literal pool, lexical environment and pending bindings for one desugar run."""

    def __init__(self, config: SigilConfig | None = None, source: str | None = None) -> None:
        """
        Create an empty context.

        Args:
            config: Reserved names and limits (defaults apply when omitted)
            source: Program text, used only to translate error positions
        """
        self.config = config if config is not None else SigilConfig()
        self.source = source
        self.literals = SigilLiteralPool()
        self.vars = SigilLexicalEnvironment()
        self.pending = SigilPendingQueue()
        self.depth = 0

        self.nil_index = self.literals.intern(self.config.nil_text)
        self.value_tag = self.literals.intern(VALUE_TAG)
        self.binding_tag = self.literals.intern(BINDING_TAG)
        self.call_tag = self.literals.intern(CALL_TAG)
        self.cons_tag = self.literals.intern(CONS_TAG)

        self.builtins = SigilBuiltinRegistry(self.config, self.nil_index)

    def push_globals(self, names: Sequence[str | Tuple[str, SigilVarKind]]) -> int:
        """
        Push host-provided names as the outermost environment entries.

        Args:
            names: Plain names (ordinary) or (name, kind) pairs, outermost first

        Returns:
            The number of entries pushed
        """
        for item in names:
            if isinstance(item, str):
                self.vars.push(item)

            else:
                name, kind = item
                self.vars.push(name, kind)

        return len(names)

    def open_scope(self) -> Tuple[int, List[SigilPendingBinding]]:
        """
        Attach every pending binding to a newly opened scope.

        Each binding pushes one environment entry.  If nothing was pending, a
        single placeholder is pushed so the scope still opens one abstraction.
        Bindings with a level above 1 leave a copy, one level lower, which the
        caller may re-queue for a scope outside the current block.

        Returns:
            (number of bindings attached, copies still owed to later scopes)
        """
        attached = self.pending.take_all()
        carried: List[SigilPendingBinding] = []
        for binding in attached:
            self.vars.push(binding.name, binding.kind)
            copy = binding.descend()
            if copy is not None:
                carried.append(copy)

        if not attached:
            self.vars.push_placeholder()

        return len(attached), carried

    def known_names(self) -> List[str]:
        """Names that would resolve right now, innermost first, then built-ins."""
        return self.vars.names() + self.builtins.names()

    def __repr__(self) -> str:
        return (
            f"SigilContext(vars={len(self.vars)}, literals={len(self.literals)}, "
            f"pending={len(self.pending)})"
        )
