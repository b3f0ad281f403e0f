"""
Built-in operator table for Sigil.

Names that are not bound in the lexical environment fall back to this table.
Each entry desugars to a fixed closed IR term; a call to a built-in is then
an ordinary application of that term.  Built-ins are never macros: their
arguments are always evaluated.

    =          \\pattern. \\value. \\k. k (bind value)
    =>         \\pattern. \\body. body
    ~>         \\pattern. \\body. rec(body self arg)
    type       \\v. typeof v
    __compare  \\a. \\b. \\eq. \\ne. compare a b eq ne
    __unpack   \\v. \\compound. \\other. unpack v compound other
    __handle   \\body. \\handler. handle body handler

A definition pattern such as `::f(:n)` evaluates to a constructed value
rather than an atom, which is how `=` tells a recursive definition
(tie `value` to itself) from a plain one (bind `value` as it is).
"""

from typing import Dict, List

from sigil.sigil_config import SigilConfig
from sigil.sigil_ir import (
    SigilIRApp, SigilIRCompare, SigilIRExpr, SigilIRHandle, SigilIRLit, SigilIRRec,
    SigilIRTypeOf, SigilIRUnpack, SigilIRVar, make_abs
)


def _v(index: int) -> SigilIRVar:
    return SigilIRVar(index)


class SigilBuiltinRegistry:
    """Maps built-in operator names to their closed IR terms."""

    BINDING_OPERATORS = ("=", "=>", "~>")

    def __init__(self, config: SigilConfig, nil_index: int) -> None:
        """
        Build the table.

        Args:
            config: Supplies the names of the comparison, unpack and handle primitives
            nil_index: Literal pool index of the nil atom
        """
        # Inside rec under `=`: arg #0, self #1, k #2, value #3, pattern #4
        recursive_value = SigilIRRec(SigilIRApp(SigilIRApp(_v(3), _v(1)), _v(0)))
        bind = make_abs(
            SigilIRApp(
                _v(0),
                SigilIRCompare(SigilIRTypeOf(_v(2)), SigilIRTypeOf(SigilIRLit(nil_index)), _v(1), recursive_value)
            ),
            3
        )

        self._table: Dict[str, SigilIRExpr] = {
            "=": bind,
            "=>": make_abs(_v(0), 2),
            # Inside rec: arg #0, self #1, body #2, pattern #3
            "~>": make_abs(SigilIRRec(SigilIRApp(SigilIRApp(_v(2), _v(1)), _v(0))), 2),
            "type": make_abs(SigilIRTypeOf(_v(0)), 1),
            config.compare_name: make_abs(SigilIRCompare(_v(3), _v(2), _v(1), _v(0)), 4),
            config.unpack_name: make_abs(SigilIRUnpack(_v(2), _v(1), _v(0)), 3),
            config.handle_name: make_abs(SigilIRHandle(_v(1), _v(0)), 2),
        }

    def lookup(self, name: str) -> SigilIRExpr | None:
        """Return the IR term for a built-in name, or None."""
        return self._table.get(name)

    def is_builtin(self, name: str) -> bool:
        """Check if a name is a built-in."""
        return name in self._table

    def names(self) -> List[str]:
        """Get all built-in names."""
        return list(self._table)
