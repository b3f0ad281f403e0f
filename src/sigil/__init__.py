"""Sigil - desugars explicit-binding surface syntax into a call-by-value lambda calculus."""

from typing import Sequence, Tuple

# Main API
from sigil.sigil_desugarer import SigilDesugarer
from sigil.sigil_result import SigilDesugarResult
from sigil.sigil_config import SigilConfig

# Exceptions
from sigil.sigil_error import (
    SigilError, SigilUnresolvedNameError, SigilDepthLimitError, SigilInternalError
)

# Surface syntax
from sigil.sigil_syntax import (
    SigilSynNode, SigilSynVar, SigilSynAtom, SigilSynString, SigilSynBinding,
    SigilSynBlock, SigilSynCall, SigilConsumeKind
)

# IR
from sigil.sigil_ir import (
    SigilIRExpr, SigilIRVar, SigilIRLit, SigilIREffect, SigilIRAbs, SigilIRRec, SigilIRApp,
    SigilIRTypeOf, SigilIRUnpack, SigilIRHandle, SigilIRCompare
)

# Lower-level components (for advanced usage)
from sigil.sigil_context import SigilContext
from sigil.sigil_environment import SigilVarKind, SigilLexicalEnvironment, SigilPendingQueue
from sigil.sigil_literal_pool import SigilLiteral, SigilLiteralPool
from sigil.sigil_builtins import SigilBuiltinRegistry


def desugar_program(
    program: SigilSynBlock | Sequence[SigilSynNode],
    source: str | None = None,
    globals_: Sequence[str | Tuple[str, SigilVarKind]] | None = None,
    config: SigilConfig | None = None
) -> SigilDesugarResult:
    """Desugar a program with a one-off desugarer."""
    return SigilDesugarer(config).desugar(program, source, globals_)


__all__ = [
    # Main API
    "SigilDesugarer", "SigilDesugarResult", "SigilConfig", "desugar_program",

    # Exceptions
    "SigilError", "SigilUnresolvedNameError", "SigilDepthLimitError", "SigilInternalError",

    # Surface syntax
    "SigilSynNode", "SigilSynVar", "SigilSynAtom", "SigilSynString", "SigilSynBinding",
    "SigilSynBlock", "SigilSynCall", "SigilConsumeKind",

    # IR
    "SigilIRExpr", "SigilIRVar", "SigilIRLit", "SigilIREffect", "SigilIRAbs", "SigilIRRec",
    "SigilIRApp", "SigilIRTypeOf", "SigilIRUnpack", "SigilIRHandle", "SigilIRCompare",

    # Lower-level components
    "SigilContext", "SigilVarKind", "SigilLexicalEnvironment", "SigilPendingQueue",
    "SigilLiteral", "SigilLiteralPool", "SigilBuiltinRegistry",
]
