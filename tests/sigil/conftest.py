"""Shared fixtures and utilities for Sigil tests."""

import pytest

from sigil import SigilDesugarer, SigilConfig
from sigil.sigil_builtins import SigilBuiltinRegistry
from sigil.sigil_context import SigilContext
from sigil.sigil_ir import SigilIRExpr
from sigil.sigil_syntax import (
    SigilConsumeKind, SigilSynAtom, SigilSynBinding, SigilSynBlock, SigilSynCall,
    SigilSynNode, SigilSynString, SigilSynVar
)


# Literal index of nil in every context
NIL = 0


@pytest.fixture
def desugarer():
    """Create a desugarer with the default configuration."""
    return SigilDesugarer()


@pytest.fixture
def ctx():
    """Create a fresh, empty desugaring context."""
    return SigilContext()


class SigilTestHelpers:
    """Builders for surface syntax trees, since parsing is not part of Sigil."""

    @staticmethod
    def var(name: str, position: int | None = None) -> SigilSynVar:
        return SigilSynVar(name, position=position)

    @staticmethod
    def atom(text: str) -> SigilSynAtom:
        return SigilSynAtom(text)

    @staticmethod
    def string(text: str) -> SigilSynString:
        return SigilSynString(text)

    @staticmethod
    def bind(name: str, level: int = 1, consume: SigilConsumeKind = SigilConsumeKind.SCOPE) -> SigilSynBinding:
        return SigilSynBinding(name, level, consume)

    @staticmethod
    def block(*items: SigilSynNode) -> SigilSynBlock:
        return SigilSynBlock(tuple(items))

    @staticmethod
    def call(callee: SigilSynNode | str, *args: SigilSynNode, position: int | None = None) -> SigilSynCall:
        """Build a call; a string callee is shorthand for a name reference."""
        if isinstance(callee, str):
            callee = SigilSynVar(callee)

        return SigilSynCall(callee, tuple(args), position=position)

    @staticmethod
    def builtin(name: str) -> SigilIRExpr:
        """Return the IR a built-in name desugars to under the default configuration."""
        term = SigilBuiltinRegistry(SigilConfig(), NIL).lookup(name)
        assert term is not None, f"'{name}' is not a built-in"
        return term

    @staticmethod
    def nest_calls(callee: str, depth: int, innermost: SigilSynNode) -> SigilSynNode:
        """Build callee(callee(...(innermost))) nested `depth` times."""
        node = innermost
        for _ in range(depth):
            node = SigilSynCall(SigilSynVar(callee), (node,))

        return node


@pytest.fixture
def helpers():
    """Provide syntax builder utilities."""
    return SigilTestHelpers
