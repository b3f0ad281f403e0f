"""
Sigil IR - the call-by-value lambda calculus produced by the desugarer.

Variables are de Bruijn indices (0 is the innermost enclosing binder).
Literals and effect names are indices into the literal pool that was built
while desugaring, so an IR term is only meaningful together with its pool.

Binders:
  SigilIRAbs   binds one argument (index 0 inside its body).
  SigilIRRec   binds its argument (index 0) and itself (index 1).

Built-in forms have fixed arity and are only produced by the built-in
operator table; user programs reach them through names such as `type`.
"""

from dataclasses import dataclass
from typing import Sequence, Union


@dataclass(frozen=True)
class SigilIRVar:
    """Reference to a bound variable by de Bruijn index."""
    index: int

    def describe(self) -> str:
        return f"#{self.index}"


@dataclass(frozen=True)
class SigilIRLit:
    """Reference to a literal pool entry."""
    index: int

    def describe(self) -> str:
        return f"lit[{self.index}]"


@dataclass(frozen=True)
class SigilIREffect:
    """Invocation of an ambient effect; the index names it in the literal pool."""
    index: int

    def describe(self) -> str:
        return f"effect[{self.index}]"


@dataclass(frozen=True)
class SigilIRAbs:
    """Single-argument abstraction."""
    body: 'SigilIRExpr'

    def describe(self) -> str:
        return f"(\\. {self.body.describe()})"


@dataclass(frozen=True)
class SigilIRRec:
    """Self-referential single-argument abstraction."""
    body: 'SigilIRExpr'

    def describe(self) -> str:
        return f"(rec. {self.body.describe()})"


@dataclass(frozen=True)
class SigilIRApp:
    """Application of a function to one argument."""
    fn: 'SigilIRExpr'
    arg: 'SigilIRExpr'

    def describe(self) -> str:
        return f"({self.fn.describe()} {self.arg.describe()})"


@dataclass(frozen=True)
class SigilIRTypeOf:
    """Yields a value describing the runtime type of its operand."""
    value: 'SigilIRExpr'

    def describe(self) -> str:
        return f"(typeof {self.value.describe()})"


@dataclass(frozen=True)
class SigilIRUnpack:
    """
    Deconstructs a value.

    If `value` is a constructed application, `on_compound` is applied to its
    function part and then its argument; otherwise `on_other` is applied to
    the value itself.
    """
    value: 'SigilIRExpr'
    on_compound: 'SigilIRExpr'
    on_other: 'SigilIRExpr'

    def describe(self) -> str:
        return f"(unpack {self.value.describe()} {self.on_compound.describe()} {self.on_other.describe()})"


@dataclass(frozen=True)
class SigilIRHandle:
    """Runs `body` with `handler` installed for the effects it invokes."""
    body: 'SigilIRExpr'
    handler: 'SigilIRExpr'

    def describe(self) -> str:
        return f"(handle {self.body.describe()} {self.handler.describe()})"


@dataclass(frozen=True)
class SigilIRCompare:
    """Yields `if_equal` when `left` and `right` are structurally equal, else `otherwise`."""
    left: 'SigilIRExpr'
    right: 'SigilIRExpr'
    if_equal: 'SigilIRExpr'
    otherwise: 'SigilIRExpr'

    def describe(self) -> str:
        return (
            f"(compare {self.left.describe()} {self.right.describe()} "
            f"{self.if_equal.describe()} {self.otherwise.describe()})"
        )


# Union type for all IR terms
SigilIRExpr = Union[
    SigilIRVar,
    SigilIRLit,
    SigilIREffect,
    SigilIRAbs,
    SigilIRRec,
    SigilIRApp,
    SigilIRTypeOf,
    SigilIRUnpack,
    SigilIRHandle,
    SigilIRCompare,
]


def make_abs(body: SigilIRExpr, count: int) -> SigilIRExpr:
    """Wrap `body` in `count` nested abstractions."""
    for _ in range(count):
        body = SigilIRAbs(body)

    return body


def make_apply_chain(fn: SigilIRExpr, args: Sequence[SigilIRExpr]) -> SigilIRExpr:
    """Apply `fn` to each of `args` in turn: ((fn a1) a2) ..."""
    for arg in args:
        fn = SigilIRApp(fn, arg)

    return fn
