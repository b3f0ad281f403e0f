"""Sigil Desugarer - lowers surface syntax into the Sigil lambda calculus IR.

User-defined functions in Sigil can act as macros: a call to a name tagged as
a macro does not evaluate its arguments, it wraps each one as a structural tag
so the callee can observe whether an argument introduces a binding:

    Value(v)           an ordinary argument, evaluated as usual
    Binding(name)      a binding marker such as :x
    Call(f, [a, ...])  a call that contains a binding somewhere inside it

Whether an argument is wrapped is decided purely from syntax, never by
evaluation.

Blocks lower to curried abstractions.  Bindings written in one block item
scope over every following item of the same block:

    { let(:a, x), let(:b, y), f(a, b) }
    =>
    \\_. (let 'a x) (\\a. (let 'b y) (\\b. f a b))

Items that bind nothing are sequenced by applying the rest of the block to
them as an ignored argument, which keeps left-to-right evaluation order under
call-by-value:

    { f(x), g(y) }  =>  \\_. (\\_. g y) (f x)
"""

import logging
from typing import List, Sequence, Tuple

from sigil.sigil_config import SigilConfig
from sigil.sigil_context import SigilContext
from sigil.sigil_environment import SigilPendingBinding, SigilVarKind
from sigil.sigil_error import SigilDepthLimitError, SigilInternalError, SigilUnresolvedNameError
from sigil.sigil_ir import (
    SigilIRAbs, SigilIRApp, SigilIREffect, SigilIRExpr, SigilIRLit, SigilIRVar,
    make_abs, make_apply_chain
)
from sigil.sigil_result import SigilDesugarResult
from sigil.sigil_syntax import (
    SigilConsumeKind, SigilSynAtom, SigilSynBinding, SigilSynBlock, SigilSynCall,
    SigilSynNode, SigilSynString, SigilSynVar
)


class SigilDesugarer:
    """Transforms Sigil surface syntax into lambda calculus IR."""

    def __init__(self, config: SigilConfig | None = None) -> None:
        """
        Initialize the desugarer.

        Args:
            config: Reserved names and limits (defaults apply when omitted)
        """
        self.config = config if config is not None else SigilConfig()
        self._logger = logging.getLogger("SigilDesugarer")

    def desugar(
        self,
        program: SigilSynBlock | Sequence[SigilSynNode],
        source: str | None = None,
        globals_: Sequence[str | Tuple[str, SigilVarKind]] | None = None
    ) -> SigilDesugarResult:
        """
        Desugar a whole program.

        The program is treated as one implicit block.  A fresh context is
        used for every call.

        Args:
            program: The top-level block, or its items
            source: Program text, used only to translate error positions
            globals_: Host-provided names, outermost first, as plain names
                (ordinary) or (name, kind) pairs

        Returns:
            The desugared program

        Raises:
            SigilUnresolvedNameError: If a name cannot be resolved
            SigilDepthLimitError: If the program nests deeper than config.max_depth
        """
        items = program.items if isinstance(program, SigilSynBlock) else tuple(program)

        ctx = SigilContext(self.config, source)
        globals_count = ctx.push_globals(globals_ or ())
        self._logger.debug("desugaring %d top-level items with %d globals", len(items), globals_count)

        expr = self._desugar_block(ctx, items)

        if not isinstance(expr, SigilIRAbs):
            raise SigilInternalError(f"Top-level program did not lower to an abstraction: {expr.describe()}")

        if len(ctx.vars) != globals_count:
            raise SigilInternalError(
                f"Environment unbalanced after desugaring: {len(ctx.vars)} entries, expected {globals_count}"
            )

        self._logger.debug("desugared program with %d literals: %s", len(ctx.literals), expr.describe())
        return SigilDesugarResult(expr, ctx.literals.entries(), globals_count)

    def has_bindings(self, ctx: SigilContext, node: SigilSynNode) -> bool:
        """
        Check whether a macro argument must keep its structure.

        Blocks are opaque: once lowered, their own bindings are not visible
        to an enclosing macro.  Calls to macros are already settled by their
        own desugaring.  This check never modifies the context.

        Raises:
            SigilDepthLimitError: If the argument nests deeper than config.max_depth
        """
        # (node, nesting depth) pairs, counted on from the current depth
        stack: List[Tuple[SigilSynNode, int]] = [(node, ctx.depth + 1)]
        while stack:
            current, depth = stack.pop()
            if self.config.max_depth and depth > self.config.max_depth:
                raise SigilDepthLimitError(self.config.max_depth, position=current.position, source=ctx.source)

            if isinstance(current, SigilSynBinding):
                return True

            if not isinstance(current, SigilSynCall):
                continue

            if self._is_macro_callee(ctx, current.callee):
                continue

            stack.extend((arg, depth + 1) for arg in reversed(current.args))
            stack.append((current.callee, depth + 1))

        return False

    def _is_macro_callee(self, ctx: SigilContext, node: SigilSynNode) -> bool:
        return isinstance(node, SigilSynVar) and ctx.vars.classify(node.name) == SigilVarKind.MACRO

    def _enter(self, ctx: SigilContext, node: SigilSynNode) -> None:
        """Track nesting depth, enforcing the configured ceiling."""
        ctx.depth += 1
        if self.config.max_depth and ctx.depth > self.config.max_depth:
            raise SigilDepthLimitError(self.config.max_depth, position=node.position, source=ctx.source)

    def _wrap(self, ctx: SigilContext, node: SigilSynNode) -> SigilIRExpr:
        """
        Wrap a macro argument as a structural tag.

        :x          -> (Binding 'x)
        { ... }     -> the lowered block, untagged
        f(:x, y)    -> (Call (Value f) (Cons (Binding 'x) (Cons (Value y) nil)))
        anything    -> (Value <evaluated>)
        """
        self._enter(ctx, node)
        try:
            if isinstance(node, SigilSynBinding):
                return SigilIRApp(SigilIRLit(ctx.binding_tag), self._desugar_binding(ctx, node))

            if isinstance(node, SigilSynBlock):
                return self._desugar_block(ctx, node.items)

            if isinstance(node, SigilSynCall) and self.has_bindings(ctx, node):
                if isinstance(node.callee, SigilSynBinding):
                    wrapped_callee: SigilIRExpr = SigilIRApp(
                        SigilIRLit(ctx.binding_tag),
                        self._desugar_binding(ctx, node.callee, self._pattern_kind(node))
                    )

                else:
                    wrapped_callee = self._wrap(ctx, node.callee)

                # Wrap left to right so bindings queue in source order
                wrapped_args = [self._wrap(ctx, arg) for arg in node.args]
                arg_list: SigilIRExpr = SigilIRLit(ctx.nil_index)
                for wrapped in reversed(wrapped_args):
                    arg_list = SigilIRApp(SigilIRApp(SigilIRLit(ctx.cons_tag), wrapped), arg_list)

                return SigilIRApp(SigilIRApp(SigilIRLit(ctx.call_tag), wrapped_callee), arg_list)

            return SigilIRApp(SigilIRLit(ctx.value_tag), self._desugar_value(ctx, node))

        finally:
            ctx.depth -= 1

    def _desugar_value(self, ctx: SigilContext, node: SigilSynNode) -> SigilIRExpr:
        """Desugar a node as an ordinary value."""
        self._enter(ctx, node)
        try:
            if isinstance(node, SigilSynVar):
                return self._desugar_var(ctx, node)

            if isinstance(node, SigilSynAtom):
                return SigilIRLit(ctx.literals.intern(node.text))

            if isinstance(node, SigilSynString):
                return SigilIRLit(ctx.literals.intern(node.text, is_string=True))

            if isinstance(node, SigilSynBinding):
                return self._desugar_binding(ctx, node)

            if isinstance(node, SigilSynBlock):
                return self._desugar_block(ctx, node.items)

            if isinstance(node, SigilSynCall):
                return self._desugar_call(ctx, node)

            raise SigilInternalError(f"Unknown syntax node type: {type(node).__name__}")

        finally:
            ctx.depth -= 1

    def _desugar_var(self, ctx: SigilContext, node: SigilSynVar) -> SigilIRExpr:
        """Resolve a name: lexical environment, then built-ins, then the effect convention."""
        index = ctx.vars.resolve(node.name)
        if index is not None:
            return SigilIRVar(index)

        builtin = ctx.builtins.lookup(node.name)
        if builtin is not None:
            return builtin

        if node.name.endswith(self.config.effect_suffix):
            return SigilIREffect(ctx.literals.intern(node.name))

        raise SigilUnresolvedNameError(
            node.name,
            available_names=ctx.known_names(),
            effect_suffix=self.config.effect_suffix,
            position=node.position,
            source=ctx.source
        )

    def _desugar_binding(
        self,
        ctx: SigilContext,
        node: SigilSynBinding,
        kind: SigilVarKind = SigilVarKind.ORDINARY
    ) -> SigilIRExpr:
        """
        Queue a binding for the next scope and return its name as a literal.

        The binding only takes effect when the enclosing block opens its next
        scope; the literal lets a macro read the name.
        """
        ctx.pending.add(SigilPendingBinding(node.name, node.level, kind))
        return SigilIRLit(ctx.literals.intern(node.name))

    def _pattern_kind(self, node: SigilSynCall) -> SigilVarKind:
        """
        Classify the name defined by a pattern such as ::f(...).

        A function whose parameters take their bindings from an explicit block
        argument receives bindings from its call sites, so calls to it are
        macro calls.
        """
        for arg in node.args:
            if isinstance(arg, SigilSynBinding) and arg.consume == SigilConsumeKind.BLOCK:
                return SigilVarKind.MACRO

        return SigilVarKind.ORDINARY

    def _desugar_call(self, ctx: SigilContext, node: SigilSynCall) -> SigilIRExpr:
        """
        Desugar a call.

        f()          -> f nil
        f(a, b)      -> (f a) b                      ordinary callee
        m(:x, y)     -> (m (Binding 'x)) (Value y)   macro callee

        Bindings queued before the call belong to the enclosing scope, so they
        are set aside while the arguments are desugared and put back in front
        of any bindings the arguments queue.
        """
        is_macro = self._is_macro_callee(ctx, node.callee)
        saved = ctx.pending.take_all()

        if isinstance(node.callee, SigilSynBinding):
            fn = self._desugar_binding(ctx, node.callee, self._pattern_kind(node))

        else:
            fn = self._desugar_value(ctx, node.callee)

        if not node.args:
            result: SigilIRExpr = SigilIRApp(fn, SigilIRLit(ctx.nil_index))

        elif is_macro:
            result = make_apply_chain(fn, [self._wrap(ctx, arg) for arg in node.args])

        else:
            result = make_apply_chain(fn, [self._desugar_value(ctx, arg) for arg in node.args])

        ctx.pending.prepend(saved)
        return result

    def _desugar_block(self, ctx: SigilContext, items: Sequence[SigilSynNode]) -> SigilIRExpr:
        """
        Fold block items into nested abstractions.

        Every item opens one scope holding the bindings queued by the item
        before it (for the first item: the bindings queued before the block,
        such as the parameters of a definition whose body this block is).  A
        scope with no bindings still opens one abstraction over an ignored
        argument.

        Folding from the last item back to the first:

            last item:             \\x1..xk. item
            item that binds:       \\x1..xk. item (rest)
            item that binds none:  \\x1..xk. (rest) item

        Multi-level bindings leave a copy one level lower each time a scope
        takes them.  Copies from the block's first scope are queued again once
        the block is done, so they reach the scope after the block.  Copies
        from later scopes are dropped: the entry those scopes pushed already
        covers every following item of the same block.
        """
        if not items:
            items = (SigilSynAtom(self.config.nil_text),)

        entry_depth = len(ctx.vars)
        opened: List[int] = []
        exprs: List[SigilIRExpr] = []
        escaping: List[SigilPendingBinding] = []

        for i, item in enumerate(items):
            count, carried = ctx.open_scope()
            opened.append(count)
            if i == 0:
                escaping = carried

            exprs.append(self._desugar_value(ctx, item))

        width = max(1, opened[-1])
        result = make_abs(exprs[-1], width)
        ctx.vars.pop(width)

        for i in range(len(items) - 2, -1, -1):
            if opened[i + 1] == 0:
                combined = SigilIRApp(result, exprs[i])

            else:
                combined = SigilIRApp(exprs[i], result)

            width = max(1, opened[i])
            result = make_abs(combined, width)
            ctx.vars.pop(width)

        if len(ctx.vars) != entry_depth:
            raise SigilInternalError(
                f"Block left the environment at depth {len(ctx.vars)}, expected {entry_depth}"
            )

        ctx.pending.clear()
        ctx.pending.prepend(escaping)
        return result
