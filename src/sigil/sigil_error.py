"""Exception classes for the Sigil desugarer with detailed context."""

import difflib
from typing import Any, List, Sequence


def offset_to_line_column(source: str, position: int) -> tuple[int, int]:
    """
    Translate a 0-based source offset into a 1-indexed (line, column) pair.

    Offsets past the end of the source are clamped to the final character.
    """
    position = max(0, min(position, len(source)))
    line = source.count('\n', 0, position) + 1
    line_start = source.rfind('\n', 0, position) + 1
    return line, position - line_start + 1


class SigilError(Exception):
    """Base exception for Sigil errors with detailed context information."""

    def __init__(
        self,
        message: str,
        context: str | None = None,
        suggestion: str | None = None,
        example: str | None = None,
        position: int | None = None,
        source: str | None = None,
        show_context: bool = True
    ):
        """
        Initialize detailed error.

        Args:
            message: Core error description
            context: Additional context information
            suggestion: Suggestion for fixing the error
            example: Example of correct usage
            position: 0-based source offset of the offending node
            source: Source code for line/column translation and context display
            show_context: Whether to show source code context
        """
        self.message = message
        self.context = context
        self.suggestion = suggestion
        self.example = example
        self.position = position
        self.source = source
        self.show_context = show_context

        self.line: int | None = None
        self.column: int | None = None
        if position is not None and source is not None:
            self.line, self.column = offset_to_line_column(source, position)

        super().__init__(self._format_detailed_message())

    def _format_context_with_marker(self, source: str, line_num: int, column: int, before: int = 2) -> str:
        """
        Format the lines leading up to the error with a marker under the error column.

        Args:
            source: The source code string
            line_num: Line number (1-indexed)
            column: Column number (1-indexed)
            before: Number of lines before the error line to include

        Returns:
            Formatted string with context and marker
        """
        lines = source.split('\n')
        start_line = max(1, line_num - before)
        width = len(str(line_num))

        result_lines = []
        for ln in range(start_line, line_num + 1):
            indicator = ">" if ln == line_num else " "
            result_lines.append(f"  {indicator} {ln:>{width}}: {lines[ln - 1]}")

        # "  " + indicator + " " + line number + ": " + (column - 1)
        padding = 2 + 1 + 1 + width + 2 + (column - 1)
        result_lines.append(" " * padding + "^")
        return "\n".join(result_lines)

    def _format_detailed_message(self) -> str:
        """Format the error message with all available details."""
        parts = [f"Error: {self.message}"]

        if self.line is not None and self.column is not None:
            parts.append(f"Location: Line {self.line}, Column {self.column}")

            if self.show_context and self.source is not None:
                context_str = self._format_context_with_marker(self.source, self.line, self.column)
                parts.append(f"\nSource Context:\n{context_str}")

        elif self.position is not None:
            parts.append(f"Position: {self.position}")

        if self.context:
            parts.append(f"Context: {self.context}")

        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")

        if self.example:
            parts.append(f"Example: {self.example}")

        return "\n".join(parts)


class SigilUnresolvedNameError(SigilError):
    """A name matched neither the lexical environment, the built-ins, nor the effect convention."""

    def __init__(
        self,
        name: str,
        available_names: Sequence[str] = (),
        effect_suffix: str = "!",
        **kwargs: Any
    ) -> None:
        """
        Initialize unresolved name error.

        Args:
            name: The name that could not be resolved
            available_names: Names that were in scope or built in at the failure point
            effect_suffix: Suffix that marks ambient effect names
            **kwargs: Additional error context (position, source)
        """
        self.name = name

        similar = self.suggest_similar_names(name, available_names)
        if similar:
            suggestion = "Did you mean " + ", ".join(f"'{s}'" for s in similar) + "?"

        else:
            suggestion = (
                f"Bind '{name}' before using it, or end the name with '{effect_suffix}' "
                "to invoke an ambient effect"
            )

        super().__init__(
            message=f"Unresolved name '{name}'",
            suggestion=suggestion,
            example=f"{{ :{name} = value, use({name}) }}",
            **kwargs
        )

    @staticmethod
    def suggest_similar_names(target: str, available: Sequence[str], max_suggestions: int = 3) -> List[str]:
        """Suggest similar names using fuzzy matching."""
        if not target or not available:
            return []

        unique = list(dict.fromkeys(available))
        return difflib.get_close_matches(target, unique, n=max_suggestions, cutoff=0.6)


class SigilDepthLimitError(SigilError):
    """The syntax tree nests deeper than the configured ceiling."""

    def __init__(self, max_depth: int, **kwargs: Any) -> None:
        """
        Initialize depth limit error.

        Args:
            max_depth: The ceiling that was exceeded
            **kwargs: Additional error context (position, source)
        """
        self.max_depth = max_depth

        super().__init__(
            message=f"Program nesting exceeds the maximum depth of {max_depth}",
            suggestion="Split deeply nested expressions into named bindings, or raise max_depth",
            **kwargs
        )


class SigilInternalError(SigilError):
    """An invariant of the desugaring algorithm was violated."""
