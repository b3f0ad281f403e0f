"""Tests for the Sigil lexical environment and pending-bindings queue.

These tests verify de Bruijn resolution (innermost match wins), macro
classification, and the FIFO behaviour of pending bindings.
"""

import pytest

from sigil.sigil_environment import (
    SigilLexicalEnvironment, SigilPendingBinding, SigilPendingQueue, SigilVarEntry, SigilVarKind
)


class TestResolution:
    """Test name resolution."""

    def test_most_recent_is_index_zero(self):
        """The most recently pushed entry has index 0."""
        env = SigilLexicalEnvironment()
        env.push("a")
        env.push("b")
        env.push("c")

        assert env.resolve("c") == 0
        assert env.resolve("b") == 1
        assert env.resolve("a") == 2

    def test_innermost_match_wins(self):
        """A shadowing entry hides the outer one."""
        env = SigilLexicalEnvironment()
        env.push("x", SigilVarKind.MACRO)
        env.push("y")
        env.push("x")

        assert env.resolve("x") == 0
        assert env.classify("x") == SigilVarKind.ORDINARY

    def test_shadow_removed_on_pop(self):
        """Popping a shadow reveals the outer entry again."""
        env = SigilLexicalEnvironment()
        env.push("x", SigilVarKind.MACRO)
        env.push("x")
        env.pop()

        assert env.resolve("x") == 0
        assert env.classify("x") == SigilVarKind.MACRO

    def test_missing_name(self):
        """Unknown names resolve and classify to None."""
        env = SigilLexicalEnvironment()
        env.push("x")

        assert env.resolve("y") is None
        assert env.classify("y") is None

    def test_placeholder_takes_slot_but_never_matches(self):
        """Placeholders shift indices but are invisible to lookup."""
        env = SigilLexicalEnvironment()
        env.push("x")
        env.push_placeholder()

        assert env.resolve("x") == 1
        assert env.names() == ["x"]
        assert len(env) == 2


class TestStackDiscipline:
    """Test push and pop."""

    def test_pop_several(self):
        """pop(count) removes the innermost entries."""
        env = SigilLexicalEnvironment()
        for name in ["a", "b", "c"]:
            env.push(name)

        env.pop(2)

        assert len(env) == 1
        assert env.resolve("a") == 0
        assert env.resolve("b") is None

    def test_pop_too_many(self):
        """Popping more entries than exist raises IndexError."""
        env = SigilLexicalEnvironment()
        env.push("a")

        with pytest.raises(IndexError, match="Cannot pop 2 entries"):
            env.pop(2)

    def test_dump_innermost_first(self):
        """dump lists entries with their indices, innermost first."""
        env = SigilLexicalEnvironment()
        env.push("f", SigilVarKind.MACRO)
        env.push_placeholder()

        assert env.dump() == "#0: _ (ordinary)\n#1: f (macro)"

    def test_iteration_outermost_first(self):
        """Iterating yields entries in push order."""
        env = SigilLexicalEnvironment()
        env.push("a")
        env.push("b", SigilVarKind.MACRO)

        assert list(env) == [SigilVarEntry("a"), SigilVarEntry("b", SigilVarKind.MACRO)]


class TestPendingBinding:
    """Test multi-level descent of pending bindings."""

    def test_level_one_has_no_copy(self):
        """An ordinary binding is used up by one scope."""
        assert SigilPendingBinding("x").descend() is None

    def test_level_two_leaves_level_one_copy(self):
        """A two-level binding leaves a one-level copy with the same kind."""
        binding = SigilPendingBinding("f", 2, SigilVarKind.MACRO)

        copy = binding.descend()

        assert copy == SigilPendingBinding("f", 1, SigilVarKind.MACRO)


class TestPendingQueue:
    """Test the pending-bindings queue."""

    def test_take_all_is_fifo_and_clears(self):
        """take_all returns bindings oldest first and empties the queue."""
        queue = SigilPendingQueue()
        queue.add(SigilPendingBinding("a"))
        queue.add(SigilPendingBinding("b"))

        taken = queue.take_all()

        assert [b.name for b in taken] == ["a", "b"]
        assert len(queue) == 0

    def test_prepend_goes_in_front(self):
        """Prepended bindings come before those queued since."""
        queue = SigilPendingQueue()
        queue.add(SigilPendingBinding("new"))

        queue.prepend([SigilPendingBinding("old1"), SigilPendingBinding("old2")])

        assert [b.name for b in queue] == ["old1", "old2", "new"]

    def test_clear(self):
        """clear discards everything."""
        queue = SigilPendingQueue()
        queue.add(SigilPendingBinding("a"))

        queue.clear()

        assert list(queue) == []
