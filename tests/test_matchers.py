"""Tests for funcmock.matchers."""

import pytest

from funcmock.matchers import ANY, AnyArgument, InstanceOf, NotNone, Satisfies, is_matcher


class TestAny:
    @pytest.mark.parametrize("candidate", [None, 0, "", "argument-1", object(), [1, 2]])
    def test_accepts_everything(self, candidate):
        assert ANY.accepts(candidate)

    def test_repr(self):
        assert repr(ANY) == "ANY"

    def test_is_not_equal_to_values(self):
        # Matching goes through accepts(), never through ==.
        assert ANY != "argument-1"


class TestInstanceOf:
    def test_single_type(self):
        matcher = InstanceOf(str)
        assert matcher.accepts("x")
        assert not matcher.accepts(1)
        assert not matcher.accepts(None)

    def test_several_types(self):
        matcher = InstanceOf(int, type(None))
        assert matcher.accepts(None)
        assert matcher.accepts(3)
        assert repr(matcher) == "InstanceOf(int, NoneType)"

    def test_needs_a_type(self):
        with pytest.raises(ValueError, match="at least one type"):
            InstanceOf()


class TestSatisfies:
    def test_predicate(self):
        matcher = Satisfies(lambda s: s.endswith(".go"), "go file")
        assert matcher.accepts("func_mock_test.go")
        assert not matcher.accepts("main.py")
        assert repr(matcher) == "Satisfies(go file)"

    def test_truthiness(self):
        assert Satisfies(len).accepts([1])
        assert not Satisfies(len).accepts([])
        assert repr(Satisfies(len)) == "Satisfies(len)"


class TestNotNone:
    def test_rejects_only_none(self):
        assert NotNone.accepts(0)
        assert NotNone.accepts("")
        assert not NotNone.accepts(None)


class TestIsMatcher:
    def test_shipped_matchers(self):
        assert is_matcher(ANY)
        assert is_matcher(AnyArgument())
        assert is_matcher(InstanceOf(str))
        assert is_matcher(NotNone)

    def test_structural(self):
        class StartsWithA:
            def accepts(self, candidate):
                return str(candidate).startswith("a")

        assert is_matcher(StartsWithA())

    def test_literals(self):
        assert not is_matcher("argument-1")
        assert not is_matcher(None)
        assert not is_matcher(42)

    def test_matcher_classes_are_literals(self):
        assert not is_matcher(AnyArgument)
