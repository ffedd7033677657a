"""Unit tests for predicate conditions and the emptiness rule."""

from __future__ import annotations

import pytest

from sqrepo.query import (
    UNSET,
    Condition,
    Op,
    between,
    eq,
    in_,
    is_,
    is_empty,
    is_sequence_value,
    ne,
    not_in,
)


class TestConditionHelpers:
    def test_eq(self) -> None:
        assert eq(1) == Condition(Op.EQ, 1)

    def test_ne_none(self) -> None:
        assert ne(None) == Condition(Op.NE, None)

    def test_in_normalises_to_tuple(self) -> None:
        assert in_(["a", "b"]) == Condition(Op.IN, ("a", "b"))
        assert in_(x for x in "ab") == Condition(Op.IN, ("a", "b"))

    def test_not_in(self) -> None:
        assert not_in({1}).op is Op.NOT_IN

    def test_between_holds_both_bounds(self) -> None:
        assert between(1, 5).value == (1, 5)

    def test_is(self) -> None:
        assert is_(None) == Condition(Op.IS, None)

    def test_condition_is_hashable_and_frozen(self) -> None:
        cond = in_([1, 2])
        assert hash(cond) == hash(in_((1, 2)))
        with pytest.raises((AttributeError, TypeError)):
            cond.value = ()  # type: ignore[misc]

    def test_repr(self) -> None:
        assert repr(eq("x")) == "EQ('x')"


class TestEmptiness:
    @pytest.mark.parametrize("value", [UNSET, "", [], (), set(), frozenset()])
    def test_empty(self, value: object) -> None:
        assert is_empty(value)

    @pytest.mark.parametrize("value", [None, 0, False, " ", [0], {"a": 1}, {}])
    def test_not_empty(self, value: object) -> None:
        assert not is_empty(value)

    def test_unset_is_singleton_and_falsy(self) -> None:
        assert type(UNSET)() is UNSET
        assert not UNSET
        assert repr(UNSET) == "UNSET"


class TestSequenceValues:
    @pytest.mark.parametrize("value", [[1], (1,), {1}, frozenset({1})])
    def test_sequences(self, value: object) -> None:
        assert is_sequence_value(value)

    @pytest.mark.parametrize("value", ["abc", b"abc", 1, None, {"a": 1}])
    def test_scalars(self, value: object) -> None:
        assert not is_sequence_value(value)
