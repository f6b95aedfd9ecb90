"""Tests for dependency list helpers."""

from __future__ import annotations

import pytest

from reconcile_traits.util import add_sorted_unique, add_unique


class TestAddUnique:
    def test_appends_missing_value(self) -> None:
        assert add_unique(["b", "a"], "c") == ["b", "a", "c"]

    def test_existing_value_is_not_duplicated(self) -> None:
        assert add_unique(["b", "a"], "a") == ["b", "a"]

    def test_mutates_and_returns_same_list(self) -> None:
        items = ["x"]
        result = add_unique(items, "y")
        assert result is items
        assert items == ["x", "y"]

    def test_membership_is_exact_string_equality(self) -> None:
        assert add_unique(["Runtime:spring-boot"], "runtime:spring-boot") == [
            "Runtime:spring-boot",
            "runtime:spring-boot",
        ]

    @pytest.mark.parametrize(
        "initial",
        [[], ["a"], ["runtime:spring-boot"], ["z", "runtime:spring-boot", "a"]],
    )
    def test_idempotent(self, initial: list[str]) -> None:
        once = add_unique(list(initial), "runtime:spring-boot")
        twice = add_unique(add_unique(list(initial), "runtime:spring-boot"), "runtime:spring-boot")
        assert once == twice


class TestAddSortedUnique:
    def test_sorts_whole_list(self) -> None:
        assert add_sorted_unique(["c", "a"], "b") == ["a", "b", "c"]

    def test_sorts_even_when_value_present(self) -> None:
        assert add_sorted_unique(["c", "a"], "a") == ["a", "c"]

    @pytest.mark.parametrize(
        ("initial", "value"),
        [
            ([], "x"),
            (["b-lib"], "runtime:spring-boot"),
            (["runtime:spring-boot", "b-lib", "camel:http"], "runtime:spring-boot"),
            (["z", "y", "x"], "a"),
        ],
    )
    def test_result_sorted_without_duplicates(self, initial: list[str], value: str) -> None:
        result = add_sorted_unique(list(initial), value)
        assert result == sorted(result)
        assert len(result) == len(set(result))
        assert value in result
