"""Tests for type specifications and the type checker."""

from __future__ import annotations

from datetime import date
from typing import Annotated, Literal

import pytest
from pydantic import Field

from servicekit.domain.types import (
    VALID,
    ExactType,
    Invalid,
    RichType,
    UnionType,
    check,
    describe,
    type_spec,
)


class TestTypeSpec:
    def test_plain_class_is_exact(self) -> None:
        assert type_spec(int) == ExactType(int)

    def test_list_is_union(self) -> None:
        spec = type_spec([str, date])
        assert spec == UnionType((ExactType(str), ExactType(date)))

    def test_tuple_is_union(self) -> None:
        assert type_spec((str, date)) == type_spec([str, date])

    def test_pipe_union_of_classes_is_union(self) -> None:
        assert type_spec(str | date) == UnionType((ExactType(str), ExactType(date)))

    def test_generic_is_rich(self) -> None:
        spec = type_spec(list[str])
        assert isinstance(spec, RichType)

    def test_existing_spec_passes_through(self) -> None:
        spec = ExactType(int)
        assert type_spec(spec) is spec

    @pytest.mark.parametrize("declared", [[], [str, "date"], (int, list[str])])
    def test_bad_union_raises(self, declared: object) -> None:
        with pytest.raises(TypeError, match="Union type"):
            type_spec(declared)


class TestCheckExact:
    def test_matching_value(self) -> None:
        assert check(30, ExactType(int)) == VALID

    def test_mismatch_message(self) -> None:
        assert check("thirty", ExactType(int)) == Invalid("must be a int")

    def test_subclass_matches(self) -> None:
        assert check(True, ExactType(int)) == VALID

    def test_none_always_passes(self) -> None:
        assert check(None, ExactType(int)) == VALID

    def test_no_coercion(self) -> None:
        assert isinstance(check("5", ExactType(int)), Invalid)


class TestCheckUnion:
    def test_any_member_matches(self) -> None:
        spec = type_spec([str, date])
        assert check("2024-01-01", spec) == VALID
        assert check(date(2024, 1, 1), spec) == VALID

    def test_mismatch_names_every_member(self) -> None:
        spec = type_spec([str, date])
        assert check(20240101, spec) == Invalid("must be a str or date")

    def test_none_passes(self) -> None:
        assert check(None, type_spec([str, date])) == VALID


class TestCheckRich:
    def test_generic_list(self) -> None:
        spec = type_spec(list[str])
        assert check(["a", "b"], spec) == VALID
        result = check("not-a-list", spec)
        assert isinstance(result, Invalid)
        assert result.message.startswith("must be a list[str] (")

    def test_annotated_constraint_diagnostic(self) -> None:
        spec = type_spec(Annotated[int, Field(ge=0)])
        result = check(-1, spec)
        assert isinstance(result, Invalid)
        assert "greater than or equal to 0" in result.message

    def test_literal(self) -> None:
        spec = type_spec(Literal["draft", "published"])
        assert check("draft", spec) == VALID
        assert isinstance(check("archived", spec), Invalid)

    def test_description_override(self) -> None:
        spec = RichType(list[int], description_override="list of integers")
        result = check("x", spec)
        assert isinstance(result, Invalid)
        assert result.message.startswith("must be a list of integers")

    def test_none_passes(self) -> None:
        assert check(None, type_spec(list[str])) == VALID


class TestDescribe:
    def test_class(self) -> None:
        assert describe(date) == "date"

    def test_generic(self) -> None:
        assert describe(list[str]) == "list[str]"
