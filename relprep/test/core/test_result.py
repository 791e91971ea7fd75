"""Tests for relprep.core.result module."""

import pytest

from relprep.core.result import Err, Ok, Result


def _describe(result: Result[int, str]) -> str:
    match result:
        case Ok(value):
            return f"ok {value}"
        case Err(error):
            return f"err {error}"


def test_match_on_ok_and_err() -> None:
    assert _describe(Ok(1)) == "ok 1"
    assert _describe(Err("x")) == "err x"


def test_equality_by_value() -> None:
    assert Ok(1) == Ok(1)
    assert Ok(1) != Err(1)


def test_frozen() -> None:
    result = Ok(1)
    with pytest.raises(AttributeError):
        result.value = 2  # type: ignore[misc]


def test_repr() -> None:
    assert repr(Ok("a")) == "Ok('a')"
    assert repr(Err(3)) == "Err(3)"
