"""Tests for relprep.core.errors module."""

import pytest

from relprep.core.errors import ErrorCode


@pytest.mark.parametrize(
    ("code", "value"),
    [
        (ErrorCode.USER_ERROR, 1),
        (ErrorCode.ENV_ERROR, 2),
        (ErrorCode.CONFIG_ERROR, 3),
        (ErrorCode.GIT_ERROR, 4),
        (ErrorCode.IO_ERROR, 5),
    ],
)
def test_stable_values(code: ErrorCode, value: int) -> None:
    assert code == value


def test_can_use_as_int() -> None:
    code: int = ErrorCode.CONFIG_ERROR
    assert code == 3


def test_str() -> None:
    assert str(ErrorCode.ENV_ERROR) == "env error"
