"""Result type for explicit error handling.

Release preparation has a closed set of failure kinds, so operations that can
fail for a domain reason return ``Ok(value)`` or ``Err(kind)`` instead of
raising. Callers branch on the result explicitly:

    match resolve_release_branch_name(policy):
        case Ok(name):
            print(f"release branch: {name}")
        case Err(kind):
            print(f"cannot resolve branch: {kind}")

Exceptions stay reserved for environment failures (a git command that could
not run, an unreadable policy file).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """A successful result.

    Attributes:
        value: The success value.
    """

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """A failed result.

    Attributes:
        error: The error value, usually an enum member naming the failure kind.
    """

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
