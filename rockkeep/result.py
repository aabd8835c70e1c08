"""
Rockkeep - Result Wrapper

The core raises typed VaultError subclasses. Front ends that prefer to
branch on values instead of catching exceptions call through capture(),
which returns Ok(value) or Err(kind, detail).

    result = capture(store.retrieve, master, "github")
    if result.ok:
        print(result.value)
    elif result.kind is ErrorKind.NOT_FOUND:
        ...
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

from .errors import ErrorKind, VaultError

T = TypeVar("T")

UNEXPECTED_DETAIL = "an unexpected error occurred"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    ok = True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    detail: str
    ok = False


Result = Union[Ok[T], Err]


def capture(func: Callable[..., T], *args: Any, **kwargs: Any) -> "Result[T]":
    """
    Call func and fold its outcome into a Result.

    VaultError subclasses keep their kind and message. Any other exception
    becomes Err(UNEXPECTED) with a generic detail so internal error text does
    not leak to the user.
    """
    try:
        return Ok(func(*args, **kwargs))
    except VaultError as e:
        return Err(e.kind, e.detail)
    except Exception as e:
        return Err(ErrorKind.UNEXPECTED, f"{UNEXPECTED_DETAIL} ({type(e).__name__})")
