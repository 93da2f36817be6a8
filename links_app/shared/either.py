"""
Two-variant result wrapper.

Expected domain failures (validation, not found) travel as ``Left`` values
instead of exceptions; successes travel as ``Right``. The HTTP layer unwraps
them at the boundary.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

L = TypeVar("L")
R = TypeVar("R")


@dataclass(frozen=True)
class Left(Generic[L]):
    value: L


@dataclass(frozen=True)
class Right(Generic[R]):
    value: R


Either = Union[Left[L], Right[R]]


def make_left(value: L) -> Left[L]:
    return Left(value)


def make_right(value: R) -> Right[R]:
    return Right(value)


def is_left(result: "Either[L, R]") -> bool:
    return isinstance(result, Left)


def is_right(result: "Either[L, R]") -> bool:
    return isinstance(result, Right)


def unwrap_either(result: "Either[L, R]") -> Union[L, R]:
    if not isinstance(result, (Left, Right)):
        raise TypeError(f"Expected Left or Right, got {type(result).__name__}")
    return result.value
