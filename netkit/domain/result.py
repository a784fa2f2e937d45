"""Three-way request result: success value, HTTP issue, transport failure.

`map` and `flat_map` only run on `Success`; `Issue` and `Failure` pass
through unchanged.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

import httpx

from netkit.domain.errors import HTTPIssueError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T | None
    response: httpx.Response | None = None

    @property
    def is_success(self) -> bool:
        return True

    def map(self, fn: Callable[[T | None], U]) -> "Success[U]":
        return Success(fn(self.value), self.response)

    def flat_map(self, fn: Callable[[T | None], "Result[U]"]) -> "Result[U]":
        return fn(self.value)

    def unwrap(self) -> T | None:
        return self.value


@dataclass(frozen=True)
class Issue:
    """Transport exchange succeeded but the status is outside the success range."""

    response: httpx.Response
    value: Any = None
    reason: str | None = None

    @property
    def is_success(self) -> bool:
        return False

    @property
    def status_code(self) -> int:
        return self.response.status_code

    def map(self, fn: Callable[[Any], Any]) -> "Issue":
        return self

    def flat_map(self, fn: Callable[[Any], Any]) -> "Issue":
        return self

    def unwrap(self) -> Any:
        raise HTTPIssueError(self)


@dataclass(frozen=True)
class Failure:
    error: BaseException

    @property
    def is_success(self) -> bool:
        return False

    def map(self, fn: Callable[[Any], Any]) -> "Failure":
        return self

    def flat_map(self, fn: Callable[[Any], Any]) -> "Failure":
        return self

    def unwrap(self) -> Any:
        raise self.error


Result = Union[Success[T], Issue, Failure]
