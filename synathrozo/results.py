"""Uniform success/failure results for store and dispatch operations.

Operations never raise past their own boundary: domain errors and collaborator
failures are logged and flattened into a ``Result`` the caller inspects.
"""

import functools
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, ParamSpec, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = ParamSpec("P")


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    COLLABORATOR = "collaborator"


class OperationError(Exception):
    """Base class for errors that map onto a failed ``Result``."""

    kind: ErrorKind = ErrorKind.COLLABORATOR


class ValidationError(OperationError):
    kind = ErrorKind.VALIDATION


class AuthorizationError(OperationError):
    kind = ErrorKind.AUTHORIZATION

    def __init__(self, message: str = "User not authenticated") -> None:
        super().__init__(message)


class NotFoundError(OperationError):
    kind = ErrorKind.NOT_FOUND


class DeliveryError(OperationError):
    """Raised when the delivery collaborator reports a failed send."""

    kind = ErrorKind.COLLABORATOR


@dataclass(frozen=True)
class Result(Generic[T]):
    success: bool
    data: T | None = None
    error: str | None = None
    kind: ErrorKind | None = None

    @classmethod
    def ok(cls, data: T | None = None) -> "Result[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, kind: ErrorKind = ErrorKind.COLLABORATOR) -> "Result[T]":
        return cls(success=False, error=error, kind=kind)


def returns_result(
    action: str,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[Result[T]]]]:
    """Wrap an async operation so it returns ``Result`` instead of raising."""

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[Result[T]]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[T]:
            try:
                return Result.ok(await func(*args, **kwargs))
            except OperationError as e:
                logger.warning("%s failed: %s", action, e)
                return Result.fail(str(e), e.kind)
            except Exception as e:
                logger.exception("%s error", action)
                return Result.fail(str(e) or e.__class__.__name__, ErrorKind.COLLABORATOR)

        return wrapper

    return decorator
