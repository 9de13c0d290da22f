"""Result envelope and typed errors returned by the catalog services.

Services never raise across their boundary. Every call returns a
``ServiceResult`` whose ``success`` flag says which of ``data`` / ``error``
to read.
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    DATABASE = "database"
    CONNECTION = "connection"


class ServiceError(BaseModel):
    message: str
    code: str
    kind: ErrorKind
    context: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel, Generic[T]):
    data: T | None = None
    error: ServiceError | None = None
    success: bool

    @classmethod
    def ok(cls, data: T | None) -> "ServiceResult[T]":
        return cls(data=data, error=None, success=True)

    @classmethod
    def fail(cls, error: ServiceError) -> "ServiceResult[T]":
        return cls(data=None, error=error, success=False)


def validation_error(message: str, code: str, **context: Any) -> ServiceError:
    return ServiceError(message=message, code=code, kind=ErrorKind.VALIDATION, context=context)


def not_found_error(message: str, code: str, **context: Any) -> ServiceError:
    return ServiceError(message=message, code=code, kind=ErrorKind.NOT_FOUND, context=context)


def database_error(message: str, code: str, exc: BaseException, **context: Any) -> ServiceError:
    context["original_error"] = str(exc)
    return ServiceError(message=message, code=code, kind=ErrorKind.DATABASE, context=context)


def connection_error(message: str, code: str, exc: BaseException, **context: Any) -> ServiceError:
    context["original_error"] = str(exc)
    return ServiceError(message=message, code=code, kind=ErrorKind.CONNECTION, context=context)
