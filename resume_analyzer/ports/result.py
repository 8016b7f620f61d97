from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """Outcome of a backend call: either ``data`` or ``error``, never both.

    A successful call may legitimately carry ``data=None`` (sign-out, a
    missing key), so success is defined by the absence of ``error``.
    """

    data: T | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.data is not None and self.error is not None:
            raise ValueError("ServiceResult cannot carry both data and error")
        if self.error is not None and not self.error:
            raise ValueError("ServiceResult error must be a non-empty message")

    @classmethod
    def ok(cls, data: T | None = None) -> "ServiceResult[T]":
        return cls(data=data)

    @classmethod
    def fail(cls, error: str) -> "ServiceResult[T]":
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None
