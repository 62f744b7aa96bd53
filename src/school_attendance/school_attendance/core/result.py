from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .enums import ErrorKind
from .exceptions import DomainError


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a workspace operation.

    Either ``error`` is None (success, optional ``value``) or it carries the
    message shown to the user together with its ``kind``.
    """

    value: Any = None
    error: Optional[str] = None
    kind: Optional[ErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any = None) -> "OperationResult":
        return cls(value=value)

    @classmethod
    def failure(cls, exc: DomainError) -> "OperationResult":
        return cls(error=str(exc), kind=exc.kind)
