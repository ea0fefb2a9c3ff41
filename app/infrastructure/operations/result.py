"""Result type for calls against the counter storage backend."""

from dataclasses import dataclass
from typing import Any, Optional

from infrastructure.operations.status import OperationStatus


@dataclass
class OperationResult:
    """Outcome of a backend call.

    ``message`` is meant for logs, never for chat replies. ``error_code`` is
    a short machine code such as ``RATE_LIMITED``.
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status is OperationStatus.SUCCESS

    @property
    def is_retryable(self) -> bool:
        return self.status is OperationStatus.TRANSIENT_ERROR

    @classmethod
    def success(cls, data: Optional[Any] = None, message: str = "ok") -> "OperationResult":
        return cls(OperationStatus.SUCCESS, message, data=data)

    @classmethod
    def error(
        cls,
        status: OperationStatus,
        message: str,
        error_code: Optional[str] = None,
    ) -> "OperationResult":
        return cls(status, message, error_code=error_code)

    @classmethod
    def transient_error(cls, message: str, error_code: Optional[str] = None) -> "OperationResult":
        """Throttling, timeouts, connection drops: the same read may succeed later."""
        return cls.error(OperationStatus.TRANSIENT_ERROR, message, error_code)

    @classmethod
    def permanent_error(cls, message: str, error_code: Optional[str] = None) -> "OperationResult":
        """Access denied or a malformed request: retrying will not help."""
        return cls.error(OperationStatus.PERMANENT_ERROR, message, error_code)
