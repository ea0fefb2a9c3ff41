"""Persistence layer exceptions."""

from typing import Optional

from infrastructure.operations import OperationStatus


class StorageUnavailableError(Exception):
    """Raised when a counter store cannot be read.

    Distinct from an unset value: callers must never display a fabricated
    value when this is raised.

    Attributes:
        status: OperationStatus of the failed call, when known
        error_code: Machine error code of the failed call, when known
    """

    def __init__(
        self,
        message: str,
        status: Optional[OperationStatus] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(message)
        self.status = status
        self.error_code = error_code
