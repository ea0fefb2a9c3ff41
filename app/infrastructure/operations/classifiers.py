"""Maps botocore exceptions from the DynamoDB counter store to OperationResult."""

from typing import Dict, Tuple

from botocore.exceptions import ClientError

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

# AWS error code -> (status, machine code, log message)
_CLIENT_ERRORS: Dict[str, Tuple[OperationStatus, str, str]] = {
    "ThrottlingException": (OperationStatus.TRANSIENT_ERROR, "RATE_LIMITED", "AWS API throttled"),
    "ProvisionedThroughputExceededException": (
        OperationStatus.TRANSIENT_ERROR,
        "RATE_LIMITED",
        "AWS API throttled",
    ),
    "RequestLimitExceeded": (OperationStatus.TRANSIENT_ERROR, "RATE_LIMITED", "AWS API throttled"),
    "AccessDeniedException": (OperationStatus.PERMANENT_ERROR, "FORBIDDEN", "AWS API access denied"),
    "ResourceNotFoundException": (OperationStatus.NOT_FOUND, "NOT_FOUND", "Counter table not found"),
    "ValidationException": (OperationStatus.PERMANENT_ERROR, "INVALID_REQUEST", "AWS validation error"),
    "InvalidParameterException": (
        OperationStatus.PERMANENT_ERROR,
        "INVALID_REQUEST",
        "AWS validation error",
    ),
}


def classify_aws_error(exc: Exception) -> OperationResult:
    """Turn a boto3/botocore exception into a failed OperationResult.

    Anything that is not a ``ClientError`` (missing credentials, endpoint
    unreachable, read timeout) is treated as a transient connection error.
    Unmapped client error codes are also treated as transient.
    """
    if not isinstance(exc, ClientError):
        return OperationResult.transient_error(
            f"AWS connection error: {type(exc).__name__}: {exc}",
            error_code="CONNECTION_ERROR",
        )

    aws_code = (exc.response or {}).get("Error", {}).get("Code", "Unknown")
    if aws_code in _CLIENT_ERRORS:
        status, error_code, message = _CLIENT_ERRORS[aws_code]
        return OperationResult.error(status, f"{message} ({aws_code})", error_code)

    return OperationResult.transient_error(
        f"AWS client error: {aws_code}", error_code="AWS_CLIENT_ERROR"
    )
