"""
Custom exceptions for the AI Sentinel moderation API.

Each failure mode of the moderation relay has its own exception type so the
HTTP layer can map it to a status code and a machine-readable error body.
"""

from typing import Optional, Dict, Any, List


class SentinelException(Exception):
    """Base exception for all moderation relay errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "SENTINEL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def response_body(self) -> Dict[str, Any]:
        """JSON body returned to the caller for this error."""
        return {
            "error": "Internal server error",
            "message": self.message,
            "error_code": self.error_code,
        }


class ValidationException(SentinelException):
    """Raised when the inbound moderation payload is missing or has invalid fields."""

    def __init__(
        self,
        message: str,
        missing: Optional[List[str]] = None,
        invalid: Optional[List[str]] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        extra: Dict[str, Any] = {}
        if missing:
            extra["missing"] = list(missing)
        if invalid:
            extra["invalid"] = list(invalid)
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details={**(details or {}), **extra}
        )

    def response_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if "missing" in self.details:
            body["missing"] = self.details["missing"]
        if "invalid" in self.details:
            body["invalid"] = self.details["invalid"]
        return body


class MalformedRequestException(SentinelException):
    """Raised when the request body is not a JSON object."""

    def __init__(self, message: str = "Malformed request body", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, error_code="MALFORMED_REQUEST", details=details)

    def response_body(self) -> Dict[str, Any]:
        return {"error": self.message}


class ConfigurationException(SentinelException):
    """Raised when required deployment configuration is absent."""

    def __init__(self, missing: List[str]):
        super().__init__(
            message=f"Missing required environment variables: {', '.join(missing)}",
            error_code="CONFIGURATION_ERROR",
            details={"missing": list(missing)}
        )


class ClassifierException(SentinelException):
    """Raised when the moderation classifier call fails or returns an unusable body."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code="CLASSIFIER_ERROR",
            details={**(details or {}), "status_code": status_code, "body": body}
        )

    @property
    def status_code(self) -> Optional[int]:
        return self.details.get("status_code")


class ReportStoreException(SentinelException):
    """Raised when a moderation report cannot be persisted."""

    def __init__(
        self,
        message: str,
        backend: str = "unknown",
        operation: str = "create_report",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code="REPORT_STORE_ERROR",
            details={**(details or {}), "backend": backend, "operation": operation}
        )


# Exception to HTTP status code mapping
EXCEPTION_STATUS_MAPPING = {
    ValidationException: 400,  # Bad Request
    MalformedRequestException: 400,  # Bad Request
    ConfigurationException: 500,  # Internal Server Error
    ClassifierException: 500,  # Internal Server Error
    ReportStoreException: 500,  # Internal Server Error
}


def status_code_for(exception: SentinelException) -> int:
    return EXCEPTION_STATUS_MAPPING.get(exception.__class__, 500)
