"""
Custom exceptions for the ingestion pipeline with structured error context.

Every fatal condition in a run is raised as one of these exceptions and
reaches the invoking layer unchanged, so the triggering event can be routed
to the dead-letter queue with enough context to inspect or replay it.

Exception Hierarchy:
    ETLException (base)
    ├── ConfigurationError
    ├── InvalidEventError
    ├── ExtractionError
    │   ├── SourceUnavailableError
    │   └── MalformedInputError
    ├── TransformationError
    └── LoadError
        ├── SchemaResolutionError
        └── WriteFailure
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone
import enum


class ETLException(Exception):
    """
    Base exception for all ingestion errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (table, bucket, key, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        # Add timestamp to context
        self.context["error_timestamp"] = self.timestamp.isoformat()

        # Chain original exception if provided
        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/dead-letter payloads."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Invocation Errors
# ============================================================================

class ConfigurationError(ETLException):
    """Required configuration (e.g. DYNAMO_TABLE_NAME) is missing or invalid."""
    pass


class InvalidEventError(ETLException):
    """
    Exception raised when the triggering event cannot be interpreted.

    Context should include:
        - record_index: Index of the offending record (if applicable)
    """
    pass


# ============================================================================
# Extraction Errors
# ============================================================================

class ExtractionError(ETLException):
    """Base exception for source read and decode failures."""
    pass


class SourceUnavailableError(ExtractionError):
    """
    Exception raised when the source object cannot be read.

    Context should include:
        - bucket: Source bucket
        - key: Source object key
        - error_code: Store error code (if available)
    """
    pass


class MalformedInputError(ExtractionError):
    """
    Exception raised when the source text cannot be tokenized against its header.

    Context should include:
        - parser_error: Message reported by the CSV parser
    """
    pass


# ============================================================================
# Transformation Errors
# ============================================================================

class TransformationError(ETLException):
    """Base exception for row mapping failures."""
    pass


# ============================================================================
# Load Errors
# ============================================================================

class LoadError(ETLException):
    """Base exception for key-value store failures."""
    pass


class SchemaResolutionError(LoadError):
    """
    Exception raised when the table's partition key cannot be determined.

    Context should include:
        - table_name: Name of the table
        - error_code: Store error code (if the describe call failed)
        - attribute_type: Declared key type (if unsupported)
    """
    pass


class WriteFailureReason(str, enum.Enum):
    """Why a batch could not be committed"""
    RETRIES_EXHAUSTED = "retries_exhausted"
    STORE_ERROR = "store_error"


class WriteFailure(LoadError):
    """
    Exception raised when a batch is not fully committed.

    Attributes:
        reason: RETRIES_EXHAUSTED when items stayed unprocessed after every
            retry, STORE_ERROR when the store rejected the request outright
        remaining: Number of items of the batch left uncommitted
    """

    def __init__(
        self,
        message: str,
        reason: WriteFailureReason,
        remaining: int,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(message, context, original_exception)
        self.reason = reason
        self.remaining = remaining
        self.context["reason"] = reason.value
        self.context["remaining"] = remaining
