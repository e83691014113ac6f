"""
Pydantic models for structured error logging.

This module defines type-safe error record models with automatic validation
and classification to ensure consistency across the error log.
"""

import json
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator, ConfigDict


class ErrorComponent(str, Enum):
    """Pipeline components that can generate errors."""
    SESSION = "session"
    GATE = "gate"
    PAGINATION = "pagination"
    EXTRACTION = "extraction"
    ENHANCER = "enhancer"
    NORMALIZER = "normalizer"
    SINK = "sink"
    CONFIG = "config"
    PIPELINE = "pipeline"
    UNKNOWN = "unknown"


class ErrorSeverity(str, Enum):
    """Error severity levels matching logging standards."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorType(str, Enum):
    """
    Categorized error types for classification.

    New error types should be added here to maintain consistency.
    """
    # Validation errors
    VALIDATION_ERROR = "validation_error"
    CONFIG_ERROR = "config_error"

    # Network errors
    TIMEOUT = "timeout"
    CONNECTION_ERROR = "connection_error"
    HTTP_ERROR = "http_error"

    # Parsing errors
    PARSE_ERROR = "parse_error"
    JSON_ERROR = "json_error"

    # Browser errors
    BROWSER_ERROR = "browser_error"
    NAVIGATION_ERROR = "navigation_error"
    ELEMENT_NOT_FOUND = "element_not_found"
    CHALLENGE_PENDING = "challenge_pending"

    # File system errors
    FILE_ERROR = "file_error"

    # Run control
    DEADLINE_EXCEEDED = "deadline_exceeded"

    # Unknown/uncategorized
    UNKNOWN = "unknown"


class ErrorStage:
    """
    Standardized stage names for error logging.

    Use these constants to ensure consistency across the codebase.
    """
    ACQUIRE_SESSION = "acquire_session"
    RELEASE_SESSION = "release_session"
    NAVIGATE = "navigate"
    AWAIT_CHALLENGE = "await_challenge"
    PREPARE_PAGE = "prepare_page"
    WAIT_FOR_READY = "wait_for_ready"
    EXPAND_CONTENT = "expand_content"
    EXTRACT_LIST = "extract_list"
    ENHANCE_ITEM = "enhance_item"
    NORMALIZE = "normalize"
    PERSIST = "persist"
    RUN = "run"


class ErrorRecord(BaseModel):
    """
    Structured error record for the JSONL error log.

    This model validates all error data before logging so that logging an
    error can never cause an additional failure.
    """
    # Required fields
    component: ErrorComponent = Field(..., description="Pipeline component")
    stage: str = Field(..., min_length=1, max_length=100, description="Processing stage")
    error_type: ErrorType = Field(..., description="Error category")
    severity: ErrorSeverity = Field(default=ErrorSeverity.ERROR, description="Severity level")
    domain: str = Field(..., min_length=1, max_length=255, description="Target domain")
    message: str = Field(..., min_length=1, description="Human-readable error message")

    # Optional context
    run_id: Optional[str] = Field(None, max_length=64, description="Harvest run identifier")
    url: Optional[str] = Field(None, max_length=2048, description="Specific URL if applicable")
    exception_type: Optional[str] = Field(None, max_length=255, description="Exception class name")
    stack_trace: Optional[str] = Field(None, description="Stack trace for unexpected errors")

    # Flexible metadata
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Additional context")

    created_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="Error timestamp"
    )

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        use_enum_values=True,
    )

    @field_validator("stage", mode="before")
    @classmethod
    def validate_stage(cls, v: str) -> str:
        """Ensure stage is not empty and normalized."""
        if not v or not str(v).strip():
            return "unknown"
        return str(v).strip().lower().replace(" ", "_")

    @field_validator("domain", mode="before")
    @classmethod
    def validate_domain(cls, v: Optional[str]) -> str:
        """Fall back to 'unknown' when no domain is available."""
        if not v or not str(v).strip():
            return "unknown"
        return str(v)

    @field_validator("message", mode="before")
    @classmethod
    def validate_message(cls, v: str) -> str:
        """Ensure message is not empty and bounded."""
        if not v or not str(v).strip():
            return "No error message provided"
        return str(v).strip()[:5000]

    @field_validator("metadata")
    @classmethod
    def sanitize_metadata(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        """Convert values that are not JSON-serializable to strings."""
        sanitized = {}
        for key, value in v.items():
            try:
                json.dumps(value)
                sanitized[key] = value
            except (TypeError, ValueError):
                sanitized[key] = str(value)
        return sanitized

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        component: ErrorComponent,
        stage: str,
        domain: str,
        url: Optional[str] = None,
        run_id: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        error_type: Optional[ErrorType] = None,
        include_stack_trace: Optional[bool] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "ErrorRecord":
        """
        Create ErrorRecord from an exception with automatic classification.

        Args:
            exc: The exception that occurred
            component: Pipeline component where the error occurred
            stage: Processing stage
            domain: Target domain
            url: Optional specific URL
            run_id: Optional harvest run identifier
            severity: Error severity (default: ERROR)
            error_type: Optional explicit error type (auto-detected if None)
            include_stack_trace: Whether to include full stack trace (auto if None)
            metadata: Additional context

        Returns:
            ErrorRecord instance ready for logging

        Example:
            >>> try:
            ...     await page.goto(link, timeout=15000)
            ... except PlaywrightTimeoutError as e:
            ...     record = ErrorRecord.from_exception(
            ...         e,
            ...         component=ErrorComponent.ENHANCER,
            ...         stage=ErrorStage.ENHANCE_ITEM,
            ...         domain="www.igdb.com",
            ...         url=link,
            ...     )
        """
        if error_type is None:
            error_type = cls._classify_exception(exc)

        message = str(exc) or f"{type(exc).__name__} occurred"
        exception_type = f"{type(exc).__module__}.{type(exc).__name__}"

        if include_stack_trace is None:
            include_stack_trace = cls._should_include_stack(exc, severity)

        stack_trace = None
        if include_stack_trace:
            stack_trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
            if len(stack_trace) > 10000:
                stack_trace = stack_trace[:10000] + "\n... (truncated)"

        return cls(
            component=component,
            stage=stage,
            error_type=error_type,
            severity=severity,
            domain=domain,
            url=url,
            run_id=run_id,
            message=message,
            exception_type=exception_type,
            stack_trace=stack_trace,
            metadata=metadata or {},
        )

    @staticmethod
    def _classify_exception(exc: BaseException) -> ErrorType:
        """
        Automatically classify exception into ErrorType.

        Uses exception type and message patterns to determine category.
        """
        exc_name = type(exc).__name__.lower()
        exc_msg = str(exc).lower()

        if "configuration" in exc_name:
            return ErrorType.CONFIG_ERROR
        if "validation" in exc_name:
            return ErrorType.VALIDATION_ERROR
        if "deadline" in exc_name:
            return ErrorType.DEADLINE_EXCEEDED

        if "timeout" in exc_name or "timeout" in exc_msg:
            return ErrorType.TIMEOUT
        if "navigation" in exc_name or "net::err" in exc_msg:
            return ErrorType.NAVIGATION_ERROR
        if "connection" in exc_name:
            return ErrorType.CONNECTION_ERROR
        if "http" in exc_name or "status" in exc_msg:
            return ErrorType.HTTP_ERROR

        if "json" in exc_name:
            return ErrorType.JSON_ERROR
        if "parse" in exc_name:
            return ErrorType.PARSE_ERROR

        if "session" in exc_name or "browser" in exc_name or "target" in exc_name:
            return ErrorType.BROWSER_ERROR
        if "selector" in exc_msg or "detailpage" in exc_name:
            return ErrorType.ELEMENT_NOT_FOUND

        if "file" in exc_name or "permission" in exc_name or exc_name == "oserror":
            return ErrorType.FILE_ERROR

        return ErrorType.UNKNOWN

    @staticmethod
    def _should_include_stack(exc: BaseException, severity: ErrorSeverity) -> bool:
        """
        Decide whether a stack trace is worth keeping.

        Expected errors (timeouts, missing content) don't need stacks.
        Unexpected errors do.
        """
        if severity == ErrorSeverity.CRITICAL:
            return True

        if severity in (ErrorSeverity.WARNING, ErrorSeverity.INFO, ErrorSeverity.DEBUG):
            return False

        EXPECTED_ERRORS = (
            'ConfigurationError',
            'DetailPageError',
            'NavigationError',
            'TimeoutError',
            'ValueError',
        )

        return type(exc).__name__ not in EXPECTED_ERRORS
