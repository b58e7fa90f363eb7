"""
Core Module - Exceptions.

============================================================
RESPONSIBILITY
============================================================
Defines all custom exceptions for the swap network core.

- Provides clear exception hierarchy
- Enables specific error handling
- Carries context for debugging and logging

============================================================
EXCEPTION HIERARCHY
============================================================
SwapCoreError (base)
├── ConfigurationError
│   └── InvalidConfigError
├── NotFoundError
│   └── ModuleNotRegisteredError
├── FetchError
├── AllSourcesFailedError
├── RetryExhaustedError
├── FeedRowError
│   ├── MissingFieldInFeedRowError
│   ├── UnexpectedCurrencyInFeedRowError
│   └── InvalidFeedValueError
├── InvalidObserverArgumentError
├── ModuleError
│   ├── ModuleInitFailedError
│   ├── OperationNotSupportedError
│   └── UnsupportedActionError

============================================================
"""

from enum import Enum
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence


# ============================================================
# SEVERITY LEVELS
# ============================================================

class Severity(Enum):
    """Exception severity levels."""

    LOW = "low"
    """Minor issue, informational."""

    MEDIUM = "medium"
    """Moderate issue, requires attention."""

    HIGH = "high"
    """Serious issue, a network or feed is unusable."""


# ============================================================
# ERROR CLASSIFICATION
# ============================================================

class ErrorClassification(Enum):
    """Classification of error recoverability."""

    TRANSIENT = "transient"
    """Temporary error, retry may succeed."""

    NON_RECOVERABLE = "non_recoverable"
    """Permanent error, the input or setup must change."""


# ============================================================
# BASE EXCEPTION
# ============================================================

class SwapCoreError(Exception):
    """
    Base exception for all swap core errors.

    All exceptions carry:
    - severity: for alerting
    - context: for debugging
    - recoverable: for error handling decisions
    - timestamp: when the error occurred
    """

    default_severity: Severity = Severity.MEDIUM
    default_classification: ErrorClassification = ErrorClassification.TRANSIENT

    def __init__(
        self,
        message: str,
        severity: Optional[Severity] = None,
        context: Optional[Dict[str, Any]] = None,
        classification: Optional[ErrorClassification] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)

        self.message = message
        self.severity = severity or self.default_severity
        self.context = context or {}
        self.classification = classification or self.default_classification
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

        if cause:
            self.context["cause_type"] = type(cause).__name__
            self.context["cause_message"] = str(cause)

    @property
    def is_recoverable(self) -> bool:
        """Check if a retry may succeed."""
        return self.classification == ErrorClassification.TRANSIENT

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for logging."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "severity": self.severity.value,
            "classification": self.classification.value,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }

    def __str__(self) -> str:
        return self.message


# ============================================================
# CONFIGURATION ERRORS
# ============================================================

class ConfigurationError(SwapCoreError):
    """Error in configuration."""

    default_severity = Severity.HIGH
    default_classification = ErrorClassification.NON_RECOVERABLE

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        actual_value: Optional[Any] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if config_key:
            context["config_key"] = config_key
        if actual_value is not None:
            context["actual_value"] = str(actual_value)[:100]

        super().__init__(message, context=context, **kwargs)
        self.config_key = config_key


class InvalidConfigError(ConfigurationError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            message=f"Invalid configuration for {key}: {reason}",
            config_key=key,
            actual_value=value,
            context={"reason": reason},
        )


# ============================================================
# LOOKUP ERRORS
# ============================================================

class NotFoundError(SwapCoreError):
    """A table row, token, relay or module could not be found."""

    default_classification = ErrorClassification.NON_RECOVERABLE


class ModuleNotRegisteredError(NotFoundError):
    """No network module is registered under the given id."""

    def __init__(self, module_id: str, available: Sequence[str] = ()):
        super().__init__(
            message=f"Unknown network module '{module_id}'. Available: {list(available)}",
            context={"module_id": module_id},
        )
        self.module_id = module_id


# ============================================================
# UPSTREAM ERRORS
# ============================================================

class FetchError(SwapCoreError):
    """An HTTP call to a price API or chain RPC failed."""

    def __init__(
        self,
        message: str,
        source_name: Optional[str] = None,
        status_code: Optional[int] = None,
        request_url: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        context: Dict[str, Any] = {}
        if source_name:
            context["source"] = source_name
        if status_code is not None:
            context["status_code"] = status_code
        if request_url:
            context["request_url"] = request_url

        super().__init__(message, context=context, cause=cause)
        self.source_name = source_name
        self.status_code = status_code
        self.request_url = request_url


class AllSourcesFailedError(SwapCoreError):
    """Every operation of a first-success race failed."""

    default_severity = Severity.HIGH

    def __init__(self, message: str, errors: Sequence[BaseException] = ()):
        self.errors: List[BaseException] = list(errors)
        super().__init__(
            message,
            context={
                "error_count": len(self.errors),
                "errors": [f"{type(e).__name__}: {e}" for e in self.errors],
            },
            cause=self.errors[-1] if self.errors else None,
        )

    @property
    def last_error(self) -> Optional[BaseException]:
        return self.errors[-1] if self.errors else None


class RetryExhaustedError(SwapCoreError):
    """An operation kept failing for every allowed attempt."""

    def __init__(
        self,
        operation_name: str,
        attempts: int,
        last_error: BaseException,
    ):
        super().__init__(
            message=f"{operation_name} failed after {attempts} attempts: {last_error}",
            context={"operation": operation_name, "attempts": attempts},
            cause=last_error,
        )
        self.operation_name = operation_name
        self.attempts = attempts
        self.last_error = last_error


# ============================================================
# TRADE FEED ERRORS
# ============================================================

class FeedRowError(SwapCoreError):
    """Base class for malformed trade feed rows."""

    default_classification = ErrorClassification.NON_RECOVERABLE

    def __init__(self, message: str, row_index: int, field_name: str, **kwargs):
        context = kwargs.pop("context", {})
        context.update({"row_index": row_index, "field": field_name})
        super().__init__(message, context=context, **kwargs)
        self.row_index = row_index
        self.field_name = field_name


class MissingFieldInFeedRowError(FeedRowError):
    """A keyed array of a feed row lacks one of the pair's currencies."""

    def __init__(self, row_index: int, field_name: str, key: str):
        super().__init__(
            message=f"Trade row {row_index} has no '{key}' entry in {field_name}",
            row_index=row_index,
            field_name=field_name,
            context={"key": key},
        )
        self.key = key


class UnexpectedCurrencyInFeedRowError(FeedRowError):
    """A keyed array of a feed row holds an entry for a third currency, or a duplicate."""

    def __init__(self, row_index: int, field_name: str, key: str):
        super().__init__(
            message=f"Trade row {row_index} has unexpected '{key}' entry in {field_name}",
            row_index=row_index,
            field_name=field_name,
            context={"key": key},
        )
        self.key = key


class InvalidFeedValueError(FeedRowError):
    """A feed value could not be read as a number."""

    def __init__(self, row_index: int, field_name: str, value: Any):
        super().__init__(
            message=f"Trade row {row_index} has a non-numeric {field_name} value: {value!r}",
            row_index=row_index,
            field_name=field_name,
            context={"value": str(value)[:100]},
        )
        self.value = value


# ============================================================
# STEP RUNNER ERRORS
# ============================================================

class InvalidObserverArgumentError(SwapCoreError, TypeError):
    """The progress observer is neither None nor callable."""

    default_classification = ErrorClassification.NON_RECOVERABLE

    def __init__(self, observer: Any):
        super().__init__(
            message="on_update should be either a callable or None",
            context={"observer_type": type(observer).__name__},
        )


# ============================================================
# MODULE ERRORS
# ============================================================

class ModuleError(SwapCoreError):
    """Base class for network module errors."""

    def __init__(self, message: str, module_id: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", {})
        if module_id:
            context["module_id"] = module_id
        super().__init__(message, context=context, **kwargs)
        self.module_id = module_id


class ModuleInitFailedError(ModuleError):
    """A network module failed to initialise. Recorded, never raised to siblings."""

    default_severity = Severity.HIGH


class OperationNotSupportedError(ModuleError):
    """The network module does not implement the requested action."""

    default_classification = ErrorClassification.NON_RECOVERABLE


class UnsupportedActionError(ModuleError):
    """The action name is not part of the network module interface."""

    default_classification = ErrorClassification.NON_RECOVERABLE


# ============================================================
# EXPORTS
# ============================================================

__all__ = [
    "Severity",
    "ErrorClassification",
    "SwapCoreError",
    "ConfigurationError",
    "InvalidConfigError",
    "NotFoundError",
    "ModuleNotRegisteredError",
    "FetchError",
    "AllSourcesFailedError",
    "RetryExhaustedError",
    "FeedRowError",
    "MissingFieldInFeedRowError",
    "UnexpectedCurrencyInFeedRowError",
    "InvalidFeedValueError",
    "InvalidObserverArgumentError",
    "ModuleError",
    "ModuleInitFailedError",
    "OperationNotSupportedError",
    "UnsupportedActionError",
]
