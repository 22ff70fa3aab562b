"""
Exception classes for the match scoring engine
"""
import asyncio
import functools
import inspect
import time
from random import uniform
from typing import Dict, Any

from fastapi import HTTPException


class MatchEngineError(Exception):
    """Base exception for the match scoring engine"""

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Dict[str, Any] = None,
        cause: Exception = None
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/response"""
        result = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class DimensionMismatch(MatchEngineError):
    """Raised when two vectors cannot be compared (empty or unequal length)"""

    def __init__(self, message: str, left_dim: int = None, right_dim: int = None, **kwargs):
        details = kwargs.pop('details', {})
        if left_dim is not None:
            details['left_dim'] = left_dim
        if right_dim is not None:
            details['right_dim'] = right_dim
        super().__init__(message, error_code="DIMENSION_MISMATCH", details=details, **kwargs)


class NotFound(MatchEngineError):
    """Raised when a subject has no stored embedding yet"""

    def __init__(self, message: str, subject_id: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if subject_id:
            details['subject_id'] = subject_id
        super().__init__(message, error_code="NOT_FOUND", details=details, **kwargs)


class InvalidArgument(MatchEngineError):
    """Raised for malformed control parameters such as a non-positive top_n"""

    def __init__(self, message: str, argument: str = None, value: Any = None, **kwargs):
        details = kwargs.pop('details', {})
        if argument:
            details['argument'] = argument
        if value is not None:
            details['invalid_value'] = str(value)
        super().__init__(message, error_code="INVALID_ARGUMENT", details=details, **kwargs)


class EmptyInput(MatchEngineError):
    """Raised when there is nothing to compare against (no jobs, no candidates)"""

    def __init__(self, message: str, collection: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if collection:
            details['collection'] = collection
        super().__init__(message, error_code="EMPTY_INPUT", details=details, **kwargs)


class ValidationError(MatchEngineError):
    """Raised when data validation fails"""

    def __init__(self, message: str, field: str = None, value: Any = None, **kwargs):
        details = kwargs.pop('details', {})
        if field:
            details['field'] = field
        if value is not None:
            details['invalid_value'] = str(value)
        super().__init__(message, error_code="VALIDATION_ERROR", details=details, **kwargs)


class DatabaseError(MatchEngineError):
    """Raised when the embedding store cannot be read"""

    def __init__(self, message: str, operation: str = None, collection: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if operation:
            details['operation'] = operation
        if collection:
            details['collection'] = collection
        super().__init__(message, error_code="DATABASE_ERROR", details=details, **kwargs)


class ConfigurationError(MatchEngineError):
    """Raised when configuration is invalid or missing"""

    def __init__(self, message: str, config_key: str = None, config_value: Any = None, **kwargs):
        details = kwargs.pop('details', {})
        if config_key:
            details['config_key'] = config_key
        if config_value is not None:
            details['config_value'] = str(config_value)
        super().__init__(message, error_code="CONFIGURATION_ERROR", details=details, **kwargs)


# HTTP Exception Mapping
STATUS_CODE_MAPPING = {
    InvalidArgument: 400,
    ValidationError: 400,
    DimensionMismatch: 400,
    NotFound: 404,
    EmptyInput: 404,
    DatabaseError: 500,
    ConfigurationError: 500,
}


def map_to_http_exception(exc: MatchEngineError) -> HTTPException:
    """Map engine exceptions to HTTP exceptions"""
    status_code = STATUS_CODE_MAPPING.get(type(exc), 500)

    detail = {
        "error": exc.to_dict(),
        "message": exc.message
    }

    return HTTPException(status_code=status_code, detail=detail)


class ExceptionContext:
    """Context manager that logs an operation and wraps foreign exceptions"""

    def __init__(self, operation: str, logger=None, **context):
        self.operation = operation
        self.logger = logger
        self.context = context

    def __enter__(self):
        if self.logger:
            self.logger.debug(f"Starting operation: {self.operation}", extra=self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            if self.logger:
                self.logger.debug(f"Operation completed: {self.operation}", extra=self.context)
            return False

        if self.logger:
            self.logger.error(
                f"Operation failed: {self.operation} - {exc_val}",
                extra={**self.context, "exception_type": exc_type.__name__}
            )

        # Engine exceptions already carry their own meaning
        if isinstance(exc_val, MatchEngineError):
            return False

        if isinstance(exc_val, (KeyError, ValueError, TypeError)):
            raise ValidationError(
                f"Validation error in {self.operation}: {str(exc_val)}",
                details=dict(self.context),
                cause=exc_val
            ) from exc_val

        raise DatabaseError(
            f"Database error in {self.operation}: {str(exc_val)}",
            operation=self.operation,
            details=dict(self.context),
            cause=exc_val
        ) from exc_val


def retry_with_logging(
    max_attempts: int = 3,
    backoff_factor: float = 1.0,
    exceptions: tuple = (Exception,),
    logger=None
):
    """Decorator to retry operations with exponential backoff and logging"""

    def decorator(func):
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if logger:
                        logger.warning(
                            f"Attempt {attempt + 1}/{max_attempts} failed for {func.__name__}: {str(e)}"
                        )
                    if attempt == max_attempts - 1:
                        if logger:
                            logger.error(f"All {max_attempts} attempts failed for {func.__name__}")
                        raise
                    await asyncio.sleep(backoff_factor * (2 ** attempt) + uniform(0, backoff_factor))

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            for attempt in range(max_attempts):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if logger:
                        logger.warning(
                            f"Attempt {attempt + 1}/{max_attempts} failed for {func.__name__}: {str(e)}"
                        )
                    if attempt == max_attempts - 1:
                        if logger:
                            logger.error(f"All {max_attempts} attempts failed for {func.__name__}")
                        raise
                    time.sleep(backoff_factor * (2 ** attempt) + uniform(0, backoff_factor))

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
