"""
Domain-specific exceptions for sortcheck.

This module defines a hierarchy of exceptions that provide:
- Clear categorization of caller errors versus data errors
- Actionable error messages with context
- Exception chaining to preserve stack traces

Usage:
    from sortcheck.exceptions import InputError

    try:
        verdict = validator.is_valid(sort_code, account_number)
    except InputError as e:
        logger.warning(f"Rejected input: {e}")

Exception Hierarchy:
    SortCheckError (base)
    ├── InputError - caller supplied unusable input
    │   ├── MissingInputError - sort code or account number absent
    │   └── InvalidFormatError - not numeric / wrong length
    ├── RuleTableError - malformed weight table or substitution table
    └── ConfigurationError - configuration/settings issues
"""

from typing import Any, Optional


class SortCheckError(Exception):
    """
    Base exception for all sortcheck errors.

    Provides consistent error formatting with optional context.

    Attributes:
        message: Human-readable error description
        context: Additional context about what was being done
        details: Technical details (field names, file paths, line numbers)
    """

    def __init__(
        self,
        message: str,
        context: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with context and details."""
        parts = [self.message]
        if self.context:
            parts.append(f"Context: {self.context}")
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            parts.append(f"Details: {detail_str}")
        return ". ".join(parts)


class InputError(SortCheckError):
    """
    Raised when the caller supplies a sort code or account number that
    cannot be validated.

    Input errors are always detected before any rule is evaluated, so a
    failed call never leaves a partial trace behind.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        super().__init__(message, details=details, **kwargs)
        self.field = field


class MissingInputError(InputError):
    """
    Raised when the sort code or the account number is absent.

    Usage:
        try:
            validator.is_valid()
        except MissingInputError as e:
            print(e.field)  # "sort_code"
    """

    def __init__(self, field: str, **kwargs):
        label = field.replace("_", " ")
        super().__init__(f"Missing bank {label}", field=field, **kwargs)


class InvalidFormatError(InputError):
    """
    Raised when an input is not purely numeric or does not have the
    required width after normalization.

    Examples:
        - Sort code "ab3456"
        - Account number "1234" (too short to pad)
        - A 5-digit sort code handed straight to the core
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if value is not None:
            details["value"] = value
        super().__init__(message, field=field, details=details, **kwargs)
        self.value = value


class RuleTableError(SortCheckError):
    """
    Raised when a weight table or substitution table cannot be parsed.

    Examples:
        - Wrong number of weight columns
        - Unknown checking method (not MOD10, MOD11 or DBLAL)
        - Exception code outside 0-14
        - Range whose start is after its end
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        line_number: Optional[int] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if source:
            details["source"] = source
        if line_number is not None:
            details["line"] = line_number
        super().__init__(message, details=details, **kwargs)
        self.source = source
        self.line_number = line_number


class ConfigurationError(SortCheckError):
    """
    Raised when configuration is invalid or cannot be loaded.

    Examples:
        - YAML file is not a mapping
        - Configured table path does not exist
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["key"] = config_key
        super().__init__(message, details=details, **kwargs)
        self.config_key = config_key


__all__ = [
    "SortCheckError",
    "InputError",
    "MissingInputError",
    "InvalidFormatError",
    "RuleTableError",
    "ConfigurationError",
]
