"""
Custom exceptions for the registrar.
"""

from typing import Optional, Any, Dict


class RegistrarException(Exception):
    """Base exception for all registrar errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ValidationError(RegistrarException):
    """Raised when data validation fails."""
    pass


class InvalidArgumentError(ValidationError):
    """Raised when an operation receives an argument it cannot accept."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="invalid_argument", details=details)


class ResourceNotFoundError(RegistrarException):
    """Raised when a requested resource is not found."""
    pass


class InvariantViolationError(RegistrarException):
    """Raised when students and courses disagree about who is enrolled where."""

    def __init__(self, violations):
        violations = list(violations)
        summary = f"{len(violations)} registration invariant(s) violated"
        if violations:
            summary += ": " + violations[0]
        super().__init__(summary, error_code="invariant_violation", details={'violations': violations})
        self.violations = violations


class ConfigurationError(RegistrarException):
    """Raised when configuration is invalid."""
    pass
