"""Error handling framework for TailGrid.

This package provides:
- Error code registry with E-XXXX format codes
- Error formatting utilities
- Typed domain exceptions

Error categories:
- E-1xxx: Grid reference errors
- E-2xxx: AI format errors
- E-3xxx: AI provider transport errors
- E-4xxx: System/configuration errors
"""

from tailgrid.errors.domain import (
    DomainError,
    GridReferenceError,
    ProviderConfigError,
    ProviderError,
)
from tailgrid.errors.formatter import TailGridError, format_error
from tailgrid.errors.registry import (
    ERROR_REGISTRY,
    ErrorCategory,
    ErrorCode,
    get_error,
    get_errors_by_category,
    render_message,
)

__all__ = [
    # Registry
    "ErrorCode",
    "ErrorCategory",
    "ERROR_REGISTRY",
    "get_error",
    "get_errors_by_category",
    "render_message",
    # Formatter
    "TailGridError",
    "format_error",
    # Domain exceptions
    "DomainError",
    "GridReferenceError",
    "ProviderError",
    "ProviderConfigError",
]
