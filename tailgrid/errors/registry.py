"""Error code registry with E-XXXX format codes.

This module defines the error code system for TailGrid, organizing errors
into categories:
- E-1xxx: Grid reference errors (unknown column/row, rejected state changes)
- E-2xxx: AI format errors (provider reply is not usable JSON)
- E-3xxx: AI provider transport errors
- E-4xxx: System/configuration errors

Each error includes a code, title, message template, and remediation steps.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error codes."""

    REFERENCE = "reference"  # E-1xxx: Grid reference errors
    FORMAT = "format"  # E-2xxx: AI format errors
    PROVIDER = "provider"  # E-3xxx: Provider transport errors
    SYSTEM = "system"  # E-4xxx: System/configuration errors


@dataclass
class ErrorCode:
    """Definition of an error code with metadata.

    Attributes:
        code: Error code in E-XXXX format.
        category: Error category for grouping.
        title: Short title for display.
        message_template: Message with {placeholders} for context.
        remediation: Action user should take to resolve.
        is_retryable: Whether the operation can be retried without user action.
    """

    code: str  # E-XXXX format
    category: ErrorCategory
    title: str  # Short title for display
    message_template: str  # Message with {placeholders}
    remediation: str  # Action user should take
    is_retryable: bool = False  # Can be retried without user action


# Error registry - all defined error codes
ERROR_REGISTRY: dict[str, ErrorCode] = {
    # Grid reference errors (E-1xxx)
    "E-1001": ErrorCode(
        code="E-1001",
        category=ErrorCategory.REFERENCE,
        title="Unknown Column",
        message_template="Column '{column}' does not exist in this grid.",
        remediation="Use one of the grid's column ids.",
    ),
    "E-1002": ErrorCode(
        code="E-1002",
        category=ErrorCategory.REFERENCE,
        title="Unknown Row",
        message_template="Row '{row_id}' does not exist in this grid.",
        remediation="Check the row id against the current data set.",
    ),
    "E-1003": ErrorCode(
        code="E-1003",
        category=ErrorCategory.REFERENCE,
        title="Invalid Page Size",
        message_template="Page size must be a positive integer, got {value}.",
        remediation="Pass a page size of 1 or more.",
    ),
    "E-1004": ErrorCode(
        code="E-1004",
        category=ErrorCategory.REFERENCE,
        title="Sorting Disabled",
        message_template="Column '{column}' does not allow sorting.",
        remediation="Enable sorting on the grid or the column.",
    ),
    "E-1005": ErrorCode(
        code="E-1005",
        category=ErrorCategory.REFERENCE,
        title="Selection Disabled",
        message_template="Row selection is not enabled for this grid.",
        remediation="Create the grid with enable_row_selection=True.",
    ),
    "E-1006": ErrorCode(
        code="E-1006",
        category=ErrorCategory.REFERENCE,
        title="Column Not Writable",
        message_template="Column '{column}' has no accessor key to write through.",
        remediation="Update the row with update_row() instead.",
    ),
    # AI format errors (E-2xxx)
    "E-2001": ErrorCode(
        code="E-2001",
        category=ErrorCategory.FORMAT,
        title="No JSON Found",
        message_template="No JSON found in response",
        remediation="Rephrase the query or use a provider with JSON output mode.",
        is_retryable=True,
    ),
    "E-2002": ErrorCode(
        code="E-2002",
        category=ErrorCategory.FORMAT,
        title="Malformed JSON",
        message_template="Invalid JSON in response: {detail}",
        remediation="Retry the query; the provider returned malformed JSON.",
        is_retryable=True,
    ),
    "E-2003": ErrorCode(
        code="E-2003",
        category=ErrorCategory.FORMAT,
        title="Output Validation Failed",
        message_template="Validation failed: {detail}",
        remediation="Retry the query; the provider reply did not match the filter/sort schema.",
        is_retryable=True,
    ),
    "E-2004": ErrorCode(
        code="E-2004",
        category=ErrorCategory.FORMAT,
        title="Empty Query",
        message_template="Query cannot be empty",
        remediation="Type a question about the data, e.g. 'customers in CA sorted by revenue'.",
    ),
    # Provider transport errors (E-3xxx)
    "E-3001": ErrorCode(
        code="E-3001",
        category=ErrorCategory.PROVIDER,
        title="Provider API Error",
        message_template="{provider} API error: {status} - {body}",
        remediation="Check the provider credentials, model name and endpoint.",
    ),
    "E-3002": ErrorCode(
        code="E-3002",
        category=ErrorCategory.PROVIDER,
        title="Provider Timeout",
        message_template="{provider} request timed out after {timeout}s",
        remediation="Retry, or raise the provider timeout.",
        is_retryable=True,
    ),
    "E-3003": ErrorCode(
        code="E-3003",
        category=ErrorCategory.PROVIDER,
        title="Provider Unreachable",
        message_template="{provider} request failed: {detail}",
        remediation="Check network access to the provider endpoint.",
        is_retryable=True,
    ),
    "E-3004": ErrorCode(
        code="E-3004",
        category=ErrorCategory.PROVIDER,
        title="Unreadable Provider Response",
        message_template="{provider} returned a response that is not JSON: {detail}",
        remediation="Check that the endpoint is a text-completion API.",
    ),
    # System/configuration errors (E-4xxx)
    "E-4001": ErrorCode(
        code="E-4001",
        category=ErrorCategory.SYSTEM,
        title="Provider Not Configured",
        message_template="Missing {setting} for the {provider} provider.",
        remediation="Set the value in tailgrid.yaml or the matching environment variable.",
    ),
    "E-4002": ErrorCode(
        code="E-4002",
        category=ErrorCategory.SYSTEM,
        title="Unknown Provider",
        message_template="Unknown provider type: {kind}",
        remediation="Use one of: openai, anthropic, ollama, custom.",
    ),
    "E-4003": ErrorCode(
        code="E-4003",
        category=ErrorCategory.SYSTEM,
        title="Unexpected Error",
        message_template="{detail}",
        remediation="Retry the query. If the problem persists, enable debug logging.",
    ),
    "E-4004": ErrorCode(
        code="E-4004",
        category=ErrorCategory.SYSTEM,
        title="Invalid Data File",
        message_template="Could not load rows from '{path}': {detail}",
        remediation="Provide a CSV file or a JSON array of objects.",
    ),
}


def get_error(code: str) -> ErrorCode | None:
    """Look up error code definition.

    Args:
        code: Error code in E-XXXX format.

    Returns:
        ErrorCode if found, None otherwise.
    """
    return ERROR_REGISTRY.get(code)


def get_errors_by_category(category: ErrorCategory) -> list[ErrorCode]:
    """Get all error codes in a category.

    Args:
        category: The error category to filter by.

    Returns:
        List of ErrorCode objects in the category.
    """
    return [e for e in ERROR_REGISTRY.values() if e.category == category]


def render_message(code: str, **context: object) -> str:
    """Fill a registry message template with context values.

    Unknown codes render as "Unknown error: <code>"; missing placeholders
    leave the template unformatted.
    """
    error_def = get_error(code)
    if error_def is None:
        return f"Unknown error: {code}"
    try:
        return error_def.message_template.format(**context)
    except KeyError:
        return error_def.message_template
