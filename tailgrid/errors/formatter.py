"""Error formatting utilities.

This module provides:
- TailGridError exception class for application errors
- Error formatting for user display
"""

from dataclasses import dataclass, field

from tailgrid.errors.registry import get_error


@dataclass
class TailGridError(Exception):
    """Application error with code, message, and context.

    Attributes:
        code: Error code in E-XXXX format.
        message: Human-readable error message.
        remediation: Action user should take to resolve.
        column: Affected column id, if applicable.
        row_id: Affected row id, if applicable.
        is_retryable: Whether the operation can be retried without user action.
        details: Additional context dictionary.
    """

    code: str
    message: str
    remediation: str
    column: str | None = None  # Affected column id
    row_id: str | None = None  # Affected row id
    is_retryable: bool = False
    details: dict = field(default_factory=dict)  # Additional context

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code}: {self.message}"

    @classmethod
    def from_code(cls, code: str, **kwargs: object) -> "TailGridError":
        """Create error from registry code with context substitution.

        Args:
            code: Error code in E-XXXX format.
            **kwargs: Context values for message template substitution.
                The 'details' key is stored on the error rather than
                substituted; 'column' and 'row_id' are used for both.

        Returns:
            TailGridError instance with formatted message.
        """
        column = kwargs.get("column")
        if not isinstance(column, str):
            column = None
        row_id = kwargs.get("row_id")
        if not isinstance(row_id, str):
            row_id = None
        details = kwargs.get("details", {})
        if not isinstance(details, dict):
            details = {}

        error_def = get_error(code)
        if not error_def:
            return cls(
                code=code,
                message=f"Unknown error: {code}",
                remediation="Enable debug logging and retry.",
                column=column,
                row_id=row_id,
                details=details,
            )

        message = error_def.message_template
        try:
            template_kwargs = {k: v for k, v in kwargs.items() if k != "details"}
            message = message.format(**template_kwargs)
        except KeyError:
            # Keep template if some placeholders are missing
            pass

        return cls(
            code=error_def.code,
            message=message,
            remediation=error_def.remediation,
            column=column,
            row_id=row_id,
            is_retryable=error_def.is_retryable,
            details=details,
        )


def format_error(error: TailGridError, include_remediation: bool = True) -> str:
    """Format error for display to user.

    Args:
        error: The TailGridError to format.
        include_remediation: Whether to include remediation steps.

    Returns:
        Multi-line formatted string suitable for user display.
    """
    lines = [f"{error.code}: {error.message}"]

    if error.row_id is not None:
        lines.append(f"  Row: {error.row_id}")
    if error.column:
        lines.append(f"  Column: {error.column}")
    if error.is_retryable:
        lines.append("  Retryable: yes")

    if include_remediation:
        lines.append(f"  Action: {error.remediation}")

    return "\n".join(lines)
