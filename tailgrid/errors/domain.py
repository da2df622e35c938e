"""Typed domain exceptions.

Callers catch specific exception types instead of matching message text.
Every exception carries the registry code that describes it, so the AI
pipeline and the CLI can report a stable E-XXXX code.

Usage:
    # In the engine (strict mode)
    raise GridReferenceError.unknown_column("revenue")

    # In the CLI
    try:
        engine.toggle_sort("revenue")
    except GridReferenceError as e:
        console.print(format_error(TailGridError.from_code(e.code, column=e.identifier)))
"""

from tailgrid.errors.registry import render_message


class DomainError(Exception):
    """Base exception for all domain errors."""

    code: str = "E-4003"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class GridReferenceError(DomainError):
    """An action referenced a column or row the grid does not have."""

    def __init__(self, code: str, kind: str, identifier: str) -> None:
        key = "column" if kind == "column" else "row_id"
        super().__init__(render_message(code, **{key: identifier}))
        self.code = code
        self.kind = kind
        self.identifier = identifier

    @classmethod
    def unknown_column(cls, column_id: str) -> "GridReferenceError":
        return cls("E-1001", "column", column_id)

    @classmethod
    def unknown_row(cls, row_id: str) -> "GridReferenceError":
        return cls("E-1002", "row", row_id)


class ProviderError(DomainError):
    """An AI provider call failed at the transport or API level.

    Attributes:
        provider: Display name of the provider ("OpenAI", "Ollama", ...).
        code: Registry code (E-3xxx).
        status_code: HTTP status, when the provider answered.
        body: Response body text, already sanitized.
    """

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        code: str = "E-3001",
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.code = code
        self.status_code = status_code
        self.body = body


class ProviderConfigError(DomainError):
    """Provider configuration is incomplete or names an unknown provider."""

    def __init__(self, message: str, code: str = "E-4001") -> None:
        super().__init__(message)
        self.code = code

    @classmethod
    def missing(cls, provider: str, setting: str) -> "ProviderConfigError":
        return cls(render_message("E-4001", provider=provider, setting=setting))

    @classmethod
    def unknown_kind(cls, kind: str) -> "ProviderConfigError":
        return cls(render_message("E-4002", kind=kind), code="E-4002")
