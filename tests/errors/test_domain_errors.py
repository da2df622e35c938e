"""Tests for typed domain exceptions."""

from tailgrid.errors import (
    DomainError,
    GridReferenceError,
    ProviderConfigError,
    ProviderError,
)


class TestGridReferenceError:

    def test_unknown_column(self):
        error = GridReferenceError.unknown_column("zip")
        assert isinstance(error, DomainError)
        assert error.code == "E-1001"
        assert error.kind == "column"
        assert error.identifier == "zip"
        assert str(error) == "Column 'zip' does not exist in this grid."

    def test_unknown_row(self):
        error = GridReferenceError.unknown_row("7")
        assert error.code == "E-1002"
        assert str(error) == "Row '7' does not exist in this grid."


class TestProviderErrors:

    def test_provider_error_fields(self):
        error = ProviderError("boom", provider="Ollama", code="E-3003")
        assert error.provider == "Ollama"
        assert error.code == "E-3003"
        assert error.status_code is None

    def test_config_error_missing(self):
        error = ProviderConfigError.missing("custom", "endpoint")
        assert error.code == "E-4001"
        assert str(error) == "Missing endpoint for the custom provider."

    def test_config_error_unknown_kind(self):
        error = ProviderConfigError.unknown_kind("bard")
        assert error.code == "E-4002"

    def test_base_code(self):
        assert DomainError("x").code == "E-4003"
