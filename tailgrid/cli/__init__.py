"""Command-line interface for browsing and querying tabular data."""
