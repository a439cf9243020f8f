"""Command-line interface for firereport."""
