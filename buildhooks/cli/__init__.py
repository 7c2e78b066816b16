"""Command-line interface for buildhooks."""
