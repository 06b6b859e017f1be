"""Command-line interface for the space tool."""
