"""Command-line tools for the rate engine."""
