"""Command-line tools for pylogroll."""
