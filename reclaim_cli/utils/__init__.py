"""Shared helpers: configuration, logging and output formatting."""
