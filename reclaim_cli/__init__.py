"""
Reclaim CLI: command-line client for Reclaim.ai tasks and calendar events.

Lists, creates, updates and deletes tasks and applies schedule actions over
the Reclaim REST API, with JSON output for scripts and agents.
"""

__version__ = "1.0.0"
__author__ = "Reclaim CLI Team"

# Import the main CLI app for entry point
from .reclaim import app, main

__all__ = ["app", "main", "__version__"]
