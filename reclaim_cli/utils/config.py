"""
Configuration utilities for the Reclaim CLI.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

ENV_FILE_NAME = ".reclaim.env"

API_KEY_ENV = "RECLAIM_API_KEY"
BASE_URL_ENV = "RECLAIM_BASE_URL"
TIMEOUT_ENV = "RECLAIM_TIMEOUT_SECS"


def load_env_vars() -> None:
    """
    Load environment variables from .env files in the following order:
    1. .reclaim.env in the current directory
    2. .reclaim.env in the user's home directory

    Variables already set in the environment are never overridden, so the
    first file to define a key wins.
    """
    # Load from current directory
    if os.path.exists(ENV_FILE_NAME):
        load_dotenv(ENV_FILE_NAME)

    # Load from home directory
    home_env = Path.home() / ENV_FILE_NAME
    if home_env.exists():
        load_dotenv(home_env)

