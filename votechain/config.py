"""
VOTECHAIN: Configuration.
Shared settings and paths for the entire codebase.
"""

import os
from pathlib import Path

# Base Paths
VOTECHAIN_DIR = Path.home() / ".votechain"
DEFAULT_DB_PATH = VOTECHAIN_DIR / "voters.db"


def _load() -> None:
    global DB_PATH, ALLOWED_ORIGINS, HOST, PORT

    # Voter store
    DB_PATH = os.environ.get("VOTECHAIN_DB", str(DEFAULT_DB_PATH))

    # Security Configuration
    ALLOWED_ORIGINS = os.environ.get(
        "VOTECHAIN_ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173"
    ).split(",")

    # Server
    HOST = os.environ.get("VOTECHAIN_HOST", "127.0.0.1")
    PORT = int(os.environ.get("VOTECHAIN_PORT", "3000"))


def reload() -> None:
    """Re-read every setting from the environment."""
    _load()


_load()
