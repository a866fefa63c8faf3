"""
Environment-based settings for the reception relay server.

Values are read once at import time, after an optional ``.env`` file in the
working directory has been loaded.
"""

import os
from pathlib import Path

import dotenv

# Load environment variables from .env file if it exists
env_path = Path(".") / ".env"
if env_path.exists():
    dotenv.load_dotenv(env_path)

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
ENV = os.getenv("ENV", "production").lower()

# Shared key staff must present on login; empty disables the check
STAFF_ACCESS_KEY = os.getenv("STAFF_ACCESS_KEY", "")

# JSON-lines file receiving every call that reaches a terminal state
CALL_ARCHIVE_PATH = os.getenv("CALL_ARCHIVE_PATH", "")
