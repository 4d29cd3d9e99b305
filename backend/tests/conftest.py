"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database and hash passwords quickly
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_FORMAT", "text")
