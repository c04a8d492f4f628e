"""Root conftest — shared test configuration."""

import os

# Ensure tests never sign tokens with a production secret or reach a real DB
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("LOG_FORMAT", "text")
