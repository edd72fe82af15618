"""Root conftest - shared test configuration."""

import os

# Tests never reach the real course directory or a file database
os.environ.setdefault("COURSE_SEARCH_API_KEY", "")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)
os.environ.setdefault("LOG_FORMAT", "text")
