"""Root conftest — shared test configuration."""

import os

# Never pick up a real database, secret or mail relay from the environment
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault("SMTP_HOST", "")
