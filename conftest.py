"""Global pytest configuration."""

import os

# Settings are read on first use; pin them before any app import
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production-use-0123456789")
os.environ.setdefault("LOG_LEVEL", "WARNING")
