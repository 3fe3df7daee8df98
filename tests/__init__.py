"""Test package. Settings are built at import time, so required env vars are set here first."""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
