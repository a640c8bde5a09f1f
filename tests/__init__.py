"""Test package. Configures an in-memory database and a signing key before the app is imported."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-signing-key-0123456789abcdef0123456789"
os.environ.setdefault("APP_ENV", "dev")
