# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS
- In-memory sqlite by default; set DATABASE_URL to run against PostgreSQL
  (the row-lock numbering tests only run there)
- Fast password hashing
- Posting stays enabled: tests exercise the ledger end to end
- No throttling
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import REST_FRAMEWORK, env

DEBUG = False
SECRET_KEY = "test-only-secret-key"

DATABASES = {
    "default": env.db("DATABASE_URL", default="sqlite://:memory:"),
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

ACCOUNTING_POSTING_ENABLED = True

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_CLASSES": (),
}
