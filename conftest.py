"""Root conftest: test settings must be in the environment before apex_chat.config is imported."""
from __future__ import annotations

import os
from pathlib import Path

os.environ.setdefault("JWT_SECRET", "test-secret-key-minimum-32-characters-long")
os.environ.setdefault("CHAT_SEED_DEMO_DATA", "false")

_env_test = Path(__file__).resolve().parent / ".env.test"
if _env_test.exists():
    for line in _env_test.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, _, value = line.partition("=")
        os.environ.setdefault(key.strip(), value.strip())
