"""Root conftest: loads .env.test before messaging_service.config is imported."""
from __future__ import annotations

import os
from pathlib import Path

_env_test = Path(__file__).resolve().parent / ".env.test"
if _env_test.exists():
    for raw in _env_test.read_text().splitlines():
        raw = raw.strip()
        if not raw or raw.startswith("#"):
            continue
        key, _, value = raw.partition("=")
        os.environ.setdefault(key.strip(), value.strip())
