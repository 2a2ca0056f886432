# prompt_relay/auth.py
"""
Invocation-boundary auth for the local server. The handler never sees credentials.

Env vars:
- AUTH_MODE (default: NONE) — NONE (open URL) or API_KEY (identity required)
- API_KEYS — comma-separated allowed keys
- API_KEYS_FILE — optional path to file with one key per line
"""

import os
from typing import Optional, Set

AUTH_MODE_NONE = "NONE"
AUTH_MODE_API_KEY = "API_KEY"

AUTH_MODE = os.getenv("AUTH_MODE", AUTH_MODE_NONE).strip().upper() or AUTH_MODE_NONE
API_KEYS_ENV = os.getenv("API_KEYS", "")
API_KEYS_FILE = os.getenv("API_KEYS_FILE", "")


def _load_api_keys() -> Set[str]:
    keys: Set[str] = set()
    if API_KEYS_ENV:
        for k in API_KEYS_ENV.split(","):
            k = k.strip()
            if k:
                keys.add(k)
    if API_KEYS_FILE and os.path.exists(API_KEYS_FILE):
        with open(API_KEYS_FILE, "r", encoding="utf-8") as f:
            for line in f:
                k = line.strip()
                if k:
                    keys.add(k)
    return keys


API_KEYS = _load_api_keys()


def auth_required() -> bool:
    return AUTH_MODE == AUTH_MODE_API_KEY


def is_key_allowed(api_key: Optional[str]) -> bool:
    """Check if API key is valid. In NONE mode every caller is allowed."""
    if not auth_required():
        return True
    if not api_key:
        return False
    return api_key in API_KEYS
