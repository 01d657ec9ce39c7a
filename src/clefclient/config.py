"""
Environment configuration for clef clients.

Settings are read from the process environment, optionally seeded from a
.env file (default: ~/.clef/.env):

    CLEF_RPC_URL    HTTP endpoint (default http://localhost:8550)
    CLEF_IPC_PATH   unix socket path; when set, IPC is preferred over HTTP
    CLEF_TIMEOUT    request timeout in seconds (default 30)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

CLEF_DIR = Path.home() / ".clef"
CLEF_ENV = CLEF_DIR / ".env"

DEFAULT_RPC_URL = "http://localhost:8550"
DEFAULT_TIMEOUT = 30.0


def load_env(env_path: Optional[Union[str, Path]] = None) -> bool:
    """Load ``env_path`` into os.environ if it exists. Returns True when a file was loaded."""
    env_path = Path(env_path) if env_path else CLEF_ENV
    if not env_path.exists():
        return False
    return load_dotenv(env_path, override=True)


def get_rpc_url() -> str:
    """Get the HTTP endpoint from environment or default."""
    return os.environ.get("CLEF_RPC_URL", DEFAULT_RPC_URL)


def get_ipc_path() -> Optional[str]:
    return os.environ.get("CLEF_IPC_PATH") or None


def get_timeout() -> float:
    raw = os.environ.get("CLEF_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"CLEF_TIMEOUT must be a number of seconds, got {raw!r}") from None
