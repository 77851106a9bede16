"""Shared setup for the command-line scripts."""

from __future__ import annotations

import pathlib
import sys

from dotenv import load_dotenv

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ssq.config import resolve_database_url  # noqa: E402


def get_database_url(override: str | None = None) -> str:
    """Resolve DB URL from .env / .env.local / environment unless overridden."""

    if override:
        return override

    load_dotenv()
    env_local = PROJECT_ROOT / ".env.local"
    if env_local.exists():
        load_dotenv(dotenv_path=env_local, override=True)

    return resolve_database_url()
