"""Configuration par variables d'environnement, avec repli sur le fichier .env."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Optional

BASE_DIR = Path(__file__).resolve().parent.parent

DEFAULT_ALLOWED_ORIGINS = [
    "https://naboulsi92.github.io",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5500",
    "http://127.0.0.1:5500",
]
DEFAULT_PORT = 3000


def _load_env() -> Dict[str, str]:
    env_path = BASE_DIR / ".env"
    if not env_path.exists():
        return {}
    data: Dict[str, str] = {}
    for line in env_path.read_text(encoding="utf-8").splitlines():
        if not line or line.strip().startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        data[key.strip()] = value.strip()
    return data


def get_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value:
        return value
    return _load_env().get(name) or default


def get_allowed_origins() -> List[str]:
    raw = get_setting("CORS_ALLOWED_ORIGINS")
    if not raw:
        return list(DEFAULT_ALLOWED_ORIGINS)
    return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]


def get_log_level() -> str:
    return (get_setting("LOG_LEVEL", "INFO") or "INFO").upper()


def get_port() -> int:
    raw = get_setting("PORT")
    try:
        return int(raw) if raw else DEFAULT_PORT
    except ValueError:
        return DEFAULT_PORT


def cors_headers(origin: Optional[str], allowed_origins: List[str]) -> Dict[str, str]:
    """Entetes CORS pour `origin`, vide si l'origine n'est pas autorisee."""
    if not origin:
        return {}
    if "*" in allowed_origins:
        headers = {"Access-Control-Allow-Origin": "*"}
    elif origin.rstrip("/") in allowed_origins:
        headers = {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
            "Vary": "Origin",
        }
    else:
        return {}
    headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
    return headers
