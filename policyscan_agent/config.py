"""
Runtime configuration for the PolicyScan agent.

Settings are read from the process environment once at startup (after loading
any .env file) and passed explicitly to the engines and the API app.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

TALOS_PLACEHOLDER_URL = "https://<your-talos-endpoint>"
FORTIGUARD_PLACEHOLDER_URL = "https://<your-fortiguard-endpoint>"

# httpx's own default timeout
DEFAULT_UPSTREAM_TIMEOUT_S = 5.0

_HERE = Path(__file__).resolve()
_PROJECT_ROOT = _HERE.parents[1]


@dataclass(frozen=True)
class EngineSettings:
    api_url: str
    api_key: str = ""

    @property
    def configured(self) -> bool:
        """False for an empty endpoint or one still holding a <placeholder>."""
        url = self.api_url.strip()
        if not url:
            return False
        return "<" not in url and ">" not in url


@dataclass(frozen=True)
class Settings:
    talos: EngineSettings = field(default_factory=lambda: EngineSettings(TALOS_PLACEHOLDER_URL))
    fortiguard: EngineSettings = field(default_factory=lambda: EngineSettings(FORTIGUARD_PLACEHOLDER_URL))
    host: str = "0.0.0.0"
    port: int = 3000
    upstream_timeout_s: float = DEFAULT_UPSTREAM_TIMEOUT_S
    scan_concurrency: int = 1
    cors_origins: tuple[str, ...] = ("http://localhost:3000",)
    log_level: str = "INFO"
    log_format: str = "json"


def _int_env(environ: dict[str, str], name: str, default: int) -> int:
    try:
        return int((environ.get(name) or "").strip() or default)
    except ValueError:
        return default


def _float_env(environ: dict[str, str], name: str, default: float) -> float:
    try:
        return float((environ.get(name) or "").strip() or default)
    except ValueError:
        return default


def _cors_origins(raw: str) -> tuple[str, ...]:
    raw = raw.strip()
    if not raw:
        return ("http://localhost:3000",)
    return tuple(o.strip() for o in raw.split(",") if o.strip())


def load_settings(environ: dict[str, str] | None = None, *, load_env_file: bool = True) -> Settings:
    """Build Settings from `environ` (defaults to os.environ).

    When reading the real environment, a .env file at the project root or the
    working directory is loaded first without overriding existing variables.
    """
    if environ is None:
        if load_env_file:
            load_dotenv(_PROJECT_ROOT / ".env", override=False)
            load_dotenv(Path.cwd() / ".env", override=False)
        environ = dict(os.environ)

    timeout = _float_env(environ, "UPSTREAM_TIMEOUT_S", DEFAULT_UPSTREAM_TIMEOUT_S)
    if timeout <= 0:
        timeout = DEFAULT_UPSTREAM_TIMEOUT_S

    return Settings(
        talos=EngineSettings(
            api_url=environ.get("TALOS_API_URL", TALOS_PLACEHOLDER_URL),
            api_key=environ.get("TALOS_API_KEY", ""),
        ),
        fortiguard=EngineSettings(
            api_url=environ.get("FORTIGUARD_API_URL", FORTIGUARD_PLACEHOLDER_URL),
            api_key=environ.get("FORTIGUARD_API_KEY", ""),
        ),
        host=(environ.get("HOST") or "0.0.0.0").strip(),
        port=_int_env(environ, "PORT", 3000),
        upstream_timeout_s=timeout,
        scan_concurrency=max(1, _int_env(environ, "SCAN_CONCURRENCY", 1)),
        cors_origins=_cors_origins(environ.get("POLICYSCAN_CORS_ORIGINS", "")),
        log_level=(environ.get("LOG_LEVEL") or "INFO").strip().upper(),
        log_format=(environ.get("LOG_FORMAT") or "json").strip().lower(),
    )
