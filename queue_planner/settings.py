"""
File: queue_planner/settings.py
Purpose: Environment-backed configuration for the planner client.
Key responsibilities:
- Parse the planner endpoint, timeouts and log level.
- Build the shared httpx client handed to PlannerClient.
"""

from dataclasses import dataclass
import os

import httpx


def _float_env(name: str, default: float) -> float:
    """Parse a float env var with a fallback."""
    raw = os.getenv(name, "")
    if raw == "":
        return default
    return float(raw)


@dataclass(frozen=True)
class Settings:
    """Planner client configuration parsed from environment."""
    planner_url: str = os.getenv("PLANNER_URL", "http://localhost:8080/")
    connect_timeout_s: float = _float_env("PLANNER_CONNECT_TIMEOUT_S", 5.0)
    read_timeout_s: float = _float_env("PLANNER_READ_TIMEOUT_S", 30.0)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()


def build_http_client(cfg: Settings = settings) -> httpx.Client:
    """Return an httpx client bounded by the configured timeouts."""
    timeout = httpx.Timeout(cfg.read_timeout_s, connect=cfg.connect_timeout_s)
    return httpx.Client(timeout=timeout)
