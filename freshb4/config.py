"""TOML configuration loader for FreshB4."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


@dataclass
class GeminiConfig:
    api_key: str = ""
    model: str = "gemini-2.5-flash"


@dataclass
class ClaudeConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"


@dataclass
class AIConfig:
    backend: str = "gemini"
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    claude: ClaudeConfig = field(default_factory=ClaudeConfig)


@dataclass
class DatabaseConfig:
    path: str = "~/.config/freshb4/pantry.db"


@dataclass
class PantryConfig:
    default_days_left: int = 7
    default_category: str = "Other"


@dataclass
class NotificationConfig:
    enabled: bool = True
    expiring_delay_seconds: int = 5
    daily_hour: int = 9
    daily_minute: int = 0
    refresh_schedule: str = "0 0 * * *"
    poll_schedule: str = "* * * * *"


@dataclass
class CameraConfig:
    index: int = 0
    save_dir: str = "/tmp/freshb4"


@dataclass
class FreshB4Config:
    ai: AIConfig = field(default_factory=AIConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    pantry: PantryConfig = field(default_factory=PantryConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)


def load_config(path: str | Path | None = None) -> FreshB4Config:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    API keys can be overridden via environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    ai = raw.get("ai", {})
    dbs = raw.get("database", {})
    pnt = raw.get("pantry", {})
    ntf = raw.get("notifications", {})
    cam = raw.get("camera", {})

    gemini_cfg = ai.get("gemini", {})
    claude_cfg = ai.get("claude", {})

    # Resolve API keys: config file → environment variable
    gemini_api_key = (
        gemini_cfg.get("api_key", "")
        or os.environ.get("GEMINI_API_KEY", "")
        or os.environ.get("EXPO_PUBLIC_GEMINI_API_KEY", "")
    )
    claude_api_key = claude_cfg.get("api_key", "") or os.environ.get(
        "ANTHROPIC_API_KEY", ""
    )

    return FreshB4Config(
        ai=AIConfig(
            backend=ai.get("backend", "gemini"),
            gemini=GeminiConfig(
                api_key=gemini_api_key,
                model=gemini_cfg.get("model", "gemini-2.5-flash"),
            ),
            claude=ClaudeConfig(
                api_key=claude_api_key,
                model=claude_cfg.get("model", "claude-sonnet-4-5-20250929"),
            ),
        ),
        database=DatabaseConfig(
            path=dbs.get("path", "~/.config/freshb4/pantry.db"),
        ),
        pantry=PantryConfig(
            default_days_left=pnt.get("default_days_left", 7),
            default_category=pnt.get("default_category", "Other"),
        ),
        notifications=NotificationConfig(
            enabled=ntf.get("enabled", True),
            expiring_delay_seconds=ntf.get("expiring_delay_seconds", 5),
            daily_hour=ntf.get("daily_hour", 9),
            daily_minute=ntf.get("daily_minute", 0),
            refresh_schedule=ntf.get("refresh_schedule", "0 0 * * *"),
            poll_schedule=ntf.get("poll_schedule", "* * * * *"),
        ),
        camera=CameraConfig(
            index=cam.get("index", 0),
            save_dir=cam.get("save_dir", "/tmp/freshb4"),
        ),
    )
