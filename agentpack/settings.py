"""Runtime settings read from the environment (and an optional .env file)."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_CONFIG_ROOT = Path("./config")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, built once at startup."""

    config_root: Path = DEFAULT_CONFIG_ROOT
    seed_defaults: bool = True
    log_level: str = "INFO"
    log_format: str = "text"  # "text" or "json"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls, load_dotenv_file: bool = True) -> "Settings":
        if load_dotenv_file:
            load_dotenv()  # load environment variables from .env file
        return cls(
            config_root=Path(os.getenv("AGENTPACK_CONFIG_ROOT", str(DEFAULT_CONFIG_ROOT))),
            seed_defaults=_env_bool("AGENTPACK_SEED_DEFAULTS", True),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("LOG_FORMAT", "text").lower(),
            # comma-separated values for multiple origins, or "*" for all (development only)
            cors_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()],
        )
