"""Service settings read from ``IMAGEDIFF_*`` environment variables."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3001
DEFAULT_MAX_UPLOAD_BYTES = 20 * 1024 * 1024
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    max_upload_bytes: int = Field(default=DEFAULT_MAX_UPLOAD_BYTES, gt=0)
    log_level: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        if env.get("IMAGEDIFF_HOST"):
            values["host"] = env["IMAGEDIFF_HOST"]
        if env.get("IMAGEDIFF_PORT"):
            values["port"] = env["IMAGEDIFF_PORT"]
        if env.get("IMAGEDIFF_MAX_UPLOAD_BYTES"):
            values["max_upload_bytes"] = env["IMAGEDIFF_MAX_UPLOAD_BYTES"]
        values["log_level"] = log_level_from_env(env)
        return cls.model_validate(values)


def log_level_from_env(environ: Mapping[str, str] | None = None) -> str | None:
    env = os.environ if environ is None else environ
    level = env.get("IMAGEDIFF_LOG", "").strip().upper()
    return level if level in LOG_LEVELS else None


def configure_logging(verbose: bool = False, level: str | None = None) -> None:
    """Log to stderr; an explicit level (e.g. from IMAGEDIFF_LOG) wins over --verbose."""
    resolved = logging.DEBUG if verbose else logging.WARNING
    if level is not None:
        resolved = getattr(logging, level)
    logging.basicConfig(level=resolved, format="%(levelname)s: %(name)s: %(message)s")
    logging.getLogger("PIL").setLevel(logging.WARNING)
