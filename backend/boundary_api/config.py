"""Server configuration, read from the environment."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel

BACKEND = Path(__file__).resolve().parents[1]

DATA_DIR = BACKEND / "public" / "data"
LOCK_DIR = BACKEND / "cache" / "locks"

DEFAULT_PORT = 3001
DEFAULT_DOWNLOAD_TIMEOUT = 120.0


class ServerConfig(BaseModel):
    port: int = DEFAULT_PORT
    environment: str = "production"
    data_dir: Path = DATA_DIR
    lock_dir: Path = LOCK_DIR
    download_timeout: float | None = DEFAULT_DOWNLOAD_TIMEOUT  # None = wait forever
    boundary_dataset: str = "NATURAL_EARTH"
    cors_origins: list[str] = ["*"]

    @property
    def debug(self) -> bool:
        """Development mode: error details are returned to the caller."""
        return self.environment == "development"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ServerConfig":
        env = os.environ if environ is None else environ
        values: dict = {}

        port = env.get("PORT") or env.get("API_PORT")
        if port:
            values["port"] = int(port)
        if env.get("NODE_ENV"):
            values["environment"] = env["NODE_ENV"]
        if env.get("DATA_DIR"):
            values["data_dir"] = Path(env["DATA_DIR"]).expanduser()
        if env.get("LOCK_DIR"):
            values["lock_dir"] = Path(env["LOCK_DIR"]).expanduser()
        if "DOWNLOAD_TIMEOUT" in env:
            raw = env["DOWNLOAD_TIMEOUT"].strip()
            values["download_timeout"] = float(raw) if raw and float(raw) > 0 else None
        if env.get("BOUNDARY_DATASET"):
            values["boundary_dataset"] = env["BOUNDARY_DATASET"]
        if env.get("CORS_ORIGINS"):
            values["cors_origins"] = [o.strip() for o in env["CORS_ORIGINS"].split(",") if o.strip()]

        return cls(**values)
