"""
Engine configuration.

Holds the tunable constants the host may want to override without
touching rule code. Rule functions take these values as explicit
parameters; only the ProgressionManager reads an EngineConfig.
"""

from __future__ import annotations

import os
from pathlib import Path


# Bundled catalog data (schemas/ and database/ live under here)
DEFAULT_DATA_PATH = Path(__file__).resolve().parents[2] / "growth" / "data"

ENV_PREFIX = "SKILLGROWTH_"


class EngineConfig:
    """Configuration for the progression engine."""

    def __init__(
        self,
        mastery_threshold: int = 10,
        default_max_level: int = 100,
        data_path: str | Path = DEFAULT_DATA_PATH,
    ):
        if mastery_threshold < 1:
            raise ValueError("mastery_threshold must be at least 1")
        if default_max_level < 1:
            raise ValueError("default_max_level must be at least 1")

        self.mastery_threshold = mastery_threshold
        self.default_max_level = default_max_level
        self.data_path = Path(data_path)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> EngineConfig:
        """
        Build a config from SKILLGROWTH_* environment variables.

        Unset variables fall back to the defaults.
        """
        env = os.environ if environ is None else environ
        kwargs: dict = {}

        if f"{ENV_PREFIX}MASTERY_THRESHOLD" in env:
            kwargs["mastery_threshold"] = int(env[f"{ENV_PREFIX}MASTERY_THRESHOLD"])
        if f"{ENV_PREFIX}DEFAULT_MAX_LEVEL" in env:
            kwargs["default_max_level"] = int(env[f"{ENV_PREFIX}DEFAULT_MAX_LEVEL"])
        if f"{ENV_PREFIX}DATA_PATH" in env:
            kwargs["data_path"] = env[f"{ENV_PREFIX}DATA_PATH"]

        return cls(**kwargs)

    def __repr__(self) -> str:
        return (
            f"EngineConfig(mastery_threshold={self.mastery_threshold}, "
            f"default_max_level={self.default_max_level}, "
            f"data_path={str(self.data_path)!r})"
        )
