"""
Runtime Configuration

Central configuration for hashing, proof output and logging.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from hashtree.crypto.hashing import DEFAULT_ALGORITHM, DigestEngine, get_engine

load_dotenv()


ENV_PREFIX = "HASHTREE_"

PROOF_FORMATS = ("json", "binary")


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for hashtree.

    Can be loaded from:
    - Environment variables (and a .env file)
    - YAML file
    - Programmatic construction
    """
    hash_algorithm: str = DEFAULT_ALGORITHM
    proof_format: str = "json"
    log_level: str = "INFO"
    log_file: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.proof_format not in PROOF_FORMATS:
            raise ValueError(
                f"proof_format must be one of {PROOF_FORMATS}, got {self.proof_format!r}"
            )

    def engine(self) -> DigestEngine:
        """Build the digest engine named by hash_algorithm."""
        return get_engine(self.hash_algorithm)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - HASHTREE_HASH_ALGORITHM: hashlib algorithm name
        - HASHTREE_PROOF_FORMAT: json or binary
        - HASHTREE_LOG_LEVEL: logging level name
        - HASHTREE_LOG_FILE: optional log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM"):
            overrides["hash_algorithm"] = os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM")
        if os.getenv(f"{ENV_PREFIX}PROOF_FORMAT"):
            overrides["proof_format"] = os.getenv(f"{ENV_PREFIX}PROOF_FORMAT", "json").lower()
        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO").upper()
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        defaults = cls()
        return cls(
            hash_algorithm=data.get("hash_algorithm", defaults.hash_algorithm),
            proof_format=data.get("proof_format", defaults.proof_format),
            log_level=data.get("log_level", defaults.log_level),
            log_file=data.get("log_file"),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        import copy
        new_config = copy.deepcopy(self)
        for key, value in overrides.items():
            setattr(new_config, key, value)
        new_config.__post_init__()
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "hash_algorithm": self.hash_algorithm,
            "proof_format": self.proof_format,
            "log_level": self.log_level,
            "log_file": self.log_file,
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set (or with None, reset) the default runtime configuration."""
    global _default_config
    _default_config = config
