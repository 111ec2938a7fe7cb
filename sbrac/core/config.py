"""
Runtime configuration for SBRAC.

Selects the group preset, default bid bit length and logging behaviour.
Values come from defaults, a .env file, or SBRAC_* environment variables,
in increasing order of precedence.
"""

import logging
import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from sbrac.crypto.group import GroupParameters, get_group

# Environment variable prefix
ENV_PREFIX = "SBRAC_"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AuctionConfig(BaseModel):
    """Auction-wide configuration parameters"""

    model_config = {"frozen": True}

    # Protocol parameters
    group: Literal["modp2048", "toy"] = "modp2048"
    bit_length: int = Field(default=10, ge=1, le=256)

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = False
    log_dir: Path = Path("logs")

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_LOG_LEVELS}")
        return level

    @property
    def log_level_number(self) -> int:
        return getattr(logging, self.log_level)

    def group_parameters(self) -> GroupParameters:
        """Resolve the configured group preset."""
        return get_group(self.group)


def load_config(env_file: Optional[str] = None) -> AuctionConfig:
    """
    Load configuration from .env / environment or use defaults.

    Args:
        env_file: Optional path to a .env file. Variables already present in
            the environment are not overridden by the file.

    Returns:
        AuctionConfig instance

    Raises:
        pydantic.ValidationError: if a variable holds an invalid value
    """
    load_dotenv(dotenv_path=env_file, override=False)

    values = {}
    for field_name in AuctionConfig.model_fields:
        raw = os.environ.get(ENV_PREFIX + field_name.upper())
        if raw is not None:
            values[field_name] = raw

    return AuctionConfig(**values)
