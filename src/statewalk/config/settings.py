"""Walk configuration settings and loading."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from statewalk.core.task import OperatorCost
from statewalk.errors import ConfigValidationError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class WalkConfig(BaseSettings):
    """Configuration of a random walk.

    Validated once at construction; a WalkConfig instance is always usable.
    ``bound=None`` means no cost bound.
    """

    model_config = SettingsConfigDict(
        env_prefix="STATEWALK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    evals: Annotated[list[str], NoDecode] = Field(min_length=1)
    boost: int = Field(default=0, ge=0)
    preferred: Annotated[list[str], NoDecode] = Field(default_factory=list)
    reopen_closed: bool = False
    randomize_successors: bool = False
    preferred_successors_first: bool = False
    successors_per_step: int = Field(default=1, ge=1)
    bound: int | None = Field(default=None, ge=0)
    random_seed: int | None = None
    cost_type: OperatorCost = OperatorCost.NORMAL
    max_steps: int | None = Field(default=None, ge=1)
    log_level: str = "INFO"

    @field_validator("evals", "preferred", mode="before")
    @classmethod
    def validate_names(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = [name.strip() for name in v.split(",") if name.strip()]
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = str(v).upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Valid: {list(LOG_LEVELS)}")
        return level


def build_config(data: dict[str, Any]) -> WalkConfig:
    """Validate ``data`` into a WalkConfig.

    Raises:
        ConfigValidationError: With the first offending field.
    """
    try:
        return WalkConfig(**data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        raise ConfigValidationError(
            message=f"Invalid walk configuration: {first['msg']}",
            field=field,
            value=first.get("input"),
            cause=e,
            errors=[{"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()],
        ) from e


def load_config(config_path: str | Path | None = None, **overrides: Any) -> WalkConfig:
    """Load configuration from file and environment.

    Priority: explicit overrides > env vars > config file > defaults.
    Overrides set to None are ignored.
    """
    config_data: dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        if config_path.exists():
            try:
                with open(config_path) as f:
                    config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigValidationError(
                    message=f"Could not parse {config_path}: {e}", cause=e
                ) from e
            if not isinstance(config_data, dict):
                raise ConfigValidationError(
                    message=f"Config file {config_path} must contain a mapping",
                    value=str(config_path),
                )
            logger.debug(f"Loaded walk configuration from {config_path}")
        else:
            logger.warning(f"Config file not found: {config_path}")

    config_data.update(_get_env_overrides())
    config_data.update({k: v for k, v in overrides.items() if v is not None})

    return build_config(config_data)


def _optional_int(value: str) -> int | None:
    if value.strip().lower() in ("", "none", "null", "inf", "infinity"):
        return None
    return int(value)


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    env_mappings = {
        "STATEWALK_EVALS": "evals",
        "STATEWALK_PREFERRED": "preferred",
        "STATEWALK_BOOST": ("boost", int),
        "STATEWALK_BOUND": ("bound", _optional_int),
        "STATEWALK_RANDOM_SEED": ("random_seed", _optional_int),
        "STATEWALK_COST_TYPE": "cost_type",
        "STATEWALK_MAX_STEPS": ("max_steps", _optional_int),
        "STATEWALK_LOG_LEVEL": "log_level",
    }

    for env_key, config_key in env_mappings.items():
        value = os.environ.get(env_key)
        if value is not None:
            if isinstance(config_key, tuple):
                key, converter = config_key
                try:
                    overrides[key] = converter(value)
                except ValueError as e:
                    raise ConfigValidationError(
                        message=f"Invalid value for {env_key}: {value!r}",
                        field=key,
                        value=value,
                        cause=e,
                    ) from e
            else:
                overrides[config_key] = value

    return overrides


__all__ = ["WalkConfig", "build_config", "load_config", "LOG_LEVELS"]
