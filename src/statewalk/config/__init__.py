"""Configuration management for statewalk."""

from statewalk.config.settings import LOG_LEVELS, WalkConfig, build_config, load_config

__all__ = ["WalkConfig", "build_config", "load_config", "LOG_LEVELS"]
