"""
Kernel Smoothing Configuration
==============================

This module handles configuration loading for the kernel smoothing style.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    KSMOOTH_SMOOTHED_PROPERTY  -> smoothing.smoothed_property
    KSMOOTH_EXTENT_POLICY      -> smoothing.extent_policy
    KSMOOTH_INVALID_DATA       -> smoothing.invalid_data
    KSMOOTH_RESOLUTION_DIVISOR -> smoothing.resolution_divisor
    KSMOOTH_LOG_LEVEL          -> logging.level
    KSMOOTH_LOG_FORMAT         -> logging.format

Example:
    from kernel_smoothing.config import settings

    options = SmoothingOptions.from_settings(
        settings.smoothing,
        value=lambda c: c["population"],
        sigma=lambda r, zf: 2 * r,
    )
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from kernel_smoothing.models.grid import ExtentPolicy
from kernel_smoothing.models.options import DEFAULT_SMOOTHED_PROPERTY, InvalidDataPolicy


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class SmoothingDefaults(BaseModel):
    """Defaults applied to SmoothingOptions built from settings."""

    smoothed_property: str = Field(
        default=DEFAULT_SMOOTHED_PROPERTY,
        min_length=1,
        description="Property name of the smoothed value",
    )
    extent_policy: ExtentPolicy = Field(
        default=ExtentPolicy.DATA,
        description="Smoothed grid extent: 'data' or 'viewport'",
    )
    invalid_data: InvalidDataPolicy = Field(
        default=InvalidDataPolicy.COERCE,
        description="Non-finite samples: 'coerce' or 'raise'",
    )
    resolution_divisor: float = Field(
        default=2.0,
        gt=0,
        description="Smoothed cell size = input resolution / divisor",
    )
    truncate: float = Field(
        default=4.0,
        gt=0,
        description="Gaussian kernel radius in standard deviations",
    )


class RenderingConfig(BaseModel):
    """Reference canvas configuration."""

    background: str = Field(default="#ffffff", description="Canvas background color")
    width: int = Field(default=800, ge=1, le=16384, description="Canvas width in pixels")
    height: int = Field(default=600, ge=1, le=16384, description="Canvas height in pixels")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for the kernel smoothing style.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    smoothing: SmoothingDefaults = Field(default_factory=SmoothingDefaults)
    rendering: RenderingConfig = Field(default_factory=RenderingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    # Find config file
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    # Load from YAML if exists
    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.debug("No config file found, using defaults and environment variables")

    # Apply environment variable overrides
    _apply_env_overrides(config_data)

    # Build settings object
    settings = Settings.model_validate(config_data)

    return settings


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Smoothing settings
    if env_prop := os.environ.get("KSMOOTH_SMOOTHED_PROPERTY"):
        config_data.setdefault("smoothing", {})["smoothed_property"] = env_prop
    if env_policy := os.environ.get("KSMOOTH_EXTENT_POLICY"):
        config_data.setdefault("smoothing", {})["extent_policy"] = env_policy.lower()
    if env_invalid := os.environ.get("KSMOOTH_INVALID_DATA"):
        config_data.setdefault("smoothing", {})["invalid_data"] = env_invalid.lower()
    if env_divisor := os.environ.get("KSMOOTH_RESOLUTION_DIVISOR"):
        config_data.setdefault("smoothing", {})["resolution_divisor"] = float(env_divisor)

    # Logging settings
    if env_log := os.environ.get("KSMOOTH_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log
    if env_format := os.environ.get("KSMOOTH_LOG_FORMAT"):
        config_data.setdefault("logging", {})["format"] = env_format


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
