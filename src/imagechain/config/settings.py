"""Configuration management for imagechain.

Loads settings from a YAML configuration file with environment variable
overrides (``IMAGECHAIN_`` prefix, ``__`` for nested sections). Supports
.env files.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from imagechain.domain.models import StabilizationPolicy, TreatmentStep

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/imagechain.yaml")


class CaptureConfig(BaseModel):
    device_index: int = Field(default=0, ge=0, description="OpenCV camera device index")
    resolution_width: int | None = Field(default=None, gt=0)
    resolution_height: int | None = Field(default=None, gt=0)
    stable: bool = Field(default=False, description="Use the 8-skip/20-retry preset")
    skip_frames: int | None = Field(
        default=None, ge=0, description="Warm-up reads; unset uses the mode default (5, or 8 when stable)"
    )
    retries: int | None = Field(
        default=None, ge=0, description="Validated reads; unset uses the mode default (15, or 20 when stable)"
    )
    validate_non_black: bool = Field(default=True)
    black_threshold: float = Field(default=5.0, ge=0)
    skip_delay: float = Field(default=0.03, ge=0)
    retry_delay: float = Field(default=0.05, ge=0)
    strict: bool = Field(default=False)
    read_retries: int = Field(default=3, ge=0, description="Empty-frame retries for plain reads")

    def resolution(self) -> tuple[int, int] | None:
        if self.resolution_width and self.resolution_height:
            return (self.resolution_width, self.resolution_height)
        return None

    def policy(self) -> StabilizationPolicy:
        """Stabilization policy described by this section."""
        timing = {
            "validate_non_black": self.validate_non_black,
            "black_threshold": self.black_threshold,
            "skip_delay": self.skip_delay,
            "retry_delay": self.retry_delay,
            "strict": self.strict,
        }
        counts = {
            name: value
            for name, value in (("skip_frames", self.skip_frames), ("retries", self.retries))
            if value is not None
        }
        if self.stable:
            return StabilizationPolicy.stable(**timing, **counts)
        return StabilizationPolicy(**timing, **counts)


class ChainConfig(BaseModel):
    steps: list[TreatmentStep] = Field(
        default_factory=list, description="Treatments applied when none are given on the CLI"
    )


class OutputConfig(BaseModel):
    directory: str = Field(default="image")
    extension: str = Field(default="jpg")
    save_intermediates: bool = Field(default=False)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for the imagechain system.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "IMAGECHAIN_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    capture: CaptureConfig = Field(default_factory=CaptureConfig)
    chain: ChainConfig = Field(default_factory=ChainConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # YAML values arrive as init kwargs; environment must win over them.
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: env vars > .env file > YAML file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    return Settings(**yaml_data)
