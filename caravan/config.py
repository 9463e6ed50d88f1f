"""Configuration management."""

from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError, model_validator


class ConfigError(RuntimeError):
    """Raised when a configuration file cannot be used."""


class RulesConfig(BaseModel):
    """Rules configuration."""

    pile_count: int = 3
    hand_size: int = 5

    # Every pile of a side must land in this range to win
    win_min: int = 21
    win_max: int = 26

    @model_validator(mode="after")
    def _check_ranges(self) -> "RulesConfig":
        if self.pile_count < 1:
            raise ValueError("pile_count must be at least 1")
        if self.hand_size < 0:
            raise ValueError("hand_size must not be negative")
        if self.win_min > self.win_max:
            raise ValueError("win_min must not exceed win_max")
        return self


class AIConfig(BaseModel):
    """Automated opponent configuration."""

    enabled: bool = True
    delay_min_ms: int = 600
    delay_max_ms: int = 1200
    strategy: str = "random"
    seed: int | None = None

    @model_validator(mode="after")
    def _check_delay(self) -> "AIConfig":
        if self.delay_min_ms < 0 or self.delay_min_ms > self.delay_max_ms:
            raise ValueError("need 0 <= delay_min_ms <= delay_max_ms")
        return self


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    show_hands: bool = False


class GameLogSettings(BaseModel):
    """Game log (JSONL) settings."""

    enabled: bool = False
    output_path: str = "logs"


class Config(BaseModel):
    """Root configuration."""

    rules: RulesConfig = RulesConfig()
    ai: AIConfig = AIConfig()
    logging: LoggingConfig = LoggingConfig()
    game_log: GameLogSettings = GameLogSettings()


def load_config(path: Path | str | None = None) -> Config:
    """Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses default config.

    Returns:
        Config object.

    Raises:
        ConfigError: If the file is not valid YAML or does not match the schema.
    """
    if path is None:
        return Config()

    config_path = Path(path)
    if not config_path.exists():
        return Config()

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not data:
        return Config()

    try:
        return Config(**data)
    except (TypeError, ValidationError) as e:
        raise ConfigError(f"Invalid config in {config_path}: {e}") from e
