"""Configuration loader for Maturion Core."""

import logging
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class AppInfo(BaseModel):
    """Application metadata."""

    name: str = "Maturion Core"
    version: str = "1.0.0"
    organization_id: str | None = None


class ChunkingConfig(BaseModel):
    """Sliding-window chunking configuration (characters)."""

    chunk_size: int = 2000
    overlap: int = 200
    max_chunks: int | None = None


class TierThreshold(BaseModel):
    """Minimum confidence and frequency a pattern needs to reach a tier."""

    min_confidence: float
    min_frequency: int


class ClassificationConfig(BaseModel):
    """Pattern strength tier thresholds, checked from critical downwards."""

    critical: TierThreshold = Field(
        default_factory=lambda: TierThreshold(min_confidence=90, min_frequency=10)
    )
    strong: TierThreshold = Field(
        default_factory=lambda: TierThreshold(min_confidence=75, min_frequency=5)
    )
    moderate: TierThreshold = Field(
        default_factory=lambda: TierThreshold(min_confidence=60, min_frequency=3)
    )


class FeedbackConfig(BaseModel):
    """Feedback weighting and pattern detection defaults."""

    default_multiplier: float = 1.0
    initial_confidence: float = 50.0
    initial_frequency: int = 1


class StorageConfig(BaseModel):
    """Storage paths configuration."""

    sqlite_path: str = "./db/maturion.db"
    documents_dir: str = "./data/documents"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig(BaseModel):
    """Root application configuration."""

    app: AppInfo = Field(default_factory=AppInfo)
    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    classification: ClassificationConfig = Field(default_factory=ClassificationConfig)
    feedback: FeedbackConfig = Field(default_factory=FeedbackConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: str | Path = "config.yaml") -> AppConfig:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Fully populated AppConfig instance.
    """
    load_dotenv()

    yaml_data: dict = {}
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file) as f:
            yaml_data = yaml.safe_load(f) or {}

    config = AppConfig(**yaml_data)

    # Environment overrides
    if log_level := os.getenv("MATURION_LOG_LEVEL"):
        config.logging.level = log_level
    if sqlite_path := os.getenv("MATURION_SQLITE_PATH"):
        config.storage.sqlite_path = sqlite_path
    if organization_id := os.getenv("MATURION_ORGANIZATION_ID"):
        config.app.organization_id = organization_id

    return config


def configure_logging(config: LoggingConfig) -> None:
    """Configure the root logger from a LoggingConfig.

    Called once by the entry script; library modules only create loggers.
    """
    logging.basicConfig(level=config.level.upper(), format=config.format)
