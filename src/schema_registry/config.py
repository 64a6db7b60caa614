"""Configuration for the schema registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field


@dataclass
class RegistryConfig:
    """Registry behaviour."""
    # Raise DuplicateAssetError instead of ignoring re-registration
    strict_registration: bool = False


@dataclass
class StoreConfig:
    """Where a host keeps the serialized catalog."""
    # Catalog blob to load at start (YAML or JSON, chosen by suffix)
    definition_file: str | None = None

    # Where save_catalog_from_config() writes; defaults to definition_file
    output_file: str | None = None


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class Config:
    """Main configuration container."""
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict) -> Config:
        """Create config from dictionary."""
        return cls(
            registry=RegistryConfig(**data.get("registry", {})),
            store=StoreConfig(**data.get("store", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )

    @classmethod
    def from_yaml(cls, path: str) -> Config:
        """Load config from YAML file."""
        import yaml
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_json(cls, path: str) -> Config:
        """Load config from JSON file."""
        import json
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)


def configure_logging(config: Config) -> None:
    """Apply the logging section to the root logger."""
    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.INFO),
        format=config.logging.format,
    )
