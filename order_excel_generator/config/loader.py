import json
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from ..exceptions import ConfigError
from .models import GeneratorConfig

logger = logging.getLogger(__name__)


def load_config(config_path: Optional[Union[str, Path]] = None) -> GeneratorConfig:
    """Loads the generator configuration from a JSON file, or the defaults when no path is given."""
    if config_path is None:
        return GeneratorConfig()
    logger.info(f"Loading configuration from: {config_path}")
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            raw_config = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Error loading configuration file {config_path}: {e}")
        raise ConfigError(f"Could not read configuration file {config_path}: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Configuration file {config_path} must contain a JSON object")
    try:
        config = GeneratorConfig(**raw_config)
    except ValidationError as e:
        logger.error(f"Invalid configuration in {config_path}: {e}")
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e
    logger.debug(f"Configuration loaded: {config.model_dump()}")
    return config
