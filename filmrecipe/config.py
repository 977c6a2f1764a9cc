"""
Configuration management for FilmRecipe
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"

# ${NAME} references inside string values
_ENV_REFERENCE = re.compile(r'\$\{([^}]+)\}')


def _expand_env_vars(value: Any) -> Any:
    """Substitute ${VAR} references in string values. Unset variables stay as written."""
    if isinstance(value, str):
        return _ENV_REFERENCE.sub(lambda match: os.environ.get(match.group(1), match.group(0)), value)
    if isinstance(value, dict):
        return {key: _expand_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    return value

def _merge_defaults(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge a loaded config over the defaults so missing keys keep their default."""
    merged = dict(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_defaults(merged[key], value)
        else:
            merged[key] = value
    return merged

def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file

    Args:
        config_path: Path to config file. If None, uses the packaged config.yaml

    Returns:
        Configuration dictionary
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    config_path = Path(config_path)

    if not config_path.exists():
        logger.warning(f"Config file not found: {config_path}. Using defaults.")
        return get_default_config()

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}
        logger.info(f"Loaded configuration from {config_path}")
        config = _expand_env_vars(config)
        return _merge_defaults(get_default_config(), config)
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load config from {config_path}: {e}")
        return get_default_config()

def get_default_config() -> Dict[str, Any]:
    """
    Get default configuration values

    Returns:
        Default configuration dictionary
    """
    return {
        'preset': {
            'group': 'Film Recipe Wizard',
            'cluster': 'film-recipe-wizard',
            'version': '17.5',
            'process_version': '15.4',
            'name_prefix': 'Preset',
        },
        'export': {
            'include': {
                'basic': True,
                'hsl': True,
                'color_grading': True,
                'curves': True,
                'point_color': True,
                'grain': True,
                'vignette': True,
                'masks': True,
            },
        },
        'logging': {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'color': True,
        },
    }

def get_config_value(config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
    """Value at a dotted path such as ``export.include.masks``, or ``default`` if any step is missing."""
    node: Any = config
    for key in key_path.split('.'):
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return node
