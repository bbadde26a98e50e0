#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("flakenotes")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. FLAKENOTES_CONFIG environment variable
    2. ~/.flakenotes/ directory
    """
    if 'FLAKENOTES_CONFIG' in os.environ:
        path = Path(os.environ['FLAKENOTES_CONFIG'])
        if path.exists():
            return path
        logger.debug(f"FLAKENOTES_CONFIG points at missing file {path}")

    config_dir = Path.home() / '.flakenotes'
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists():
            return path

    # No file yet: default location
    return config_dir / 'config.json'


def load_config():
    """Load configuration from file."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    # Load from file if it exists
    if config_path.exists():
        try:
            if config_path.suffix.lower() in ['.toml']:
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                import yaml
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                # Default to JSON format
                with open(config_path, 'r') as f:
                    file_config = json.load(f)

            # Merge file config with defaults
            config = merge_configs(config, file_config)
        except Exception as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    # Apply environment variable overrides
    config = apply_env_overrides(config)

    return config


def get_default_config():
    """Get default configuration."""
    return {
        "render": {
            "raw_details": True,        # Echo the raw notification in a <details> block
            "cross_origin": "omit",     # omit | error
        },
        "output": {
            "format": "jsonl",          # Structured format for `flakenotes parse`
        },
        "logging": {
            "level": "WARNING",
            "format": "%(levelname)s: %(message)s"
        },
    }


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            # Recursively merge nested dictionaries
            merged[key] = merge_configs(merged[key], value)
        else:
            # Override or add new key
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: FLAKENOTES_SECTION_KEY
    For example: FLAKENOTES_RENDER_RAW_DETAILS=false
    """
    env_prefix = "FLAKENOTES_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == 'FLAKENOTES_CONFIG':
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        # Convert value
        if value.lower() in ('true', '1', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', '0', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i : i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key is None:
                break

            # End of the env var: this is the key to set
            if i + best_match_len == len(key_parts):
                current_level[matched_key] = typed_value
                break

            if not isinstance(current_level[matched_key], dict):
                # Env var is longer than the config path
                break
            current_level = current_level[matched_key]
            i += best_match_len

    return config


def configure_logging(config, debug=False):
    """Apply the logging section of the config to the package logger."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            force=True,
        )
        logger.setLevel(logging.DEBUG)
        return

    settings = config.get('logging', {})
    level = logging.getLevelName(str(settings.get('level', 'WARNING')).upper())
    if not isinstance(level, int):
        logger.warning(f"Unknown log level {settings.get('level')!r}, using WARNING")
        level = logging.WARNING
    logger.setLevel(level)
    for handler in logging.getLogger().handlers:
        handler.setFormatter(logging.Formatter(settings.get('format', "%(levelname)s: %(message)s")))
