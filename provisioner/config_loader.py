# provisioner/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the provisioner.

Handles loading settings from Pydantic model defaults, environment
variables, an optional YAML file and command-line arguments, applying the
following order of precedence (lowest first):
1. Pydantic Model Defaults
2. Environment Variables (loaded by BaseSettings)
3. YAML Configuration File
4. Command-Line Arguments
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from provisioner.config import DEFAULT_CONFIG_FILE
from provisioner.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively updates a dictionary `source` with values from another dictionary
    `overrides`. Nested dictionaries are merged key by key; any other value
    replaces the one in `source`. A None override never replaces an existing
    value.

    Parameters:
        source: Dict[str, Any]
            The dictionary to be updated. This dictionary gets modified in place.
        overrides: Dict[str, Any]
            The dictionary containing values to update or add to the `source`.

    Returns:
        Dict[str, Any]:
            The updated dictionary.
    """
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and key in source
            and isinstance(source[key], dict)
        ):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
        elif key not in source:
            source[key] = value
    return source


def _read_yaml_config(
    config_path: Path, logger_to_use: logging.Logger
) -> Dict[str, Any]:
    if not config_path.is_file():
        logger_to_use.debug(
            f"Configuration file {config_path} not found. Using defaults and environment."
        )
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger_to_use.error(
            f"Configuration error: could not parse {config_path}: {e}"
        )
        raise SystemExit(f"Configuration error: {e}") from e

    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        logger_to_use.warning(
            f"Configuration file {config_path} does not contain a mapping. Ignoring it."
        )
        return {}
    logger_to_use.info(f"Loaded configuration overrides from {config_path}")
    return yaml_data


def _cli_overrides(cli_args: argparse.Namespace) -> Dict[str, Any]:
    cli_arg_dict = vars(cli_args)
    mapped_cli_values: Dict[str, Any] = {}

    for cli_key, cli_value in cli_arg_dict.items():
        if cli_value is None:
            continue

        if cli_key == "maven_version":
            mapped_cli_values.setdefault("maven", {})["version"] = cli_value
        elif cli_key == "sonarqube_version":
            mapped_cli_values.setdefault("sonarqube", {})["version"] = cli_value
        elif cli_key == "log_file":
            mapped_cli_values["log_file"] = str(cli_value)
        elif cli_key == "install_root":
            mapped_cli_values["install_root"] = str(cli_value)

    return mapped_cli_values


def load_app_settings(
    cli_args: Optional[argparse.Namespace] = None,
    config_file_path: Union[str, Path] = DEFAULT_CONFIG_FILE,
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Loads application settings.

    A missing YAML file is not an error. A YAML file that is not a mapping
    is ignored with a warning.

    Args:
        cli_args: Parsed command-line arguments (from argparse).
        config_file_path: Path to the YAML configuration file.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        An instance of AppSettings with the fully resolved configuration.

    Raises:
        SystemExit: If the YAML cannot be parsed or the merged values fail
            validation.
    """
    logger_to_use = current_logger if current_logger else module_logger

    # Model defaults < environment variables
    current_values_dict = AppSettings().model_dump(exclude_defaults=False)

    yaml_overrides = _read_yaml_config(Path(config_file_path), logger_to_use)
    current_values_dict = _deep_update(current_values_dict, yaml_overrides)

    if cli_args:
        current_values_dict = _deep_update(
            current_values_dict, _cli_overrides(cli_args)
        )

    try:
        final_settings = AppSettings(**current_values_dict)
    except Exception as e:  # Catch Pydantic validation errors etc.
        logger_to_use.error(f"Configuration error: validation failed: {e}")
        raise SystemExit(f"Configuration error: {e}") from e

    logger_to_use.debug("Successfully loaded and validated application settings")
    return final_settings
