"""
Configuration file loading utilities.

This module handles loading and parsing of the reporter's TOML file. The
options live in a ``[reporter]`` table; see validators.validate_reporter_config
for the keys it understands.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Union

from ..validation import ErrorSeverity, ValidationError, handle_config_error

logger = logging.getLogger(__name__)


def load_toml_file(file_path: Union[str, Path], description: str = "configuration file") -> Dict[str, Any]:
    """
    Load and parse a TOML file with error handling.

    Args:
        file_path: Path to the TOML file to load
        description: Human-readable description for error messages

    Returns:
        Parsed TOML data as a dictionary

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the file is malformed
    """
    file_path = Path(file_path)
    logger.info(f"Loading {description} from: {file_path}")

    if not file_path.exists():
        logger.error(f"{description} not found: {file_path}")
        raise FileNotFoundError(f"{description} not found: {file_path}")

    try:
        with open(file_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        handle_config_error(
            error=e,
            context=f"parsing {description}",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise


def load_reporter_table(file_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load the ``[reporter]`` table of a configuration file.

    Raises:
        ValidationError: If the file has no ``[reporter]`` table.
    """
    data = load_toml_file(file_path, "reporter configuration file")
    reporter = data.get("reporter")
    if not isinstance(reporter, dict):
        raise ValidationError(
            f"Missing [reporter] table in {file_path}",
            field_name="reporter",
        )
    return reporter
