"""Load and validate a configuration document from disk."""
import json
import logging
from pathlib import Path
from typing import Any, Union

import yaml

from .config import ValidatedConfig
from .errors import ParseError
from .parser import DocumentParser
from .utils.logging_config import timed
from .validator import ConfigValidator

logger = logging.getLogger(__name__)

JSON_SUFFIXES = {".json"}


def load_document(path: Union[str, Path]) -> dict[str, Any]:
    """
    Read and decode a configuration file.

    ``.json`` files are decoded as JSON, anything else as YAML (a JSON
    document is also valid YAML).

    Raises:
        ParseError: If the file cannot be read or decoded into a mapping
    """
    path = Path(path)
    try:
        contents = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not read config file: {path}")
        raise ParseError(f"Could not read config file: {path}: {e}") from e

    try:
        if path.suffix.lower() in JSON_SUFFIXES:
            document = json.loads(contents)
        else:
            document = yaml.safe_load(contents)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        logger.error(f"Could not parse config file: {path}")
        raise ParseError(f"Could not parse config file {path}: {e}") from e

    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise ParseError(
            f"Config file {path} must contain a mapping, got {type(document).__name__}"
        )
    return document


def validate_document(document: Any) -> ValidatedConfig:
    """Parse an already decoded document and validate it."""
    parsed = DocumentParser().parse(document)
    return ConfigValidator().validate(parsed)


@timed("load_config")
def load_config(path: Union[str, Path]) -> ValidatedConfig:
    """
    Read, parse and validate a configuration file.

    Raises:
        ConfigError: On any read, decode or validation failure
    """
    logger.info(f"Loading config file {path}")
    return validate_document(load_document(path))
