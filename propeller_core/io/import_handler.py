"""
Import functionality for propeller designs and airfoil coordinate files.

Handles loading from JSON with format detection and version validation.
"""

import json
from pathlib import Path
from typing import Tuple
import logging
import warnings

import numpy as np
from numpy.typing import NDArray

from .schema import (
    check_version_compatibility, validate_schema, is_wrapped_record, VersionCompatibility
)
from ..geometry.airfoil import detect_and_parse
from ..geometry.propeller import PropellerParams, generate_design_id

logger = logging.getLogger(__name__)


class InvalidFormat(ValueError):
    """Raised when import fails due to an unrecognized or malformed record."""
    pass


class DesignImportWarning(UserWarning):
    """Warning issued when import has non-fatal issues."""
    pass


def design_from_record(data, strict: bool = False) -> Tuple[PropellerParams, list]:
    """
    Build a design from an export wrapper or a bare parameter record.

    Imported designs always receive a fresh id.

    Args:
        data: Decoded JSON value
        strict: If True, raise on any version warning

    Returns:
        Tuple of (PropellerParams, list of warning messages)

    Raises:
        InvalidFormat: If the record is not recognized or cannot be parsed
    """
    warnings_list = []

    is_valid, errors = validate_schema(data)
    if not is_valid:
        raise InvalidFormat(f"Schema validation failed: {'; '.join(errors)}")

    if is_wrapped_record(data):
        if "schema_version" in data:
            compat, version_msg = check_version_compatibility(data["schema_version"])
            if compat == VersionCompatibility.WARN_NEWER_MINOR:
                warnings_list.append(version_msg)
                if strict:
                    raise InvalidFormat(version_msg)
                warnings.warn(version_msg, DesignImportWarning)
        record = data["params"]
    else:
        record = data

    try:
        params = PropellerParams.from_dict(record)
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidFormat(f"Failed to parse design data: {e}")

    params.id = generate_design_id()
    return params, warnings_list


def import_json(path: Path, strict: bool = False) -> Tuple[PropellerParams, list]:
    """
    Import a propeller design from JSON.

    Args:
        path: Path to JSON file
        strict: If True, raise on any version warning

    Returns:
        Tuple of (PropellerParams, list of warning messages)

    Raises:
        InvalidFormat: If file is not valid JSON or has an invalid record
        FileNotFoundError: If file does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidFormat(f"Invalid JSON format: {e}")

    params, warnings_list = design_from_record(data, strict=strict)
    logger.info("Imported design %r from %s", params.name, path)
    return params, warnings_list


def import_airfoil(path: Path) -> NDArray[np.float64]:
    """
    Import airfoil coordinates from a Selig, Lednicer or CSV file.

    Returns:
        Array (N, 2) of (x, y) points, possibly empty
    """
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        content = f.read()

    points = detect_and_parse(content)
    logger.info("Imported %d airfoil points from %s", len(points), path)
    return points
