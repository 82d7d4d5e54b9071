"""
Options configuration: YAML file → CompareOptions.

Example options.yaml:

    ignore_nodes: [timestamp, id]
    ignore_paths: ["/order/customer/note"]
    order: ignore
    normalize_numbers: true
    max_input_characters: 200
    csv:
      separator: ";"
      header: missing
      column_order: include
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from docequal.domain.errors import ErrorCodes, InvalidOptionsError
from docequal.domain.options import CompareOptions

logger = logging.getLogger(__name__)

# =============================================================================
# Keys
# =============================================================================

LIST_KEYS = {
    "ignore_nodes": CompareOptions.ignore_node,
    "ignore_columns": CompareOptions.ignore_column,
    "ignore_paths": CompareOptions.ignore_path,
}

SCALAR_KEYS = {
    "order",
    "row_order",
    "normalize_numbers",
    "max_input_characters",
    "report_scope",
    "report_format",
}

CSV_KEYS = {"separator", "newline", "header", "quote", "escape", "column_order"}


def _unknown(keys: set[str], allowed: set[str], section: str) -> None:
    unknown = sorted(keys - allowed)
    if unknown:
        raise InvalidOptionsError(
            ErrorCodes.UNKNOWN_OPTION,
            f"Unknown option(s) in {section}: {unknown}; allowed: {sorted(allowed)}",
            unknown=unknown,
        )


def options_from_mapping(mapping: Mapping[str, Any] | None) -> CompareOptions:
    """
    Build validated options from a plain mapping.

    Args:
        mapping: Parsed configuration (None or empty → default options)

    Returns:
        Validated CompareOptions

    Raises:
        InvalidOptionsError: Unknown keys, wrong types or out-of-range values
    """
    if mapping is None:
        return CompareOptions().validate()
    if not isinstance(mapping, Mapping):
        raise InvalidOptionsError(
            ErrorCodes.INVALID_OPTION,
            f"Options must be a mapping, got {type(mapping).__name__}",
        )

    _unknown(set(mapping), set(LIST_KEYS) | SCALAR_KEYS | {"csv"}, "options")

    options = CompareOptions()

    for key, add in LIST_KEYS.items():
        values = mapping.get(key) or []
        if not isinstance(values, list):
            raise InvalidOptionsError(
                ErrorCodes.INVALID_OPTION,
                f"Option '{key}' must be a list, got {values!r}",
                option=key,
            )
        for value in values:
            add(options, value)

    for key in SCALAR_KEYS & set(mapping):
        setattr(options, key, mapping[key])

    csv_settings = mapping.get("csv") or {}
    if not isinstance(csv_settings, Mapping):
        raise InvalidOptionsError(
            ErrorCodes.INVALID_OPTION,
            f"Option 'csv' must be a mapping, got {csv_settings!r}",
            option="csv",
        )
    _unknown(set(csv_settings), CSV_KEYS, "csv options")
    for key, value in csv_settings.items():
        setattr(options, key, value)

    return options.validate()


def load_options(path: Path | str) -> CompareOptions:
    """
    Load options from a YAML file.

    Raises:
        FileNotFoundError: When the file does not exist
        InvalidOptionsError: On invalid YAML or invalid options
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Options file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise InvalidOptionsError(
                ErrorCodes.INVALID_OPTION,
                f"Cannot read options file {path}: {exc}",
                path=str(path),
            ) from exc

    logger.debug(f"Loaded options from {path}")
    return options_from_mapping(data)
