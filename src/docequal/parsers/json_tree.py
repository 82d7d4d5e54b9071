"""
JSON parser: raw text → canonical value.

Numbers keep the literal text they were written with, so `1.0` and `1` stay
different values. Booleans and null become scalars of their own kind.
Duplicate keys within one object are rejected instead of silently merged.
"""

import json
import logging
from typing import Any

from docequal.domain.errors import ErrorCodes, MalformedInputError
from docequal.domain.model import Array, Object, Scalar, ScalarKind, Value

logger = logging.getLogger(__name__)


class _NumberLiteral(str):
    """Marks a number literal so it is not mistaken for a JSON string."""


class _DuplicateKeyError(ValueError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(key)


def _object_pairs(pairs: list[tuple[str, Any]]) -> Object:
    seen: set[str] = set()
    for key, _ in pairs:
        if key in seen:
            raise _DuplicateKeyError(key)
        seen.add(key)
    return Object(tuple((key, _to_value(value)) for key, value in pairs))


def _reject_constant(name: str) -> None:
    raise ValueError(f"{name} is not valid JSON")


def _to_value(raw: Any) -> Value:
    if isinstance(raw, (Object, Array, Scalar)):
        return raw
    if isinstance(raw, _NumberLiteral):
        return Scalar(str(raw), ScalarKind.NUMBER)
    if isinstance(raw, str):
        return Scalar(raw, ScalarKind.STRING)
    if raw is True:
        return Scalar("true", ScalarKind.BOOLEAN)
    if raw is False:
        return Scalar("false", ScalarKind.BOOLEAN)
    if raw is None:
        return Scalar("null", ScalarKind.NULL)
    if isinstance(raw, list):
        return Array(tuple(_to_value(item) for item in raw))
    raise TypeError(f"Unexpected JSON value type: {type(raw).__name__}")


def load_json(text: str, label: str = "JSON") -> Value:
    """
    Load raw JSON text into the canonical model.

    Args:
        text: Raw JSON contents
        label: Document label used in error messages

    Returns:
        Canonical value of the document root

    Raises:
        MalformedInputError: On invalid JSON or duplicate keys
    """
    if not isinstance(text, str) or not text.strip():
        raise MalformedInputError(
            ErrorCodes.EMPTY_INPUT,
            f"Cannot load blank {label} contents",
            document=label,
        )

    try:
        raw = json.loads(
            text,
            object_pairs_hook=_object_pairs,
            parse_int=_NumberLiteral,
            parse_float=_NumberLiteral,
            parse_constant=_reject_constant,
        )
    except json.JSONDecodeError as exc:
        raise MalformedInputError(
            ErrorCodes.MALFORMED_JSON,
            f"Cannot correctly load the {label} contents due to a deserialization failure: {exc.msg} "
            f"(line {exc.lineno}, column {exc.colno})",
            document=label,
            line=exc.lineno,
            column=exc.colno,
            offset=exc.pos,
        ) from exc
    except _DuplicateKeyError as exc:
        raise MalformedInputError(
            ErrorCodes.DUPLICATE_JSON_KEY,
            f"Cannot load the {label} contents: key '{exc.key}' appears more than once in the same object, "
            "please use unique JSON keys",
            document=label,
            key=exc.key,
        ) from exc
    except ValueError as exc:
        raise MalformedInputError(
            ErrorCodes.MALFORMED_JSON,
            f"Cannot correctly load the {label} contents: {exc}",
            document=label,
        ) from exc

    logger.debug(f"Loaded {label} document with root of type {type(raw).__name__}")
    return _to_value(raw)
