"""
Scalar normalization for comparisons.

Default policy is strict text: scalars compare by their trimmed text, so
`1.0` and `1` differ. Number normalization is an explicit opt-in.

Also builds canonical sort keys used when element order is ignored.
"""

import re
from decimal import Decimal, InvalidOperation

from docequal.domain.model import Array, Object, Scalar, Table, Value
from docequal.domain.options import CompareOptions, Order


class ScalarNormalizer:
    """
    Normalize scalar text before equality checks.

    Usage:
        normalizer = ScalarNormalizer(normalize_numbers=True)
        normalizer.equal(Scalar("1.0"), Scalar("1"))  # True
    """

    # Plain decimal literal: 12, -3.5, .5, 1e3 (no thousands separators)
    NUMBER_PATTERN = re.compile(r'^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$')

    # Beyond this exponent numbers are written as digits + exponent
    MAX_FIXED_POINT_EXPONENT = 64

    def __init__(self, normalize_numbers: bool = False):
        """
        Args:
            normalize_numbers: Compare decimal-looking texts by value
        """
        self.normalize_numbers = normalize_numbers

    def normalize(self, text: str) -> str:
        """Trimmed text, with decimal literals normalized when enabled."""
        result = text.strip()
        if self.normalize_numbers and self.NUMBER_PATTERN.match(result):
            return self._normalize_number(result)
        return result

    def equal(self, expected: Scalar, actual: Scalar) -> bool:
        return self.normalize(expected.text) == self.normalize(actual.text)

    def _normalize_number(self, text: str) -> str:
        """
        Normalize a decimal literal to a canonical string.

        Prevents issues like 1.0 vs 1.00 without float imprecision. Works on
        the digit tuple so no context precision or exponent limit applies.
        """
        try:
            sign, digits, exponent = Decimal(text).as_tuple()
        except InvalidOperation:
            return text

        significant = "".join(str(digit) for digit in digits).lstrip("0")
        if not significant:
            return "0"
        stripped = significant.rstrip("0")
        exponent += len(significant) - len(stripped)
        prefix = "-" if sign else ""

        # 1e999999999 stays short instead of a billion zeros
        if abs(exponent) > self.MAX_FIXED_POINT_EXPONENT:
            return f"{prefix}{stripped}E{exponent}"
        return prefix + format(Decimal(f"{stripped}E{exponent}"), "f")


def canonical_text(value: Value, options: CompareOptions, normalizer: ScalarNormalizer) -> str:
    """
    Order-independent text of a value, used as sort key.

    Object entries are sorted by name, ignored node names are left out, and
    arrays are sorted too when their order is ignored.
    """
    if isinstance(value, Scalar):
        return f"{value.kind.value}:{normalizer.normalize(value.text)!r}"

    if isinstance(value, Object):
        parts = [
            f"{name!r}={canonical_text(child, options, normalizer)}"
            for name, child in sorted(value.entries, key=lambda entry: entry[0])
            if not options.is_name_ignored(name)
        ]
        return "{" + ",".join(parts) + "}"

    if isinstance(value, Array):
        items = [canonical_text(item, options, normalizer) for item in value.items]
        if options.order is Order.IGNORE:
            items.sort()
        return "[" + ",".join(items) + "]"

    if isinstance(value, Table):
        rows = [repr(row.cells) for row in value.rows]
        return f"table:{value.header!r}:" + ",".join(rows)

    raise TypeError(f"Unknown canonical value: {type(value).__name__}")
