"""
Error definitions for docequal.

Rules:
- No silent failures: every failing call raises exactly one error
- Parse and option errors abort before any comparison happens
- Only ComparisonMismatch carries a rendered diff report
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from docequal.compare.engine import Mismatch, MismatchKind


class DocEqualError(Exception):
    """
    Base error carrying a machine-readable code and context.

    Usage:
        raise MalformedInputError(ErrorCodes.MALFORMED_JSON, line=3, column=7)
    """

    def __init__(self, code: str, message: str | None = None, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(message if message is not None else self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """For logs/JSON serialization."""
        return {
            "code": self.code,
            "message": str(self),
            **self.context,
        }


class MalformedInputError(DocEqualError, ValueError):
    """One of the documents is not a valid instance of its declared format."""


class TransformExecutionError(DocEqualError):
    """The external transform step failed (bad program or runtime error)."""


class InvalidOptionsError(DocEqualError, ValueError):
    """Conflicting or out-of-range comparison options."""


class ComparisonMismatch(DocEqualError, AssertionError):
    """
    Both documents parsed but are not equivalent under the configured options.

    Subclasses AssertionError so test runners report it as a test failure.
    The `kind` and `path` attributes allow asserting on the shape of the
    failure without matching the rendered report.
    """

    def __init__(self, mismatch: "Mismatch", report: str) -> None:
        self.mismatch = mismatch
        self.report = report
        super().__init__(
            ErrorCodes.COMPARISON_MISMATCH,
            report,
            kind=mismatch.kind.value,
            path=mismatch.path,
        )

    @property
    def kind(self) -> "MismatchKind":
        return self.mismatch.kind

    @property
    def path(self) -> str:
        return self.mismatch.path


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """Error code constants."""

    # === Parse ===
    MALFORMED_XML = "MALFORMED_XML"
    MALFORMED_JSON = "MALFORMED_JSON"
    MALFORMED_CSV = "MALFORMED_CSV"
    MIXED_XML_CONTENT = "MIXED_XML_CONTENT"
    DUPLICATE_JSON_KEY = "DUPLICATE_JSON_KEY"
    EMPTY_INPUT = "EMPTY_INPUT"

    # === Transform ===
    TRANSFORM_FAILED = "TRANSFORM_FAILED"
    MALFORMED_TRANSFORM_OUTPUT = "MALFORMED_TRANSFORM_OUTPUT"

    # === Options ===
    INVALID_OPTION = "INVALID_OPTION"
    UNKNOWN_OPTION = "UNKNOWN_OPTION"
    CONFLICTING_OPTIONS = "CONFLICTING_OPTIONS"

    # === Compare ===
    COMPARISON_MISMATCH = "COMPARISON_MISMATCH"
