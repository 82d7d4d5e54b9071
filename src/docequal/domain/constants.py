"""
Domain constants: defaults shared by parsers, engine and report.
"""

# =============================================================================
# Report
# =============================================================================

# Maximum characters of each document block written to a failure report
DEFAULT_MAX_INPUT_CHARACTERS = 500

# Marker appended to a document block that exceeded the character limit
TRIMMED_MARKER = "...trimmed..."

# Maximum characters of a single value description in the summary lines
MAX_DESCRIPTION_CHARACTERS = 120

# =============================================================================
# Paths
# =============================================================================

ROOT_PATH = "/"

# Entry names used when an XML element cannot collapse to a plain scalar
XML_TEXT_ENTRY = "#text"
XML_ATTRIBUTE_PREFIX = "@"

# =============================================================================
# CSV
# =============================================================================

DEFAULT_CSV_SEPARATOR = ","
DEFAULT_CSV_NEWLINE = "\n"
DEFAULT_CSV_QUOTE = '"'
DEFAULT_CSV_ESCAPE = "\\"

# =============================================================================
# Golden scenarios
# =============================================================================
# scenario/
# ├── expected.{xml,json,csv}
# ├── actual.{xml,json,csv}       (or input.xml + transform.xslt)
# └── options.yaml                (optional)

GOLDEN_EXPECTED_STEM = "expected"
GOLDEN_ACTUAL_STEM = "actual"
GOLDEN_INPUT_FILENAME = "input.xml"
GOLDEN_TRANSFORM_FILENAME = "transform.xslt"
GOLDEN_OPTIONS_FILENAME = "options.yaml"
