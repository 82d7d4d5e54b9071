"""
Format parsers: raw text → canonical values.

- xml_tree: lxml-based element tree conversion
- json_tree: literal-preserving JSON loading
- csv_table: quote/escape-aware CSV tokenizer and writer
"""

from .csv_table import load_csv, render_csv
from .json_tree import load_json
from .xml_tree import load_xml

__all__ = [
    "load_xml",
    "load_json",
    "load_csv",
    "render_csv",
]
