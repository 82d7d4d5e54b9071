"""Core services: configuration loading."""

from .config import load_options, options_from_mapping

__all__ = ["load_options", "options_from_mapping"]
