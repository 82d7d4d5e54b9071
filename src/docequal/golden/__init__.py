"""
Golden scenarios: file-based regression comparisons.

Each scenario directory holds an expected document and either an actual
document or an input XML with a transform program.
"""

from .runner import GoldenRunner, GoldenScenario, discover_scenarios

__all__ = ["GoldenRunner", "GoldenScenario", "discover_scenarios"]
