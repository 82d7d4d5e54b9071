"""
Golden test runner.

Loads scenario directories, produces the actual document (read from disk or
transformed from input XML), and compares it with the expected document.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from docequal.assertions import assert_documents_equal, compare_documents
from docequal.compare.engine import ComparisonResult
from docequal.core.config import load_options
from docequal.domain.constants import (
    GOLDEN_ACTUAL_STEM,
    GOLDEN_EXPECTED_STEM,
    GOLDEN_INPUT_FILENAME,
    GOLDEN_OPTIONS_FILENAME,
    GOLDEN_TRANSFORM_FILENAME,
)
from docequal.domain.errors import DocEqualError
from docequal.domain.options import CompareOptions, Format
from docequal.transform.xslt import TransformExecutor, run_transform

logger = logging.getLogger(__name__)


def _find_document(scenario_path: Path, stem: str) -> tuple[Path, Format] | None:
    for fmt in Format:
        candidate = scenario_path / f"{stem}.{fmt.value}"
        if candidate.exists():
            return candidate, fmt
    return None


@dataclass
class GoldenScenario:
    """A golden test scenario."""
    name: str
    path: Path
    fmt: Format
    expected: str
    actual: str | None = None
    input_xml: str | None = None
    program: str | None = None
    options: CompareOptions = field(default_factory=CompareOptions)

    @property
    def is_transform(self) -> bool:
        return self.program is not None

    @classmethod
    def load(cls, scenario_path: Path) -> "GoldenScenario":
        """
        Load a scenario from a directory.

        Expected structure:
            scenario_path/
                expected.{xml,json,csv}
                actual.{xml,json,csv}      (or input.xml + transform.xslt)
                options.yaml (optional)
        """
        found = _find_document(scenario_path, GOLDEN_EXPECTED_STEM)
        if found is None:
            raise FileNotFoundError(f"Missing expected.{{xml,json,csv}} in {scenario_path}")
        expected_path, fmt = found

        actual: str | None = None
        input_xml: str | None = None
        program: str | None = None

        actual_path = scenario_path / f"{GOLDEN_ACTUAL_STEM}.{fmt.value}"
        input_path = scenario_path / GOLDEN_INPUT_FILENAME
        transform_path = scenario_path / GOLDEN_TRANSFORM_FILENAME

        if actual_path.exists():
            actual = actual_path.read_text(encoding="utf-8")
        elif input_path.exists() and transform_path.exists():
            input_xml = input_path.read_text(encoding="utf-8")
            program = transform_path.read_text(encoding="utf-8")
        else:
            raise FileNotFoundError(
                f"Missing {actual_path.name} or {GOLDEN_INPUT_FILENAME} + {GOLDEN_TRANSFORM_FILENAME} "
                f"in {scenario_path}"
            )

        # Load options (optional)
        options_path = scenario_path / GOLDEN_OPTIONS_FILENAME
        options = load_options(options_path) if options_path.exists() else CompareOptions()

        return cls(
            name=scenario_path.name,
            path=scenario_path,
            fmt=fmt,
            expected=expected_path.read_text(encoding="utf-8"),
            actual=actual,
            input_xml=input_xml,
            program=program,
            options=options,
        )


class GoldenRunner:
    """
    Run golden comparison scenarios.

    Usage:
        runner = GoldenRunner()
        for scenario in discover_scenarios(golden_dir):
            runner.run_scenario(scenario)
    """

    def __init__(self, executor: TransformExecutor | None = None):
        """
        Args:
            executor: Transform executor for transform scenarios (default: XSLT)
        """
        self.executor = executor

    def produce_actual(self, scenario: GoldenScenario) -> str:
        """Actual document text, transforming the input when needed."""
        if not scenario.is_transform:
            return scenario.actual or ""
        return run_transform(
            scenario.program,
            scenario.input_xml,
            scenario.fmt,
            scenario.options,
            self.executor,
        )

    def run_scenario(self, scenario: GoldenScenario, assert_match: bool = True) -> ComparisonResult:
        """
        Run a single golden scenario.

        Args:
            scenario: The scenario to run
            assert_match: Whether to assert match (raise on failure)

        Returns:
            ComparisonResult of expected against actual

        Raises:
            ComparisonMismatch: When assert_match and the documents differ
        """
        actual = self.produce_actual(scenario)
        logger.debug(f"Running golden scenario {scenario.name} ({scenario.fmt.value})")

        if assert_match:
            assert_documents_equal(
                scenario.expected,
                actual,
                scenario.fmt,
                scenario.options.copy(),
                method_name=f"golden scenario {scenario.name}",
            )
            return ComparisonResult()

        return compare_documents(scenario.expected, actual, scenario.fmt, scenario.options.copy())[2]

    def generate_expected(self, scenario: GoldenScenario) -> Path:
        """
        Write the produced actual document as the scenario's expected file.

        WARNING: This should only be used to initialize golden files,
        not in CI. The generated files should be manually reviewed.

        Returns:
            Path of the written expected file
        """
        actual = self.produce_actual(scenario)
        expected_path = scenario.path / f"{GOLDEN_EXPECTED_STEM}.{scenario.fmt.value}"
        expected_path.write_text(actual, encoding="utf-8")
        return expected_path


def discover_scenarios(golden_dir: Path) -> list[GoldenScenario]:
    """
    Discover all golden scenarios in a directory.

    Args:
        golden_dir: Path to golden tests directory

    Returns:
        List of GoldenScenario objects sorted by name
    """
    scenarios = []

    for scenario_path in golden_dir.iterdir():
        if not scenario_path.is_dir() or scenario_path.name.startswith(("_", ".")):
            continue
        try:
            scenarios.append(GoldenScenario.load(scenario_path))
        except (OSError, DocEqualError) as e:
            logger.warning(f"Failed to load scenario {scenario_path}: {e}")

    return sorted(scenarios, key=lambda s: s.name)
