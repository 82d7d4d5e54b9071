"""
Transform-then-compare helpers.

The transform itself is delegated to a TransformExecutor; the default one
runs XSLT 1.0 programs with lxml. Any executor failure is surfaced as a
TransformExecutionError, distinct from a document mismatch.
"""

import logging
from collections.abc import Mapping
from typing import Protocol

from lxml import etree

from docequal.assertions import assert_documents_equal, load_document
from docequal.domain.errors import (
    ErrorCodes,
    MalformedInputError,
    TransformExecutionError,
)
from docequal.domain.options import CompareOptions, Format, resolve_options
from docequal.parsers.xml_tree import parse_xml_document

logger = logging.getLogger(__name__)

TRANSFORM_OUTPUT_LABEL = "XSLT output"


class TransformExecutor(Protocol):
    """Runs a transform program over an XML document."""

    def transform(self, program: str, input_xml: str, parameters: Mapping[str, str]) -> str:
        ...


class XsltTransformExecutor:
    """
    XSLT 1.0 executor backed by lxml.

    Parameters are passed as string parameters, so values need no XPath
    quoting.
    """

    def transform(self, program: str, input_xml: str, parameters: Mapping[str, str]) -> str:
        stylesheet = etree.XSLT(etree.fromstring(program.encode("utf-8")))
        document = etree.fromstring(input_xml.encode("utf-8"))
        result = stylesheet(
            document,
            **{name: etree.XSLT.strparam(str(value)) for name, value in parameters.items()},
        )
        return str(result)


def run_transform(
    program: str,
    input_xml: str,
    target: Format,
    options: CompareOptions | None = None,
    executor: TransformExecutor | None = None,
    parameters: Mapping[str, str] | None = None,
) -> str:
    """
    Transform XML and check the output loads in the target format.

    Args:
        program: Transform program (XSLT stylesheet for the default executor)
        input_xml: Raw input XML
        target: Format the output must be valid in
        options: Comparison options (CSV settings are used to load CSV output)
        executor: Transform executor (default: XsltTransformExecutor)
        parameters: Named string parameters for the program

    Returns:
        Output text of the transform

    Raises:
        MalformedInputError: Invalid input XML, or output invalid in the target format
        TransformExecutionError: The executor raised
    """
    target = Format(target)
    options = resolve_options(options)
    executor = executor or XsltTransformExecutor()
    parameters = dict(parameters or {})

    parse_xml_document(input_xml, "input XML")

    logger.debug(f"Running {type(executor).__name__} to {target.value}, parameters={sorted(parameters)}")
    try:
        output = executor.transform(program, input_xml, parameters)
    except Exception as exc:
        raise TransformExecutionError(
            ErrorCodes.TRANSFORM_FAILED,
            f"Transform to {target.value.upper()} failed: {exc}",
            executor=type(executor).__name__,
            target=target.value,
        ) from exc

    try:
        load_document(output, target, options, TRANSFORM_OUTPUT_LABEL)
    except MalformedInputError as exc:
        raise MalformedInputError(
            ErrorCodes.MALFORMED_TRANSFORM_OUTPUT,
            f"Transform output is not valid {target.value.upper()}: {exc}",
            target=target.value,
            cause=exc.code,
        ) from exc

    return output


def transform_xml_to_xml(
    program: str,
    input_xml: str,
    options: CompareOptions | None = None,
    executor: TransformExecutor | None = None,
    **parameters: str,
) -> str:
    return run_transform(program, input_xml, Format.XML, options, executor, parameters)


def transform_xml_to_json(
    program: str,
    input_xml: str,
    options: CompareOptions | None = None,
    executor: TransformExecutor | None = None,
    **parameters: str,
) -> str:
    return run_transform(program, input_xml, Format.JSON, options, executor, parameters)


def transform_xml_to_csv(
    program: str,
    input_xml: str,
    options: CompareOptions | None = None,
    executor: TransformExecutor | None = None,
    **parameters: str,
) -> str:
    return run_transform(program, input_xml, Format.CSV, options, executor, parameters)


def assert_transform_equal(
    program: str,
    input_xml: str,
    expected: str,
    target: Format,
    options: CompareOptions | None = None,
    executor: TransformExecutor | None = None,
    **parameters: str,
) -> None:
    """
    Transform input XML and assert the output equals the expected document.

    Raises:
        ComparisonMismatch: Output differs from the expected document
        TransformExecutionError: The executor raised
        MalformedInputError: Invalid input, expected document or output
    """
    target = Format(target)
    output = run_transform(program, input_xml, target, options, executor, parameters)
    assert_documents_equal(
        expected,
        output,
        target,
        options,
        method_name="assert_transform_equal",
        actual_label=f"{TRANSFORM_OUTPUT_LABEL} ({target.value.upper()})",
    )
