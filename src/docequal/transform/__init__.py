"""Transform-then-compare: run a program over XML, compare its output."""

from .xslt import (
    TransformExecutor,
    XsltTransformExecutor,
    assert_transform_equal,
    run_transform,
    transform_xml_to_csv,
    transform_xml_to_json,
    transform_xml_to_xml,
)

__all__ = [
    "TransformExecutor",
    "XsltTransformExecutor",
    "run_transform",
    "transform_xml_to_xml",
    "transform_xml_to_json",
    "transform_xml_to_csv",
    "assert_transform_equal",
]
