"""
Pytest fixtures for docequal tests.

Documents are small literal strings so every test shows its inputs.
"""

import textwrap
from pathlib import Path

import pytest

# =============================================================================
# Path Fixtures
# =============================================================================

@pytest.fixture
def golden_dir() -> Path:
    """Golden scenarios directory."""
    return Path(__file__).parent / "golden" / "scenarios"


# =============================================================================
# Document Fixtures
# =============================================================================

@pytest.fixture
def order_xml() -> str:
    """XML order with attributes and repeated lines."""
    return textwrap.dedent("""\
        <?xml version="1.0" encoding="UTF-8"?>
        <order id="42">
            <customer>ACME</customer>
            <line sku="A1"><qty>2</qty></line>
            <line sku="B7"><qty>1</qty></line>
        </order>
        """)


@pytest.fixture
def order_json() -> str:
    """JSON document with nested arrays and typed scalars."""
    return textwrap.dedent("""\
        {
          "id": 42,
          "customer": "ACME",
          "paid": true,
          "note": null,
          "lines": [
            {"sku": "A1", "qty": 2},
            {"sku": "B7", "qty": 1}
          ]
        }
        """)


@pytest.fixture
def people_csv() -> str:
    """CSV with header."""
    return "id,name,city\n1,Ann,Oslo\n2,Bob,Rome\n"


@pytest.fixture
def order_to_json_xslt() -> str:
    """XSLT turning the order XML into JSON text."""
    return textwrap.dedent("""\
        <xsl:stylesheet version="1.0" xmlns:xsl="http://www.w3.org/1999/XSL/Transform">
          <xsl:output method="text"/>
          <xsl:param name="currency" select="'EUR'"/>
          <xsl:template match="/order">
            <xsl:text>{"id": </xsl:text><xsl:value-of select="@id"/>
            <xsl:text>, "currency": "</xsl:text><xsl:value-of select="$currency"/>
            <xsl:text>", "lines": </xsl:text><xsl:value-of select="count(line)"/>
            <xsl:text>}</xsl:text>
          </xsl:template>
        </xsl:stylesheet>
        """)
