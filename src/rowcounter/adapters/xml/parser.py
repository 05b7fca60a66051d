"""lxml adapter for parsing report exports and evaluating path queries."""

from lxml import etree

from rowcounter.core.errors import ParseError

# Reports come from a remote server: never resolve entities or fetch DTDs.
_PARSER_OPTIONS = {
    "resolve_entities": False,
    "no_network": True,
    "load_dtd": False,
    "huge_tree": False,
}


class ParsedReport:
    """A parsed report document.

    Only valid for the invocation that parsed it; implements the
    ReportDocument port used by the counting engine.
    """

    def __init__(self, tree: etree._ElementTree) -> None:
        self._tree = tree

    @property
    def root_tag(self) -> str:
        return self._tree.getroot().tag

    def evaluate_count(self, expr: str, **variables: str) -> float:
        """Evaluate a numeric path expression such as ``count(...)``.

        Raises:
            ParseError: If the expression is invalid or not numeric.
        """
        result = self._evaluate(expr, variables)
        if isinstance(result, bool) or not isinstance(result, (int, float)):
            raise ParseError(f"Expression {expr!r} did not evaluate to a number")
        return float(result)

    def evaluate_nodes(self, expr: str, **variables: str) -> list[etree._Element]:
        """Evaluate a node-set path expression, returning elements in document order."""
        result = self._evaluate(expr, variables)
        if not isinstance(result, list):
            raise ParseError(f"Expression {expr!r} did not evaluate to a node set")
        return [node for node in result if isinstance(node, etree._Element)]

    def attribute(self, node: etree._Element, name: str) -> str | None:
        return node.get(name)

    def _evaluate(self, expr: str, variables: dict[str, str]) -> object:
        try:
            return self._tree.xpath(expr, **variables)
        except etree.XPathError as e:
            raise ParseError(f"Invalid path expression {expr!r}: {e}") from e


def parse_report(raw: bytes) -> ParsedReport:
    """Parse a raw report body.

    Args:
        raw: Response body bytes.

    Returns:
        ParsedReport ready for path queries.

    Raises:
        ParseError: If the body is empty or not well-formed XML.
    """
    if not raw or not raw.strip():
        raise ParseError("Report body is empty")
    parser = etree.XMLParser(**_PARSER_OPTIONS)
    try:
        root = etree.fromstring(raw, parser=parser)
    except etree.XMLSyntaxError as e:
        raise ParseError(f"Report is not well-formed XML: {e}") from e
    return ParsedReport(etree.ElementTree(root))
