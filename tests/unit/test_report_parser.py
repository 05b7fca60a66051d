"""Tests for the lxml report parser adapter."""

import pytest

from rowcounter.adapters.xml import ParsedReport, parse_report
from rowcounter.core.errors import ParseError
from rowcounter.core.ports import ReportDocument
from tests.reports import transactions_report

TRANSACTIONS = "/dashboardreport/data/businesstransactionsdashlet/transactions/transaction"


@pytest.mark.adapters
class TestParseReport:
    """Tests for parse_report()."""

    def test_returns_parsed_report(self) -> None:
        report = parse_report(transactions_report("A"))
        assert isinstance(report, ParsedReport)
        assert report.root_tag == "dashboardreport"

    def test_implements_report_document_port(self) -> None:
        """ParsedReport must satisfy the ReportDocument protocol."""
        assert isinstance(parse_report(b"<dashboardreport/>"), ReportDocument)

    def test_accepts_xml_declaration(self) -> None:
        raw = b'<?xml version="1.0" encoding="UTF-8"?>\n<dashboardreport/>'
        assert parse_report(raw).root_tag == "dashboardreport"

    @pytest.mark.parametrize("raw", [b"", b"   \n"])
    def test_empty_body_raises(self, raw: bytes) -> None:
        with pytest.raises(ParseError, match="empty"):
            parse_report(raw)

    def test_malformed_xml_raises(self) -> None:
        with pytest.raises(ParseError, match="well-formed"):
            parse_report(b"<dashboardreport><data>")

    def test_html_error_page_raises(self) -> None:
        with pytest.raises(ParseError):
            parse_report(b"<html><body>Login required<br></body></html>")


@pytest.mark.adapters
class TestEvaluate:
    """Tests for ParsedReport path evaluation."""

    def test_count_returns_float(self) -> None:
        report = parse_report(transactions_report("A", "B", "C"))
        result = report.evaluate_count(f"count({TRANSACTIONS})")
        assert result == 3.0
        assert isinstance(result, float)

    def test_count_of_missing_path_is_zero(self) -> None:
        report = parse_report(b"<other/>")
        assert report.evaluate_count(f"count({TRANSACTIONS})") == 0.0

    def test_count_with_variable(self) -> None:
        report = parse_report(transactions_report("group=A;x=1", "group=B;x=2"))
        expr = f"count({TRANSACTIONS}[contains(@group, $label)])"
        assert report.evaluate_count(expr, label="A") == 1.0

    def test_variable_with_quotes_is_safe(self) -> None:
        """Labels are bound as variables, never spliced into the expression."""
        report = parse_report(transactions_report("A"))
        expr = f"count({TRANSACTIONS}[contains(@group, $label)])"
        assert report.evaluate_count(expr, label="it's") == 0.0

    def test_nodes_in_document_order(self) -> None:
        report = parse_report(transactions_report("first", "second", "third"))
        nodes = report.evaluate_nodes(TRANSACTIONS)
        assert [report.attribute(n, "group") for n in nodes] == ["first", "second", "third"]

    def test_nodes_empty_is_valid(self) -> None:
        assert parse_report(transactions_report()).evaluate_nodes(TRANSACTIONS) == []

    def test_missing_attribute_is_none(self) -> None:
        report = parse_report(transactions_report(None))
        [node] = report.evaluate_nodes(TRANSACTIONS)
        assert report.attribute(node, "group") is None

    def test_count_of_node_set_raises(self) -> None:
        report = parse_report(transactions_report("A"))
        with pytest.raises(ParseError, match="number"):
            report.evaluate_count(TRANSACTIONS)

    def test_nodes_of_number_raises(self) -> None:
        report = parse_report(transactions_report("A"))
        with pytest.raises(ParseError, match="node set"):
            report.evaluate_nodes(f"count({TRANSACTIONS})")

    def test_invalid_expression_raises(self) -> None:
        report = parse_report(transactions_report("A"))
        with pytest.raises(ParseError, match="Invalid path expression"):
            report.evaluate_nodes("/dashboardreport[")
