"""XML report adapter."""

from rowcounter.adapters.xml.parser import ParsedReport, parse_report

__all__ = ["ParsedReport", "parse_report"]
