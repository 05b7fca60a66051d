"""HTTP report retrieval adapter."""

from rowcounter.adapters.http.fetcher import (
    DEFAULT_TIMEOUT,
    ReportFetcher,
    basic_auth_header,
    build_report_path,
    build_url,
    check_port,
    check_protocol,
)

__all__ = [
    "DEFAULT_TIMEOUT",
    "ReportFetcher",
    "basic_auth_header",
    "build_report_path",
    "build_url",
    "check_port",
    "check_protocol",
]
