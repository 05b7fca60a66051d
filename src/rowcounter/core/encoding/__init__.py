"""Encoders for published samples."""

from rowcounter.core.encoding.ndjson import encode_metrics

__all__ = ["encode_metrics"]
