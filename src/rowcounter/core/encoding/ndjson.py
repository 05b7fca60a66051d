"""NDJSON encoder for published metric samples."""

import json
from collections.abc import Iterable

from rowcounter.core.models import MetricSample


def encode_metrics(samples: Iterable[MetricSample]) -> str:
    """Encode metric samples to newline-delimited JSON.

    Args:
        samples: An iterable of MetricSample objects.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no samples.
    """
    lines = [
        json.dumps(
            {
                "name": sample.name,
                "timestamp": sample.timestamp,
                "value": sample.value,
                "labels": sample.labels,
            }
        )
        for sample in samples
    ]
    if not lines:
        return ""
    return "\n".join(lines) + "\n"
