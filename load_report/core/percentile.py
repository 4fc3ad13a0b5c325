"""Percentile resolution over bucketed latency histograms.

Response times are recorded upstream as a sparse histogram mapping a latency
bucket (milliseconds, coarsened above a threshold) to the number of requests
that landed in it. The functions here walk that histogram to find the latency
at a given percentile.
"""

import math
from typing import Mapping

from ..utils.logging import get_logger

logger = get_logger(__name__)

# Percentiles shown in every response time table, in column order.
REPORT_PERCENTILES = (0.5, 0.6, 0.7, 0.8, 0.9, 0.95, 0.99, 1.0)


def format_number(value, precision: int = 0) -> str:
    """Format a number with thousands separators.

    Examples:
        >>> format_number(1234567)
        '1,234,567'
        >>> format_number(1234.5, precision=2)
        '1,234.50'
    """
    return f"{value:,.{precision}f}"


def target_rank(total_count: int, percent: float) -> int:
    """Return the 1-indexed rank of ``percent`` within ``total_count`` samples."""
    # Rounding first keeps 0.7 * 10 from ceiling to 8.
    return max(1, math.ceil(round(percent * total_count, 9)))


def response_time_percentile(
    response_times: Mapping[int, int],
    total_count: int,
    minimum: int,
    maximum: int,
    percent: float,
) -> int:
    """Return the latency at ``percent`` of the recorded responses.

    Buckets are walked in ascending order, accumulating counts, until the
    cumulative count reaches the target rank. When the histogram holds fewer
    samples than ``total_count`` and the rank is never reached, ``maximum`` is
    returned. With no requests at all, ``minimum`` is returned. A bucket key
    outside the observed ``[minimum, maximum]`` range (an artifact of bucket
    rounding) is clamped back into it.

    Args:
        response_times: Histogram of latency bucket to occurrence count.
        total_count: Number of requests the percentile is taken over.
        minimum: Smallest response time observed.
        maximum: Largest response time observed.
        percent: Target percentile in (0.0, 1.0].

    Returns:
        The latency value at the requested percentile.
    """
    if total_count <= 0:
        return minimum

    rank = target_rank(total_count, percent)

    cumulative = 0
    for bucket in sorted(response_times):
        cumulative += response_times[bucket]
        if cumulative >= rank:
            if minimum <= maximum:
                return min(max(bucket, minimum), maximum)
            return bucket

    logger.debug(
        "Histogram holds %d of %d samples, rank %d unreachable; using maximum %s",
        cumulative, total_count, rank, maximum,
    )
    return maximum


def calculate_response_time_percentile(
    response_times: Mapping[int, int],
    total_count: int,
    minimum: int,
    maximum: int,
    percent: float,
    precision: int = 0,
) -> str:
    """Resolve a percentile and format it for display."""
    value = response_time_percentile(response_times, total_count, minimum, maximum, percent)
    return format_number(value, precision)
