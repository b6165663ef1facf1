"""
Assembly statistics calculation utilities.
Includes length summaries, the Nx/Lx family, and cumulative-length curve data.
"""

import math
import numpy as np
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from assembly_statsx.core.models import NValuePoint, CumulativePoint

NX_THRESHOLDS = (50, 60, 70, 80, 90)
CURVE_FRACTIONS = (10, 20, 30, 40, 50, 60, 70, 80, 90)
MAX_CURVE_POINTS = 500

@dataclass(frozen=True)
class LengthStats:
    count: int
    total: int
    mean: float
    median: float
    largest: int
    smallest: int
    nx: Tuple[Tuple[int, int, int], ...]  # (x, Nx, Lx) for each of NX_THRESHOLDS
    n100: int
    l100: int

def calculate_nx(sorted_desc: Sequence[int], total: int, pct: float) -> Tuple[int, int]:
    """
    Calculate Nx and Lx from lengths sorted in descending order.

    The first contig at which the running sum reaches (>=) pct% of the total
    gives Nx (its length) and Lx (its 1-based rank).

    :param sorted_desc: Contig lengths, longest first.
    :param total: Sum of all lengths.
    :param pct: Percentage threshold, e.g. 50 for N50.
    :return: Tuple of (Nx, Lx).
    """
    threshold = total * (pct / 100)
    cumulative_sum = 0
    for i, length in enumerate(sorted_desc):
        cumulative_sum += length
        if cumulative_sum >= threshold:
            return length, i + 1
    # Only reachable through floating-point rounding of the threshold
    return sorted_desc[-1], len(sorted_desc)

def calculate_median(sorted_desc: Sequence[int]) -> float:
    """
    Median of lengths sorted in descending order; the mean of the two middle values for an even count.
    """
    sorted_asc = sorted_desc[::-1]
    n = len(sorted_asc)
    mid = n // 2
    if n % 2 == 1:
        return sorted_asc[mid]
    return (sorted_asc[mid - 1] + sorted_asc[mid]) / 2

def calculate_length_stats(sorted_desc: Sequence[int], total: int) -> LengthStats:
    """
    Calculate length statistics (count, mean, median, extremes, N50-N90 and N100).

    :param sorted_desc: Non-empty contig lengths, longest first.
    :param total: Sum of the lengths.
    :return: LengthStats for the set.
    """
    num_contigs = len(sorted_desc)

    nx = tuple((pct,) + calculate_nx(sorted_desc, total, pct) for pct in NX_THRESHOLDS)

    return LengthStats(
        count=num_contigs,
        total=total,
        mean=total / num_contigs,
        median=calculate_median(sorted_desc),
        largest=sorted_desc[0],
        smallest=sorted_desc[-1],
        nx=nx,
        # N100/L100 are by definition the smallest contig and the full count
        n100=sorted_desc[-1],
        l100=num_contigs
    )

def calculate_n_value_points(sorted_desc: Sequence[int], total: int) -> List[NValuePoint]:
    """
    Calculate the N10-N90 curve points.
    """
    points = []
    for pct in CURVE_FRACTIONS:
        n_value, l_value = calculate_nx(sorted_desc, total, pct)
        points.append(NValuePoint(fraction=pct, min_length=n_value, l_value=l_value, label=f"N{pct}"))
    return points

def build_cumulative_curve(sorted_desc: Sequence[int]) -> List[CumulativePoint]:
    """
    Calculate data for the cumulative assembly size curve (L-curve).

    :param sorted_desc: Contig lengths, longest first.
    :return: One point per contig with its rank, length and running total.
    """
    y = np.cumsum(np.asarray(sorted_desc, dtype=np.int64)).tolist()
    return [
        CumulativePoint(rank=i + 1, contig_length=int(length), cumulative_bases=cum)
        for i, (length, cum) in enumerate(zip(sorted_desc, y))
    ]

def downsample_curve(points: List[CumulativePoint], max_points: int = MAX_CURVE_POINTS) -> List[CumulativePoint]:
    """
    Reduce a cumulative curve to exactly max_points points, evenly spaced in rank.

    Indices are round(i / (max_points - 1) * (n - 1)) with halves rounded up,
    so the first and last points are always kept.

    :param points: Full curve from build_cumulative_curve.
    :param max_points: Maximum number of points to return.
    :return: The curve unchanged if it is short enough, else the sampled points.
    """
    n = len(points)
    if n <= max_points:
        return list(points)
    sampled = []
    for i in range(max_points):
        idx = math.floor(i / (max_points - 1) * (n - 1) + 0.5)
        sampled.append(points[idx])
    return sampled
