"""
Fixed-edge histograms over contig length and per-contig GC content.
"""

import math
from typing import Iterable, List, Tuple

from assembly_statsx.core.models import HistogramBin, GCHistogramBin, MAX_SAFE_INTEGER

# (label, inclusive lower edge, exclusive upper edge); labels are matched verbatim downstream
LENGTH_BIN_DEFS: Tuple[Tuple[str, int, float], ...] = (
    ('<100', 0, 100),
    ('100-500', 100, 500),
    ('500-1k', 500, 1_000),
    ('1k-5k', 1_000, 5_000),
    ('5k-10k', 5_000, 10_000),
    ('10k-50k', 10_000, 50_000),
    ('50k-100k', 50_000, 100_000),
    ('100k-500k', 100_000, 500_000),
    ('500k-1M', 500_000, 1_000_000),
    ('>=1M', 1_000_000, math.inf),
)

GC_BIN_WIDTH = 5
GC_BIN_COUNT = 100 // GC_BIN_WIDTH + 1

def length_bin_index(length: int) -> int:
    """
    Index of the length bin containing the given length.
    """
    for i, (_, low, high) in enumerate(LENGTH_BIN_DEFS):
        if low <= length < high:
            return i
    raise ValueError(f"Length must be non-negative, got {length}")

def bin_lengths(lengths: Iterable[int]) -> List[HistogramBin]:
    """
    Count contigs in each of the fixed log-scale length bins.

    :param lengths: Contig lengths.
    :return: Ten bins, in ascending order of length.
    """
    counts = [0] * len(LENGTH_BIN_DEFS)
    for length in lengths:
        counts[length_bin_index(length)] += 1

    return [
        HistogramBin(
            bin_label=label,
            count=count,
            min_len=low,
            max_len=MAX_SAFE_INTEGER if high == math.inf else int(high)
        )
        for (label, low, high), count in zip(LENGTH_BIN_DEFS, counts)
    ]

def gc_bin_index(gc_pct: float) -> int:
    """
    Index of the 5%-wide GC bin; exactly 100% folds into the last bin.
    """
    clamped = min(100.0, max(0.0, gc_pct))
    return min(GC_BIN_COUNT - 1, math.floor(clamped / GC_BIN_WIDTH))

def bin_gc_percents(gc_percents: Iterable[float]) -> List[GCHistogramBin]:
    """
    Count contigs in each GC bin ("0%", "5%", ..., "100%").

    :param gc_percents: Per-contig GC percentages.
    :return: 21 bins.
    """
    counts = [0] * GC_BIN_COUNT
    for gc_pct in gc_percents:
        counts[gc_bin_index(gc_pct)] += 1

    return [
        GCHistogramBin(bin_label=f"{i * GC_BIN_WIDTH}%", count=count)
        for i, count in enumerate(counts)
    ]
