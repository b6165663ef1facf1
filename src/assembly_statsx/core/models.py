"""
Data models for assembly-statsx.
Defines the sequence record, run options, and the per-file result types.
"""

from dataclasses import dataclass, field, asdict
from typing import Tuple, Dict, Any

# Largest integer exactly representable as a JSON double; stands in for
# the open upper edge of the last length bin.
MAX_SAFE_INTEGER = 2 ** 53 - 1

@dataclass(frozen=True)
class SequenceRecord:
    """
    A single named sequence as produced by the parsers.
    """
    id: str
    sequence: str

@dataclass(frozen=True)
class AssemblyOptions:
    """
    Options applied to every input set in a run.
    """
    min_length: int = 0

    def __post_init__(self):
        if self.min_length < 0:
            raise ValueError(f"min_length must be >= 0, got {self.min_length}")

DEFAULT_OPTIONS = AssemblyOptions()

@dataclass(frozen=True)
class AssemblyStats:
    """
    Aggregate statistics for one input set. Every numeric field is zero for an empty set.
    """
    filename: str
    num_sequences: int = 0
    total_bases: int = 0
    avg_length: float = 0
    median_length: float = 0
    largest: int = 0
    smallest: int = 0
    n50: int = 0
    l50: int = 0
    n60: int = 0
    l60: int = 0
    n70: int = 0
    l70: int = 0
    n80: int = 0
    l80: int = 0
    n90: int = 0
    l90: int = 0
    n100: int = 0
    l100: int = 0
    gc_percent: float = 0
    n_count: int = 0
    gaps: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "numSequences": self.num_sequences,
            "totalBases": self.total_bases,
            "avgLength": self.avg_length,
            "medianLength": self.median_length,
            "largest": self.largest,
            "smallest": self.smallest,
            "n50": self.n50, "l50": self.l50,
            "n60": self.n60, "l60": self.l60,
            "n70": self.n70, "l70": self.l70,
            "n80": self.n80, "l80": self.l80,
            "n90": self.n90, "l90": self.l90,
            "n100": self.n100, "l100": self.l100,
            "gcPercent": self.gc_percent,
            "nCount": self.n_count,
            "gaps": self.gaps,
        }

@dataclass(frozen=True)
class NValuePoint:
    fraction: int
    min_length: int
    l_value: int
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {"fraction": self.fraction, "minLength": self.min_length, "lValue": self.l_value, "label": self.label}

@dataclass(frozen=True)
class HistogramBin:
    bin_label: str
    count: int
    min_len: int
    max_len: int

    def to_dict(self) -> Dict[str, Any]:
        return {"binLabel": self.bin_label, "count": self.count, "minLen": self.min_len, "maxLen": self.max_len}

@dataclass(frozen=True)
class GCHistogramBin:
    bin_label: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"binLabel": self.bin_label, "count": self.count}

@dataclass(frozen=True)
class CumulativePoint:
    rank: int
    contig_length: int
    cumulative_bases: int

    def to_dict(self) -> Dict[str, Any]:
        return {"rank": self.rank, "contigLength": self.contig_length, "cumulativeBases": self.cumulative_bases}

@dataclass(frozen=True)
class TopContigEntry:
    id: str
    length: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

@dataclass(frozen=True)
class AssemblyResult:
    """
    Statistics plus the derived series used for plotting, for a single input set.
    """
    stats: AssemblyStats
    n_value_points: Tuple[NValuePoint, ...] = field(default_factory=tuple)
    histogram_bins: Tuple[HistogramBin, ...] = field(default_factory=tuple)
    gc_histogram_bins: Tuple[GCHistogramBin, ...] = field(default_factory=tuple)
    cumulative_data: Tuple[CumulativePoint, ...] = field(default_factory=tuple)
    top_contigs: Tuple[TopContigEntry, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stats": self.stats.to_dict(),
            "nValuePoints": [p.to_dict() for p in self.n_value_points],
            "histogramBins": [b.to_dict() for b in self.histogram_bins],
            "gcHistogramBins": [b.to_dict() for b in self.gc_histogram_bins],
            "cumulativeData": [p.to_dict() for p in self.cumulative_data],
            "topContigs": [c.to_dict() for c in self.top_contigs],
        }
