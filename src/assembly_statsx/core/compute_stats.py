"""
Statistics engine for assembly-statsx.
Combines composition, length statistics, histograms, the cumulative curve
and the top-contig ranking into one AssemblyResult per input set.
"""

import logging
from typing import List, Sequence

from assembly_statsx.core.models import (
    SequenceRecord,
    AssemblyOptions,
    AssemblyStats,
    AssemblyResult,
    TopContigEntry,
    DEFAULT_OPTIONS
)
from assembly_statsx.core.composition import analyze_composition, gc_percent
from assembly_statsx.core.binning import bin_lengths, bin_gc_percents
from assembly_statsx.utils.stats import (
    calculate_length_stats,
    calculate_n_value_points,
    build_cumulative_curve,
    downsample_curve
)

logger = logging.getLogger(__name__)

TOP_CONTIG_COUNT = 25

def select_top_contigs(records: Sequence[SequenceRecord], k: int = TOP_CONTIG_COUNT) -> List[TopContigEntry]:
    """
    Return the k longest records as (id, length) entries, longest first.
    Records of equal length keep their input order.
    """
    ranked = sorted(records, key=lambda r: len(r.sequence), reverse=True)
    return [TopContigEntry(id=r.id, length=len(r.sequence)) for r in ranked[:k]]

def compute_stats(
    records: Sequence[SequenceRecord],
    filename: str,
    options: AssemblyOptions = DEFAULT_OPTIONS
) -> AssemblyResult:
    """
    Compute assembly statistics and plot series for one set of records.

    Records are expected to be already filtered by options.min_length.
    An empty set yields all-zero statistics and empty series.

    :param records: Sequence records of one input file.
    :param filename: Display label for the input set.
    :param options: Options the records were filtered with.
    :return: AssemblyResult for the set.
    """
    if not records:
        logger.debug(f"{filename}: no sequences (min length {options.min_length}), returning empty result")
        return AssemblyResult(stats=AssemblyStats(filename=filename))

    lengths = []
    contig_gc_percents = []
    total_bases = 0
    total_gc = 0
    total_non_n = 0
    n_count = 0
    gaps = 0

    for record in records:
        length = len(record.sequence)
        lengths.append(length)
        total_bases += length

        comp = analyze_composition(record.sequence)
        total_gc += comp.gc_count
        total_non_n += comp.non_ambiguous_count
        n_count += comp.ambiguous_count
        gaps += comp.gap_run_count
        contig_gc_percents.append(gc_percent(comp))

    # Base-weighted over the whole set, not a mean of per-contig values
    overall_gc = (total_gc / total_non_n) * 100 if total_non_n > 0 else 0.0

    # Sorted once; every length-based series below reads this order
    sorted_desc = sorted(lengths, reverse=True)
    length_stats = calculate_length_stats(sorted_desc, total_bases)
    nx = {pct: (n_value, l_value) for pct, n_value, l_value in length_stats.nx}

    stats = AssemblyStats(
        filename=filename,
        num_sequences=length_stats.count,
        total_bases=total_bases,
        avg_length=length_stats.mean,
        median_length=length_stats.median,
        largest=length_stats.largest,
        smallest=length_stats.smallest,
        n50=nx[50][0], l50=nx[50][1],
        n60=nx[60][0], l60=nx[60][1],
        n70=nx[70][0], l70=nx[70][1],
        n80=nx[80][0], l80=nx[80][1],
        n90=nx[90][0], l90=nx[90][1],
        n100=length_stats.n100, l100=length_stats.l100,
        gc_percent=overall_gc,
        n_count=n_count,
        gaps=gaps
    )

    curve = build_cumulative_curve(sorted_desc)

    logger.debug(
        f"{filename}: {stats.num_sequences} sequences, {total_bases} bp, "
        f"N50 {stats.n50}, {len(curve)} curve points before sampling"
    )

    return AssemblyResult(
        stats=stats,
        n_value_points=tuple(calculate_n_value_points(sorted_desc, total_bases)),
        histogram_bins=tuple(bin_lengths(lengths)),
        gc_histogram_bins=tuple(bin_gc_percents(contig_gc_percents)),
        cumulative_data=tuple(downsample_curve(curve)),
        top_contigs=tuple(select_top_contigs(records))
    )
