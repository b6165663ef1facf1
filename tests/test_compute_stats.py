import random
import pytest
from assembly_statsx.core.models import SequenceRecord, AssemblyOptions, AssemblyStats
from assembly_statsx.core.composition import analyze_composition, gc_percent
from assembly_statsx.core.binning import (
    bin_lengths,
    bin_gc_percents,
    gc_bin_index,
    length_bin_index,
    LENGTH_BIN_DEFS
)
from assembly_statsx.core.compute_stats import compute_stats, select_top_contigs

def make_record(id, sequence):
    return SequenceRecord(id=id, sequence=sequence)

def lengths_to_records(lengths):
    return [make_record(f"c{i}", 'A' * length) for i, length in enumerate(lengths)]

# Composition

def test_composition_counts():
    comp = analyze_composition('GCGCATAT')
    assert comp.gc_count == 4
    assert comp.non_ambiguous_count == 8
    assert comp.ambiguous_count == 0
    assert comp.gap_run_count == 0
    assert gc_percent(comp) == pytest.approx(50.0)

def test_composition_mixed_case():
    assert gc_percent(analyze_composition('gcgcATAT')) == pytest.approx(50.0)

def test_composition_all_n():
    comp = analyze_composition('NNNNNNNN')
    assert comp.ambiguous_count == 8
    assert comp.non_ambiguous_count == 0
    assert comp.gap_run_count == 1
    assert gc_percent(comp) == 0

def test_gap_runs():
    assert analyze_composition('AAANNNAAANAA').gap_run_count == 2
    assert analyze_composition('ACGTACGT').gap_run_count == 0
    assert analyze_composition('ACGNNNGT').gap_run_count == 1
    assert analyze_composition('ACGnnnGTnACG').gap_run_count == 2
    # Mixed-case runs are one run
    assert analyze_composition('ANnNA').gap_run_count == 1

def test_other_symbols_are_ignored():
    # R, Y, '-' and '*' are neither counted nor rejected
    comp = analyze_composition('GRY-*A')
    assert comp.gc_count == 1
    assert comp.non_ambiguous_count == 2
    assert comp.ambiguous_count == 0
    assert gc_percent(comp) == pytest.approx(50.0)

def test_other_symbols_split_gap_runs():
    assert analyze_composition('NN-NN').gap_run_count == 2

# Binning

def test_length_bin_labels_verbatim():
    assert [label for label, _, _ in LENGTH_BIN_DEFS] == [
        '<100', '100-500', '500-1k', '1k-5k', '5k-10k',
        '10k-50k', '50k-100k', '100k-500k', '500k-1M', '>=1M'
    ]

def test_length_bins_are_contiguous():
    for (_, _, high), (_, low, _) in zip(LENGTH_BIN_DEFS, LENGTH_BIN_DEFS[1:]):
        assert high == low
    assert LENGTH_BIN_DEFS[0][1] == 0

def test_length_bin_edges():
    assert LENGTH_BIN_DEFS[length_bin_index(0)][0] == '<100'
    assert LENGTH_BIN_DEFS[length_bin_index(99)][0] == '<100'
    assert LENGTH_BIN_DEFS[length_bin_index(100)][0] == '100-500'
    assert LENGTH_BIN_DEFS[length_bin_index(1000)][0] == '1k-5k'
    assert LENGTH_BIN_DEFS[length_bin_index(999_999)][0] == '500k-1M'
    assert LENGTH_BIN_DEFS[length_bin_index(2_000_000)][0] == '>=1M'

def test_bin_lengths():
    bins = bin_lengths([1000, 2_000_000, 50, 60, 4999])
    counts = {b.bin_label: b.count for b in bins}

    assert len(bins) == 10
    assert counts['<100'] == 2
    assert counts['1k-5k'] == 2
    assert counts['>=1M'] == 1
    assert sum(b.count for b in bins) == 5
    assert bins[0].min_len == 0 and bins[0].max_len == 100
    assert bins[-1].min_len == 1_000_000
    assert bins[-1].max_len == 2 ** 53 - 1

def test_gc_bin_index():
    assert gc_bin_index(0) == 0
    assert gc_bin_index(4.99) == 0
    assert gc_bin_index(5) == 1
    assert gc_bin_index(50) == 10
    assert gc_bin_index(99.9) == 19
    assert gc_bin_index(100) == 20
    # Floating-point overshoot is clamped
    assert gc_bin_index(100.0000001) == 20
    assert gc_bin_index(-0.1) == 0

def test_bin_gc_percents():
    bins = bin_gc_percents([50.0, 0.0, 100.0, 100.0])
    assert len(bins) == 21
    assert bins[0].bin_label == '0%'
    assert bins[20].bin_label == '100%'
    counts = {b.bin_label: b.count for b in bins}
    assert counts['50%'] == 1
    assert counts['0%'] == 1
    assert counts['100%'] == 2
    assert sum(b.count for b in bins) == 4

# Top contigs

def test_select_top_contigs_sorted_and_limited():
    records = lengths_to_records(range(1, 41))
    top = select_top_contigs(records)

    assert len(top) == 25
    assert top[0].length == 40
    assert top[0].id == 'c39'
    lengths = [t.length for t in top]
    assert lengths == sorted(lengths, reverse=True)

def test_select_top_contigs_ties_keep_input_order():
    records = [make_record('x', 'AA'), make_record('y', 'AAA'), make_record('z', 'AA'), make_record('x', 'AAA')]
    top = select_top_contigs(records)
    assert [(t.id, t.length) for t in top] == [('y', 3), ('x', 3), ('x', 2), ('z', 2)]

def test_select_top_contigs_fewer_than_k():
    top = select_top_contigs(lengths_to_records([5, 10]))
    assert [t.length for t in top] == [10, 5]

# Orchestrator

def test_single_sequence():
    records = [make_record('seq1', 'ACGT' * 250)]
    result = compute_stats(records, 'test.fa', AssemblyOptions())
    stats = result.stats

    assert stats.filename == 'test.fa'
    assert stats.num_sequences == 1
    assert stats.total_bases == 1000
    assert stats.n50 == 1000 and stats.l50 == 1
    assert stats.n100 == 1000 and stats.l100 == 1
    assert stats.largest == 1000 and stats.smallest == 1000
    assert stats.gc_percent == pytest.approx(50.0)
    counts = {b.bin_label: b.count for b in result.histogram_bins}
    assert counts['1k-5k'] == 1

def test_known_n50_dataset():
    # total 1500: N50=400, L50=2, N90=200, L90=4
    result = compute_stats(lengths_to_records([100, 200, 300, 400, 500]), 'test.fa')
    stats = result.stats

    assert stats.total_bases == 1500
    assert (stats.n50, stats.l50) == (400, 2)
    assert (stats.n90, stats.l90) == (200, 4)
    assert (stats.n100, stats.l100) == (100, 5)
    assert stats.avg_length == 300
    assert stats.median_length == 300

def test_median_even_count():
    stats = compute_stats(lengths_to_records([100, 200, 300, 400]), 'test.fa').stats
    assert stats.median_length == 250

def test_all_n_sequence():
    result = compute_stats([make_record('s1', 'NNNNNNNN')], 'test.fa')
    assert result.stats.gc_percent == 0
    assert result.stats.n_count == 8
    assert result.stats.gaps == 1
    counts = {b.bin_label: b.count for b in result.gc_histogram_bins}
    assert counts['0%'] == 1

def test_gc_is_base_weighted():
    # Per-contig GC: 100% (2 bases) and 0% (8 bases). Mean of percentages would be 50%,
    # the base-weighted value is 2 / 10 = 20%.
    records = [make_record('a', 'GG'), make_record('b', 'AAAAAAAA')]
    result = compute_stats(records, 'test.fa')
    assert result.stats.gc_percent == pytest.approx(20.0)
    counts = {b.bin_label: b.count for b in result.gc_histogram_bins}
    assert counts['100%'] == 1
    assert counts['0%'] == 1

def test_gaps_and_n_count_summed_over_records():
    records = [make_record('a', 'AAANNNAAANAA'), make_record('b', 'nnACGT')]
    stats = compute_stats(records, 'test.fa').stats
    assert stats.gaps == 3
    assert stats.n_count == 6

def test_histogram_counts_sum_to_sequence_count():
    records = lengths_to_records([1, 99, 100, 450, 700, 1200, 6000, 20000, 70000])
    records.append(make_record('gc', 'GCGCGCAT' * 10))
    result = compute_stats(records, 'test.fa')
    assert sum(b.count for b in result.histogram_bins) == len(records)
    assert sum(b.count for b in result.gc_histogram_bins) == len(records)

def test_cumulative_data():
    records = lengths_to_records([100, 200, 300])
    result = compute_stats(records, 'test.fa')
    data = result.cumulative_data

    assert [p.contig_length for p in data] == [300, 200, 100]
    for prev, nxt in zip(data, data[1:]):
        assert nxt.rank > prev.rank
        assert nxt.cumulative_bases > prev.cumulative_bases
    assert data[-1].cumulative_bases == result.stats.total_bases

def test_cumulative_data_downsampled_for_many_sequences():
    records = lengths_to_records([100 + i for i in range(1000)])
    result = compute_stats(records, 'test.fa')

    assert len(result.cumulative_data) == 500
    assert result.cumulative_data[-1].cumulative_bases == result.stats.total_bases
    assert len(result.top_contigs) == 25
    assert result.top_contigs[0].length == 1099

def test_n_value_points_in_result():
    result = compute_stats(lengths_to_records([100, 200, 300, 400, 500]), 'test.fa')
    assert [p.fraction for p in result.n_value_points] == list(range(10, 100, 10))
    n50 = next(p for p in result.n_value_points if p.label == 'N50')
    assert (n50.min_length, n50.l_value) == (result.stats.n50, result.stats.l50)

def test_empty_input():
    result = compute_stats([], 'empty.fa', AssemblyOptions(min_length=100))

    assert result.stats == AssemblyStats(filename='empty.fa')
    assert result.stats.num_sequences == 0
    assert result.stats.total_bases == 0
    assert result.stats.gc_percent == 0
    assert result.n_value_points == ()
    assert result.histogram_bins == ()
    assert result.gc_histogram_bins == ()
    assert result.cumulative_data == ()
    assert result.top_contigs == ()

def test_zero_length_records():
    records = [make_record('a', ''), make_record('b', '')]
    result = compute_stats(records, 'test.fa')
    assert result.stats.num_sequences == 2
    assert result.stats.total_bases == 0
    assert (result.stats.n50, result.stats.l50) == (0, 1)
    assert result.stats.n100 == 0
    counts = {b.bin_label: b.count for b in result.histogram_bins}
    assert counts['<100'] == 2

def test_negative_min_length_rejected():
    with pytest.raises(ValueError):
        AssemblyOptions(min_length=-1)

def test_result_to_dict_uses_interchange_keys():
    result = compute_stats(lengths_to_records([100, 200]), 'test.fa')
    data = result.to_dict()

    assert data['stats']['numSequences'] == 2
    assert data['stats']['gcPercent'] == 0
    assert data['nValuePoints'][0] == {'fraction': 10, 'minLength': 200, 'lValue': 1, 'label': 'N10'}
    assert data['histogramBins'][1]['binLabel'] == '100-500'
    assert data['cumulativeData'][-1]['cumulativeBases'] == 300
    assert data['topContigs'][0] == {'id': 'c1', 'length': 200}

def test_lengths_sorted_once(monkeypatch):
    import builtins
    import assembly_statsx.core.compute_stats as compute_module
    length_sorts = []

    def counting_sorted(iterable, key=None, reverse=False):
        if key is None:
            length_sorts.append(reverse)
        return builtins.sorted(iterable, key=key, reverse=reverse)

    monkeypatch.setattr(compute_module, 'sorted', counting_sorted, raising=False)
    result = compute_stats(lengths_to_records([300, 100, 400, 200]), 'test.fa')

    assert length_sorts == [True]
    assert result.stats.median_length == 250
    assert [p.contig_length for p in result.cumulative_data] == [400, 300, 200, 100]

def test_composition_matches_per_base_classification():
    rng = random.Random(3)
    sequence = ''.join(rng.choice('ACGTNacgtnRY-') for _ in range(20_000))
    upper = sequence.upper()
    expected_gc = sum(1 for b in upper if b in 'GC')
    expected_at = sum(1 for b in upper if b in 'AT')
    expected_runs = sum(1 for i, b in enumerate(upper) if b == 'N' and (i == 0 or upper[i - 1] != 'N'))

    comp = analyze_composition(sequence)
    assert comp.gc_count == expected_gc
    assert comp.non_ambiguous_count == expected_gc + expected_at
    assert comp.ambiguous_count == upper.count('N')
    assert comp.gap_run_count == expected_runs

def test_composition_of_long_sequence():
    # 1 Mb of sequence with 1000 gaps of 10 N each
    sequence = ('ACGTACGTGC' * 99 + 'N' * 10) * 1000
    comp = analyze_composition(sequence)
    assert comp.gc_count == 1000 * 99 * 6
    assert comp.non_ambiguous_count == 1000 * 990
    assert comp.ambiguous_count == 10_000
    assert comp.gap_run_count == 1000
