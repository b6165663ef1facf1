"""
Report generation module for assembly-statsx.
Writes the CSV comparison table, JSON exports and the interactive HTML dashboard.
"""

import json
import logging
import plotly.graph_objects as go
import pandas as pd
from jinja2 import Environment, FileSystemLoader, select_autoescape
from pathlib import Path
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence

from assembly_statsx.core.models import AssemblyResult, AssemblyStats
from assembly_statsx.utils.format import format_bases, format_count, format_pct

logger = logging.getLogger(__name__)

class Metric(NamedTuple):
    label: str
    get_value: Callable[[AssemblyStats], str]
    get_raw: Callable[[AssemblyStats], float]
    higher_is_better: bool

def _nl_metrics(x: int) -> List[Metric]:
    return [
        Metric(f'N{x}', lambda s: format_bases(getattr(s, f'n{x}')), lambda s: getattr(s, f'n{x}'), True),
        Metric(f'L{x}', lambda s: format_count(getattr(s, f'l{x}')), lambda s: getattr(s, f'l{x}'), False),
    ]

METRICS: List[Metric] = [
    Metric('Filename', lambda s: s.filename, lambda s: 0, False),
    Metric('Sequences', lambda s: format_count(s.num_sequences), lambda s: s.num_sequences, False),
    Metric('Total Bases', lambda s: format_bases(s.total_bases), lambda s: s.total_bases, True),
    Metric('Average Length', lambda s: format_bases(s.avg_length), lambda s: s.avg_length, True),
    Metric('Median Length', lambda s: format_bases(s.median_length), lambda s: s.median_length, True),
    Metric('Largest', lambda s: format_bases(s.largest), lambda s: s.largest, True),
    Metric('Smallest', lambda s: format_bases(s.smallest), lambda s: s.smallest, False),
    *[m for x in (50, 60, 70, 80, 90, 100) for m in _nl_metrics(x)],
    Metric('GC%', lambda s: format_pct(s.gc_percent), lambda s: s.gc_percent, False),
    Metric('N-bases', lambda s: format_count(s.n_count), lambda s: s.n_count, False),
    Metric('Gaps', lambda s: format_count(s.gaps), lambda s: s.gaps, False),
]

def find_best_index(results: Sequence[AssemblyResult], metric: Metric) -> int:
    """
    Index of the best file for a metric, or -1 for single-file runs and non-numeric rows.
    """
    if len(results) <= 1 or metric.label == 'Filename':
        return -1
    raws = [metric.get_raw(r.stats) for r in results]
    best_idx = 0
    for i in range(1, len(raws)):
        if (raws[i] > raws[best_idx]) if metric.higher_is_better else (raws[i] < raws[best_idx]):
            best_idx = i
    return best_idx

def best_index_by_n50(results: Sequence[AssemblyResult]) -> int:
    if len(results) <= 1:
        return -1
    best_idx = 0
    for i, r in enumerate(results):
        if r.stats.n50 > results[best_idx].stats.n50:
            best_idx = i
    return best_idx

def build_summary_table(results: Sequence[AssemblyResult]) -> pd.DataFrame:
    """
    Build the metric-by-file comparison table with formatted values.

    :param results: One AssemblyResult per input file.
    :return: DataFrame with a 'Metric' column and one column per file.
    """
    rows = [[m.label] + [m.get_value(r.stats) for r in results] for m in METRICS]
    # Files may share a display name; DataFrame columns tolerate duplicates
    columns = ['Metric'] + [r.stats.filename for r in results]
    return pd.DataFrame(rows, columns=columns)

def write_summary_table(results: Sequence[AssemblyResult], output_path: Path):
    df = build_summary_table(results)
    df.to_csv(output_path, index=False, encoding='utf-8')
    logger.debug(f"Wrote summary table to {output_path}")

def write_stats_json(results: Sequence[AssemblyResult], output_path: Path):
    """
    Write the per-file statistics records as a JSON array.
    """
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump([r.stats.to_dict() for r in results], f, indent=2)
    logger.debug(f"Wrote statistics JSON to {output_path}")

def write_results_json(results: Sequence[AssemblyResult], output_path: Path):
    """
    Write full results, including all plot series, as a JSON array.
    """
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump([r.to_dict() for r in results], f, indent=2)
    logger.debug(f"Wrote results JSON to {output_path}")

def build_figures(results: Sequence[AssemblyResult]) -> Dict[str, str]:
    """
    Build the Plotly figures for the dashboard.

    :param results: One AssemblyResult per input file.
    :return: Mapping of plot name to Plotly JSON.
    """
    # Length histogram
    fig_hist = go.Figure()
    for r in results:
        fig_hist.add_trace(go.Bar(
            x=[b.bin_label for b in r.histogram_bins],
            y=[b.count for b in r.histogram_bins],
            name=r.stats.filename
        ))
    fig_hist.update_layout(title="Contig Length Distribution", xaxis_title="Length (bp)", yaxis_title="Count", barmode='group')

    # N-value curve
    fig_n = go.Figure()
    for r in results:
        fig_n.add_trace(go.Scatter(
            x=[p.label for p in r.n_value_points],
            y=[p.min_length for p in r.n_value_points],
            mode='lines+markers',
            name=r.stats.filename,
            text=[f"L{p.fraction}: {p.l_value}" for p in r.n_value_points],
            hoverinfo='text+x+y'
        ))
    fig_n.update_layout(title="N-Value Curve", xaxis_title="Nx", yaxis_title="Contig Length (bp)")

    # Cumulative length (L-curve)
    fig_cum = go.Figure()
    for r in results:
        fig_cum.add_trace(go.Scatter(
            x=[p.rank for p in r.cumulative_data],
            y=[p.cumulative_bases for p in r.cumulative_data],
            mode='lines',
            name=r.stats.filename
        ))
    fig_cum.update_layout(title="Cumulative Assembly Length", xaxis_title="Contig rank", yaxis_title="Cumulative Bases")

    # Top contigs
    fig_top = go.Figure()
    for r in results:
        fig_top.add_trace(go.Bar(
            x=[c.id for c in r.top_contigs],
            y=[c.length for c in r.top_contigs],
            name=r.stats.filename
        ))
    fig_top.update_layout(title="Top 25 Contigs by Length", xaxis_title="Contig", yaxis_title="Length (bp)")

    # GC distribution
    fig_gc = go.Figure()
    for r in results:
        fig_gc.add_trace(go.Bar(
            x=[b.bin_label for b in r.gc_histogram_bins],
            y=[b.count for b in r.gc_histogram_bins],
            name=r.stats.filename
        ))
    fig_gc.update_layout(title="GC Content Distribution", xaxis_title="GC-content (%)", yaxis_title="Count", barmode='group')

    return {
        'length_hist_json': fig_hist.to_json(),
        'n_curve_json': fig_n.to_json(),
        'cumulative_json': fig_cum.to_json(),
        'top_contigs_json': fig_top.to_json(),
        'gc_dist_json': fig_gc.to_json(),
    }

def generate_report(
    results: Sequence[AssemblyResult],
    output_dir: Path,
    run_parameters: Optional[Dict[str, Any]] = None
) -> Path:
    """
    Render the interactive HTML dashboard.

    :param results: One AssemblyResult per input file.
    :param output_dir: Directory to save report.html.
    :param run_parameters: Parameters shown in the report header.
    :return: Path of the written report.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    best_by_n50 = best_index_by_n50(results)
    table_rows = [
        {
            'label': m.label,
            'values': [m.get_value(r.stats) for r in results],
            'best': find_best_index(results, m),
        }
        for m in METRICS
    ]

    template_dir = Path(__file__).parent / 'templates'
    env = Environment(loader=FileSystemLoader(str(template_dir)), autoescape=select_autoescape(['html']))
    template = env.get_template('report.html')

    html_content = template.render(
        filenames=[r.stats.filename for r in results],
        summaries=[
            {
                'filename': r.stats.filename,
                'n50': format_bases(r.stats.n50),
                'total': format_bases(r.stats.total_bases),
                'gc': format_pct(r.stats.gc_percent),
                'largest': format_bases(r.stats.largest),
            }
            for r in results
        ],
        table_rows=table_rows,
        best_by_n50=best_by_n50,
        run_parameters=run_parameters if run_parameters else {},
        **build_figures(results)
    )

    report_path = output_dir / 'report.html'
    with open(report_path, 'w', encoding='utf-8') as f:
        f.write(html_content)
    logger.debug(f"Wrote HTML report to {report_path}")
    return report_path
