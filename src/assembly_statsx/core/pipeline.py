"""
Multi-file pipeline for assembly-statsx.
Parses each input file, applies the minimum-length filter and computes statistics,
optionally fanning out one worker process per file.
"""

import logging
import multiprocessing
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from assembly_statsx.core.models import SequenceRecord, AssemblyOptions, AssemblyResult, DEFAULT_OPTIONS
from assembly_statsx.core.compute_stats import compute_stats
from assembly_statsx.parsers.fasta_parser import parse_assembly_file
from assembly_statsx.utils.logging import worker_configurer

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, float], None]

def filter_records(records: Sequence[SequenceRecord], min_length: int) -> List[SequenceRecord]:
    """
    Keep records whose sequence is at least min_length long.
    """
    if min_length <= 0:
        return list(records)
    return [r for r in records if len(r.sequence) >= min_length]

def process_file(path: Union[str, Path], options: AssemblyOptions = DEFAULT_OPTIONS) -> AssemblyResult:
    """
    Parse, filter and compute statistics for a single input file.

    :param path: FASTA/FASTQ file, optionally gzipped.
    :param options: Run options.
    :return: AssemblyResult for the file.
    """
    logger.info(f"Parsing {Path(path).name}...")
    filename, records = parse_assembly_file(path)

    filtered = filter_records(records, options.min_length)
    if options.min_length > 0:
        logger.info(f"  {len(filtered)} sequences (>={options.min_length}bp)")
    else:
        logger.info(f"  {len(filtered)} sequences")

    result = compute_stats(filtered, filename, options)
    stats = result.stats
    logger.info(f"  N50: {stats.n50}, Total: {stats.total_bases}bp, GC: {stats.gc_percent:.1f}%")
    return result

def run_pipeline(
    paths: Sequence[Union[str, Path]],
    options: AssemblyOptions = DEFAULT_OPTIONS,
    threads: int = 1,
    on_progress: Optional[ProgressCallback] = None,
    log_queue=None
) -> List[AssemblyResult]:
    """
    Compute statistics for every input file, returning results in input order.

    :param paths: Input files.
    :param options: Run options shared by all files.
    :param threads: Number of worker processes; 1 runs in-process.
    :param on_progress: Optional callback receiving (message, percent 0-100).
    :param log_queue: Logging queue from setup_logging, forwarded to workers.
    :return: One AssemblyResult per input file.
    """
    def report(message: str, pct: float):
        logger.debug(f"[{pct:.0f}%] {message}")
        if on_progress is not None:
            on_progress(message, pct)

    report('Validating...', 5)
    if not paths:
        raise ValueError('No files provided')

    num_files = len(paths)
    results: List[AssemblyResult] = []

    if threads <= 1 or num_files == 1:
        for i, path in enumerate(paths):
            report(f"Processing {Path(path).name}...", 5 + (i / num_files) * 85)
            results.append(process_file(path, options))
    else:
        processes = min(threads, num_files)
        initializer = worker_configurer if log_queue is not None else None
        initargs = (log_queue,) if log_queue is not None else ()
        with multiprocessing.Pool(processes, initializer=initializer, initargs=initargs) as pool:
            # imap keeps input order, so progress advances file by file
            jobs = pool.imap(_process_file_star, [(path, options) for path in paths])
            for i, path in enumerate(paths):
                report(f"Processing {Path(path).name}...", 5 + (i / num_files) * 85)
                results.append(next(jobs))

    report('Done!', 100)
    return results

def _process_file_star(args):
    return process_file(*args)
