"""
Main entry point for the assembly-statsx command-line tool.
Computes assembly statistics for each input file and writes the comparison
table, JSON exports and the interactive HTML report.
"""

import argparse
import logging
import multiprocessing
import sys
from pathlib import Path

from assembly_statsx.core.models import AssemblyOptions
from assembly_statsx.core.pipeline import run_pipeline
from assembly_statsx.utils.logging import setup_logging
from assembly_statsx.visualization.report_generator import (
    generate_report,
    write_summary_table,
    write_stats_json,
    write_results_json
)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="assembly-statsx: Assembly quality statistics for FASTA/FASTQ files.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    # Mandatory
    parser.add_argument("files", nargs="+", help="Assembly FASTA/FASTQ files (optionally .gz)")

    # Optional
    parser.add_argument("-o", "--output", default="./output", help="Output directory for results")

    # Configurable
    parser.add_argument("--min-length", type=int, default=0, help="Ignore sequences shorter than this (bp)")
    parser.add_argument("--threads", type=int, default=max(1, multiprocessing.cpu_count() - 1), help="Number of files processed in parallel")
    parser.add_argument("--no-report", action="store_true", help="Skip the HTML report")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print debug messages to the console")
    return parser

def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    output_dir = Path(args.output)
    log_queue, log_listener = setup_logging(output_dir, verbose=args.verbose)

    logger = logging.getLogger(__name__)
    try:
        logger.info("Starting assembly-statsx...")
        options = AssemblyOptions(min_length=args.min_length)

        results = run_pipeline(
            args.files,
            options,
            threads=args.threads,
            log_queue=log_queue
        )

        logger.info("Writing outputs...")
        write_summary_table(results, output_dir / 'assembly-stats.csv')
        write_stats_json(results, output_dir / 'assembly-stats.json')
        write_results_json(results, output_dir / 'assembly-results.json')
        if not args.no_report:
            generate_report(results, output_dir, run_parameters={
                'Input files': ', '.join(args.files),
                'Minimum length': args.min_length,
            })

        logger.info(f"Done. Results saved in {output_dir}")
    except Exception as e:
        logger.error(f"Critical failure: {e}")
        sys.exit(1)
    finally:
        log_listener.stop()

if __name__ == "__main__":
    main()
