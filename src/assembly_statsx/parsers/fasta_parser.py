"""
FASTA/FASTQ file parser for assembly-statsx.
Handles plain and gzip-compressed input and converts it to SequenceRecord lists.
"""

import gzip
import logging
import zlib
from pathlib import Path
from typing import List, TextIO, Tuple, Union

from Bio.SeqIO.FastaIO import SimpleFastaParser

from assembly_statsx.core.models import SequenceRecord

logger = logging.getLogger(__name__)

FASTQ_SUFFIXES = ('.fastq', '.fq')

class AssemblyParseError(Exception):
    """
    Base class for failures while reading an input file.
    """

class UnreadableSourceError(AssemblyParseError):
    """
    The input file could not be opened or read.
    """

class SequenceDecodeError(AssemblyParseError):
    """
    The input could be read but not decompressed, decoded, or parsed.
    """

def parse_fasta_text(handle: TextIO) -> List[SequenceRecord]:
    """
    Parse FASTA text into records.

    The id is the first whitespace-delimited token of the header. Multi-line
    sequences are joined, blank lines skipped and case preserved.
    Spaces inside sequence lines are removed by the Biopython parser.

    :param handle: Text handle positioned at the start of the FASTA content.
    :return: List of SequenceRecord objects in file order.
    """
    records = []
    for title, sequence in SimpleFastaParser(handle):
        tokens = title.split(None, 1)
        records.append(SequenceRecord(id=tokens[0] if tokens else '', sequence=sequence))
    return records

def parse_fastq_text(handle: TextIO) -> List[SequenceRecord]:
    """
    Parse FASTQ text into records, reading 4-line blocks (@id, sequence, +, quality).

    The id is the whole header line after '@'. Blank or stray lines where a
    header is expected are skipped. Only the sequence line is used; quality
    lines are never checked. Records with an empty sequence are dropped.

    :param handle: Text handle positioned at the start of the FASTQ content.
    :return: List of SequenceRecord objects in file order.
    """
    lines = handle.read().split('\n')
    records = []
    i = 0
    while i < len(lines):
        header = lines[i].rstrip()
        if not header.startswith('@'):
            i += 1
            continue
        sequence = lines[i + 1].rstrip() if i + 1 < len(lines) else ''
        if sequence:
            records.append(SequenceRecord(id=header[1:], sequence=sequence))
        i += 4
    return records

def display_name_for(path: Path) -> Tuple[str, bool, bool]:
    """
    Derive the display name and format flags from a file name.

    :param path: Input file path.
    :return: Tuple (display_name, is_gzipped, is_fastq).
    """
    name = path.name
    is_gz = name.lower().endswith('.gz')
    if is_gz:
        name = name[:-3]
    is_fastq = name.lower().endswith(FASTQ_SUFFIXES)
    return name, is_gz, is_fastq

def parse_assembly_file(path: Union[str, Path]) -> Tuple[str, List[SequenceRecord]]:
    """
    Read a FASTA or FASTQ file, decompressing it if it ends in .gz.

    :param path: Path to the input file.
    :return: Tuple of (display name without .gz, records).
    :raises UnreadableSourceError: If the file cannot be opened or read.
    :raises SequenceDecodeError: If decompression, decoding or parsing fails.
    """
    path = Path(path)
    display_name, is_gz, is_fastq = display_name_for(path)

    try:
        if is_gz:
            handle = gzip.open(path, 'rt', encoding='utf-8')
        else:
            handle = open(path, 'r', encoding='utf-8')
    except OSError as e:
        logger.error(f"Failed to open {path}: {e}")
        raise UnreadableSourceError(f"Cannot read {path}: {e}") from e

    try:
        with handle:
            records = parse_fastq_text(handle) if is_fastq else parse_fasta_text(handle)
    except (gzip.BadGzipFile, EOFError, zlib.error, ValueError) as e:
        # UnicodeDecodeError is a ValueError
        logger.error(f"Failed to decode {path}: {e}")
        raise SequenceDecodeError(f"Cannot decode {path}: {e}") from e
    except OSError as e:
        logger.error(f"Failed to read {path}: {e}")
        raise UnreadableSourceError(f"Cannot read {path}: {e}") from e

    logger.debug(f"Parsed {len(records)} {'FASTQ' if is_fastq else 'FASTA'} records from {path}")
    return display_name, records
