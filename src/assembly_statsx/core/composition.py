"""
Base composition analysis for a single sequence.
Counts GC, unambiguous and N bases, and runs of N (gaps).
"""

import re
from dataclasses import dataclass

GAP_RUN = re.compile(r'[Nn]+')

@dataclass(frozen=True)
class Composition:
    gc_count: int = 0
    non_ambiguous_count: int = 0
    ambiguous_count: int = 0
    gap_run_count: int = 0

def analyze_composition(sequence: str) -> Composition:
    """
    Count base classes in a sequence, case-insensitively.

    G/C count as GC and unambiguous, A/T as unambiguous only, N as ambiguous.
    Any other symbol (IUPAC codes, gaps, masking characters) is ignored.

    :param sequence: Nucleotide sequence.
    :return: Composition counts for the sequence.
    """
    upper = sequence.upper()
    gc = upper.count('G') + upper.count('C')
    at = upper.count('A') + upper.count('T')

    return Composition(
        gc_count=gc,
        non_ambiguous_count=gc + at,
        ambiguous_count=upper.count('N'),
        gap_run_count=len(GAP_RUN.findall(sequence))
    )

def gc_percent(composition: Composition) -> float:
    """
    GC percentage of the unambiguous bases; 0 when there are none (e.g. an all-N sequence).
    """
    if composition.non_ambiguous_count == 0:
        return 0.0
    return composition.gc_count / composition.non_ambiguous_count * 100
