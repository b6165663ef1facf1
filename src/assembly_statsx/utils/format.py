"""
Human-readable formatting of base counts and percentages.
"""

from typing import Union

Number = Union[int, float]

def format_count(n: Number) -> str:
    """
    Thousands-separated number; fractional values keep up to three decimals.
    """
    if float(n).is_integer():
        return f"{int(n):,}"
    return f"{n:,.3f}".rstrip('0').rstrip('.')

def format_bases(n: Number) -> str:
    """
    Convert a base-pair count to a human-readable string.

    1500000 -> "1.50 Mb", 150000 -> "150.0 Kb", 1500 -> "1,500 bp"
    """
    if n >= 1_000_000:
        return f"{n / 1_000_000:.2f} Mb"
    if n >= 10_000:
        return f"{n / 1_000:.1f} Kb"
    return f"{format_count(n)} bp"

def format_pct(n: Number) -> str:
    """
    Percentage with two decimals, e.g. 45.678 -> "45.68%".
    """
    return f"{n:.2f}%"
