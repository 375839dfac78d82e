"""
Per-scaffold summary reporting.
"""

from pathlib import Path
from typing import Union

import pandas as pd

from .exceptions import OutputFileError
from .models import ConsensusStats

SUMMARY_COLUMNS = [
    "scaffold",
    "input_length",
    "output_length",
    "variants",
    "substitutions",
    "deletions",
    "mismatches",
    "absorbed",
    "overwritten",
    "skipped_bases",
    "extended_windows",
]


def stats_to_dataframe(stats: ConsensusStats) -> pd.DataFrame:
    """One row per scaffold, in reference order."""
    rows = [summary.to_dict() for summary in stats.scaffolds]
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def write_summary(stats: ConsensusStats, path: Union[str, Path]) -> pd.DataFrame:
    """Write the per-scaffold summary as TSV and return the frame."""
    df = stats_to_dataframe(stats)
    try:
        df.to_csv(path, sep="\t", index=False)
    except OSError as e:
        raise OutputFileError(path, e.strerror or str(e)) from e
    return df


def format_summary(stats: ConsensusStats) -> str:
    """Short human-readable summary of a run."""
    lines = [
        f"Scaffolds processed:      {len(stats.scaffolds)}",
        f"Variant calls loaded:     {stats.variants}",
        f"Alleles substituted:      {stats.substitutions}",
        f"Deletion markers applied: {stats.deletions}",
        f"Bases skipped by indels:  {stats.skipped_bases}",
        f"Nested calls absorbed:    {stats.absorbed}",
        f"Reference mismatches:     {stats.mismatches}",
    ]
    if stats.leftover_variants:
        lines.append("Unconsumed variant records remain (see warning above)")
    return "\n".join(lines)
