"""
Consensus rewriting of one scaffold.

Positions and skip windows run over the concatenated scaffold sequence while
output is produced one line per input line, so the original wrapping is kept.
A multi-base reference allele opens a skip window that consumes the following
reference bases without emitting them. A call inside that window whose
reference allele is longer than the call that opened it extends the window by
its own span minus one; shorter or equal calls inside it are absorbed.
"""

import logging
from typing import Iterable, Iterator, Optional

from .models import ScaffoldSummary, VariantTable

logger = logging.getLogger(__name__)


def rewrite(
    scaffold_bases: Iterable[str],
    variant_table: VariantTable,
    scaffold_name: str,
    summary: Optional[ScaffoldSummary] = None,
) -> Iterator[str]:
    """
    Rewrite a scaffold's sequence lines with its variant calls applied.

    Args:
        scaffold_bases: Sequence lines without terminators
        variant_table: Calls for this scaffold keyed by 1-based position
        scaffold_name: Used in mismatch diagnostics
        summary: Optional counters updated as lines are produced

    Yields:
        One rewritten line per input line, each ending in a newline
    """
    pos = 0
    skip = 0
    window_span = 0

    for line in scaffold_bases:
        out = []
        for base in line:
            pos += 1

            if skip > 0:
                skip -= 1
                if summary is not None:
                    summary.skipped_bases += 1
                nested = variant_table.get(pos)
                if nested is not None:
                    if len(nested.ref_allele) > window_span:
                        skip += len(nested.ref_allele) - 1
                        if summary is not None:
                            summary.extended_windows += 1
                    elif summary is not None:
                        summary.absorbed += 1
                continue

            var = variant_table.get(pos)
            if var is None:
                out.append(base)
                continue

            if len(var.ref_allele) == 1 and var.ref_allele != base:
                logger.warning("%s:%d %s is not %s", scaffold_name, pos, base, var.ref_allele)
                if summary is not None:
                    summary.mismatches += 1

            if not var.is_deletion_marker:
                out.append(var.alt_allele)
                if summary is not None:
                    summary.substitutions += 1
            elif summary is not None:
                summary.deletions += 1

            skip = len(var.ref_allele) - 1
            window_span = len(var.ref_allele)

        rewritten = "".join(out)
        if summary is not None:
            summary.input_length += len(line)
            summary.output_length += len(rewritten)
        yield rewritten + "\n"
