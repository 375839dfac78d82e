"""
Per-scaffold variant table construction.

The variant stream is read forward only. Each call to ``build_table`` consumes
the contiguous block of lines belonging to one scaffold and hands back the
first line of the next block as a read-ahead token, so the orchestrator can
walk the variant file in lock-step with the reference without rewinding.
"""

import logging
from typing import Optional, TextIO, Tuple

from .exceptions import VariantParseError
from .models import VariantRecord, VariantTable

logger = logging.getLogger(__name__)

# 0-based VCF columns used here
CHROM_COL = 0
POS_COL = 1
REF_COL = 3
ALT_COL = 4
INFO_COL = 7
MIN_FIELDS = INFO_COL + 1

NO_CALL_ALLELES = (".", "N")


class VariantStream:
    """Forward-only line reader over a variant file handle.

    Tracks the number of the line most recently read so parse errors can
    point at it. Blank lines are skipped.
    """

    def __init__(self, handle: TextIO):
        self._handle = handle
        self.line_number = 0

    def readline(self) -> str:
        """Return the next non-blank line, or "" when the stream is exhausted."""
        for line in self._handle:
            self.line_number += 1
            if line.strip():
                return line
        return ""

    def first_data_line(self) -> str:
        """Skip leading comment lines and return the first data line."""
        while True:
            line = self.readline()
            if not line.startswith("#"):
                return line


def variant_chrom(line: str) -> str:
    """Return the scaffold identity field of a variant line."""
    return line.split("\t", 1)[CHROM_COL].strip()


def scaffold_matches(line: str, scaffold_name: str) -> bool:
    """Check whether a variant line belongs to a scaffold.

    The CHROM field must equal the scaffold name exactly, so that
    ``scaffold_1`` never claims records for ``scaffold_10``.
    """
    if not line:
        return False
    return variant_chrom(line) == scaffold_name


def is_indel(info: str) -> bool:
    """True when the INFO field marks the call as an indel."""
    return info.startswith("INDEL")


def is_no_call(alt: str) -> bool:
    """True when the ALT field carries no substitution."""
    return alt in NO_CALL_ALLELES


def parse_variant_line(
    line: str,
    include_indels: bool,
    line_number: Optional[int] = None,
) -> Optional[VariantRecord]:
    """
    Parse and filter a single variant line.

    Args:
        line: Tab-separated variant record
        include_indels: Keep records whose INFO field starts with INDEL
        line_number: Position of the line in its file, for error messages

    Returns:
        VariantRecord, or None if the line is filtered out

    Raises:
        VariantParseError: If required fields are missing or POS is invalid
    """
    fields = line.rstrip("\r\n").split("\t")
    if len(fields) < MIN_FIELDS:
        raise VariantParseError(
            f"Invalid variant line - expected at least {MIN_FIELDS} columns, got {len(fields)}",
            line_number,
        )

    alternate = fields[ALT_COL]
    attributes = fields[INFO_COL]
    indel = is_indel(attributes)

    if indel and not include_indels:
        return None

    if not indel and is_no_call(alternate):
        return None

    # Only the first alternate allele is used
    alternate = alternate.split(",")[0]

    try:
        position = int(fields[POS_COL])
    except ValueError:
        raise VariantParseError(f"Invalid position '{fields[POS_COL]}'", line_number)
    if position < 1:
        raise VariantParseError(f"Position must be >= 1, got {position}", line_number)

    reference = fields[REF_COL]
    if not reference or not alternate:
        raise VariantParseError("Empty REF or ALT allele", line_number)

    return VariantRecord(position=position, ref_allele=reference, alt_allele=alternate)


def build_table(
    variant_stream: VariantStream,
    scaffold_name: str,
    first_line: str,
    include_indels: bool,
) -> Tuple[VariantTable, str]:
    """
    Load the variant calls for one scaffold.

    Args:
        variant_stream: Stream positioned just after ``first_line``
        scaffold_name: Scaffold whose records should be consumed
        first_line: Read-ahead token from the previous call
        include_indels: Keep indel records

    Returns:
        Tuple of (table, next_unconsumed_line). The second element is the
        first line belonging to another scaffold, or "" at end of stream.
        When ``first_line`` does not belong to this scaffold the stream is
        not read and ``first_line`` is returned unchanged.
    """
    table = VariantTable(scaffold_name)

    if not scaffold_matches(first_line, scaffold_name):
        return table, first_line

    line = first_line
    line_number = variant_stream.line_number
    while line and scaffold_matches(line, scaffold_name):
        record = parse_variant_line(line, include_indels, line_number)
        if record is not None:
            table.add(record)
        line = variant_stream.readline()
        line_number = variant_stream.line_number

    logger.debug(
        "%s: loaded %d variant calls (%d overwritten)",
        scaffold_name, len(table), table.overwritten,
    )
    return table, line
