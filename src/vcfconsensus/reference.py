"""
Reference FASTA scaffold accumulation.

Sequence lines are buffered per scaffold exactly as they were wrapped in the
input, so the rewritten consensus keeps the reference's line layout.
"""

from typing import Iterator, Optional, TextIO

from .exceptions import ReferenceFormatError
from .models import Scaffold


def scaffold_name_from_header(header: str) -> str:
    """Return the scaffold identity from a FASTA header line.

    The identity is the first whitespace-delimited token after ``>``.
    """
    parts = header[1:].split(None, 1)
    if not parts:
        raise ReferenceFormatError(f"FASTA header without identifier: {header.rstrip()!r}")
    return parts[0]


def iter_scaffolds(handle: TextIO) -> Iterator[Scaffold]:
    """
    Yield one Scaffold per header line of a FASTA stream.

    Scaffolds without sequence lines are yielded with an empty line list.

    Raises:
        ReferenceFormatError: If sequence lines appear before the first header
    """
    current: Optional[Scaffold] = None
    line_number = 0

    for line in handle:
        line_number += 1

        if line.startswith(">"):
            if current is not None:
                yield current
            current = Scaffold(header=line, name=scaffold_name_from_header(line))
            continue

        sequence = line.rstrip("\r\n")
        if current is None:
            if not sequence.strip():
                continue
            raise ReferenceFormatError(
                f"Line {line_number}: sequence data before the first FASTA header"
            )
        current.lines.append(sequence)

    # Don't forget the last scaffold
    if current is not None:
        yield current
