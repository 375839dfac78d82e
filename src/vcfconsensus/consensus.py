"""
Stream orchestration for consensus generation.

Drives the reference FASTA scaffold by scaffold. For each scaffold the header
is echoed, the matching block of the variant stream is loaded into a table and
the sequence lines are rewritten. The read-ahead token returned by the table
builder is the only state carried from one scaffold to the next.
"""

import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Optional, TextIO, Union

from xopen import xopen

from .config import Config
from .exceptions import InputFileError, OutputFileError
from .models import ConsensusStats
from .reference import iter_scaffolds
from .rewriter import rewrite
from .variants import VariantStream, build_table, variant_chrom

logger = logging.getLogger(__name__)


def open_text(path: Union[str, Path], mode: str = "r") -> TextIO:
    """Open a plain or compressed text file.

    Raises:
        InputFileError: If the file cannot be opened for reading
    """
    if path is None:
        raise InputFileError(path, "no path configured")
    try:
        return xopen(path, mode)
    except OSError as e:
        if "r" in mode:
            raise InputFileError(path, e.strerror or str(e)) from e
        raise


def generate_consensus(
    reference_handle: TextIO,
    variant_handle: TextIO,
    output_handle: TextIO,
    config: Config,
) -> ConsensusStats:
    """
    Write the consensus FASTA for a reference and a co-sorted variant stream.

    Args:
        reference_handle: Reference FASTA text stream
        variant_handle: Variant text stream sorted in reference scaffold order
        output_handle: Destination for the consensus FASTA
        config: Run configuration; only ``include_indels`` is used here

    Returns:
        ConsensusStats with one summary per scaffold
    """
    stats = ConsensusStats()
    variant_stream = VariantStream(variant_handle)
    next_line = variant_stream.first_data_line()

    for scaffold in iter_scaffolds(reference_handle):
        output_handle.write(scaffold.header)

        table, next_line = build_table(
            variant_stream, scaffold.name, next_line, config.include_indels
        )

        summary = stats.start_scaffold(scaffold.name)
        summary.variants = len(table)
        summary.overwritten = table.overwritten

        for line in rewrite(scaffold.lines, table, scaffold.name, summary):
            output_handle.write(line)

        logger.debug(
            "%s: %d bp in, %d bp out, %d variants",
            scaffold.name, summary.input_length, summary.output_length, summary.variants,
        )

    if next_line:
        stats.leftover_variants = True
        logger.warning(
            "Variant file not empty: records remain from scaffold '%s' onwards "
            "(line %d), which was not matched in the reference",
            variant_chrom(next_line), variant_stream.line_number,
        )

    return stats


def generate_consensus_from_files(
    config: Config,
    output_handle: Optional[TextIO] = None,
) -> ConsensusStats:
    """
    Open the configured inputs and write the consensus.

    Both inputs are opened before any output is produced, so an unreadable
    file fails the run without writing a partial FASTA.

    Args:
        config: Run configuration with reference and variant paths
        output_handle: Destination stream; defaults to ``config.output_path``
            or standard output

    Returns:
        ConsensusStats for the run

    Raises:
        InputFileError: If either input cannot be opened
        OutputFileError: If the output path cannot be opened for writing
    """
    with ExitStack() as stack:
        reference_handle = stack.enter_context(open_text(config.reference_path))
        variant_handle = stack.enter_context(open_text(config.variant_path))

        if output_handle is None:
            if config.output_path is not None:
                try:
                    output_handle = stack.enter_context(xopen(config.output_path, "w"))
                except OSError as e:
                    raise OutputFileError(config.output_path, e.strerror or str(e)) from e
            else:
                output_handle = sys.stdout

        logger.info("Reference: %s", config.reference_path)
        logger.info("Variants:  %s", config.variant_path)
        logger.info("Indels:    %s", "applied" if config.include_indels else "ignored")

        stats = generate_consensus(reference_handle, variant_handle, output_handle, config)
        output_handle.flush()

    return stats
