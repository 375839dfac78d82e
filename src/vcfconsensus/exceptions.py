"""
Exception hierarchy for vcfconsensus.

Only fatal conditions are raised. Reference-base mismatches and leftover
variant records are reported through logging and never raise.
"""

from typing import Optional


class ConsensusError(Exception):
    """Base class for all fatal vcfconsensus errors."""


class InputFileError(ConsensusError):
    """An input file could not be opened."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Can't open {path}: {reason}")


class OutputFileError(ConsensusError):
    """An output file could not be written."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Can't write {path}: {reason}")


class VariantParseError(ConsensusError):
    """A variant line is missing required fields or has an invalid position."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"Line {line_number}: {message}"
        super().__init__(message)


class ReferenceFormatError(ConsensusError):
    """The reference FASTA stream is not well formed."""
