"""
Data models for consensus generation.

This module defines the records shared by the variant table builder, the
consensus rewriter and the stream orchestrator.
"""

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(frozen=True)
class VariantRecord:
    """A single called site within a scaffold.

    Attributes:
        position: 1-based offset within the scaffold's base sequence
        ref_allele: Reference bases covered by the call
        alt_allele: Replacement text; "." emits nothing
    """
    position: int
    ref_allele: str
    alt_allele: str

    @property
    def is_deletion_marker(self) -> bool:
        """True when the call emits nothing at its position."""
        return self.alt_allele == "."


class VariantTable(dict):
    """Variant calls for one scaffold, keyed by 1-based position.

    Inserting at an existing position replaces the earlier call.
    """

    def __init__(self, scaffold_name: str = ""):
        super().__init__()
        self.scaffold_name = scaffold_name
        self.overwritten = 0

    def add(self, record: VariantRecord) -> None:
        if record.position in self:
            self.overwritten += 1
        self[record.position] = record


@dataclass
class Scaffold:
    """One reference record: its verbatim header and its sequence lines.

    Attributes:
        header: Header line exactly as read, including its terminator
        name: Scaffold identity used to match variant lines
        lines: Sequence lines with terminators removed, in input order
    """
    header: str
    name: str
    lines: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return sum(len(line) for line in self.lines)


@dataclass
class ScaffoldSummary:
    """Per-scaffold counters collected while rewriting."""
    scaffold: str
    input_length: int = 0
    output_length: int = 0
    variants: int = 0
    substitutions: int = 0
    deletions: int = 0
    mismatches: int = 0
    absorbed: int = 0
    overwritten: int = 0
    skipped_bases: int = 0
    extended_windows: int = 0

    def to_dict(self) -> Dict:
        return {
            "scaffold": self.scaffold,
            "input_length": self.input_length,
            "output_length": self.output_length,
            "variants": self.variants,
            "substitutions": self.substitutions,
            "deletions": self.deletions,
            "mismatches": self.mismatches,
            "absorbed": self.absorbed,
            "overwritten": self.overwritten,
            "skipped_bases": self.skipped_bases,
            "extended_windows": self.extended_windows,
        }


@dataclass
class ConsensusStats:
    """Run-wide counters for one consensus generation.

    Attributes:
        scaffolds: Per-scaffold summaries in reference order
        leftover_variants: Variant records remained after the last scaffold
    """
    scaffolds: List[ScaffoldSummary] = field(default_factory=list)
    leftover_variants: bool = False

    def start_scaffold(self, name: str) -> ScaffoldSummary:
        summary = ScaffoldSummary(scaffold=name)
        self.scaffolds.append(summary)
        return summary

    def _total(self, attribute: str) -> int:
        return sum(getattr(s, attribute) for s in self.scaffolds)

    @property
    def variants(self) -> int:
        return self._total("variants")

    @property
    def substitutions(self) -> int:
        return self._total("substitutions")

    @property
    def deletions(self) -> int:
        return self._total("deletions")

    @property
    def mismatches(self) -> int:
        return self._total("mismatches")

    @property
    def absorbed(self) -> int:
        return self._total("absorbed")

    @property
    def skipped_bases(self) -> int:
        return self._total("skipped_bases")

    @property
    def extended_windows(self) -> int:
        return self._total("extended_windows")
