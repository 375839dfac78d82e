"""
Tests for the consensus rewriter.

Tests cover:
- SNP substitution and reference mismatch diagnostics
- Deletions, insertions and skip windows
- Nested indel calls extending or being absorbed by a skip window
- Line wrapping preservation across skip windows
"""

import logging
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from vcfconsensus.models import ScaffoldSummary, VariantRecord, VariantTable
from vcfconsensus.rewriter import rewrite


def make_table(*records):
    """Build a VariantTable from (position, ref, alt) tuples."""
    table = VariantTable("chr1")
    for position, ref, alt in records:
        table.add(VariantRecord(position=position, ref_allele=ref, alt_allele=alt))
    return table


def run(lines, table, summary=None):
    return list(rewrite(lines, table, "chr1", summary))


class TestSubstitution:
    """Tests for single-base substitution."""

    def test_no_variants(self):
        """Test that a scaffold without calls is echoed unchanged."""
        assert run(["ACGTACGT"], make_table()) == ["ACGTACGT\n"]

    def test_snp(self):
        """Test substituting a SNP at position 3."""
        table = make_table((3, "G", "T"))
        assert run(["ACGTACGT"], table) == ["ACTTACGT\n"]

    def test_positions_span_lines(self):
        """Test that positions continue across sequence lines."""
        table = make_table((6, "C", "A"))
        assert run(["ACGT", "ACGT"], table) == ["ACGT\n", "AAGT\n"]

    def test_mismatch_warns_and_substitutes(self, caplog):
        """Test that a REF mismatch is reported but the ALT is still used."""
        table = make_table((2, "G", "T"))

        with caplog.at_level(logging.WARNING):
            result = run(["ACGT"], table)

        assert result == ["ATGT\n"]
        assert "chr1:2 C is not G" in caplog.text

    def test_matching_ref_no_warning(self, caplog):
        """Test that a matching REF produces no diagnostic."""
        table = make_table((2, "C", "T"))

        with caplog.at_level(logging.WARNING):
            run(["ACGT"], table)

        assert caplog.text == ""

    def test_multibase_ref_not_checked(self, caplog):
        """Test that only single-base REF alleles are verified."""
        table = make_table((1, "GG", "G"))

        with caplog.at_level(logging.WARNING):
            result = run(["ACGT"], table)

        assert result == ["GGT\n"]
        assert caplog.text == ""

    def test_empty_line_preserved(self):
        """Test that empty sequence lines still produce a newline."""
        assert run(["AC", "", "GT"], make_table()) == ["AC\n", "\n", "GT\n"]


class TestIndels:
    """Tests for multi-base reference and alternate alleles."""

    def test_deletion_marker(self):
        """Test that a '.' ALT with a 3-base REF removes 3 bases."""
        table = make_table((4, "CCC", "."))
        assert run(["AAACCCGGG"], table) == ["AAAGGG\n"]

    def test_single_base_deletion_marker(self):
        """Test that a '.' ALT with a 1-base REF removes only that base."""
        table = make_table((4, "C", "."))
        assert run(["AAACCCGGG"], table) == ["AAACCGGG\n"]

    def test_insertion(self):
        """Test that a longer ALT replaces the single REF base."""
        table = make_table((4, "C", "CTT"))
        result = run(["AAACCCGGG"], table)

        assert result == ["AAACTTCCGGG\n"]
        assert len(result[0].rstrip("\n")) == 9 + 2

    def test_vcf_style_deletion(self):
        """Test a REF-longer-than-ALT deletion keeps the ALT text."""
        table = make_table((3, "ACC", "A"))
        assert run(["AAACCCGGG"], table) == ["AAACGGG\n"]

    def test_window_crosses_line_boundary(self):
        """Test that skipped bases are taken from the following line."""
        table = make_table((4, "TA", "."))
        assert run(["ACGT", "ACGT"], table) == ["ACG\n", "CGT\n"]

    def test_window_spans_several_lines(self):
        """Test a skip window longer than one wrapped line."""
        table = make_table((2, "CGTACG", "C"))
        assert run(["ACG", "TAC", "GTA"], table) == ["AC\n", "\n", "TA\n"]

    def test_window_stops_at_scaffold_end(self):
        """Test that a window running off the end consumes what is left."""
        table = make_table((3, "GTAA", "G"))
        assert run(["ACGT"], table) == ["ACG\n"]

    def test_positions_after_window(self):
        """Test that a call after a window uses reference coordinates."""
        table = make_table((2, "CG", "C"), (5, "A", "T"))
        assert run(["ACGTACGT"], table) == ["ACTTCGT\n"]


class TestNestedIndels:
    """Tests for calls starting inside an active skip window."""

    # Positions: A1 C2 G3 T4 A5 C6 G7 T8 A9 C10 G11 T12 A13 C14
    SEQUENCE = "ACGTACGTACGTAC"

    def test_longer_nested_call_extends_window(self):
        """Test that a longer call at position 6 extends the window.

        The window opened at 5 has one base left when position 6 is
        consumed, and the nested call adds its span minus one (4), so
        positions 6 through 11 are consumed.
        The skip count after position 6 is (2 - 1) + (5 - 1) = 5, so the
        window ends at 11. Prose elsewhere saying "through position 10" is
        off by one: ending at 10 would emit G11 and give "ACGTGTAC".
        """
        table = make_table((5, "ACG", "."), (6, "CGTAC", "."))
        summary = ScaffoldSummary("chr1")

        assert run([self.SEQUENCE], table, summary) == ["ACGTTAC\n"]
        assert summary.skipped_bases == 6
        assert summary.extended_windows == 1
        assert summary.absorbed == 0

    def test_longer_nested_call_with_alt(self):
        """Test that the outer call's ALT is still emitted."""
        table = make_table((5, "ACG", "A"), (6, "CGTAC", "C"))
        assert run([self.SEQUENCE], table) == ["ACGTATAC\n"]

    def test_equal_length_nested_call_does_not_extend(self):
        """Test that an equal-length nested call is absorbed."""
        table = make_table((5, "ACG", "."), (6, "CGT", "."))
        summary = ScaffoldSummary("chr1")

        assert run([self.SEQUENCE], table, summary) == ["ACGTTACGTAC\n"]
        assert summary.skipped_bases == 2
        assert summary.extended_windows == 0
        assert summary.absorbed == 1

    def test_shorter_nested_call_absorbed(self):
        """Test that a shorter nested call has no individual effect."""
        table = make_table((5, "ACGT", "A"), (6, "C", "G"))
        summary = ScaffoldSummary("chr1")

        assert run([self.SEQUENCE], table, summary) == ["ACGTAACGTAC\n"]
        assert summary.absorbed == 1
        assert summary.substitutions == 1

    def test_nested_call_compared_with_opening_call(self):
        """Test that later nested calls are compared with the call that opened the window."""
        table = make_table((5, "ACG", "."), (6, "CGTA", "."), (8, "TACG", "."))

        # at 6: 1 + 3 = 4, at 8: 2 + 3 = 5, so 9 through 13 are consumed
        assert run([self.SEQUENCE], table) == ["ACGTC\n"]


class TestSummaryCounters:
    """Tests for counters collected while rewriting."""

    def test_lengths_and_counts(self):
        """Test input/output lengths and per-kind counters."""
        table = make_table((2, "C", "T"), (4, "T", "."), (6, "C", "CAA"), (8, "A", "G"))
        summary = ScaffoldSummary("chr1")

        result = run(["ACGT", "ACGT"], table, summary)

        assert result == ["ATG\n", "ACAAGG\n"]
        assert summary.input_length == 8
        assert summary.output_length == 9
        assert summary.substitutions == 3
        assert summary.deletions == 1
        assert summary.mismatches == 1

    def test_generator_is_lazy(self):
        """Test that lines are produced one at a time."""
        lines = rewrite(["AC", "GT"], make_table(), "chr1")
        assert next(lines) == "AC\n"
        assert next(lines) == "GT\n"
        with pytest.raises(StopIteration):
            next(lines)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
