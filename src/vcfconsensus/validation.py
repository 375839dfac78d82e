"""
Pre-flight validation of consensus inputs.

The consensus engine assumes a well-formed variant file sorted in the same
scaffold order as the reference, with REF alleles taken from that reference.
These checks report violations up front instead of producing a silently
wrong consensus.
"""

import os
from typing import Dict, List, Set, Tuple

from Bio import SeqIO
from xopen import xopen

from .variants import MIN_FIELDS


def _parse_fasta_sequences(fasta_path: str) -> Dict[str, str]:
    """
    Parse FASTA file to get full sequences.

    Args:
        fasta_path: Path to FASTA file

    Returns:
        Dictionary mapping sequence IDs to sequences (uppercase)
    """
    with xopen(fasta_path) as handle:
        return {record.id: str(record.seq).upper() for record in SeqIO.parse(handle, "fasta")}


def _fasta_order(fasta_path: str) -> List[str]:
    """Scaffold IDs in the order they appear in the FASTA."""
    with xopen(fasta_path) as handle:
        return [record.id for record in SeqIO.parse(handle, "fasta")]


def _data_lines(vcf_path: str):
    """Yield (line_number, fields) for each non-comment, non-blank line."""
    with xopen(vcf_path) as f:
        for line_number, line in enumerate(f, start=1):
            line = line.rstrip("\r\n")
            if not line.strip() or line.startswith("#"):
                continue
            yield line_number, line.split("\t")


def validate_vcf(vcf_path: str) -> Tuple[bool, List[str], List[str]]:
    """
    Basic VCF file validation.

    Args:
        vcf_path: Path to VCF file

    Returns:
        Tuple of (is_valid, errors, warnings)
    """
    errors = []
    warnings = []

    if not os.path.exists(vcf_path):
        errors.append(f"VCF file not found: {vcf_path}")
        return False, errors, warnings

    has_header = False
    with xopen(vcf_path) as f:
        for line in f:
            if line.startswith("##fileformat=VCF"):
                has_header = True
                break
            if not line.startswith("#"):
                break

    for line_number, parts in _data_lines(vcf_path):
        if len(parts) < MIN_FIELDS:
            errors.append(
                f"Line {line_number}: Invalid VCF line - expected at least {MIN_FIELDS} columns"
            )
            continue

        try:
            pos = int(parts[1])
            if pos < 1:
                errors.append(f"Line {line_number}: Position must be >= 1")
        except ValueError:
            errors.append(f"Line {line_number}: Invalid position '{parts[1]}'")

        if not parts[3]:
            errors.append(f"Line {line_number}: Empty REF allele")

    if not has_header:
        warnings.append("Missing ##fileformat header")

    is_valid = len(errors) == 0
    return is_valid, errors, warnings


def validate_vcf_order(vcf_path: str, fasta_path: str) -> Tuple[bool, List[str], List[str]]:
    """
    Check that the VCF is co-sorted with the reference.

    Records for a scaffold must form one contiguous block, blocks must follow
    the FASTA's scaffold order, and positions must ascend within a block.

    Args:
        vcf_path: Path to VCF file
        fasta_path: Path to reference FASTA file

    Returns:
        Tuple of (is_valid, errors, warnings)
    """
    errors: List[str] = []
    warnings: List[str] = []

    for label, path in (("VCF file", vcf_path), ("Reference FASTA", fasta_path)):
        if not os.path.exists(path):
            errors.append(f"{label} not found: {path}")
    if errors:
        return False, errors, warnings

    rank = {name: i for i, name in enumerate(_fasta_order(fasta_path))}
    seen_blocks: Set[str] = set()
    unknown_chroms: Set[str] = set()
    current_chrom = None
    last_rank = -1
    last_pos = 0

    for line_number, parts in _data_lines(vcf_path):
        if len(parts) < 2:
            continue
        chrom = parts[0]
        try:
            pos = int(parts[1])
        except ValueError:
            continue

        if chrom != current_chrom:
            if chrom in seen_blocks:
                errors.append(
                    f"Line {line_number}: Records for '{chrom}' are not contiguous"
                )
            seen_blocks.add(chrom)
            current_chrom = chrom
            last_pos = 0

            if chrom not in rank:
                if chrom not in unknown_chroms:
                    unknown_chroms.add(chrom)
                    warnings.append(f"Chromosome '{chrom}' not found in reference FASTA")
            else:
                if rank[chrom] < last_rank:
                    errors.append(
                        f"Line {line_number}: '{chrom}' appears out of reference order"
                    )
                last_rank = max(last_rank, rank[chrom])

        if pos < last_pos:
            errors.append(
                f"Line {line_number}: Position {pos} on '{chrom}' is not sorted "
                f"(previous {last_pos})"
            )
        last_pos = pos

    is_valid = len(errors) == 0
    return is_valid, errors, warnings


def validate_vcf_ref_bases(
    vcf_path: str,
    fasta_path: str,
    max_errors: int = 100
) -> Tuple[bool, List[str], List[str]]:
    """
    Validate that VCF REF bases match the reference genome.

    Args:
        vcf_path: Path to VCF file
        fasta_path: Path to reference FASTA file
        max_errors: Stop after this many errors (to avoid overwhelming output)

    Returns:
        Tuple of (is_valid, errors, warnings)
        - is_valid: True if all REF bases match the reference
        - errors: List of mismatch error messages
        - warnings: List of warning messages (e.g., unknown chromosome)
    """
    errors: List[str] = []
    warnings: List[str] = []

    # Check files exist
    if not os.path.exists(vcf_path):
        errors.append(f"VCF file not found: {vcf_path}")
        return False, errors, warnings

    if not os.path.exists(fasta_path):
        errors.append(f"Reference FASTA not found: {fasta_path}")
        return False, errors, warnings

    sequences = _parse_fasta_sequences(fasta_path)
    if not sequences:
        errors.append("No sequences found in reference FASTA")
        return False, errors, warnings

    total_variants = 0
    matched_variants = 0
    unknown_chroms: Set[str] = set()
    unknown_variants = 0

    def add_error(message: str) -> bool:
        errors.append(message)
        if len(errors) >= max_errors:
            warnings.append(f"Stopped after {max_errors} errors")
            return True
        return False

    for line_number, parts in _data_lines(vcf_path):
        if len(parts) < 5:
            continue

        chrom = parts[0]
        try:
            pos = int(parts[1])
        except ValueError:
            continue

        ref = parts[3].upper()
        total_variants += 1

        if chrom not in sequences:
            unknown_variants += 1
            if chrom not in unknown_chroms:
                unknown_chroms.add(chrom)
                warnings.append(f"Chromosome '{chrom}' not found in reference FASTA")
            continue

        seq = sequences[chrom]

        # VCF is 1-based, Python is 0-based
        start_idx = pos - 1
        end_idx = start_idx + len(ref)

        if start_idx < 0:
            if add_error(f"Line {line_number}: Position {pos} is invalid (< 1)"):
                break
            continue

        if end_idx > len(seq):
            if add_error(
                f"Line {line_number}: REF extends beyond sequence end "
                f"(pos={pos}, ref_len={len(ref)}, seq_len={len(seq)})"
            ):
                break
            continue

        actual_ref = seq[start_idx:end_idx]
        if ref != actual_ref:
            if add_error(
                f"Line {line_number}: REF mismatch at {chrom}:{pos} - "
                f"VCF has '{ref}', reference has '{actual_ref}'"
            ):
                break
        else:
            matched_variants += 1

    checked = total_variants - unknown_variants
    if checked > 0 and matched_variants < checked:
        match_rate = (matched_variants / checked) * 100
        warnings.append(
            f"REF base validation: {matched_variants}/{checked} variants matched ({match_rate:.1f}%)"
        )

    is_valid = len(errors) == 0
    return is_valid, errors, warnings
