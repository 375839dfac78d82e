"""
vcfconsensus: reference consensus from co-sorted FASTA and VCF streams

Overlays variant calls onto reference scaffolds, substituting the first
alternate allele at each called position and optionally applying indels,
while preserving the reference FASTA's line wrapping.
"""

__version__ = "1.0.0"

from vcfconsensus.config import Config
from vcfconsensus.consensus import generate_consensus, generate_consensus_from_files
from vcfconsensus.models import ConsensusStats, Scaffold, VariantRecord, VariantTable
from vcfconsensus.rewriter import rewrite
from vcfconsensus.variants import VariantStream, build_table, scaffold_matches
from vcfconsensus.validation import validate_vcf, validate_vcf_order, validate_vcf_ref_bases
from vcfconsensus.logging import setup_logging

__all__ = [
    "Config",
    "ConsensusStats",
    "Scaffold",
    "VariantRecord",
    "VariantStream",
    "VariantTable",
    "build_table",
    "generate_consensus",
    "generate_consensus_from_files",
    "rewrite",
    "scaffold_matches",
    "validate_vcf",
    "validate_vcf_order",
    "validate_vcf_ref_bases",
    "setup_logging",
    "__version__",
]
