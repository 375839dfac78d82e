"""
vcfconsensus Command-Line Interface

Entry points for the vcfconsensus and vcfconsensus-validate commands.
"""

import argparse
import sys
from typing import List, Optional

from vcfconsensus import __version__
from vcfconsensus.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vcfconsensus",
        description="Replace reference bases with called alternate alleles "
                    "from a co-sorted VCF and write the consensus FASTA to stdout",
    )
    parser.add_argument("-r", "--ref", required=True,
                        help="Reference FASTA (plain or compressed)")
    parser.add_argument("-v", "--vcf", required=True,
                        help="VCF sorted in the same scaffold order as the reference")
    parser.add_argument("-i", "--indels", action="store_true",
                        help="Apply indel records (INFO starting with INDEL); "
                             "ignored by default")
    parser.add_argument("-o", "--output", default=None,
                        help="Write the consensus FASTA here instead of stdout")
    parser.add_argument("--summary", default=None,
                        help="Write a per-scaffold summary TSV")
    parser.add_argument("--log-file", default=None,
                        help="Also write diagnostics to this file")
    parser.add_argument("--verbose", action="store_true",
                        help="Enable debug output")
    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the vcfconsensus command."""
    from vcfconsensus.config import Config
    from vcfconsensus.consensus import generate_consensus_from_files
    from vcfconsensus.exceptions import ConsensusError
    from vcfconsensus.report import format_summary, write_summary

    args = build_parser().parse_args(argv)
    config = Config.from_args(args)
    logger = setup_logging("vcfconsensus", log_file=config.log_file, verbose=config.verbose)

    is_valid, errors = config.validate()
    if not is_valid:
        for error in errors:
            logger.error(error)
        return 1

    try:
        stats = generate_consensus_from_files(config)
    except ConsensusError as e:
        logger.error(str(e))
        return 1

    for line in format_summary(stats).splitlines():
        logger.info(line)

    if config.summary_path:
        try:
            write_summary(stats, config.summary_path)
        except ConsensusError as e:
            logger.error(str(e))
            return 1
        logger.info(f"Summary written to: {config.summary_path}")

    return 0


def validate_main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the vcfconsensus-validate command."""
    from vcfconsensus.validation import (
        validate_vcf,
        validate_vcf_order,
        validate_vcf_ref_bases,
    )

    parser = argparse.ArgumentParser(
        prog="vcfconsensus-validate",
        description="Check that a VCF is well formed, co-sorted with and "
                    "consistent with a reference FASTA",
    )
    parser.add_argument("-r", "--ref", required=True, help="Reference FASTA")
    parser.add_argument("-v", "--vcf", required=True, help="VCF file")
    parser.add_argument("--max-errors", type=int, default=100,
                        help="Stop REF checking after this many errors (default: 100)")
    args = parser.parse_args(argv)

    logger = setup_logging("vcfconsensus")

    logger.info("vcfconsensus input validation")
    logger.info("=============================")

    checks = [
        ("VCF structure", lambda: validate_vcf(args.vcf)),
        ("Scaffold order", lambda: validate_vcf_order(args.vcf, args.ref)),
        ("REF bases", lambda: validate_vcf_ref_bases(args.vcf, args.ref, args.max_errors)),
    ]

    all_valid = True
    for name, check in checks:
        is_valid, errors, warnings = check()
        for warning in warnings:
            logger.warning(f"{name}: {warning}")
        for error in errors:
            logger.error(f"{name}: {error}")
        if is_valid:
            logger.info(f"✓ {name}")
        else:
            logger.error(f"✗ {name}")
            all_valid = False

    return 0 if all_valid else 1


def run():
    """Console script wrapper for main()."""
    sys.exit(main())


def run_validate():
    """Console script wrapper for validate_main()."""
    sys.exit(validate_main())


if __name__ == "__main__":
    run()
