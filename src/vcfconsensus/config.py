"""
vcfconsensus Configuration Module

Explicit run configuration passed into the stream orchestrator.

Configuration Priority (highest to lowest):
1. Explicit arguments (command line or constructor)
2. Environment variables
3. Defaults

Environment Variables:
    VCFCONSENSUS_INCLUDE_INDELS - Apply indel records (1/true/yes/on)
    VCFCONSENSUS_LOG_FILE       - Also write diagnostics to this file
    VCFCONSENSUS_VERBOSE        - Enable debug logging (1/true/yes/on)
"""

import os
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)

TRUTHY_VALUES = ("1", "true", "yes", "on")


def _env_flag(name: str) -> Optional[bool]:
    """Read a boolean flag from the environment, None if unset."""
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return None
    return value.strip().lower() in TRUTHY_VALUES


@dataclass
class Config:
    """
    Consensus run configuration.

    Attributes:
        reference_path: Source reference FASTA
        variant_path: Source variant file, co-sorted with the reference
        include_indels: Apply multi-base calls with skip/extend semantics
        output_path: Consensus FASTA destination (None writes to stdout)
        summary_path: Optional per-scaffold summary TSV
        log_file: Optional file receiving a copy of the diagnostics
        verbose: Enable debug logging
    """

    # Inputs
    reference_path: Optional[Path] = None
    variant_path: Optional[Path] = None

    # Behaviour
    include_indels: Optional[bool] = None

    # Outputs
    output_path: Optional[Path] = None
    summary_path: Optional[Path] = None
    log_file: Optional[Path] = None
    verbose: Optional[bool] = None

    # Internal state
    _initialized: bool = field(default=False, repr=False)

    def __post_init__(self):
        """Normalise paths and fill unset values from the environment."""
        if not self._initialized:
            self._coerce_paths()
            self._load_from_environment()
            self._initialized = True

    def _coerce_paths(self) -> None:
        for name in ("reference_path", "variant_path", "output_path", "summary_path", "log_file"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, Path):
                setattr(self, name, Path(value))

    def _load_from_environment(self) -> None:
        """Load unset options from environment variables, then defaults."""
        if self.include_indels is None:
            env_indels = _env_flag("VCFCONSENSUS_INCLUDE_INDELS")
            if env_indels is not None:
                logger.debug("include_indels=%s from VCFCONSENSUS_INCLUDE_INDELS", env_indels)
            self.include_indels = bool(env_indels)

        if self.verbose is None:
            self.verbose = bool(_env_flag("VCFCONSENSUS_VERBOSE"))

        if self.log_file is None and os.environ.get("VCFCONSENSUS_LOG_FILE"):
            self.log_file = Path(os.environ["VCFCONSENSUS_LOG_FILE"])

    @classmethod
    def from_args(cls, args) -> "Config":
        """Build a configuration from a parsed argparse namespace.

        Flags left at their argparse default of False defer to the
        environment.
        """
        return cls(
            reference_path=args.ref,
            variant_path=args.vcf,
            include_indels=True if getattr(args, "indels", False) else None,
            output_path=getattr(args, "output", None),
            summary_path=getattr(args, "summary", None),
            log_file=getattr(args, "log_file", None),
            verbose=True if getattr(args, "verbose", False) else None,
        )

    def validate(self) -> tuple[bool, list[str]]:
        """
        Validate configuration.

        Returns:
            Tuple of (is_valid, list of error messages)
        """
        errors = []

        for label, path in (("Reference FASTA", self.reference_path),
                            ("Variant file", self.variant_path)):
            if path is None:
                errors.append(f"{label} not configured.")
            elif not path.exists():
                errors.append(f"{label} not found: {path}")
            elif path.is_dir():
                errors.append(f"{label} is a directory: {path}")
            elif not os.access(path, os.R_OK):
                errors.append(f"{label} is not readable: {path}")

        return len(errors) == 0, errors

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "reference_path": str(self.reference_path) if self.reference_path else None,
            "variant_path": str(self.variant_path) if self.variant_path else None,
            "include_indels": self.include_indels,
            "output_path": str(self.output_path) if self.output_path else None,
            "summary_path": str(self.summary_path) if self.summary_path else None,
            "log_file": str(self.log_file) if self.log_file else None,
            "verbose": self.verbose,
        }
