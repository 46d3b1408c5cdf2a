#!/usr/bin/env python3
"""
Sample Statistic Configuration Module

Centralized configuration for the per-sample to INFO summary annotation.
Provides a single source of truth for the supported statistics, the INFO
header declaration written for the computed value, and the environment
variables that tune logging.

USAGE:
    from common.stat_config import DEFAULT_STATISTIC, RunConfig

    config = RunConfig(sample_field="DP", info_field="DP_MEDIAN", statistic="median")
    valid, errors = config.validate()
"""

import os
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

# ============================================================================
# STATISTIC CONFIGURATION
# ============================================================================

# Statistic used when no selector flag is given
DEFAULT_STATISTIC = "mean"

STATISTIC_CHOICES = ("mean", "median", "min", "max")

STATISTIC_DESCRIPTIONS = {
    "mean": "Arithmetic mean of the per-sample values (sum divided by count)",
    "median": "Lower-middle element of the ordered per-sample values",
    "min": "Smallest per-sample value",
    "max": "Largest per-sample value",
}

# ============================================================================
# VCF FORMAT CONFIGURATION
# ============================================================================

# Declaration appended to the header; Number=1 since one value per record
INFO_DECLARATION_TEMPLATE = (
    '##INFO=<ID={info_id},Number=1,Type=Float,'
    'Description="Summary statistic generated by {statistic} of per-sample values of {field}">'
)

# Existing INFO declarations a float statistic can be stored under
COMPATIBLE_INFO_TYPES = ("Float", "String")
COMPATIBLE_INFO_NUMBERS = (1, ".")

# VCF missing value marker
MISSING_VALUE = "."

# Fixed body columns before FORMAT
FIXED_COLUMNS = ("#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO")

# Characters that would break the INFO column if used in an INFO key
RESERVED_INFO_KEY_CHARACTERS = (";", "=", ",", " ", "\t", "\n")

# ============================================================================
# ENVIRONMENT CONFIGURATION
# ============================================================================

ENVIRONMENT_VARIABLES = {
    "VCFSAMPLE2INFO_LOG_LEVEL": "Set logging level (DEBUG, INFO, WARNING, ERROR)",
    "VCFSAMPLE2INFO_LOG_DIR": "Directory for detailed log files (file logging is off when unset)",
    "VCFSAMPLE2INFO_ENABLE_METRICS": "Enable metrics collection (true/false)",
}


@dataclass
class RunConfig:
    """Parameters of one annotation run."""

    sample_field: Optional[str] = None
    info_field: Optional[str] = None
    statistic: str = DEFAULT_STATISTIC
    input_vcf: Optional[str] = None
    output_vcf: Optional[str] = None

    def validate(self) -> Tuple[bool, List[str]]:
        """
        Validate run parameters.

        Returns:
            Tuple of (is_valid, error_messages)
        """
        errors = []

        if not self.sample_field or not self.info_field:
            errors.append("both a sample field and an info field are required.")

        if self.info_field:
            bad = [c for c in RESERVED_INFO_KEY_CHARACTERS if c in self.info_field]
            if bad:
                errors.append(
                    f"info field '{self.info_field}' contains reserved characters: {bad!r}"
                )

        if self.statistic not in STATISTIC_CHOICES:
            errors.append(
                f"unknown statistic '{self.statistic}' (choose from {', '.join(STATISTIC_CHOICES)})"
            )

        return len(errors) == 0, errors

    def as_dict(self) -> Dict[str, Optional[str]]:
        return {
            "sample_field": self.sample_field,
            "info_field": self.info_field,
            "statistic": self.statistic,
            "input_vcf": self.input_vcf or "<stdin>",
            "output_vcf": self.output_vcf or "<stdout>",
        }


def print_configuration_summary(config: RunConfig, stream=None) -> None:
    """Print run configuration for debugging (to stderr by default)."""
    out = stream or sys.stderr
    print("=" * 60, file=out)
    print("SAMPLE TO INFO CONFIGURATION SUMMARY", file=out)
    print("=" * 60, file=out)
    for key, value in config.as_dict().items():
        print(f"  {key}: {value}", file=out)
    print(f"  description: {STATISTIC_DESCRIPTIONS.get(config.statistic, 'unknown')}", file=out)
    print("  environment:", file=out)
    for name, description in ENVIRONMENT_VARIABLES.items():
        print(f"    {name}={os.environ.get(name, '<unset>')}  ({description})", file=out)
    print("=" * 60, file=out)
