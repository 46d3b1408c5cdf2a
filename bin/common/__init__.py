"""
Common shared configuration for the per-sample to INFO annotation.

This package holds the statistic choices, header templates and run
parameter validation used by vcf_utils and the command line script.
"""

from .stat_config import (
    # Statistics
    DEFAULT_STATISTIC,
    STATISTIC_CHOICES,
    STATISTIC_DESCRIPTIONS,

    # VCF format
    FIXED_COLUMNS,
    COMPATIBLE_INFO_NUMBERS,
    COMPATIBLE_INFO_TYPES,
    INFO_DECLARATION_TEMPLATE,
    MISSING_VALUE,

    # Environment
    ENVIRONMENT_VARIABLES,

    # Run parameters
    RunConfig,
    print_configuration_summary,
)

__all__ = [
    "DEFAULT_STATISTIC",
    "STATISTIC_CHOICES",
    "STATISTIC_DESCRIPTIONS",
    "FIXED_COLUMNS",
    "COMPATIBLE_INFO_NUMBERS",
    "COMPATIBLE_INFO_TYPES",
    "INFO_DECLARATION_TEMPLATE",
    "MISSING_VALUE",
    "ENVIRONMENT_VARIABLES",
    "RunConfig",
    "print_configuration_summary",
]
