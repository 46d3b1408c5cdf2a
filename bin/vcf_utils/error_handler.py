#!/usr/bin/env python3
"""
Error taxonomy and exit-code classification for per-sample INFO annotation.

Every failure in the annotation run is fatal: errors are raised where they
are detected, propagate untouched through the stream/extract/reduce/annotate
steps, and are only converted to a process exit status by the CLI entry
point.

Classes:
    Sample2InfoError: Base class carrying the exit code for the failure
    OpenError: Input unreadable or header missing/malformed
    ConfigError: Missing or invalid run parameters
    MultiValueFieldError: Per-sample field holds more than one value
    EmptyStatisticError: No sample contributed a value for a record
    NumericParseError: Per-sample field value is not a number
    UnknownStatisticError: Selector does not name a known statistic
    RecordFormatError: Body line cannot be split into a record
    StreamStateError: Header/record emitted out of order

Functions:
    exit_code_for: Map any exception to a process exit status
    describe_error: One-line message for standard error
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)

# Exit statuses used by the command line script
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INVALID_ARGUMENT = 2
EXIT_FILE_NOT_FOUND = 2
EXIT_PERMISSION_DENIED = 13
EXIT_INTERRUPTED = 130


class Sample2InfoError(Exception):
    """Base class for all fatal annotation errors."""

    exit_code = EXIT_FAILURE


class OpenError(Sample2InfoError):
    """Input could not be read or does not start with a VCF header."""

    def __init__(self, source: str, reason: str, cause: Optional[BaseException] = None):
        self.source = source
        self.reason = reason
        self.cause = cause
        super().__init__(f"Cannot open VCF '{source}': {reason}")

    @property
    def exit_code(self) -> int:
        if isinstance(self.cause, FileNotFoundError):
            return EXIT_FILE_NOT_FOUND
        if isinstance(self.cause, PermissionError):
            return EXIT_PERMISSION_DENIED
        return EXIT_FAILURE


class ConfigError(Sample2InfoError):
    """Run parameters are missing or unusable."""

    exit_code = EXIT_INVALID_ARGUMENT


class MultiValueFieldError(Sample2InfoError):
    """A sample holds more than one value for the summarized field."""

    def __init__(self, sample: str, field: str, values, location: str = ""):
        self.sample = sample
        self.field = field
        self.values = list(values)
        self.location = location
        where = f" at {location}" if location else ""
        super().__init__(
            f"Cannot handle sample fields with multiple values: sample '{sample}' "
            f"has {field}={','.join(self.values)}{where}"
        )


class EmptyStatisticError(Sample2InfoError):
    """A statistic was requested over an empty set of values."""

    def __init__(self, message: str = "Cannot compute a statistic over zero values"):
        super().__init__(message)


class NumericParseError(Sample2InfoError):
    """A per-sample value could not be parsed as a floating point number."""

    def __init__(self, sample: str, field: str, value: str, location: str = ""):
        self.sample = sample
        self.field = field
        self.value = value
        self.location = location
        where = f" at {location}" if location else ""
        super().__init__(
            f"Non-numeric value '{value}' for {field} in sample '{sample}'{where}"
        )


class UnknownStatisticError(Sample2InfoError):
    """The statistic selector does not map to a known reducer."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"Failure to convert stat type to a known statistic: {name!r}")


class RecordFormatError(Sample2InfoError):
    """htslib could not parse a body line into a variant record."""

    def __init__(self, record_number: int, reason: str):
        self.record_number = record_number
        self.reason = reason
        super().__init__(f"Malformed VCF record #{record_number}: {reason}")


class StreamStateError(Sample2InfoError):
    """Header mutated after emission, or a record written before the header."""


def exit_code_for(error: BaseException) -> int:
    """
    Classify an exception into a process exit status.

    Args:
        error: The exception that terminated the run

    Returns:
        Exit status for sys.exit()
    """
    if isinstance(error, Sample2InfoError):
        return error.exit_code
    if isinstance(error, KeyboardInterrupt):
        return EXIT_INTERRUPTED
    if isinstance(error, FileNotFoundError):
        return EXIT_FILE_NOT_FOUND
    if isinstance(error, PermissionError):
        return EXIT_PERMISSION_DENIED
    return EXIT_FAILURE


def describe_error(error: BaseException) -> str:
    """Build the message reported on standard error for a fatal error."""
    if isinstance(error, Sample2InfoError):
        return f"Error: {error}"
    if isinstance(error, KeyboardInterrupt):
        return "Error: annotation interrupted by user"
    return f"Error: {type(error).__name__} - {error}"
