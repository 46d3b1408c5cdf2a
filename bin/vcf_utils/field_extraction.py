"""
Per-sample FORMAT field extraction.

This module pulls the numeric value of one FORMAT field out of every sample
of a record, in header sample order, for use by the statistic reducers.

Functions:
    parse_numeric: Parse one FORMAT value as a float
    extract_sample_values: Collect one numeric value per sample carrying a field

Example:
    >>> from vcf_utils.field_extraction import extract_sample_values
    >>> values = extract_sample_values(record, 'DP')
    >>> print(values)
    [10.0, 20.0, 30.0]
"""
import logging
import math
import re

from common.stat_config import MISSING_VALUE

from .error_handler import MultiValueFieldError, NumericParseError
from .record_stream import record_location, sample_fields

logger = logging.getLogger(__name__)

# Plain decimal/scientific notation; rejects nan, inf and digit separators
NUMBER_PATTERN = re.compile(r'^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$')


def parse_numeric(value, sample='', field='', location=''):
    """
    Parse one per-sample value as a floating point number.

    Args:
        value (str): Raw FORMAT value
        sample (str): Sample name, for error messages
        field (str): FORMAT key, for error messages
        location (str): 'chrom:pos' of the record, for error messages

    Returns:
        float: Parsed value

    Raises:
        NumericParseError: If the value is not a plain finite number
    """
    if not NUMBER_PATTERN.match(value):
        raise NumericParseError(sample, field, value, location)
    number = float(value)
    # Literals such as 1e999 overflow to inf
    if not math.isfinite(number):
        raise NumericParseError(sample, field, value, location)
    return number


def extract_sample_values(record, field):
    """
    Collect the numeric value of a FORMAT field across a record's samples.

    Samples are visited in header order. A sample that does not carry the
    field, or carries only the missing marker '.', contributes nothing.

    Args:
        record (pysam.VariantRecord): Record to read
        field (str): FORMAT key to extract (e.g. 'DP')

    Returns:
        list: Floats, one per contributing sample (may be empty)

    Raises:
        MultiValueFieldError: If a sample holds more than one value for the field
        NumericParseError: If a value is not a number
    """
    values = []
    location = record_location(record)
    for sample, fields in sample_fields(record).items():
        raw = fields.get(field)
        if raw is None:
            continue
        parts = raw.split(',')
        if len(parts) > 1:
            raise MultiValueFieldError(sample, field, parts, location)
        if raw == MISSING_VALUE:
            logger.debug(f"{location}: sample {sample} has missing {field}")
            continue
        values.append(parse_numeric(raw, sample, field, location))
    return values
