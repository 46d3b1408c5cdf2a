"""
Summary statistics over per-sample values.

This module provides the four reducers used to collapse the per-sample
values of a record into one site-level number, and the enum used to select
one of them for a run.

Constants:
    REDUCERS: Mapping of Statistic to reducer function

Functions:
    mean: Arithmetic mean (sum divided by count)
    median: Lower-middle element of the ordered values
    minimum: Smallest value
    maximum: Largest value
    reduce_values: Apply the reducer selected by a Statistic
    format_value: Render a statistic as a decimal INFO value

Example:
    >>> from vcf_utils.sample_statistics import Statistic, reduce_values, format_value
    >>> format_value(reduce_values(Statistic.MEDIAN, [10.0, 20.0, 30.0, 40.0]))
    '20'
"""
from enum import Enum

import numpy as np

from .error_handler import EmptyStatisticError, UnknownStatisticError


class Statistic(Enum):
    """Statistic selector; exactly one is active per run."""

    MEAN = "mean"
    MEDIAN = "median"
    MIN = "min"
    MAX = "max"

    @classmethod
    def from_name(cls, name):
        """
        Look up a statistic by its command line name.

        Raises:
            UnknownStatisticError: If the name is not one of mean/median/min/max
        """
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).lower())
        except ValueError:
            raise UnknownStatisticError(name) from None

    def __str__(self):
        return self.value


def _require_values(values):
    if len(values) == 0:
        raise EmptyStatisticError()


def mean(values):
    """Sum divided by count, accumulated left to right in double precision."""
    _require_values(values)
    total = 0.0
    for value in values:
        total += value
    return total / len(values)


def median(values):
    """
    Lower-middle element of the ordered values.

    For an even number of values the two central values are NOT averaged:
    [10, 20, 30, 40] gives 20, the element at index (n - 1) // 2.

    Note: vcflib's vcfsample2info selects index n // 2 instead, which is the
    upper-middle element for even n (30 for the example above). Results
    differ from vcflib on records with an even number of values.
    """
    _require_values(values)
    k = (len(values) - 1) // 2
    return float(np.partition(np.asarray(values, dtype=np.float64), k)[k])


def minimum(values):
    _require_values(values)
    return float(np.min(np.asarray(values, dtype=np.float64)))


def maximum(values):
    _require_values(values)
    return float(np.max(np.asarray(values, dtype=np.float64)))


REDUCERS = {
    Statistic.MEAN: mean,
    Statistic.MEDIAN: median,
    Statistic.MIN: minimum,
    Statistic.MAX: maximum,
}


def reduce_values(statistic, values):
    """
    Reduce a non-empty sequence of floats with the selected statistic.

    Args:
        statistic (Statistic or str): Statistic selector
        values (sequence): Per-sample values

    Returns:
        float: Statistic value

    Raises:
        UnknownStatisticError: If the selector has no reducer
        EmptyStatisticError: If values is empty
    """
    reducer = REDUCERS.get(Statistic.from_name(statistic))
    if reducer is None:
        raise UnknownStatisticError(statistic)
    return reducer(values)


def format_value(value):
    """
    Render a statistic as a decimal number for the INFO column.

    Uses the shortest representation that round-trips, never scientific
    notation, and drops a trailing '.0'.

    Example:
        >>> format_value(3.0)
        '3'
        >>> format_value(2.5)
        '2.5'
    """
    return np.format_float_positional(float(value), trim='-')
