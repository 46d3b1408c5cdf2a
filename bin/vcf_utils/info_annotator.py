"""
INFO header declaration and per-record INFO annotation.

Functions:
    build_info_declaration: Build the ##INFO line for the computed statistic
    declare_annotation: Add the ##INFO line to a stream's header
    apply_annotation: Overwrite a record's INFO entry with the computed value
"""
import logging

from common.stat_config import (
    COMPATIBLE_INFO_NUMBERS,
    COMPATIBLE_INFO_TYPES,
    INFO_DECLARATION_TEMPLATE,
)

from .error_handler import ConfigError
from .sample_statistics import Statistic, format_value

logger = logging.getLogger(__name__)


def build_info_declaration(info_id, statistic, field):
    """
    Build the ##INFO declaration for the summary statistic.

    Example:
        >>> build_info_declaration('DP_MEAN', Statistic.MEAN, 'DP')
        '##INFO=<ID=DP_MEAN,Number=1,Type=Float,Description="Summary statistic generated by mean of per-sample values of DP">'
    """
    return INFO_DECLARATION_TEMPLATE.format(
        info_id=info_id,
        statistic=Statistic.from_name(statistic).value,
        field=field,
    )


def declare_annotation(stream, info_id, statistic, field):
    """
    Add the ##INFO declaration to the stream's header.

    htslib keeps one declaration per INFO ID, so an ID the input already
    declares keeps its existing line and a warning is logged. The existing
    declaration must be able to hold a single float (Float or String,
    Number=1 or '.').

    Returns:
        str: The declaration line built for the statistic

    Raises:
        ConfigError: If the ID is already declared with an incompatible type
    """
    line = build_info_declaration(info_id, statistic, field)
    if info_id in stream.header.info:
        existing = stream.header.info[info_id]
        if existing.type not in COMPATIBLE_INFO_TYPES or existing.number not in COMPATIBLE_INFO_NUMBERS:
            raise ConfigError(
                f"INFO/{info_id} is already declared as Number={existing.number},Type={existing.type}; "
                f"cannot store the {statistic} of {field} there"
            )
        logger.warning(f"INFO/{info_id} is already declared in the header; keeping the existing "
                       f"declaration, values will be overwritten by the {statistic} of {field}")
        return line

    stream.add_declaration(line)
    logger.debug(f"Added header line: {line}")
    return line


def apply_annotation(record, info_id, value):
    """
    Set INFO/<info_id> to a single value.

    Any previous values for the key are replaced, not merged. A String
    declaration receives the positional decimal text of the value.
    """
    if record.header.info[info_id].type == 'String':
        record.info[info_id] = format_value(value)
    else:
        record.info[info_id] = float(value)
    return record
