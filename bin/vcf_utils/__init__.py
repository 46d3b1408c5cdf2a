"""
VCF utilities package for per-sample to INFO summary annotation.

This package provides the streaming VCF reader/writer, per-sample field
extraction, the summary statistic reducers and the INFO annotation steps
used by the vcfsample2info script.

Modules:
    record_stream: pysam-backed header/record stream
    io_utils: pysam input opening and output sinks (stdout, text, BGZF)
    field_extraction: Numeric per-sample FORMAT value extraction
    sample_statistics: mean/median/min/max reducers and value formatting
    info_annotator: ##INFO declaration and per-record INFO overwrite
    sample_to_info: Single-pass annotation pipeline
    error_handler: Fatal error taxonomy and exit codes
    logging_config: Logging setup and run metrics

Example:
    >>> from vcf_utils import VariantStream, SampleStatAnnotator
    >>>
    >>> with VariantStream.open('calls.vcf.gz', output='annotated.vcf.gz') as stream:
    ...     stats = SampleStatAnnotator(stream, 'DP', 'DP_MEAN', 'mean').run()
    >>> print(stats['records_annotated'])
"""

__version__ = "1.0.0"

from .error_handler import (
    ConfigError,
    EmptyStatisticError,
    MultiValueFieldError,
    NumericParseError,
    OpenError,
    RecordFormatError,
    Sample2InfoError,
    StreamStateError,
    UnknownStatisticError,
)
from .field_extraction import extract_sample_values
from .info_annotator import apply_annotation, build_info_declaration, declare_annotation
from .record_stream import VariantStream, record_location, sample_fields
from .sample_statistics import Statistic, format_value, reduce_values
from .sample_to_info import PipelineState, SampleStatAnnotator
