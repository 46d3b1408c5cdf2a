"""
Per-sample to INFO summary annotation pipeline.

This module drives a single forward pass over a VCF stream: it declares the
new INFO field, writes the header, then for every record extracts the
per-sample values of a FORMAT field, reduces them with the selected
statistic, writes the result into INFO and emits the record.

Any failure aborts the run. A record whose statistic cannot be computed is
never written, so the output never contains a record without the
annotation.

Classes:
    PipelineState: AWAIT_HEADER -> STREAMING_RECORDS -> DONE
    SampleStatAnnotator: Runs the annotation over one VariantStream

Example:
    >>> from vcf_utils.record_stream import VariantStream
    >>> from vcf_utils.sample_to_info import SampleStatAnnotator
    >>> with VariantStream.open('calls.vcf.gz') as stream:
    ...     SampleStatAnnotator(stream, 'DP', 'DP_MEDIAN', 'median').run()
"""
import logging
import time
from enum import Enum

from .error_handler import EmptyStatisticError, StreamStateError
from .field_extraction import extract_sample_values
from .info_annotator import apply_annotation, declare_annotation
from .record_stream import record_location
from .sample_statistics import Statistic, reduce_values

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    AWAIT_HEADER = "await_header"
    STREAMING_RECORDS = "streaming_records"
    DONE = "done"


class SampleStatAnnotator:
    """
    Annotate every record of a stream with a summary of one FORMAT field.

    Args:
        stream: Open VariantStream (owns input and output)
        sample_field: FORMAT key to summarize (e.g. 'DP')
        info_field: INFO key receiving the statistic
        statistic: Statistic or its name (mean, median, min, max)
        operational_logger: Optional OperationalLogger for stage/metric logging
    """

    def __init__(self, stream, sample_field, info_field, statistic=Statistic.MEAN,
                 operational_logger=None):
        self.stream = stream
        self.sample_field = sample_field
        self.info_field = info_field
        self.statistic = Statistic.from_name(statistic)
        self.operational_logger = operational_logger
        self.state = PipelineState.AWAIT_HEADER
        self.n_samples = len(stream.samples)

        self.stats = {
            'records_read': 0,
            'records_annotated': 0,
            'values_used': 0,
            'samples_skipped': 0,
        }

    def _stage(self, name, status):
        if self.operational_logger:
            self.operational_logger.log_stage(name, status)
        else:
            logger.debug(f"STAGE: {name} - {status}")

    def start(self):
        """Declare the INFO field and emit the header."""
        if self.state is not PipelineState.AWAIT_HEADER:
            raise StreamStateError(f"Cannot start annotation in state {self.state.value}")
        declare_annotation(self.stream, self.info_field, self.statistic, self.sample_field)
        self.stream.write_header()
        self.state = PipelineState.STREAMING_RECORDS
        self._stage("HEADER", "COMPLETE")

    def annotate_record(self, record):
        """
        Compute the statistic for one record and store it in INFO.

        Raises:
            EmptyStatisticError: If no sample carries a value for the field
            MultiValueFieldError: If a sample holds several values
            NumericParseError: If a value is not numeric
        """
        values = extract_sample_values(record, self.sample_field)
        if not values:
            raise EmptyStatisticError(
                f"No sample has a value for {self.sample_field} at {record_location(record)}; "
                f"cannot compute {self.statistic.value}"
            )
        self.stats['values_used'] += len(values)
        self.stats['samples_skipped'] += self.n_samples - len(values)
        return apply_annotation(record, self.info_field, reduce_values(self.statistic, values))

    def run(self):
        """
        Run the full pass and return the run statistics.

        Returns:
            dict: Counters for records read/annotated and values used
        """
        start_time = time.time()
        self._stage("ANNOTATION", "START")
        self.start()

        for record in self.stream:
            self.stats['records_read'] += 1
            self.annotate_record(record)
            self.stream.write(record)
            self.stats['records_annotated'] += 1

        self.state = PipelineState.DONE
        duration = time.time() - start_time
        logger.info(f"Annotated {self.stats['records_annotated']:,} records with "
                    f"INFO/{self.info_field} = {self.statistic.value}({self.sample_field})")
        if self.operational_logger:
            self.operational_logger.log_performance("annotation", duration, self.stats['records_annotated'])
            self.operational_logger.log_metric("values_used", self.stats['values_used'], "counter")
            self.operational_logger.log_metric("samples_skipped", self.stats['samples_skipped'], "counter")
        self._stage("ANNOTATION", "COMPLETE")
        return self.stats
