"""
Streaming VCF reader/writer for record-level annotation.

This module wraps a pysam.VariantFile reader and a VcfOutput writer into a
single forward-only stream. The header is taken from the reader, receives
any new declarations while the stream is still in its header phase, and is
then handed to the writer; records are read lazily and written back through
htslib, so untouched INFO entries and sample fields keep their values.

Classes:
    VariantStream: Forward-only record iterator that owns the reader and
        the output sink

Functions:
    record_location: 'chrom:pos' label for log and error messages
    sample_fields: Raw per-sample FORMAT text of a record, keyed by sample

Example:
    >>> from vcf_utils.record_stream import VariantStream
    >>> with VariantStream.open('calls.vcf.gz') as stream:
    ...     stream.add_declaration('##INFO=<ID=X,Number=1,Type=Float,Description="x">')
    ...     stream.write_header()
    ...     for record in stream:
    ...         stream.write(record)
"""
import logging
from collections import OrderedDict
from typing import Iterator, List, Optional

from common.stat_config import FIXED_COLUMNS

from .error_handler import RecordFormatError, StreamStateError
from .io_utils import VcfOutput, open_vcf_input

logger = logging.getLogger(__name__)

FORMAT_COLUMN = len(FIXED_COLUMNS)


def record_location(record) -> str:
    return f"{record.chrom}:{record.pos}"


def sample_fields(record) -> "OrderedDict[str, OrderedDict[str, str]]":
    """
    Split the sample columns of a record into raw FORMAT text.

    Values are taken from the record's VCF text rather than the typed pysam
    accessors, which collapse a Number=1 field to its first value. Trailing
    FORMAT keys dropped by a sample are absent from its mapping.

    Args:
        record: pysam.VariantRecord

    Returns:
        OrderedDict: sample name -> OrderedDict(FORMAT key -> raw value),
            in header sample order

    Example:
        >>> sample_fields(record)['S1']
        OrderedDict([('GT', '0/1'), ('DP', '10'), ('AD', '5,5')])
    """
    fields = str(record).rstrip('\n').split('\t')
    table = OrderedDict()
    if len(fields) <= FORMAT_COLUMN:
        return table
    format_keys = fields[FORMAT_COLUMN].split(':')
    for name, column in zip(record.header.samples, fields[FORMAT_COLUMN + 1:]):
        table[name] = OrderedDict(zip(format_keys, column.split(':')))
    return table


class VariantStream:
    """
    Forward-only VCF record stream.

    Owns the pysam reader and the output sink for the duration of a run.
    The header may receive new declarations until write_header() is
    called, after which it is frozen.

    Args:
        vcf_in: Open pysam.VariantFile reader
        name: Display name of the input for log and error messages
        output: VcfOutput, output path, or None for standard output
    """

    def __init__(self, vcf_in, name: str = '<stream>', output=None):
        self._vcf_in = vcf_in
        self.name = name
        self.output = output if isinstance(output, VcfOutput) else VcfOutput(output)
        self._records = iter(vcf_in)
        self.records_read = 0
        self.header_written = False
        self._exhausted = False
        logger.debug(f"Opened stream {self.name}: {len(self.samples)} samples")

    @classmethod
    def open(cls, source=None, output=None) -> "VariantStream":
        """
        Open a VCF stream from a path or standard input.

        Args:
            source: File path, or None/'-' for standard input
            output: VcfOutput, output path, or None for stdout

        Raises:
            OpenError: If the input is unreadable or has no valid header
        """
        vcf_in, name = open_vcf_input(source)
        return cls(vcf_in, name=name, output=output)

    @property
    def header(self):
        """The pysam.VariantHeader shared by the reader and the writer."""
        return self._vcf_in.header

    @property
    def samples(self) -> List[str]:
        return list(self.header.samples)

    def add_declaration(self, line: str) -> None:
        """Append a '##' declaration line to the in-memory header."""
        if self.header_written:
            raise StreamStateError(
                f"Cannot add header line after the header was written: {line}"
            )
        if not line.startswith('##'):
            line = '##' + line.lstrip('#')
        self.header.add_line(line)

    def write_header(self) -> None:
        """Hand the final header to the output and freeze it."""
        if self.header_written:
            raise StreamStateError("Header has already been written")
        self.output.open(self.header)
        self.header_written = True

    def next_record(self) -> Optional[object]:
        """Return the next pysam.VariantRecord, or None at end of input."""
        if self._exhausted:
            return None
        try:
            record = next(self._records)
        except StopIteration:
            self._exhausted = True
            return None
        except (OSError, ValueError) as e:
            raise RecordFormatError(self.records_read + 1, str(e) or type(e).__name__) from e
        self.records_read += 1
        return record

    def __iter__(self) -> Iterator[object]:
        while True:
            record = self.next_record()
            if record is None:
                return
            yield record

    def write(self, record) -> None:
        """Serialize one record to the output sink."""
        if not self.header_written:
            raise StreamStateError("Header must be written before the first record")
        self.output.write(record)

    def close(self, success: bool = True) -> None:
        """Release the reader and commit (or discard) the output."""
        try:
            if success:
                self.output.commit()
            else:
                self.output.discard()
        finally:
            self._vcf_in.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close(success=exc_type is None)
        return False
