"""
I/O utility functions for VCF stream operations.

This module opens VCF inputs with pysam (plain, gzip/BGZF compressed, or
standard input) and provides the output sink used when writing the
annotated stream. Output goes to standard output by default; file outputs
are written to a temporary sibling file and moved into place only when the
run succeeds, so a failed run never leaves a truncated VCF behind.

Functions:
    is_stdin_source: Check whether a source argument means standard input
    open_vcf_input: Open a VCF source as a pysam.VariantFile

Classes:
    VcfOutput: Output sink for stdout, plain text or BGZF-compressed files

Example:
    >>> from vcf_utils.io_utils import open_vcf_input, VcfOutput
    >>> vcf_in, name = open_vcf_input('calls.vcf.gz')
    >>> with VcfOutput('annotated.vcf.gz') as out:
    ...     out.open(vcf_in.header)
    ...     for record in vcf_in:
    ...         out.write(record)
"""
import errno
import logging
import os
import sys
import tempfile
from pathlib import Path

import pysam

from .error_handler import OpenError

logger = logging.getLogger(__name__)

STDIN_NAMES = (None, '-', '/dev/stdin')
STDOUT_NAMES = (None, '-', '/dev/stdout')
COMPRESSED_SUFFIXES = ('.gz', '.bgz')


def is_stdin_source(source):
    """
    Check whether a source argument refers to standard input.

    Args:
        source: Path, '-' or None

    Returns:
        bool: True if the source means standard input
    """
    if source is sys.stdin:
        return True
    if isinstance(source, (str, Path)) or source is None:
        return (str(source) if source is not None else None) in STDIN_NAMES
    return False


def open_vcf_input(source):
    """
    Open a VCF source for reading.

    Args:
        source: File path (str or Path; compression is detected by htslib),
            or None / '-' for standard input

    Returns:
        tuple: (pysam.VariantFile, display_name)

    Raises:
        OpenError: If the file cannot be read or has no valid VCF header
    """
    if is_stdin_source(source):
        target, name = '-', '<stdin>'
    else:
        path = Path(source)
        name = target = str(path)
        if not path.exists():
            raise OpenError(name, "No such file or directory",
                            cause=FileNotFoundError(errno.ENOENT, "No such file or directory", name))
        if path.is_dir():
            raise OpenError(name, "Is a directory",
                            cause=IsADirectoryError(errno.EISDIR, "Is a directory", name))
        if not os.access(path, os.R_OK):
            raise OpenError(name, "Permission denied",
                            cause=PermissionError(errno.EACCES, "Permission denied", name))

    try:
        vcf_in = pysam.VariantFile(target)
    except (OSError, ValueError) as e:
        raise OpenError(name, str(e) or "not a VCF/BCF file", cause=e) from e

    logger.debug(f"Opened VCF input: {name} ({len(vcf_in.header.samples)} samples)")
    return vcf_in, name


class VcfOutput:
    """
    Output sink for the annotated VCF stream.

    Records are written with pysam.VariantFile to standard output, a plain
    text file, or a BGZF-compressed file ('wz') when the path ends in '.gz'.
    File outputs are staged in a temporary file next to the target and
    renamed on commit.
    """

    def __init__(self, path=None):
        self.path = None if path is None or str(path) in STDOUT_NAMES else Path(path)
        self.compressed = self.path is not None and self.path.suffix in COMPRESSED_SUFFIXES
        self._writer = None
        self._temp_path = None
        self._closed = False
        self.records_written = 0

    @property
    def name(self):
        return str(self.path) if self.path else '<stdout>'

    @property
    def mode(self):
        return 'wz' if self.compressed else 'w'

    def open(self, header):
        """
        Open the pysam writer with the final header.

        Args:
            header: pysam.VariantHeader to emit ahead of the records
        """
        if self._writer is not None:
            return self
        if self.path is None:
            # pysam duplicates the descriptor, so closing the writer leaves stdout open
            sys.stdout.flush()
            target = sys.stdout
        else:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix='.tmp', dir=str(self.path.parent)
            )
            os.close(fd)
            self._temp_path = Path(temp_name)
            target = str(self._temp_path)
            logger.debug(f"Staging output in temporary file: {self._temp_path}")
        self._writer = pysam.VariantFile(target, self.mode, header=header)
        return self

    def write(self, record):
        """Write one pysam.VariantRecord to the sink."""
        if self._writer is None:
            raise ValueError("VcfOutput.open() must be called before writing records")
        self._writer.write(record)
        self.records_written += 1

    def commit(self):
        """Close the writer, moving a staged file into place."""
        if self._closed:
            return
        self._closed = True
        if self._writer is None:
            return
        self._writer.close()
        if self._temp_path is not None:
            os.replace(self._temp_path, self.path)
            logger.info(f"Wrote {self.records_written:,} records to {self.path}")

    def discard(self):
        """Close the writer after a failure, removing any staged file."""
        if self._closed:
            return
        self._closed = True
        try:
            if self._writer is not None:
                self._writer.close()
        finally:
            if self._temp_path is not None and self._temp_path.exists():
                self._temp_path.unlink()
                logger.debug(f"Removed partial output: {self._temp_path}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.commit()
        else:
            self.discard()
        return False
