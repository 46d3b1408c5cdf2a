"""Pytest fixtures for vcfsample2info tests."""

from pathlib import Path

import pytest

HEADER_LINES = [
    "##fileformat=VCFv4.2",
    '##FILTER=<ID=LowQual,Description="Low quality">',
    '##INFO=<ID=AF,Number=A,Type=Float,Description="Allele frequency">',
    '##INFO=<ID=SOMATIC,Number=0,Type=Flag,Description="Somatic event">',
    '##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">',
    '##FORMAT=<ID=DP,Number=1,Type=Integer,Description="Read depth">',
    '##FORMAT=<ID=AD,Number=R,Type=Integer,Description="Allelic depths">',
    '##FORMAT=<ID=VAF,Number=1,Type=Float,Description="Variant allele fraction">',
    '##FORMAT=<ID=XS,Number=1,Type=String,Description="Caller score as text">',
    "##contig=<ID=chr1,length=248956422>",
]


def make_vcf(records, samples=("S1", "S2", "S3"), header_lines=None) -> str:
    """Build VCF text from body lines (columns joined with tabs)."""
    lines = list(header_lines if header_lines is not None else HEADER_LINES)
    columns = ["#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO"]
    if samples:
        columns += ["FORMAT"] + list(samples)
    lines.append("\t".join(columns))
    for record in records:
        lines.append(record if isinstance(record, str) else "\t".join(record))
    return "\n".join(lines) + "\n"


def body(text):
    """Record lines of VCF text."""
    return [line for line in text.splitlines() if line and not line.startswith("#")]


def info_column(line):
    return line.split("\t")[7]


@pytest.fixture
def write_vcf(tmp_path: Path):
    """Factory writing body lines to a VCF file under tmp_path."""
    counter = {"n": 0}

    def _write(records, samples=("S1", "S2", "S3"), header_lines=None, name=None) -> Path:
        counter["n"] += 1
        path = tmp_path / (name or f"input_{counter['n']}.vcf")
        path.write_text(make_vcf(records, samples=samples, header_lines=header_lines))
        return path

    return _write


@pytest.fixture
def dp_records() -> list:
    """Three records with DP for every sample.

    - chr1:100: DP 10/20/30
    - chr1:200: DP 5/7/9, SOMATIC flag and existing AF
    - chr1:300: DP 40/.(missing)/8, sample 2 missing value
    """
    return [
        ["chr1", "100", "rs1", "A", "G", "50", "PASS", "AF=0.5",
         "GT:DP:AD", "0/1:10:5,5", "0/0:20:20,0", "1/1:30:0,30"],
        ["chr1", "200", ".", "C", "T", "99.5", "PASS", "SOMATIC;AF=0.1",
         "GT:DP", "0/1:5", "0/1:7", "0/0:9"],
        ["chr1", "300", ".", "G", "A,C", ".", "LowQual", ".",
         "GT:DP", "0/1:40", "./.:.", "1/2:8"],
    ]


@pytest.fixture
def sample_vcf(write_vcf, dp_records) -> Path:
    """Write a small three-sample VCF to disk."""
    return write_vcf(dp_records, name="input.vcf")
