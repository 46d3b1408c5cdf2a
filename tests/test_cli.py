"""Tests for the vcfsample2info command line script."""

import gzip
import io
import json
import subprocess
import sys
from pathlib import Path

import pytest

from conftest import body, info_column
from vcfsample2info import argparser, run


class FakeTty(io.StringIO):
    def isatty(self) -> bool:
        return True


@pytest.fixture(autouse=True)
def _no_log_dir(monkeypatch):
    monkeypatch.delenv("VCFSAMPLE2INFO_LOG_DIR", raising=False)
    monkeypatch.delenv("VCFSAMPLE2INFO_LOG_LEVEL", raising=False)
    monkeypatch.delenv("VCFSAMPLE2INFO_ENABLE_METRICS", raising=False)


SCRIPT = Path(__file__).resolve().parents[1] / "bin" / "vcfsample2info.py"


class TestArguments:
    """Tests for option parsing."""

    def test_default_statistic_is_mean(self) -> None:
        args = argparser().parse_args(["-f", "DP", "-i", "X"])
        assert args.statistic == "mean"
        assert args.vcf is None

    @pytest.mark.parametrize("flag,expected", [
        ("-a", "mean"), ("-m", "median"), ("-n", "min"), ("-x", "max"),
        ("--average", "mean"), ("--median", "median"), ("--min", "min"), ("--max", "max"),
    ])
    def test_statistic_flags(self, flag, expected) -> None:
        args = argparser().parse_args(["-f", "DP", "-i", "X", flag])
        assert args.statistic == expected

    def test_stat_by_name(self) -> None:
        args = argparser().parse_args(["-f", "DP", "-i", "X", "--stat", "max"])
        assert args.statistic == "max"

    def test_statistic_flags_are_exclusive(self) -> None:
        with pytest.raises(SystemExit):
            argparser().parse_args(["-f", "DP", "-i", "X", "-m", "-x"])


class TestRun:
    """Tests for run() exit codes and output."""

    def test_usage_when_no_arguments_on_terminal(self, monkeypatch, capsys) -> None:
        monkeypatch.setattr("sys.stdin", FakeTty())
        assert run([]) == 0
        captured = capsys.readouterr()
        assert "usage:" in captured.err
        assert captured.out == ""

    def test_missing_info_field_is_config_error(self, sample_vcf: Path, capsys) -> None:
        assert run(["-f", "DP", str(sample_vcf)]) == 2
        assert "both a sample field and an info field are required" in capsys.readouterr().err

    def test_missing_sample_field_is_config_error(self, sample_vcf: Path) -> None:
        assert run(["-i", "X", str(sample_vcf)]) == 2

    def test_reserved_characters_in_info_field(self, sample_vcf: Path, capsys) -> None:
        assert run(["-f", "DP", "-i", "A;B", str(sample_vcf)]) == 2
        assert "reserved characters" in capsys.readouterr().err

    def test_annotates_file_to_stdout(self, sample_vcf: Path, capfd) -> None:
        assert run(["-f", "DP", "-i", "DP_MED", "--median", str(sample_vcf)]) == 0
        out = capfd.readouterr().out
        assert '##INFO=<ID=DP_MED,Number=1,Type=Float,' in out
        infos = [info_column(line) for line in body(out)]
        assert infos == ["AF=0.5;DP_MED=20", "SOMATIC;AF=0.1;DP_MED=7", "DP_MED=8"]

    def test_missing_input_file(self, tmp_path: Path, capsys) -> None:
        assert run(["-f", "DP", "-i", "X", str(tmp_path / "absent.vcf")]) == 2
        assert "Cannot open VCF" in capsys.readouterr().err

    def test_invalid_header(self, tmp_path: Path, capsys) -> None:
        path = tmp_path / "bad.vcf"
        path.write_text("not a vcf\n")
        assert run(["-f", "DP", "-i", "X", str(path)]) == 1
        assert "Cannot open VCF" in capsys.readouterr().err

    def test_incompatible_info_id(self, sample_vcf: Path, tmp_path: Path, capsys) -> None:
        output = tmp_path / "out.vcf"
        assert run(["-f", "DP", "-i", "SOMATIC", "-o", str(output), str(sample_vcf)]) == 2
        assert "already declared" in capsys.readouterr().err
        assert not output.exists()

    def test_multi_value_field_fails(self, write_vcf, tmp_path: Path, capsys) -> None:
        path = write_vcf(["chr1\t1\t.\tA\tG\t.\tPASS\t.\tGT:AD\t0/1:5,6\t0/1:3\t0/0:2"])
        output = tmp_path / "out.vcf"
        assert run(["-f", "AD", "-i", "X", "-o", str(output), str(path)]) == 1
        assert "multiple values" in capsys.readouterr().err
        assert not output.exists()

    def test_infinite_value_fails(self, write_vcf, tmp_path: Path, capsys) -> None:
        path = write_vcf(["chr1\t1\t.\tA\tG\t.\tPASS\t.\tXS\t1e999\t2\t3"])
        output = tmp_path / "out.vcf"
        assert run(["-f", "XS", "-i", "X", "-x", "-o", str(output), str(path)]) == 1
        assert "Non-numeric value '1e999'" in capsys.readouterr().err
        assert not output.exists()

    def test_empty_statistic_fails(self, sample_vcf: Path, tmp_path: Path, capsys) -> None:
        output = tmp_path / "out.vcf"
        assert run(["-f", "GQ", "-i", "X", "-o", str(output), str(sample_vcf)]) == 1
        assert "No sample has a value for GQ" in capsys.readouterr().err

    def test_output_file_plain(self, sample_vcf: Path, tmp_path: Path) -> None:
        output = tmp_path / "out" / "annotated.vcf"
        assert run(["-f", "DP", "-i", "X", "-n", "-o", str(output), str(sample_vcf)]) == 0
        infos = [info_column(line) for line in body(output.read_text())]
        assert infos[2] == "X=8"
        assert list(output.parent.iterdir()) == [output]

    def test_output_file_bgzf(self, sample_vcf: Path, tmp_path: Path) -> None:
        """Test .gz output is BGZF and readable with gzip."""
        output = tmp_path / "annotated.vcf.gz"
        assert run(["-f", "DP", "-i", "X", "-o", str(output), str(sample_vcf)]) == 0
        with gzip.open(output, "rt") as f:
            text = f.read()
        assert len(body(text)) == 3
        assert text.startswith("##fileformat=VCFv4.2\n")

    def test_bgzf_input(self, sample_vcf: Path, tmp_path: Path) -> None:
        """Test a BGZF file written by one run is readable by the next."""
        packed = tmp_path / "packed.vcf.gz"
        assert run(["-f", "DP", "-i", "X", "-o", str(packed), str(sample_vcf)]) == 0
        output = tmp_path / "again.vcf"
        assert run(["-f", "DP", "-i", "Y", "-x", "-o", str(output), str(packed)]) == 0
        infos = [info_column(line) for line in body(output.read_text())]
        assert [info.rsplit("=", 1)[1] for info in infos] == ["30", "9", "40"]

    def test_failed_run_leaves_no_output_file(self, tmp_path: Path, sample_vcf: Path) -> None:
        output = tmp_path / "out" / "annotated.vcf"
        assert run(["-f", "GQ", "-i", "X", "-o", str(output), str(sample_vcf)]) == 1
        assert not output.exists()
        assert list(output.parent.iterdir()) == []

    def test_metrics_report_and_verbose(self, sample_vcf: Path, tmp_path: Path, capsys) -> None:
        report = tmp_path / "metrics.json"
        argv = ["-f", "DP", "-i", "X", "-v", "--metrics-report", str(report),
                "-o", str(tmp_path / "out.vcf"), str(sample_vcf)]
        assert run(argv) == 0
        err = capsys.readouterr().err
        assert "SAMPLE TO INFO CONFIGURATION SUMMARY" in err
        data = json.loads(report.read_text())
        assert data["metrics"]["counters"]["annotation_items"]["value"] == 3
        assert data["metrics"]["counters"]["values_used"]["value"] == 8


class TestScript:
    """Tests running the script as a pipeline stage."""

    def test_reads_standard_input_and_writes_standard_output(self, sample_vcf: Path) -> None:
        with open(sample_vcf) as stdin:
            result = subprocess.run(
                [sys.executable, str(SCRIPT), "-f", "DP", "-i", "DP_MAX", "-x"],
                stdin=stdin, capture_output=True, text=True, check=False,
            )
        assert result.returncode == 0, result.stderr
        infos = [info_column(line) for line in body(result.stdout)]
        assert [info.rsplit("=", 1)[1] for info in infos] == ["30", "9", "40"]

    def test_missing_input_exit_status(self, tmp_path: Path) -> None:
        result = subprocess.run(
            [sys.executable, str(SCRIPT), "-f", "DP", "-i", "X", str(tmp_path / "absent.vcf")],
            capture_output=True, text=True, check=False,
        )
        assert result.returncode == 2
        assert result.stdout == ""
