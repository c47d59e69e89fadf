"""End-to-end tests for the command-line entry point"""
import os
from unittest.mock import patch
import pytest

from main import main, EXIT_OK, EXIT_USAGE, EXIT_ENVIRONMENT


class TestMain:
    """Test exit codes and output of main()"""

    def test_scalar_metric(self, capsys):
        code = main(["--name", "backup_last_success", "--type", "gauge",
                     "--comment", "Last successful backup", "--label", "host=db1",
                     "--value", "1700000000"])
        assert code == EXIT_OK
        assert capsys.readouterr().out == (
            "# HELP backup_last_success Last successful backup\n"
            "# TYPE backup_last_success gauge\n"
            'backup_last_success{host="db1",} 1700000000\n'
        )

    def test_histogram_metric(self, capsys):
        code = main([
            "--name", "http_request_duration_seconds",
            "--le", "0.05", "--count", "24054",
            "--le", "0.5", "--count", "129389",
            "--total-count", "144320", "--value", "53423",
        ])
        assert code == EXIT_OK
        lines = capsys.readouterr().out.splitlines()
        assert lines[2:] == [
            'http_request_duration_seconds_bucket{le="0.05"} 24054',
            'http_request_duration_seconds_bucket{le="0.5"} 129389',
            'http_request_duration_seconds_bucket{le="+Inf"} 144320',
            "http_request_duration_seconds_sum 53423",
            "http_request_duration_seconds_count 144320",
        ]

    @pytest.mark.parametrize("value", ["-Inf", "-1e3", "-.5e1"])
    def test_dash_leading_value(self, value, capsys):
        assert main(["--name", "t", "--value", value]) == EXIT_OK
        assert capsys.readouterr().out.splitlines()[-1] == f"t {value}"

    def test_dash_leading_comment(self, capsys):
        assert main(["--name", "t", "--comment", "-deprecated", "--value", "1"]) == EXIT_OK
        assert capsys.readouterr().out.splitlines()[0] == "# HELP t -deprecated"

    def test_no_options_writes_nothing(self, capsys):
        assert main([]) == EXIT_OK
        assert capsys.readouterr().out == ""

    def test_failure_discards_earlier_groups(self, capsys):
        """Test nothing is written when a later group fails"""
        code = main(["--name", "ok", "--value", "1",
                     "--name", "h", "--le", "1", "--count", "1", "--value", "2"])
        captured = capsys.readouterr()
        assert code == EXIT_USAGE
        assert captured.out == ""
        assert "--total-count" in captured.err

    @pytest.mark.parametrize("argv", [
        ["--value", "1"],
        ["--name", "g", "--type", "gauge", "--le", "1"],
        ["--name", "h", "--count", "1"],
        ["--name", "t", "--label", "nolabel", "--value", "1"],
        ["--name", "t", "--value", "1", "trailing"],
        ["--name", "t", "--value"],
        ["--name", "t", "--value", "1", "--", "x"],
    ])
    def test_usage_failures(self, argv, capsys):
        assert main(argv) == EXIT_USAGE
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "error:" in captured.err

    def test_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0
        assert "--value" in capsys.readouterr().out

    def test_output_file(self, tmp_path, capsys):
        target = tmp_path / "textfile" / "jobs.prom"
        code = main(["--output", str(target), "--name", "jobs", "--value", "3"])
        assert code == EXIT_OK
        assert capsys.readouterr().out == ""
        assert target.read_text() == "# HELP jobs \n# TYPE jobs UNTYPED\njobs 3\n"

    def test_output_file_from_environment(self, tmp_path):
        target = tmp_path / "env.prom"
        with patch.dict(os.environ, {"OUTPUT_FILE": str(target)}):
            assert main(["--name", "jobs", "--value", "3"]) == EXIT_OK
        assert target.read_text().endswith("jobs 3\n")

    def test_sort_labels_from_environment(self, capsys):
        with patch.dict(os.environ, {"SORT_LABELS": "true"}):
            main(["--name", "t", "--label", "b=1", "--label", "a=2", "--value", "1"])
        assert capsys.readouterr().out.splitlines()[-1] == 't{a="2",b="1",} 1'

    def test_invalid_configuration(self, capsys):
        with patch.dict(os.environ, {"LOG_LEVEL": "LOUD"}):
            assert main(["--name", "t", "--value", "1"]) == EXIT_ENVIRONMENT
        assert "invalid configuration" in capsys.readouterr().err

    def test_unwritable_output(self, tmp_path, capsys):
        blocker = tmp_path / "file"
        blocker.write_text("")
        code = main(["--output", str(blocker / "sub" / "x.prom"), "--name", "t", "--value", "1"])
        assert code == EXIT_ENVIRONMENT
        assert "cannot write" in capsys.readouterr().err
