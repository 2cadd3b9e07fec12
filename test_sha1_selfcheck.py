import pytest
import yaml

import sha1_selfcheck
from sha1_selfcheck import TEST_VECTORS, benchmark, failed_vectors, main, self_check


def test_vector_table_is_immutable():
    assert isinstance(TEST_VECTORS, tuple)
    assert all(isinstance(entry, tuple) for entry in TEST_VECTORS)
    assert len(TEST_VECTORS) == 6


def test_self_check_passes():
    assert self_check()
    assert failed_vectors() == []


def test_self_check_detects_wrong_answer(monkeypatch):
    bad = ((b"abc", (0, 0, 0, 0, 0)),)
    monkeypatch.setattr(sha1_selfcheck, "TEST_VECTORS", TEST_VECTORS + bad)
    assert not self_check()
    ((message, expected, actual),) = failed_vectors()
    assert message == b"abc"
    assert expected == (0, 0, 0, 0, 0)
    assert actual == TEST_VECTORS[2][1]


def test_benchmark_reports_positive_throughput():
    assert benchmark(50) > 0


@pytest.mark.parametrize("iterations", [0, -5])
def test_benchmark_rejects_non_positive_iterations(iterations):
    with pytest.raises(ValueError):
        benchmark(iterations)


def test_main_runs_check_and_benchmark(capsys):
    assert main(["--iterations", "20"]) == 0
    out = capsys.readouterr().out
    assert "Self-check passed" in out
    assert "Speed:" in out
    assert "MB/s" in out


def test_main_without_benchmark(capsys):
    assert main(["--no-benchmark"]) == 0
    out = capsys.readouterr().out
    assert "Self-check passed" in out
    assert "Speed:" not in out


def test_main_fails_on_bad_vector(monkeypatch, capsys):
    monkeypatch.setattr(sha1_selfcheck, "TEST_VECTORS", ((b"a", (1, 2, 3, 4, 5)),))
    assert main(["--iterations", "10"]) == 1
    out = capsys.readouterr().out
    assert "Self-check failed" in out
    assert "Speed:" not in out


def test_main_writes_yaml_report(tmp_path):
    report_path = tmp_path / "report.yaml"
    assert main(["--iterations", "10", "--report", str(report_path)]) == 0

    report = yaml.safe_load(report_path.read_text())
    assert report["passed"] is True
    assert len(report["vectors"]) == 6
    assert report["vectors"][2] == {
        "message": "abc",
        "expected": "a9993e364706816aba3e25717850c26c9cd0d89d",
        "actual": "a9993e364706816aba3e25717850c26c9cd0d89d",
        "passed": True,
    }
    assert report["benchmark"]["iterations"] == 10
    assert report["benchmark"]["bytes_per_second"] > 0


def test_main_rejects_bad_iterations():
    with pytest.raises(SystemExit):
        main(["--iterations", "0"])
