import pytest

from benchmarks import bench_borrow


@pytest.mark.parametrize("bench", bench_borrow.BENCHMARKS)
def test_benchmark_leaves_cells_usable(
    bench, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(bench_borrow, "INNER_LOOPS", 3)
    bench()


def test_main_reports_every_benchmark(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(bench_borrow, "INNER_LOOPS", 2)
    monkeypatch.setattr("sys.argv", ["bench_borrow.py", "1"])
    bench_borrow.main()
    lines = capsys.readouterr().out.splitlines()
    assert [line.split()[0] for line in lines] == [
        bench.__name__ for bench in bench_borrow.BENCHMARKS
    ]
    assert all(line.endswith("ns/borrow") for line in lines)
