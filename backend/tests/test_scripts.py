from __future__ import annotations

import json
from pathlib import Path

import pytest

import scripts.benchmark_engines as benchmark_engines
import scripts.solve_routes as solve_routes
from roadroute.settings import settings

INPUT_TEXT = """[CITIES]
1: Москва
2: Санкт-Петербург
3: Нижний Новгород
4: Казань

[ROADS]
1 - 2: 700, 480, 800
1 - 3: 400, 250, 300
2 - 3: 1100, 700, 1200
3 - 4: 350, 300, 500
1 - 4: 800, 600, 1000

[REQUESTS]
Москва -> Санкт-Петербург | (Д,В,С)
Нижний Новгород -> Казань | (С,В,Д)
"""


def _write_input(tmp_path: Path, text: str = INPUT_TEXT) -> Path:
    path = tmp_path / "input.txt"
    path.write_text(text, encoding="utf-8")
    return path


def test_solve_routes_main_writes_output(tmp_path: Path, capsys) -> None:
    input_path = _write_input(tmp_path)
    output_path = tmp_path / "output.txt"

    code = solve_routes.main(
        ["--input", str(input_path), "--output", str(output_path), "--engine", "sequential"]
    )

    assert code == 0
    lines = output_path.read_text(encoding="utf-8").split("\n")
    assert lines[0] == "DISTANCE: Москва -> Санкт-Петербург | distance=700, time=480, cost=800"
    assert lines[4] == ""
    assert lines[8] == "COMPROMISE: Нижний Новгород -> Казань | distance=350, time=300, cost=500"
    summary = json.loads(capsys.readouterr().out)
    assert summary["engine"] == "sequential"
    assert summary["request_count"] == 2
    assert summary["no_route_count"] == 0


def test_solve_routes_main_reports_missing_input(tmp_path: Path, capsys) -> None:
    code = solve_routes.main(["--input", str(tmp_path / "absent.txt"), "--output", str(tmp_path / "o.txt")])

    assert code == 1
    assert "I/O error" in capsys.readouterr().err


def test_solve_routes_main_reports_parse_errors(tmp_path: Path, capsys) -> None:
    input_path = _write_input(tmp_path, "[CITIES]\n1: A\n[ROADS]\n1 - 2: 1, 2\n")

    code = solve_routes.main(["--input", str(input_path), "--output", str(tmp_path / "o.txt")])

    assert code == 1
    assert "parse error at line 4" in capsys.readouterr().err
    assert not (tmp_path / "o.txt").exists()


def test_solve_routes_main_reports_undecodable_input(tmp_path: Path, capsys) -> None:
    input_path = tmp_path / "input.txt"
    input_path.write_bytes(b"[CITIES]\n1: \xff\xfe\n")

    code = solve_routes.main(["--input", str(input_path), "--output", str(tmp_path / "o.txt")])

    assert code == 1
    assert "not valid utf-8 text" in capsys.readouterr().err
    assert not (tmp_path / "o.txt").exists()


def test_run_solve_with_artifacts(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "out_dir", str(tmp_path / "out"))
    args = solve_routes.build_parser().parse_args(
        [
            "--input",
            str(_write_input(tmp_path)),
            "--output",
            str(tmp_path / "output.txt"),
            "--artifacts",
            "--run-id",
            "run_abc",
        ]
    )

    summary = solve_routes.run_solve(args)

    assert summary["run_id"] == "run_abc"
    assert Path(summary["manifest"]).exists()
    assert Path(summary["artifacts"]["results.csv"]).exists()
    manifest = json.loads(Path(summary["manifest"]).read_text(encoding="utf-8"))
    assert manifest["artifacts"] == ["results.csv", "results.json"]
    assert manifest["node_count"] == 4


def test_benchmark_engines_reports_no_mismatches(tmp_path: Path) -> None:
    args = benchmark_engines.build_parser().parse_args(
        [
            "--shape",
            "dense",
            "--node-count",
            "30",
            "--pair-count",
            "6",
            "--iterations",
            "1",
            "--out-dir",
            str(tmp_path),
        ]
    )

    record = benchmark_engines.run_benchmark(args)

    assert record["mismatch_count"] == 0
    assert record["pair_count"] == 6
    assert record["node_count"] == 30
    assert Path(record["log_path"]).exists()
    assert Path(record["log_path"]).parent == tmp_path.resolve() / "benchmarks"


def test_generate_pairs_is_seeded() -> None:
    graph = benchmark_engines.build_graph("linear", 12, seed=1)

    assert benchmark_engines.generate_pairs(graph, 5, 3) == benchmark_engines.generate_pairs(graph, 5, 3)
    assert all(1 <= a <= 12 and 1 <= b <= 12 for a, b in benchmark_engines.generate_pairs(graph, 5, 3))
