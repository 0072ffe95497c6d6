from __future__ import annotations

import csv
import json

import pytest
import requests
from typer.testing import CliRunner

from conftest import FakeTransport
from pqzkbench.metrics import FIELDNAMES
from pqzkbench_cli import main as cli_main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def transport(monkeypatch: pytest.MonkeyPatch) -> FakeTransport:
    fake = FakeTransport()
    monkeypatch.setattr(cli_main, "_make_transport", lambda timeout: fake)
    return fake


def test_kem_command_prints_json(runner, transport):
    result = runner.invoke(
        cli_main.app,
        ["--label", "ci", "kem", "--param-set", "ml_kem_512", "--operation", "encaps",
         "--iterations", "5", "--requests", "4", "--concurrency", "2"],
    )
    assert result.exit_code == 0, result.output
    (record,) = json.loads(result.stdout)
    assert list(record) == FIELDNAMES
    assert record["label"] == "ci"
    assert record["service"] == "lattice_service"
    assert record["operation"] == "encaps"
    assert record["param_set"] == "ml_kem_512"
    assert record["requests"] == 4
    assert record["concurrency"] == 2
    assert record["error_count"] == 0
    # avg_us 2000 on the wire
    assert record["avg_latency_ms"] == pytest.approx(2.0)
    assert len(transport.calls) == 4
    url, body = transport.calls[0]
    assert url == "http://localhost:8000/kem_bench"
    assert body == {"param_set": "ml_kem_512", "iterations": 5, "operation": "encaps"}
    assert transport.closed


def test_zk_prove_writes_csv_file(runner, transport, tmp_path):
    out = tmp_path / "prove.csv"
    result = runner.invoke(
        cli_main.app,
        ["--output", "csv", "--file", str(out), "zk-prove", "--url", "http://zk.test/",
         "--circuit-id", "cube_root", "--iterations", "3"],
    )
    assert result.exit_code == 0, result.output
    with out.open(newline="", encoding="utf-8") as handle:
        (row,) = list(csv.DictReader(handle))
    assert row["service"] == "zk_service"
    assert row["operation"] == "prove"
    assert row["param_set"] == "cube_root"
    assert float(row["avg_latency_ms"]) == pytest.approx(20.0)
    assert transport.calls[0][0] == "http://zk.test/zk_prove_bench"


def test_zk_verify_defaults(runner, transport):
    result = runner.invoke(cli_main.app, ["zk-verify"])
    assert result.exit_code == 0, result.output
    (record,) = json.loads(result.stdout)
    assert record["operation"] == "verify"
    assert record["iterations"] == 100
    assert transport.calls[0] == (
        "http://localhost:8001/zk_verify_bench",
        {"circuit_id": "multiply", "iterations": 100},
    )


def test_suite_runs_full_matrix(runner, transport, tmp_path):
    out = tmp_path / "suite.json"
    result = runner.invoke(
        cli_main.app,
        ["--file", str(out), "suite", "--kem-iterations", "20", "--zk-iterations", "3"],
    )
    assert result.exit_code == 0, result.output
    records = json.loads(out.read_text(encoding="utf-8"))
    assert len(records) == 16
    kem = [r for r in records if r["service"] == "lattice_service"]
    assert len(kem) == 12
    assert {(r["param_set"], r["operation"]) for r in kem} == {
        (ps, op)
        for ps in ("ml_kem_512", "ml_kem_768", "ml_kem_1024")
        for op in ("keygen", "encaps", "decaps", "full_handshake")
    }
    assert all(r["iterations"] == 20 for r in kem)
    zk = [(r["param_set"], r["operation"], r["iterations"]) for r in records[12:]]
    assert zk == [
        ("multiply", "prove", 3),
        ("multiply", "verify", 30),
        ("cube_root", "prove", 3),
        ("cube_root", "verify", 30),
    ]
    assert all(r["requests"] == 1 and r["concurrency"] == 1 for r in records)


def test_unreachable_service_still_reports(runner, monkeypatch):
    fake = FakeTransport(lambda url, body, call: requests.ConnectionError("refused"))
    monkeypatch.setattr(cli_main, "_make_transport", lambda timeout: fake)
    result = runner.invoke(cli_main.app, ["--log-level", "CRITICAL", "kem", "--requests", "5"])
    assert result.exit_code == 0, result.output
    (record,) = json.loads(result.stdout)
    assert record["error_count"] == 5
    assert record["avg_latency_ms"] == 0
    assert record["throughput_ops_sec"] == 0


def test_timeout_reaches_transport(runner, monkeypatch):
    seen = {}

    def make(timeout):
        seen["timeout"] = timeout
        return FakeTransport()

    monkeypatch.setattr(cli_main, "_make_transport", make)
    result = runner.invoke(cli_main.app, ["--timeout", "1.5", "zk-prove"])
    assert result.exit_code == 0, result.output
    assert seen["timeout"] == 1.5


def test_rejects_unknown_output_format(runner, transport):
    result = runner.invoke(cli_main.app, ["--output", "xml", "kem"])
    assert result.exit_code != 0
    assert transport.calls == []
