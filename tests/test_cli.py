import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from payment_processor.cli import app, cmd_process

runner = CliRunner()


# ---- Helpers -----------------------------------------------------------------


def _write_input(path: Path, records) -> Path:
    path.write_text(json.dumps(records, indent=2), encoding="utf-8")
    return path


def _tx(tx_id, merchant, amount, currency, status, created):
    return {
        "transactionId": tx_id,
        "merchantRef": merchant,
        "amount": amount,
        "currency": currency,
        "status": status,
        "createdAtUtc": created,
    }


# ---- Tests -------------------------------------------------------------------


def test_process_writes_report(tmp_path: Path):
    inp = _write_input(
        tmp_path / "transactions.json",
        [
            _tx("tx-001", "m-1", 100.00, "USD", "SUCCESS", "2025-01-12T10:00:00Z"),
            _tx("tx-002", "m-2", 200.00, "EUR", "FAILED", "2025-01-12T11:00:00Z"),
            _tx("tx-003", "m-3", 300.00, "GBP", "PENDING", "2025-01-12T12:00:00Z"),
            _tx("tx-004", "m-4", -50.00, "USD", "SUCCESS", "2025-01-12T13:00:00Z"),
        ],
    )
    out = tmp_path / "report.json"

    result = runner.invoke(app, ["process", "--input", str(inp), "--output", str(out)])

    assert result.exit_code == 0, result.output
    assert f"Report generated at {out.resolve()}" in result.output
    doc = json.loads(out.read_text(encoding="utf-8"))
    assert doc["totalTransactions"] == 4
    assert doc["validTransactions"] == 3
    assert doc["invalidTransactions"] == 1
    assert doc["invalidReasons"]["INVALID_AMOUNT"] == 1
    assert doc["statusCounts"] == {"SUCCESS": 1, "FAILED": 1, "PENDING": 1}
    assert doc["successAmountStats"] == {"min": 100.0, "max": 100.0, "avg": 100.0}
    assert doc["duplicateGroups"] == []


def test_process_reports_both_duplicate_rules(tmp_path: Path):
    inp = _write_input(
        tmp_path / "duplicates.json",
        [
            _tx("tx-001", "m-1", 100.00, "USD", "SUCCESS", "2025-01-12T10:00:00Z"),
            _tx("tx-001", "m-1", 100.00, "USD", "SUCCESS", "2025-01-12T11:00:00Z"),
            _tx("tx-002", "m-2", 200.00, "EUR", "FAILED", "2025-01-12T12:00:00Z"),
            _tx("tx-003", "m-2", 200.00, "EUR", "SUCCESS", "2025-01-12T13:00:00Z"),
        ],
    )
    out = tmp_path / "duplicates-report.json"

    result = runner.invoke(app, ["process", "--input", str(inp), "--output", str(out)])

    assert result.exit_code == 0, result.output
    doc = json.loads(out.read_text(encoding="utf-8"))
    assert [g["rule"] for g in doc["duplicateGroups"]] == ["TXID", "MERCHANT_AMOUNT_DAY"]
    assert [t["transactionId"] for t in doc["duplicateGroups"][1]["transactions"]] == [
        "tx-002",
        "tx-003",
    ]


def test_process_empty_array(tmp_path: Path):
    inp = _write_input(tmp_path / "empty.json", [])
    out = tmp_path / "empty-report.json"

    result = runner.invoke(app, ["process", "--input", str(inp), "--output", str(out)])

    assert result.exit_code == 0, result.output
    doc = json.loads(out.read_text(encoding="utf-8"))
    assert doc["totalTransactions"] == 0
    assert doc["duplicateGroups"] == []


def test_missing_required_option_is_usage_error(tmp_path: Path):
    result = runner.invoke(app, ["process", "--input", str(tmp_path / "x.json")])
    assert result.exit_code != 0


# ---- Command handler error mapping -------------------------------------------


def test_cmd_process_missing_input(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    code = cmd_process(str(tmp_path / "missing.json"), str(tmp_path / "out.json"))

    assert code == 1
    assert "Error: Input file not found" in capsys.readouterr().err
    assert not (tmp_path / "out.json").exists()


@pytest.mark.parametrize("content", ["{oops", '{"transactionId": "tx-1"}', '[{"amount": "x"}]'])
def test_cmd_process_malformed_input(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], content: str
):
    inp = tmp_path / "bad.json"
    inp.write_text(content, encoding="utf-8")

    code = cmd_process(str(inp), str(tmp_path / "out.json"))

    assert code == 1
    assert "Error: Invalid JSON format in input file" in capsys.readouterr().err


def test_cmd_process_unwritable_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    inp = _write_input(tmp_path / "in.json", [])

    # Parent directory does not exist.
    code = cmd_process(str(inp), str(tmp_path / "no-such-dir" / "out.json"))

    assert code == 1
    assert "Error: I/O error occurred" in capsys.readouterr().err


def test_cmd_process_success_message(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    inp = _write_input(tmp_path / "in.json", [])

    code = cmd_process(str(inp), "out.json")

    assert code == 0
    assert capsys.readouterr().out.strip() == f"Report generated at {(tmp_path / 'out.json').resolve()}"


# ---- Log level ---------------------------------------------------------------


@pytest.fixture
def _restore_pkg_logger():
    import logging

    logger = logging.getLogger("payment_processor")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


def test_log_level_option_sets_package_level(tmp_path: Path, _restore_pkg_logger):
    inp = _write_input(tmp_path / "in.json", [])

    result = runner.invoke(
        app,
        ["--log-level", "warning", "process", "--input", str(inp), "--output", "out.json"],
    )

    assert result.exit_code == 0, result.output
    assert _restore_pkg_logger.level == 30


def test_log_level_read_from_dotenv(tmp_path: Path, _restore_pkg_logger):
    (tmp_path / ".env").write_text("PAYMENT_PROCESSOR_LOG_LEVEL=ERROR\n", encoding="utf-8")
    inp = _write_input(tmp_path / "in.json", [])

    result = runner.invoke(app, ["process", "--input", str(inp), "--output", "out.json"])

    assert result.exit_code == 0, result.output
    assert _restore_pkg_logger.level == 40


def test_unknown_log_level_is_usage_error(tmp_path: Path, _restore_pkg_logger):
    inp = _write_input(tmp_path / "in.json", [])

    result = runner.invoke(
        app, ["--log-level", "loud", "process", "--input", str(inp), "--output", "out.json"]
    )

    assert result.exit_code == 2
    assert not (tmp_path / "out.json").exists()
