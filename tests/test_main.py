import sys
import os
import io
import logging
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import main as cli
from models import AccountSnapshot


class TestFormatDecimal:
    @pytest.mark.parametrize("value, expected", [
        (Decimal("1.5000"), "1.5"),
        (Decimal("100"), "100"),
        (Decimal("100.0"), "100"),
        (Decimal("0.0001"), "0.0001"),
        (Decimal("-0.4"), "-0.4"),
        (Decimal("-0.0"), "0"),
        (Decimal("0E-4"), "0"),
    ])
    def test_format(self, value, expected):
        assert cli.format_decimal(value) == expected


class TestWriteAccounts:
    def test_sorted_csv_table(self):
        stream = io.StringIO()
        cli.write_accounts([
            AccountSnapshot(2, Decimal("2.0"), Decimal("0"), Decimal("2.0"), False),
            AccountSnapshot(1, Decimal("-0.4"), Decimal("0"), Decimal("-0.4"), True),
        ], stream)

        assert stream.getvalue().splitlines() == [
            "client,available,held,total,locked",
            "1,-0.4,0,-0.4,true",
            "2,2,0,2,false",
        ]


class TestMain:
    def test_usage(self, capsys):
        assert cli.main([]) == 1
        assert "Usage" in capsys.readouterr().err

    def test_processes_file(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 1, 1, 1.0",
            "deposit, 2, 2, 2.0",
            "deposit, 1, 3, 2.0",
            "withdrawal, 1, 4, 1.5",
            "withdrawal, 2, 5, 3.0",
        ]))

        assert cli.main([str(csv_file)]) == 0

        assert capsys.readouterr().out.splitlines() == [
            "client,available,held,total,locked",
            "1,1.5,0,1.5,false",
            "2,2,0,2,false",
        ]

    def test_fatal_error_prints_no_table(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 1, 1, 1.0",
            "withdrawal, 1, 2,",
        ]))

        assert cli.main([str(csv_file)]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Error occurred: Missing amount field in transaction with id: 2" in captured.err


    def test_undecodable_input_reports_error(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_bytes(b"type,client,tx,amount\ndeposit,1,1,\xff\n")

        assert cli.main([str(csv_file)]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Error occurred: Error parsing CSV input" in captured.err

class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def reset_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        root.handlers = []
        yield
        root.handlers = handlers
        root.setLevel(level)

    def test_default_level(self, monkeypatch):
        monkeypatch.delenv(cli.LOG_LEVEL_ENV_VAR, raising=False)
        cli.configure_logging()
        assert logging.getLogger().level == logging.WARNING

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv(cli.LOG_LEVEL_ENV_VAR, "debug")
        cli.configure_logging()
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level_falls_back(self, monkeypatch):
        monkeypatch.setenv(cli.LOG_LEVEL_ENV_VAR, "chatty")
        cli.configure_logging()
        assert logging.getLogger().level == logging.WARNING
