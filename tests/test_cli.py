"""Tests for the command-line interface."""

import pytest

from devclimate.cli import main


class TestCli:
    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "init-db" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "0.1.0" in capsys.readouterr().out

    def test_init_db(self):
        assert main(["init-db"]) == 0

    def test_init_db_unreachable(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'x.db'}")
        monkeypatch.setenv("DATABASE_CONNECT_ATTEMPTS", "1")
        assert main(["init-db"]) == 1

    def test_invalid_configuration(self, monkeypatch, capsys):
        monkeypatch.setenv("SECRET_KEY", "short")
        assert main(["init-db"]) == 2
        assert "Invalid configuration" in capsys.readouterr().err
