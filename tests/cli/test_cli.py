"""Tests for the command line interface."""

import os

import pytest

from termhold import __version__
from termhold.cli import main
from termhold.cli.args import parse_args
from termhold.cli.display import build_details_table


class TestParseArgs:
    def test_defaults(self):
        args = parse_args([])

        assert args.path is None
        assert args.host is None
        assert args.port is None
        assert args.config == "termhold.yaml"
        assert args.verbose is False

    def test_all_options(self):
        args = parse_args(["/srv", "--host", "0.0.0.0", "--port", "9000", "-c", "x.yaml", "-v"])

        assert args.path == "/srv"
        assert args.host == "0.0.0.0"
        assert args.port == 9000
        assert args.config == "x.yaml"
        assert args.verbose is True

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestMain:
    @pytest.fixture
    def uvicorn_calls(self, monkeypatch):
        calls = []
        monkeypatch.setattr("termhold.cli.uvicorn.run", lambda *a, **kw: calls.append((a, kw)))
        monkeypatch.setattr("termhold.cli.display_startup_screen", lambda **kw: None)
        monkeypatch.setattr("termhold.cli.setup_logging", lambda **kw: None)
        env = {k: v for k, v in os.environ.items() if not k.startswith("TERMHOLD_")}
        monkeypatch.setattr(os, "environ", env)
        return calls

    def test_runs_uvicorn_factory(self, uvicorn_calls, tmp_path):
        config_path = tmp_path / "termhold.yaml"
        config_path.write_text("server:\n  port: 9100\n")

        main([str(tmp_path), "--config", str(config_path)])

        ((args, kwargs),) = uvicorn_calls
        assert args == ("termhold.asgi:create_app_from_env",)
        assert kwargs["factory"] is True
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9100

        assert os.environ["TERMHOLD_CWD"] == str(tmp_path.resolve())
        assert os.environ["TERMHOLD_CONFIG_PATH"] == str(config_path)

    def test_cli_overrides_config(self, uvicorn_calls, tmp_path):
        main(["--host", "0.0.0.0", "--port", "8123", "--config", str(tmp_path / "none.yaml")])

        ((_, kwargs),) = uvicorn_calls
        assert (kwargs["host"], kwargs["port"]) == ("0.0.0.0", 8123)

    def test_rejects_missing_directory(self, uvicorn_calls, tmp_path):
        with pytest.raises(SystemExit):
            main([str(tmp_path / "missing"), "--config", str(tmp_path / "none.yaml")])

        assert uvicorn_calls == []


class TestDisplay:
    def test_details_table(self):
        table = build_details_table("ws://127.0.0.1:8000/api/terminal", "bash", "/home/user")

        assert table.row_count == 4
