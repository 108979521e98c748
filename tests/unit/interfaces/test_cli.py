"""Tests for the torrify CLI entrypoint."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from torrify.interfaces.cli import cli


@pytest.fixture()
def uvicorn_run(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    run = MagicMock()
    monkeypatch.setattr(cli.uvicorn, "run", run)
    monkeypatch.setattr(cli, "configure_logging", MagicMock(return_value={"version": 1}))
    return run


class TestParseArgs:
    def test_defaults(self) -> None:
        args = cli._parse_args([])
        assert args.host is None
        assert args.port is None
        assert args.config is None

    def test_all_flags(self) -> None:
        args = cli._parse_args(
            [
                "--host",
                "127.0.0.1",
                "--port",
                "9000",
                "--config",
                "c.yaml",
                "--log-level",
                "DEBUG",
                "--log-format",
                "json",
            ]
        )
        assert args.port == 9000
        assert args.log_level == "DEBUG"
        assert args.log_format == "json"

    def test_rejects_unknown_log_level(self) -> None:
        with pytest.raises(SystemExit):
            cli._parse_args(["--log-level", "TRACE"])


class TestStart:
    def test_runs_uvicorn_with_cli_host_and_port(self, uvicorn_run: MagicMock) -> None:
        cli.start(["--host", "127.0.0.1", "--port", "9001"])

        uvicorn_run.assert_called_once()
        kwargs = uvicorn_run.call_args.kwargs
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9001
        assert kwargs["log_config"] == {"version": 1}

    def test_env_host_and_port(
        self, uvicorn_run: MagicMock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("HOST", "10.0.0.1")
        monkeypatch.setenv("PORT", "7000")
        cli.start([])
        kwargs = uvicorn_run.call_args.kwargs
        assert kwargs["host"] == "10.0.0.1"
        assert kwargs["port"] == 7000

    def test_log_overrides_reach_config(
        self, uvicorn_run: MagicMock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        captured = {}

        def _fake_create_app(config):
            captured["config"] = config
            return MagicMock()

        monkeypatch.setattr(cli, "create_app", _fake_create_app)
        cli.start(["--log-level", "ERROR", "--log-format", "json"])
        assert captured["config"].log_level == "ERROR"
        assert captured["config"].log_format == "json"

    def test_missing_config_file(self, uvicorn_run: MagicMock, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            cli.start(["--config", str(tmp_path / "missing.yaml")])
        uvicorn_run.assert_not_called()
