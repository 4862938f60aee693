"""Tests for whisker._cli — argument parsing and command dispatch."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from whisker._cli import DEFAULT_CLIENT_CONFIG, _build_parser, main


class TestBuildParser:
    """_build_parser — CLI argument parsing."""

    def test_serve_default_args(self) -> None:
        parser = _build_parser()
        args = parser.parse_args(["serve"])
        assert args.command == "serve"
        assert args.root == "."
        assert args.host is None
        assert args.port is None
        assert args.patterns is None
        assert args.verbose is None

    def test_serve_all_flags(self) -> None:
        parser = _build_parser()
        args = parser.parse_args([
            "serve", "assets/",
            "--host", "0.0.0.0",
            "--port", "9000",
            "--glob", "**/*.ts",
            "--glob", "**/*.css",
            "-v",
        ])
        assert args.root == "assets/"
        assert args.host == "0.0.0.0"
        assert args.port == 9000
        assert args.patterns == ["**/*.ts", "**/*.css"]
        assert args.verbose is True

    def test_connect_default_args(self) -> None:
        parser = _build_parser()
        args = parser.parse_args(["connect", "localhost"])
        assert args.command == "connect"
        assert args.hostname == "localhost"
        assert args.config == str(DEFAULT_CLIENT_CONFIG)
        assert args.enable is False
        assert args.verbose is False

    def test_connect_flags(self) -> None:
        parser = _build_parser()
        args = parser.parse_args(["connect", "dev.local", "--config", "c.json", "--enable"])
        assert args.config == "c.json"
        assert args.enable is True

    def test_no_command_returns_none(self) -> None:
        parser = _build_parser()
        args = parser.parse_args([])
        assert args.command is None


class TestMain:
    """main() — dispatch to whisker.app."""

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "serve" in capsys.readouterr().out

    def test_serve_dispatch(self) -> None:
        with patch("whisker.app.serve") as serve:
            main(["serve", "assets", "--port", "9000", "--glob", "*.ts"])
        serve.assert_called_once_with(
            root="assets", host=None, port=9000, patterns=("*.ts",), verbose=None,
        )

    def test_connect_dispatch_exit_code(self) -> None:
        with patch("whisker.app.connect", return_value=1) as connect:
            with pytest.raises(SystemExit) as exc_info:
                main(["connect", "localhost", "--config", "c.json"])
        connect.assert_called_once_with("localhost", "c.json", enable=False, verbose=False)
        assert exc_info.value.code == 1
