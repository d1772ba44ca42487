"""
Unit tests for ServerConfig and the command line.
"""

import logging

import pytest

from minihttp import ServerConfig, __version__
from minihttp.__main__ import build_parser, config_from_args


class TestServerConfig:
    """Tests for ServerConfig."""

    def test_defaults(self):
        config = ServerConfig()

        assert config.host == "127.0.0.1"
        assert config.port == 4221
        assert config.directory == "."
        assert config.timeout is None
        assert config.canonical_headers is False
        config.validate()

    @pytest.mark.parametrize("overrides", [
        {"port": -1},
        {"port": 65536},
        {"backlog": 0},
        {"buffer_size": 512},
        {"timeout": 0},
        {"max_body_size": -1},
        {"log_level": "CHATTY"},
    ])
    def test_validate_rejects(self, overrides):
        with pytest.raises(ValueError):
            ServerConfig(**overrides).validate()

    def test_port_zero_is_valid(self):
        ServerConfig(port=0).validate()

    def test_log_level_value(self):
        assert ServerConfig(log_level="debug").log_level_value == logging.DEBUG

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("HTTP_HOST", "0.0.0.0")
        monkeypatch.setenv("HTTP_PORT", "8080")
        monkeypatch.setenv("HTTP_DIRECTORY", "/tmp/data")
        monkeypatch.setenv("HTTP_TIMEOUT", "2.5")
        monkeypatch.setenv("HTTP_LOG_LEVEL", "DEBUG")

        config = ServerConfig.from_env()

        assert config.host == "0.0.0.0"
        assert config.port == 8080
        assert config.directory == "/tmp/data"
        assert config.timeout == 2.5
        assert config.log_level == "DEBUG"

    def test_from_env_defaults(self, monkeypatch):
        for name in ("HTTP_HOST", "HTTP_PORT", "HTTP_DIRECTORY", "HTTP_TIMEOUT", "HTTP_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        config = ServerConfig.from_env()

        assert config.port == 4221
        assert config.timeout is None


class TestCommandLine:
    """Tests for the argparse front end."""

    def test_directory_flag(self):
        args = build_parser().parse_args(["--directory", "/tmp/x"])
        config = config_from_args(args)

        assert config.directory == "/tmp/x"
        assert config.port == 4221

    def test_defaults(self):
        config = config_from_args(build_parser().parse_args([]))

        assert config.directory == "."
        assert config.host == "127.0.0.1"
        assert config.log_level == "INFO"
        assert config.canonical_headers is False

    def test_short_flags(self):
        args = build_parser().parse_args(
            ["-d", "/srv", "-H", "0.0.0.0", "-p", "9000", "-l", "DEBUG", "--canonical-headers"]
        )
        config = config_from_args(args)

        assert (config.directory, config.host, config.port) == ("/srv", "0.0.0.0", 9000)
        assert config.log_level == "DEBUG"
        assert config.canonical_headers is True

    def test_bad_log_level(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--log-level", "LOUD"])

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--version"])

        assert __version__ in capsys.readouterr().out
