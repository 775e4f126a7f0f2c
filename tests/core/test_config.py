"""Tests for console configuration."""

from __future__ import annotations

import os

import pytest

from nebula_console.core.config import HISTORY_FILE_NAME, ConsoleConfig, default_history_file
from nebula_console.core.errors import ConfigError


def valid_config(**overrides) -> ConsoleConfig:
    fields = {"port": 9669, "user": "root", "password": "nebula"}
    fields.update(overrides)
    return ConsoleConfig(**fields)


class TestValidate:
    """Tests for ConsoleConfig.validate."""

    def test_valid(self):
        """A config with port, user and password passes."""
        valid_config().validate()

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"port": None}, "argument port is missed!"),
            ({"port": -1}, "argument port is missed!"),
            ({"user": ""}, "argument username is empty!"),
            ({"password": ""}, "argument password is empty!"),
            ({"eval_script": "SHOW HOSTS", "file": "x.ngql"}, "mutually exclusive"),
        ],
    )
    def test_missing_required(self, overrides, message):
        """Missing options raise ConfigError with a specific message."""
        with pytest.raises(ConfigError, match=message):
            valid_config(**overrides).validate()

    @pytest.mark.parametrize(
        "missing", ["ssl_root_ca_path", "ssl_cert_path", "ssl_private_key_path"]
    )
    def test_ssl_requires_all_paths(self, missing):
        """TLS needs the CA, certificate and key paths."""
        paths = {
            "ssl_root_ca_path": "ca.pem",
            "ssl_cert_path": "cert.pem",
            "ssl_private_key_path": "key.pem",
        }
        paths[missing] = None
        with pytest.raises(ConfigError, match=f"argument {missing} should be specified"):
            valid_config(enable_ssl=True, **paths).validate()


class TestInteractive:
    """Tests for the interactive property."""

    def test_interactive_without_script(self):
        """No -e and no -f means interactive."""
        assert valid_config().interactive

    def test_not_interactive_with_eval(self):
        """-e disables interactive mode."""
        assert not valid_config(eval_script="SHOW HOSTS").interactive

    def test_not_interactive_with_file(self):
        """-f disables interactive mode."""
        assert not valid_config(file="a.ngql").interactive


class TestDriverConfig:
    """Tests for pool_config and ssl_config."""

    def test_pool_config(self):
        """Pool config carries the timeout and a small pool."""
        config = valid_config(timeout=1500).pool_config()
        assert config.timeout == 1500
        assert config.max_connection_pool_size == 2
        assert config.min_connection_pool_size == 0

    def test_ssl_disabled(self):
        """No SSL config without --enable-ssl."""
        assert valid_config().ssl_config() is None

    def test_ssl_config(self, tmp_path):
        """SSL config points at the given files."""
        paths = {}
        for name in ("ca", "cert", "key"):
            path = tmp_path / f"{name}.pem"
            path.write_text("x")
            paths[name] = str(path)
        ssl_conf = valid_config(
            enable_ssl=True,
            ssl_root_ca_path=paths["ca"],
            ssl_cert_path=paths["cert"],
            ssl_private_key_path=paths["key"],
        ).ssl_config()
        assert ssl_conf.ca_certs == paths["ca"]
        assert ssl_conf.certfile == paths["cert"]
        assert ssl_conf.keyfile == paths["key"]

    def test_ssl_missing_file(self, tmp_path):
        """A missing certificate file raises ConfigError."""
        missing = str(tmp_path / "ca.pem")
        config = valid_config(
            enable_ssl=True,
            ssl_root_ca_path=missing,
            ssl_cert_path=missing,
            ssl_private_key_path=missing,
        )
        with pytest.raises(ConfigError, match="unable to open file"):
            config.ssl_config()


class TestDefaultHistoryFile:
    """Tests for default_history_file."""

    def test_uses_home(self, monkeypatch, tmp_path):
        """History lives in $HOME."""
        monkeypatch.setenv("HOME", str(tmp_path))
        assert default_history_file() == os.path.join(str(tmp_path), HISTORY_FILE_NAME)

    def test_without_home(self, monkeypatch):
        """Without HOME the file sits next to the executable."""
        monkeypatch.delenv("HOME", raising=False)
        assert default_history_file().endswith(HISTORY_FILE_NAME)
