"""Console configuration built from command-line options."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from nebula_console.core.errors import ConfigError

if TYPE_CHECKING:
    from nebula3.Config import Config, SSL_config

HISTORY_FILE_NAME = ".nebula_history"


def default_history_file() -> str:
    """History lives in $HOME, or next to the executable when HOME is unset."""
    home = os.environ.get("HOME")
    if not home:
        home = str(Path(sys.argv[0]).resolve().parent)
    return os.path.join(home, HISTORY_FILE_NAME)


@dataclass
class ConsoleConfig:
    """Everything needed to connect and pick an input mode.

    Attributes:
        address: Server host or IP.
        port: Server port. None means not given.
        user: Login user name.
        password: Login password.
        timeout: Connection timeout in milliseconds, 0 means never.
        eval_script: Inline nGQL passed with -e.
        file: nGQL script file passed with -f.
        enable_ssl: Connect over TLS.
        ssl_root_ca_path: Root CA bundle for TLS.
        ssl_cert_path: Client certificate for TLS.
        ssl_private_key_path: Client private key for TLS.
        csv_file: Initial CSV export target.
        dot_file: Initial DOT export target.
        line_editor: Interactive backend, "prompt-toolkit" or "readline".
        history_file: Interactive history file.
    """

    address: str = "127.0.0.1"
    port: int | None = None
    user: str = ""
    password: str = ""
    timeout: int = 0
    eval_script: str | None = None
    file: str | None = None
    enable_ssl: bool = False
    ssl_root_ca_path: str | None = None
    ssl_cert_path: str | None = None
    ssl_private_key_path: str | None = None
    csv_file: str | None = None
    dot_file: str | None = None
    line_editor: str = "prompt-toolkit"
    history_file: str | None = None

    @property
    def interactive(self) -> bool:
        """True when statements come from the terminal."""
        return not self.eval_script and not self.file

    def validate(self) -> None:
        """Check required options.

        Raises:
            ConfigError: On the first missing or inconsistent option.
        """
        if self.port is None or self.port < 0:
            raise ConfigError("argument port is missed!")
        if not self.user:
            raise ConfigError("argument username is empty!")
        if not self.password:
            raise ConfigError("argument password is empty!")
        if self.eval_script and self.file:
            raise ConfigError("arguments eval and file are mutually exclusive")

        if self.enable_ssl:
            if not self.ssl_root_ca_path:
                raise ConfigError(
                    "argument ssl_root_ca_path should be specified when enable_ssl is true"
                )
            if not self.ssl_cert_path:
                raise ConfigError(
                    "argument ssl_cert_path should be specified when enable_ssl is true"
                )
            if not self.ssl_private_key_path:
                raise ConfigError(
                    "argument ssl_private_key_path should be specified when enable_ssl is true"
                )

    def pool_config(self) -> Config:
        """Driver connection pool settings; the console only ever needs one session."""
        from nebula3.Config import Config

        config = Config()
        config.timeout = self.timeout
        config.idle_time = 0
        config.max_connection_pool_size = 2
        config.min_connection_pool_size = 0
        return config

    def ssl_config(self) -> SSL_config | None:
        """Driver TLS settings, or None when TLS is disabled."""
        if not self.enable_ssl:
            return None

        from nebula3.Config import SSL_config

        for path in (self.ssl_root_ca_path, self.ssl_cert_path, self.ssl_private_key_path):
            if path and not os.path.isfile(path):
                raise ConfigError(f"unable to open file {path}")

        ssl_conf = SSL_config()
        ssl_conf.ca_certs = self.ssl_root_ca_path
        ssl_conf.certfile = self.ssl_cert_path
        ssl_conf.keyfile = self.ssl_private_key_path
        return ssl_conf
