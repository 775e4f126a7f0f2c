"""CLI entry point."""

from __future__ import annotations

import logging
import sys

import rich_click as click

from nebula_console.cli.repl.terminal import EDITORS
from nebula_console.core.config import ConsoleConfig
from nebula_console.core.errors import ConsoleError
from nebula_console.core.logging_config import configure_logging

logger = logging.getLogger(__name__)

# Configure rich-click styling
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.USE_MARKDOWN = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = "Try running '--help' for more information."
click.rich_click.ERRORS_EPILOGUE = ""
click.rich_click.MAX_WIDTH = 100
click.rich_click.OPTION_GROUPS = {
    "nebula-console": [
        {
            "name": "Connection",
            "options": ["--addr", "--port", "--user", "--password", "--timeout"],
        },
        {"name": "Input", "options": ["--eval", "--file"]},
        {
            "name": "TLS",
            "options": [
                "--enable-ssl",
                "--ssl-root-ca-path",
                "--ssl-cert-path",
                "--ssl-private-key-path",
            ],
        },
    ]
}


@click.command(name="nebula-console")
@click.version_option(package_name="nebula-console", message="nebula-console version %(version)s")
@click.option(
    "--addr", "--address", "address", default="127.0.0.1", show_default=True,
    help="The Nebula Graph IP/HOST address",
)
@click.option("-P", "--port", type=int, default=None, help="The Nebula Graph port")
@click.option("-u", "--user", default="", help="The Nebula Graph login user name")
@click.option(
    "-p", "--password", default="", envvar="NEBULA_PASSWORD",
    help="The Nebula Graph login password",
)
@click.option(
    "-t", "--timeout", type=click.IntRange(min=0), default=0, show_default=True,
    help="Connection timeout in milliseconds, 0 means never timeout",
)
@click.option("-e", "--eval", "eval_script", default=None, help="Run this nGQL and exit")
@click.option("-f", "--file", "file", default=None, help="Run this nGQL script file and exit")
@click.option("--enable-ssl", is_flag=True, help="Connect over TLS")
@click.option("--ssl-root-ca-path", default=None, help="Root certification authority file")
@click.option("--ssl-cert-path", default=None, help="Client certificate file")
@click.option("--ssl-private-key-path", default=None, help="Client private key file")
@click.option("--csv", "csv_file", default=None, help="Append every result table to FILE as CSV")
@click.option("--dot", "dot_file", default=None, help="Write every DOT execution plan to FILE")
@click.option(
    "--line-editor", type=click.Choice(EDITORS), default="prompt-toolkit", show_default=True,
    help="Interactive line editor",
)
@click.option("--history-file", default=None, help="History file [default: $HOME/.nebula_history]")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    envvar="NEBULA_CONSOLE_LOG_LEVEL",
    help="Log level [default: WARNING]",
)
def cli(
    address: str,
    port: int | None,
    user: str,
    password: str,
    timeout: int,
    eval_script: str | None,
    file: str | None,
    enable_ssl: bool,
    ssl_root_ca_path: str | None,
    ssl_cert_path: str | None,
    ssl_private_key_path: str | None,
    csv_file: str | None,
    dot_file: str | None,
    line_editor: str,
    history_file: str | None,
    log_level: str | None,
) -> None:
    """Interactive console for Nebula Graph.

    Without **-e** or **-f** statements are read from the terminal. Lines
    starting with `:` are local commands; type `:help` to list them.

    **Examples:**

        nebula-console -u root -p nebula --port 9669
        nebula-console -u root -p nebula --port 9669 -e "SHOW HOSTS"
        nebula-console -u root -p nebula --port 9669 -f script.ngql --csv out.csv
    """
    configure_logging(level=log_level)

    config = ConsoleConfig(
        address=address,
        port=port,
        user=user,
        password=password,
        timeout=timeout,
        eval_script=eval_script,
        file=file,
        enable_ssl=enable_ssl,
        ssl_root_ca_path=ssl_root_ca_path,
        ssl_cert_path=ssl_cert_path,
        ssl_private_key_path=ssl_private_key_path,
        csv_file=csv_file,
        dot_file=dot_file,
        line_editor=line_editor,
        history_file=history_file,
    )

    # Lazy import keeps --help and --version off the driver import path
    from nebula_console.cli.repl import run_console

    try:
        config.validate()
        run_console(config)
    except ConsoleError as e:
        logger.debug("console failed", exc_info=True)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
