"""Command-line frontend for nebula-console.

Example:
    $ nebula-console -u root -p nebula --address 127.0.0.1 --port 9669
    $ nebula-console -u root -p nebula --port 9669 -e "SHOW HOSTS"
    $ nebula-console -u root -p nebula --port 9669 -f script.ngql
"""

from nebula_console.cli.main import main

__all__ = ["main"]
