"""Dataset lookup for `:play`."""

from __future__ import annotations

import logging
import os
from importlib import resources
from typing import TextIO

from nebula_console.core.errors import DatasetNotFoundError

logger = logging.getLogger(__name__)

DATA_DIR = "data"
DATA_PACKAGE = "nebula_console.data"
SUFFIX = ".ngql"


def open_dataset(name: str) -> TextIO:
    """Open a dataset script, preferring ./data/ over the bundled copies.

    Raises:
        DatasetNotFoundError: If neither location has `name`.ngql.
    """
    filename = name + SUFFIX
    local = os.path.join(DATA_DIR, filename)
    if os.path.isfile(local):
        logger.info("dataset %s loaded from %s", name, local)
        return open(local, encoding="utf-8")

    bundled = resources.files(DATA_PACKAGE).joinpath(filename)
    if bundled.is_file():
        logger.info("dataset %s loaded from package data", name)
        return bundled.open("r", encoding="utf-8")

    raise DatasetNotFoundError(
        f"file {filename} not existed in package data and file directory ./{DATA_DIR}/"
    )
