"""Shared JSON file reading for the table loaders."""

import json
import logging
from pathlib import Path
from typing import Any


logger = logging.getLogger(__name__)

# Get the data directory path
DATA_DIR = Path(__file__).parent.parent.parent.parent / "data"


def read_table(data_dir: Path, filename: str, default: Any) -> Any:
    """Read one JSON table.

    Args:
        data_dir: Directory holding the tables.
        filename: Table file name.
        default: Returned when the file is missing or unreadable.

    Returns:
        Parsed JSON, or ``default``.
    """
    path = Path(data_dir) / filename
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not load %s, using defaults: %s", path, e)
        return default

    logger.debug("Loaded %s", path)
    return data
