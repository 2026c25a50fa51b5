"""Mod table loader."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..models.mod import ModData
from ._json import DATA_DIR, read_table


logger = logging.getLogger(__name__)

MODS_FILE = "mods.json"


@lru_cache(maxsize=4)
def load_mods(data_dir: Path = DATA_DIR) -> dict[str, ModData]:
    """Load every mod from JSON.

    Entries that fail validation are skipped.

    Returns:
        Mapping of mod name to ModData.
    """
    raw = read_table(data_dir, MODS_FILE, {})
    mods = {}
    for name, entry in raw.items():
        try:
            mods[name] = ModData.model_validate(entry)
        except ValidationError as e:
            logger.warning("Skipping mod %r: %s", name, e)
    return mods


def get_mod(name: str, data_dir: Path = DATA_DIR) -> Optional[ModData]:
    """Get a mod by name.

    Returns:
        ModData if found, None otherwise.
    """
    return load_mods(data_dir).get(name)
