"""Weapon catalog loader."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..models.weapon import WeaponCatalogEntry
from ._json import DATA_DIR, read_table


logger = logging.getLogger(__name__)

WEAPONS_FILE = "weapons.json"


@lru_cache(maxsize=4)
def load_weapon_catalog(data_dir: Path = DATA_DIR) -> dict[str, list[WeaponCatalogEntry]]:
    """Load the weapon catalog grouped by slot.

    Returns:
        slot name -> catalog entries.
    """
    raw = read_table(data_dir, WEAPONS_FILE, {})
    catalog = {}
    for slot, entries in raw.items():
        parsed = []
        for entry in entries:
            try:
                parsed.append(WeaponCatalogEntry.model_validate(entry))
            except ValidationError as e:
                logger.warning("Skipping %s weapon entry: %s", slot, e)
        catalog[slot] = parsed
    return catalog


def get_weapon_entry(
    slot: str, name: str, data_dir: Path = DATA_DIR
) -> Optional[WeaponCatalogEntry]:
    """Get a catalog weapon by slot and name.

    Returns:
        WeaponCatalogEntry if found, None otherwise.
    """
    for entry in load_weapon_catalog(data_dir).get(slot, []):
        if entry.name == name:
            return entry
    return None
