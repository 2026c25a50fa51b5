"""Armour coverage, temporary block and armour catalog loaders."""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import ValidationError

from ..models.armour import ArmourCatalogEntry
from ._json import DATA_DIR, read_table


logger = logging.getLogger(__name__)

COVERAGE_FILE = "armour_coverage.json"
TEMP_BLOCK_FILE = "temp_block.json"
ARMOUR_FILE = "armour.json"


@lru_cache(maxsize=4)
def load_armour_coverage(data_dir: Path = DATA_DIR) -> dict[str, dict[str, float]]:
    """Load the coverage table.

    Returns:
        body part -> armour type -> coverage percent.
    """
    raw = read_table(data_dir, COVERAGE_FILE, {})
    return {
        part: {armour_type: float(pct) for armour_type, pct in types.items()}
        for part, types in raw.items()
    }


@lru_cache(maxsize=4)
def load_temp_block(data_dir: Path = DATA_DIR) -> dict[str, tuple[str, ...]]:
    """Load which head armour types block each temporary item.

    Returns:
        item name -> head armour types that block it.
    """
    raw = read_table(data_dir, TEMP_BLOCK_FILE, {})
    return {item: tuple(types) for item, types in raw.items()}


@lru_cache(maxsize=4)
def load_armour_catalog(data_dir: Path = DATA_DIR) -> dict[str, list[ArmourCatalogEntry]]:
    """Load the armour catalog grouped by slot.

    Returns:
        slot name -> catalog entries.
    """
    raw = read_table(data_dir, ARMOUR_FILE, {})
    catalog = {}
    for slot, entries in raw.items():
        parsed = []
        for entry in entries:
            try:
                parsed.append(ArmourCatalogEntry.model_validate(entry))
            except ValidationError as e:
                logger.warning("Skipping %s armour entry: %s", slot, e)
        catalog[slot] = parsed
    return catalog
