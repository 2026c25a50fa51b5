"""
Static data API routes.
"""

from fastapi import APIRouter, HTTPException, Depends
from typing import Dict, List, Any

from ...combat.models import ArmourSlot, WeaponSlot
from ...data.game_data import GameData
from ..dependencies import get_game_data

router = APIRouter()


# === Mods ===


@router.get("/mods")
async def get_all_mods(game_data: GameData = Depends(get_game_data)) -> Dict[str, Any]:
    """Get all weapon mods by name."""
    return {name: mod.model_dump() for name, mod in game_data.mods.items()}


@router.get("/mods/{mod_name}")
async def get_mod(mod_name: str, game_data: GameData = Depends(get_game_data)) -> Dict[str, Any]:
    """Get specific mod by name."""
    mod = game_data.get_mod_effects(mod_name)
    if mod is None:
        raise HTTPException(status_code=404, detail="Mod not found")
    return mod.model_dump()


# === Armour ===


@router.get("/coverage")
async def get_armour_coverage(
    game_data: GameData = Depends(get_game_data),
) -> Dict[str, Dict[str, float]]:
    """Get armour coverage percentages by body part."""
    return game_data.get_armour_coverage()


@router.get("/armour/{slot}")
async def get_armour_names(
    slot: ArmourSlot, game_data: GameData = Depends(get_game_data)
) -> List[str]:
    """Get catalog armour piece names for a slot."""
    return game_data.armour_names(slot)


# === Weapons ===


@router.get("/weapons/{slot}")
async def get_weapon_names(
    slot: WeaponSlot, game_data: GameData = Depends(get_game_data)
) -> List[str]:
    """Get catalog weapon names for a slot."""
    if slot.is_unarmed:
        raise HTTPException(status_code=404, detail="Slot has no catalog")
    return game_data.weapon_names(slot)
