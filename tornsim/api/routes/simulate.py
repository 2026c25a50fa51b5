"""
Fight simulation API routes.
"""

from fastapi import APIRouter, HTTPException, Depends

from ..schemas.simulation import SimulateRequest, SimulationResponse
from ..services.simulation_service import SimulationService
from ..dependencies import get_simulation_service

router = APIRouter()


@router.post("", response_model=SimulationResponse)
async def simulate_fight(
    request: SimulateRequest,
    service: SimulationService = Depends(get_simulation_service),
):
    """
    Simulate a hero vs villain matchup.

    Run N fights and return win rates, life distributions and battle stats.
    """
    try:
        return service.simulate(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
