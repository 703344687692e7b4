"""
Preset management API endpoints.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from mortgage_tools.api.calculations import (
    MortgageInput,
    SplitMortgageInput,
    run_mortgage,
    run_split_mortgage,
)
from mortgage_tools.constants import DEFAULT_REPAYMENT_SHARE
from mortgage_tools.db.database import get_db
from mortgage_tools.services.presets import PresetData, PresetRecord, PresetRepository

logger = logging.getLogger(__name__)

router = APIRouter()


class PresetCreate(BaseModel):
    """Schema for saving a preset."""

    name: str
    type: str = "regular"
    data: PresetData


class PresetUpdate(BaseModel):
    """Schema for updating a preset."""

    name: Optional[str] = None
    data: Optional[PresetData] = None


class PresetListResponse(BaseModel):
    """Response for listing presets."""

    presets: List[dict]
    total: int


def get_preset_repository(db: Session = Depends(get_db)) -> PresetRepository:
    """Dependency for the preset repository."""
    return PresetRepository(db)


def _get_or_404(repo: PresetRepository, preset_id: str) -> PresetRecord:
    record = repo.get_preset(preset_id)
    if not record:
        raise HTTPException(status_code=404, detail="Preset not found")
    return record


def preset_results(record: PresetRecord):
    """Run the calculator a preset belongs to with its saved inputs."""
    data = record.data
    if record.preset_type == "split":
        return run_split_mortgage(
            SplitMortgageInput(
                price=data.price,
                person1_deposit=data.person1_deposit or 0.0,
                person2_deposit=data.person2_deposit or 0.0,
                person1_repayment_share=(
                    DEFAULT_REPAYMENT_SHARE
                    if data.person1_repayment_share is None
                    else data.person1_repayment_share
                ),
                rate=data.rate,
                term_years=data.term_years,
                frequency=data.frequency,
                age_of_mortgage=data.age_of_mortgage,
                sale_price=data.sale_price or 0.0,
            )
        )
    return run_mortgage(
        MortgageInput(
            price=data.price,
            deposit=data.deposit or 0.0,
            rate=data.rate,
            term_years=data.term_years,
            frequency=data.frequency,
            age_of_mortgage=data.age_of_mortgage,
            sale_price=data.sale_price or 0.0,
        )
    )


@router.get("/", response_model=PresetListResponse)
async def list_presets(
    type: Optional[str] = None,
    repo: PresetRepository = Depends(get_preset_repository),
):
    """List all presets, optionally filtered by type."""
    presets = repo.load_presets(type)
    return PresetListResponse(
        presets=[p.to_json() for p in presets],
        total=len(presets),
    )


@router.post("/", status_code=201)
async def create_preset(
    preset_data: PresetCreate,
    repo: PresetRepository = Depends(get_preset_repository),
):
    """Save a new preset."""
    try:
        record = repo.save_preset(preset_data.name, preset_data.data, preset_data.type)
    except ValueError as e:
        logger.warning(f"Rejected preset '{preset_data.name}': {e}")
        raise HTTPException(status_code=400, detail=str(e))
    return record.to_json()


@router.delete("/")
async def clear_presets(
    type: Optional[str] = None,
    repo: PresetRepository = Depends(get_preset_repository),
):
    """Delete all presets."""
    return {"deleted": repo.clear_presets(type)}


@router.get("/export")
async def export_presets(repo: PresetRepository = Depends(get_preset_repository)):
    """Download all presets as a JSON array."""
    return Response(
        content=repo.export_json(),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="mortgage-presets.json"'},
    )


@router.post("/import")
async def import_presets(
    request: Request,
    repo: PresetRepository = Depends(get_preset_repository),
):
    """Import a JSON array of presets (the body of an export)."""
    payload = (await request.body()).decode("utf-8")
    try:
        imported = repo.import_json(payload)
    except ValueError as e:
        logger.warning(f"Rejected preset import: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    return {"imported": imported}


@router.get("/{preset_id}")
async def get_preset(
    preset_id: str,
    repo: PresetRepository = Depends(get_preset_repository),
):
    """Get a preset by ID."""
    return _get_or_404(repo, preset_id).to_json()


@router.put("/{preset_id}")
async def update_preset(
    preset_id: str,
    preset_data: PresetUpdate,
    repo: PresetRepository = Depends(get_preset_repository),
):
    """Rename a preset or replace its inputs."""
    record = repo.update_preset(preset_id, preset_data.name, preset_data.data)
    if not record:
        raise HTTPException(status_code=404, detail="Preset not found")
    return record.to_json()


@router.delete("/{preset_id}")
async def delete_preset(
    preset_id: str,
    repo: PresetRepository = Depends(get_preset_repository),
):
    """Delete a preset."""
    if not repo.delete_preset(preset_id):
        raise HTTPException(status_code=404, detail="Preset not found")
    return {"deleted": True, "id": preset_id}


@router.get("/{preset_id}/results")
async def get_preset_results(
    preset_id: str,
    repo: PresetRepository = Depends(get_preset_repository),
):
    """Calculate results from a preset's saved inputs."""
    return preset_results(_get_or_404(repo, preset_id))
