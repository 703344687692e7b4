"""
Preset repository.

Stores named snapshots of calculator inputs. The JSON shape of a preset matches
the list the browser calculator kept in local storage, so an exported list can
be imported back (and vice versa) without losing the age-of-mortgage value in
whatever form it was saved.
"""

import json
import logging
import time
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator
from sqlalchemy.orm import Session

from mortgage_tools.calculations.amortization import Frequency
from mortgage_tools.calculations.point_in_time import PointInTime
from mortgage_tools.constants import PRESET_TYPES
from mortgage_tools.db.models import Preset

logger = logging.getLogger(__name__)


class PresetData(BaseModel):
    """Calculator inputs stored in a preset."""

    price: float
    rate: float
    term_years: float = Field(alias="termYears")
    frequency: Frequency
    age_of_mortgage: Union[str, int, float, Dict[str, Any]] = Field(alias="ageOfMortgage")

    # Regular mortgage
    deposit: Optional[float] = None

    # Split mortgage
    person1_deposit: Optional[float] = Field(default=None, alias="person1Deposit")
    person2_deposit: Optional[float] = Field(default=None, alias="person2Deposit")
    person1_repayment_share: Optional[float] = Field(
        default=None, alias="person1RepaymentShare"
    )
    sale_price: Optional[float] = Field(default=None, alias="salePrice")

    class Config:
        populate_by_name = True

    @field_validator("age_of_mortgage")
    @classmethod
    def check_age_of_mortgage(cls, value):
        PointInTime.parse(value)
        return value

    @property
    def point_in_time(self) -> PointInTime:
        return PointInTime.parse(self.age_of_mortgage)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PresetRecord(BaseModel):
    """A saved preset."""

    id: str
    name: str
    timestamp: int
    preset_type: str = Field(alias="type")
    data: PresetData

    class Config:
        populate_by_name = True

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "timestamp": self.timestamp,
            "type": self.preset_type,
            "data": self.data.to_json(),
        }


def _now_millis() -> int:
    return int(time.time() * 1000)


def _check_type(preset_type: str) -> str:
    if preset_type not in PRESET_TYPES:
        raise ValueError(f"Preset type must be one of {', '.join(PRESET_TYPES)}; got {preset_type}")
    return preset_type


def preset_to_record(preset: Preset) -> PresetRecord:
    """Convert Preset model to a PresetRecord."""
    return PresetRecord(
        id=preset.id,
        name=preset.name,
        timestamp=preset.timestamp,
        preset_type=preset.preset_type,
        data=PresetData.model_validate(preset.data),
    )


class PresetRepository:
    """Database-backed preset list."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self, preset_type: Optional[str] = None):
        query = self.db.query(Preset)
        if preset_type:
            query = query.filter(Preset.preset_type == preset_type)
        return query

    def load_presets(self, preset_type: Optional[str] = None) -> List[PresetRecord]:
        """All presets, oldest first, optionally of one type."""
        rows = self._query(preset_type).order_by(Preset.timestamp.asc()).all()
        return [preset_to_record(row) for row in rows]

    def get_preset(self, preset_id: str) -> Optional[PresetRecord]:
        row = self.db.get(Preset, preset_id)
        return preset_to_record(row) if row else None

    def save_preset(
        self,
        name: str,
        data: PresetData,
        preset_type: str = "regular",
        *,
        preset_id: Optional[str] = None,
        timestamp: Optional[int] = None,
    ) -> PresetRecord:
        """
        Save a new preset.

        Args:
            name: Display name
            data: Calculator inputs
            preset_type: "regular" or "split"
            preset_id: Keep an existing id (used by import); generated otherwise
            timestamp: Keep an existing timestamp in milliseconds

        Returns:
            The stored preset
        """
        row = Preset(
            name=name.strip() or "Preset",
            preset_type=_check_type(preset_type),
            timestamp=timestamp if timestamp is not None else _now_millis(),
            data=data.to_json(),
        )
        if preset_id:
            row.id = preset_id

        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)

        logger.info(f"Saved {row.preset_type} preset '{row.name}' ({row.id})")
        return preset_to_record(row)

    def update_preset(
        self,
        preset_id: str,
        name: Optional[str] = None,
        data: Optional[PresetData] = None,
    ) -> Optional[PresetRecord]:
        """Rename a preset and/or replace its inputs. Returns None if missing."""
        row = self.db.get(Preset, preset_id)
        if not row:
            return None

        if name is not None:
            row.name = name.strip() or row.name
        if data is not None:
            row.data = data.to_json()

        self.db.commit()
        self.db.refresh(row)

        logger.info(f"Updated preset '{row.name}' ({row.id})")
        return preset_to_record(row)

    def delete_preset(self, preset_id: str) -> bool:
        """Delete a preset. Returns False if it did not exist."""
        row = self.db.get(Preset, preset_id)
        if not row:
            return False

        self.db.delete(row)
        self.db.commit()

        logger.info(f"Deleted preset {preset_id}")
        return True

    def clear_presets(self, preset_type: Optional[str] = None) -> int:
        """Delete all presets (of one type if given). Returns the count deleted."""
        deleted = self._query(preset_type).delete(synchronize_session=False)
        self.db.commit()

        logger.info(f"Cleared {deleted} presets")
        return deleted

    def export_json(self) -> str:
        """All presets as a JSON array."""
        return json.dumps([record.to_json() for record in self.load_presets()])

    def import_json(self, payload: str) -> int:
        """
        Import presets from a JSON array.

        Entries that are not valid presets are skipped. An entry whose id is
        already stored replaces the stored preset.

        Returns:
            Number of presets imported

        Raises:
            ValueError: If the payload is not a JSON array
        """
        try:
            entries = json.loads(payload)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid preset JSON: {e}") from e

        if not isinstance(entries, list):
            raise ValueError("Preset JSON must be an array")

        imported = 0
        for entry in entries:
            try:
                record = PresetRecord.model_validate(entry)
                _check_type(record.preset_type)
            except (ValidationError, ValueError) as e:
                logger.warning(f"Skipping invalid preset entry: {e}")
                continue

            existing = self.db.get(Preset, record.id)
            if existing:
                self.db.delete(existing)
                self.db.commit()

            self.save_preset(
                record.name,
                record.data,
                record.preset_type,
                preset_id=record.id,
                timestamp=record.timestamp,
            )
            imported += 1

        return imported
