from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

WeightUnit = Literal["kg", "ton"]
LengthUnit = Literal["m", "ft"]


class LoadBase(BaseModel):
    """Fields shared by load create/update payloads."""
    current_location: str = Field(..., min_length=1, description="Pickup location")
    destination_location: str = Field(..., min_length=1, description="Drop-off location")
    weight: float = Field(..., gt=0, description="Cargo weight")
    weight_unit: WeightUnit = Field(..., description="Unit for weight")
    truck_length: float = Field(..., gt=0, description="Required truck length")
    length_unit: LengthUnit = Field(..., description="Unit for truck length")
    contact_number: str = Field(..., min_length=1, description="Shipper contact number")
    staff_contact_number: str = Field(..., min_length=1, description="Staff contact number")


class LoadCreate(LoadBase):
    """Create load payload."""


class LoadUpdate(LoadBase):
    """Full replacement of a load's editable fields (receipt is managed separately)."""


class LoadRead(LoadBase):
    """Load read model."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="Load id")
    receipt_storage_id: Optional[str] = Field(None, description="Canonical receipt storage reference")
    created_at: datetime = Field(..., description="Created at")
    updated_at: datetime = Field(..., description="Updated at")
