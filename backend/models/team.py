"""
PromoterPro - Promoters & Floors

Floors are referenced BY NAME from Promoter.assignedFloors and
SaleRecord.saleLocation. Deleting a floor does not cascade.
"""

from typing import List, Optional
from pydantic import Field, field_validator

from .common import CamelModel


class Floor(CamelModel):
    id: str
    name: str


class Promoter(CamelModel):
    id: str
    name: str
    assigned_floors: List[str] = []
    password: Optional[str] = None  # sha256 digest, "" or None = unset


class PromoterCreate(CamelModel):
    name: str = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Promoter name is required")
        return v


class PromoterUpdate(CamelModel):
    name: Optional[str] = None
    assigned_floors: Optional[List[str]] = None


class FloorCreate(CamelModel):
    name: str = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Floor name is required")
        return v


class FloorToggle(CamelModel):
    floor_name: str
