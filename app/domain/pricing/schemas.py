"""Pricing domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class PricingCreate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None
    duration: Optional[str] = None
    features: Optional[list[str]] = None
    display_order: Optional[int] = None
    slug: Optional[str] = None

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        if v is not None and v < 0:
            raise ValueError("Price cannot be negative")
        return v


class PricingUpdate(BaseModel):
    """Partial update; fields left out keep their value"""

    name: Optional[str] = None
    price: Optional[float] = None
    duration: Optional[str] = None
    features: Optional[list[str]] = None
    display_order: Optional[int] = None

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        if v is not None and v < 0:
            raise ValueError("Price cannot be negative")
        return v


class PricingItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    name: str
    category: str
    price: float
    duration: Optional[str] = None
    features: Optional[list[str]] = None
    display_order: int
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None


class CatalogResponse(BaseModel):
    packages: list[PricingItemResponse]
    addons: list[PricingItemResponse]


class PricingMutationResponse(BaseModel):
    message: str
    pricing: PricingItemResponse
