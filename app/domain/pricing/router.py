"""Pricing router - public catalog and admin maintenance"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import Caller, require_admin
from ...database import get_db
from .schemas import (
    CatalogResponse,
    PricingCreate,
    PricingItemResponse,
    PricingMutationResponse,
    PricingUpdate,
)
from .service import PricingService

router = APIRouter(prefix="/pricing", tags=["Pricing"])


def get_pricing_service(db: Session = Depends(get_db)) -> PricingService:
    """Dependency injection for PricingService"""
    return PricingService(db)


@router.get("", response_model=CatalogResponse)
async def get_pricing(service: PricingService = Depends(get_pricing_service)):
    """Packages and add-ons; no authentication required"""
    catalog = service.get_catalog()
    return CatalogResponse(
        packages=[PricingItemResponse.model_validate(i) for i in catalog["packages"]],
        addons=[PricingItemResponse.model_validate(i) for i in catalog["addons"]],
    )


@router.post("", response_model=PricingMutationResponse, status_code=201)
async def create_pricing_item(
    data: PricingCreate,
    caller: Caller = Depends(require_admin),
    service: PricingService = Depends(get_pricing_service),
):
    item = service.create_item(caller.uid, caller.role, data)
    return PricingMutationResponse(
        message="Pricing item created", pricing=PricingItemResponse.model_validate(item)
    )


@router.put("/{slug}", response_model=PricingMutationResponse)
async def update_pricing_item(
    slug: str,
    data: PricingUpdate,
    caller: Caller = Depends(require_admin),
    service: PricingService = Depends(get_pricing_service),
):
    item = service.update_item(caller.uid, caller.role, slug, data)
    return PricingMutationResponse(
        message="Pricing updated", pricing=PricingItemResponse.model_validate(item)
    )
