"""Pricing service - package and add-on catalog"""

import logging

from sqlalchemy.orm import Session

from ...models import PricingItem
from ...schemas import Role
from ...shared.clock import Clock, utcnow
from ...shared.errors import NotFoundError, ValidationError
from ...shared.validators import slugify
from ..bookings import policy
from .repository import PricingRepository
from .schemas import PricingCreate, PricingUpdate

logger = logging.getLogger(__name__)

CATEGORIES = ("package", "addon")


class PricingService:
    """Service layer for the pricing catalog"""

    def __init__(self, db: Session, clock: Clock = utcnow):
        self.db = db
        self.clock = clock
        self.repo = PricingRepository()

    def get_catalog(self) -> dict:
        """Public catalog split into packages and add-ons, each in display order"""
        items = self.repo.get_catalog(self.db)
        return {
            "packages": [i for i in items if i.category == "package"],
            "addons": [i for i in items if i.category == "addon"],
        }

    def create_item(self, caller_id: str, caller_role: Role, data: PricingCreate) -> PricingItem:
        policy.check_admin(caller_role)
        if not data.name or not data.category or data.price is None:
            raise ValidationError("name, category, and price are required")
        if data.category not in CATEGORIES:
            raise ValidationError("Invalid category")

        slug = slugify(data.slug) if data.slug and data.slug.strip() else slugify(data.name)
        if not slug:
            raise ValidationError("Invalid slug")
        if self.repo.get_by_slug(self.db, slug):
            raise ValidationError(f"A pricing item with slug '{slug}' already exists")

        item = self.repo.create_item(
            self.db,
            slug=slug,
            name=data.name,
            category=data.category,
            price=data.price,
            duration=(data.duration or None) if data.category == "package" else None,
            features=data.features,
            display_order=data.display_order or 0,
            updated_at=self.clock(),
            updated_by=caller_id,
        )
        logger.info(f"💲 Pricing item {slug} created by {caller_id}")
        return item

    def update_item(
        self, caller_id: str, caller_role: Role, slug: str, data: PricingUpdate
    ) -> PricingItem:
        policy.check_admin(caller_role)
        item = self.repo.get_by_slug(self.db, slug)
        if not item:
            raise NotFoundError("Pricing item not found")

        updates = data.model_dump(exclude_unset=True)
        updates["updated_at"] = self.clock()
        updates["updated_by"] = caller_id
        item = self.repo.update_item(self.db, item, **updates)
        logger.info(f"💲 Pricing item {slug} updated by {caller_id}: {sorted(updates)}")
        return item
