"""Pricing repository - Database operations for the pricing catalog"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import PricingItem


class PricingRepository:
    """Repository for pricing catalog database operations"""

    @staticmethod
    def get_catalog(db: Session) -> list[PricingItem]:
        return (
            db.query(PricingItem)
            .order_by(PricingItem.category.asc(), PricingItem.display_order.asc(), PricingItem.id.asc())
            .all()
        )

    @staticmethod
    def get_by_slug(db: Session, slug: str) -> Optional[PricingItem]:
        return db.query(PricingItem).filter(PricingItem.slug == slug).first()

    @staticmethod
    def create_item(db: Session, **item_data) -> PricingItem:
        item = PricingItem(**item_data)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def update_item(db: Session, item: PricingItem, **updates) -> PricingItem:
        for key, value in updates.items():
            setattr(item, key, value)
        db.commit()
        db.refresh(item)
        return item
