"""Promotion campaign storage"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from ..models.promotion import Promotion, PromotionRecord, normalize_code


def demo_promotions(today: date) -> list[PromotionRecord]:
    """Demo campaigns valid around the given day"""
    return [
        PromotionRecord(
            id="promo-001",
            name="Save 10%",
            code="SAVE10",
            discount_percentage=Decimal("10"),
            description="10% off the whole order",
            start_date=today - timedelta(days=30),
            end_date=today + timedelta(days=30),
        ),
        PromotionRecord(
            id="promo-002",
            name="Flat 50 Off",
            code="FLAT50",
            discount_amount=Decimal("50"),
            description="Flat 50 off any order",
            start_date=today - timedelta(days=7),
            end_date=today + timedelta(days=7),
            usage_limit=100,
        ),
        PromotionRecord(
            id="promo-003",
            name="Diwali Special",
            code="DIWALI25",
            discount_percentage=Decimal("25"),
            start_date=today - timedelta(days=60),
            end_date=today - timedelta(days=30),
        ),
    ]


class PromotionDatabase:
    """In-memory promotion campaigns keyed by code"""

    def __init__(self, promotions: Optional[list[PromotionRecord]] = None):
        if promotions is None:
            promotions = demo_promotions(date.today())
        self.promotions: dict[str, PromotionRecord] = {p.code: p for p in promotions}

    def resolve(self, code: str, today: Optional[date] = None) -> Optional[Promotion]:
        """Get a promotion by code if it is currently valid"""
        record = self.promotions.get(normalize_code(code))
        if not record or not record.is_valid_on(today or date.today()):
            return None
        return record.to_promotion()

    def list_active(self, today: Optional[date] = None) -> list[Promotion]:
        day = today or date.today()
        return [p.to_promotion() for p in self.promotions.values() if p.is_valid_on(day)]

    def record_usage(self, code: str) -> None:
        """Count one redemption of a code"""
        record = self.promotions.get(normalize_code(code))
        if record:
            record.usage_count += 1
