"""Promotion models"""

from decimal import Decimal
from datetime import date
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional


def normalize_code(code: Optional[str]) -> str:
    """Trim and upper-case a promotion code"""
    return (code or "").strip().upper()


class Promotion(BaseModel):
    """Coded discount rule applied to a cart subtotal"""
    id: str
    name: str
    code: str
    discount_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    discount_amount: Optional[Decimal] = Field(default=None, ge=0)
    description: Optional[str] = None

    @field_validator("code")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return normalize_code(value)

    @model_validator(mode="after")
    def _one_discount_kind(self) -> "Promotion":
        if self.discount_percentage is not None and self.discount_amount is not None:
            raise ValueError("A promotion is either a percentage or a fixed amount, not both")
        return self

    @property
    def is_percentage(self) -> bool:
        return self.discount_percentage is not None


class PromotionRecord(Promotion):
    """Stored promotion campaign with validity window and usage cap"""
    is_active: bool = True
    start_date: date
    end_date: date
    usage_limit: Optional[int] = Field(default=None, ge=0)
    usage_count: int = Field(default=0, ge=0)

    def is_valid_on(self, day: date) -> bool:
        if not self.is_active:
            return False
        if not (self.start_date <= day <= self.end_date):
            return False
        if self.usage_limit is not None and self.usage_count >= self.usage_limit:
            return False
        return True

    def to_promotion(self) -> Promotion:
        return Promotion(
            id=self.id,
            name=self.name,
            code=self.code,
            discount_percentage=self.discount_percentage,
            discount_amount=self.discount_amount,
            description=self.description,
        )


class ApplyPromotionRequest(BaseModel):
    """Request to apply a promotion code"""
    code: str
