"""Domain Value Objects"""
from pydantic import BaseModel, Field
from datetime import date
from decimal import Decimal
from typing import Optional

from domain.enums import VehicleCategory


CURRENCY = "LKR"


class DateRange(BaseModel):
    """Value Object for an inclusive rental period"""
    start_date: date
    end_date: date

    def days(self) -> int:
        """Number of rental days, counting both ends; 0 when start is after end"""
        if self.start_date > self.end_date:
            return 0
        return (self.end_date - self.start_date).days + 1

    def overlaps(self, start_date: date, end_date: date) -> bool:
        """Two inclusive ranges overlap unless one ends before the other starts"""
        return not (self.end_date < start_date or self.start_date > end_date)

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def is_ordered(self) -> bool:
        return self.start_date <= self.end_date

    class Config:
        frozen = True


class PricingRule(BaseModel):
    """Value Object for the per-category tariff"""
    daily_rate: Decimal = Field(ge=0)
    free_distance_per_day: int = Field(ge=0)
    extra_distance_rate: Decimal = Field(ge=0)
    tax_rate: Decimal = Field(ge=0, le=1)

    class Config:
        frozen = True


class ChargeBreakdown(BaseModel):
    """Itemized charge for a rental, every intermediate figure included"""
    category: Optional[VehicleCategory] = None
    pricing_configured: bool = True
    days: int = 0
    daily_rate: Decimal = Decimal("0")
    base_price: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    free_distance: int = 0
    actual_distance: int = 0
    extra_distance: int = 0
    extra_distance_rate: Decimal = Decimal("0")
    extra_charge: Decimal = Decimal("0")
    subtotal: Decimal = Decimal("0")
    tax_rate: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    deposit: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    currency: str = CURRENCY

    @property
    def amount_due_now(self) -> Decimal:
        """Total without the refundable deposit"""
        return self.total - self.deposit

    class Config:
        frozen = True
