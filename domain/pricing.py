"""Pricing Table and Fee Calculator"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Optional

from domain.entities import Booking, DEPOSIT
from domain.enums import VehicleCategory
from domain.value_objects import ChargeBreakdown, PricingRule


LONG_RENTAL_DAYS = 7
LONG_RENTAL_DISCOUNT = Decimal("0.10")

PRICING_TABLE: Dict[VehicleCategory, PricingRule] = {
    VehicleCategory.COMPACT_PETROL: PricingRule(
        daily_rate=Decimal("5000"), free_distance_per_day=100,
        extra_distance_rate=Decimal("50"), tax_rate=Decimal("0.10")
    ),
    VehicleCategory.HYBRID: PricingRule(
        daily_rate=Decimal("7500"), free_distance_per_day=150,
        extra_distance_rate=Decimal("60"), tax_rate=Decimal("0.12")
    ),
    VehicleCategory.ELECTRIC: PricingRule(
        daily_rate=Decimal("10000"), free_distance_per_day=200,
        extra_distance_rate=Decimal("40"), tax_rate=Decimal("0.08")
    ),
    VehicleCategory.LUXURY_SUV: PricingRule(
        daily_rate=Decimal("15000"), free_distance_per_day=250,
        extra_distance_rate=Decimal("75"), tax_rate=Decimal("0.15")
    ),
}


def round_money(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def find_pricing_rule(category: VehicleCategory) -> Optional[PricingRule]:
    """Return the tariff for a category, or None when the category is unconfigured"""
    return PRICING_TABLE.get(category)


def long_rental_discount(base_price: Decimal, days: int) -> Decimal:
    if days >= LONG_RENTAL_DAYS:
        return base_price * LONG_RENTAL_DISCOUNT
    return Decimal("0")


def estimate_rental_price(daily_rate: Decimal, days: int) -> Decimal:
    """Daily rate times days with the long-rental discount, no distance or tax"""
    base_price = Decimal(daily_rate) * max(days, 0)
    return round_money(base_price - long_rental_discount(base_price, days))


def charge_for(category: VehicleCategory, days: int, actual_distance: int) -> ChargeBreakdown:
    """Itemized charge for renting a category for a number of days.

    Unconfigured categories and empty rentals produce an all-zero breakdown;
    ``pricing_configured`` tells the two apart.
    """
    rule = find_pricing_rule(category)
    if rule is None:
        return ChargeBreakdown(category=category, pricing_configured=False,
                               days=max(days, 0), actual_distance=actual_distance)
    if days <= 0:
        return ChargeBreakdown(category=category, days=0, actual_distance=actual_distance)

    base_price = rule.daily_rate * days
    free_distance = rule.free_distance_per_day * days
    extra_distance = max(0, actual_distance - free_distance)
    extra_charge = rule.extra_distance_rate * extra_distance
    discount = long_rental_discount(base_price, days)
    subtotal = (base_price - discount) + extra_charge
    tax = subtotal * rule.tax_rate
    total = subtotal + tax + DEPOSIT

    return ChargeBreakdown(
        category=category,
        days=days,
        daily_rate=round_money(rule.daily_rate),
        base_price=round_money(base_price),
        discount=round_money(discount),
        free_distance=free_distance,
        actual_distance=actual_distance,
        extra_distance=extra_distance,
        extra_distance_rate=round_money(rule.extra_distance_rate),
        extra_charge=round_money(extra_charge),
        subtotal=round_money(subtotal),
        tax_rate=rule.tax_rate,
        tax=round_money(tax),
        deposit=round_money(DEPOSIT),
        total=round_money(total)
    )


def compute_charge(booking: Booking, actual_distance: int) -> ChargeBreakdown:
    """Charge for a booking given the distance actually driven"""
    return charge_for(booking.vehicle.category, booking.duration_in_days(), actual_distance)


def estimate_charge(booking: Booking) -> ChargeBreakdown:
    """Charge for a booking at its declared distance"""
    return compute_charge(booking, booking.total_distance)
