"""Search and recommendation over the rental catalog"""
import logging
from collections import Counter
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from application.catalog import Catalog
from domain.availability import is_bookable
from domain.entities import Vehicle, Booking
from domain.enums import VehicleCategory, BookingStatus, BookingTimeStatus
from domain.exceptions import ReferenceNotFoundError
from domain.pricing import charge_for, estimate_charge, estimate_rental_price
from domain.value_objects import DateRange

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 5
MIN_FAVOURITE_MATCHES = 3
BACKFILL_BUDGET_FACTOR = Decimal("1.2")
DEFAULT_DAILY_BUDGET = Decimal("7500")


class SearchService:
    """Read-only queries; never mutates the catalog"""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def _is_bookable(self, vehicle: Vehicle, start_date: date, end_date: date) -> bool:
        existing = self.catalog.bookings.find_by_vehicle_id(vehicle.vehicle_id)
        return is_bookable(vehicle, start_date, end_date, existing)

    def search_vehicles(
        self,
        category: Optional[str] = None,
        max_price: Optional[Decimal] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[str] = None,
        model_keyword: Optional[str] = None
    ) -> List[Vehicle]:
        """Vehicles matching every supplied criterion, in catalog order"""
        results = []
        for vehicle in self.catalog.vehicles.find_all():
            if category and category.lower() not in vehicle.category.value.lower():
                continue
            if max_price is not None and max_price > 0 and vehicle.daily_rate > max_price:
                continue
            if status and vehicle.status.value.lower() != status.lower():
                continue
            if model_keyword and model_keyword.lower() not in vehicle.model.lower():
                continue
            if start_date and end_date and not self._is_bookable(vehicle, start_date, end_date):
                continue
            results.append(vehicle)
        return results

    def search_bookings(
        self,
        customer_name: Optional[str] = None,
        vehicle_model: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        booking_id: Optional[str] = None,
        status: Optional[str] = None,
        today: Optional[date] = None
    ) -> List[Booking]:
        """Bookings matching every supplied criterion.

        ``start_date``/``end_date`` bound the booking period; ``status`` is one of
        upcoming, active, completed or cancelable relative to ``today``.
        """
        time_status = None
        if status:
            try:
                time_status = BookingTimeStatus(status.lower())
            except ValueError:
                logger.debug(f"Unknown booking status filter '{status}'")
                return []

        results = []
        for booking in self.catalog.bookings.find_all():
            if customer_name and customer_name.lower() not in booking.customer.name.lower():
                continue
            if vehicle_model and vehicle_model.lower() not in booking.vehicle.model.lower():
                continue
            if start_date and booking.start_date < start_date:
                continue
            if end_date and booking.end_date > end_date:
                continue
            if booking_id and booking_id.lower() not in booking.booking_id.lower():
                continue
            if time_status and not booking.matches_time_status(time_status, today):
                continue
            results.append(booking)
        return results

    def find_best_matches(
        self,
        start_date: date,
        end_date: date,
        max_budget: Decimal,
        preferred_category: Optional[VehicleCategory] = None
    ) -> List[Vehicle]:
        """Bookable vehicles within budget, preferred category first, cheapest first"""
        days = DateRange(start_date=start_date, end_date=end_date).days()
        candidates = [
            v for v in self.catalog.vehicles.find_all()
            if self._is_bookable(v, start_date, end_date)
        ]
        candidates.sort(key=lambda v: (
            v.category != preferred_category,
            estimate_rental_price(v.daily_rate, days)
        ))
        return [
            v for v in candidates
            if charge_for(v.category, days, 0).total <= Decimal(max_budget)
        ]

    # ==================== RECOMMENDATIONS ====================
    def recommend(self, customer_id: str) -> List[Vehicle]:
        """Vehicles suited to a customer's rental history"""
        if not self.catalog.customers.find_by_id(customer_id):
            raise ReferenceNotFoundError("Customer", customer_id)

        history = [
            b for b in self.catalog.bookings.find_by_customer_id(customer_id)
            if b.status != BookingStatus.CANCELLED
        ]
        if not history:
            return self.popular_vehicles()

        favourite = self.favourite_category(history)
        budget = self.average_daily_spend(history)
        available = [v for v in self.catalog.vehicles.find_all() if v.is_available()]

        recommendations = [
            v for v in available
            if v.category == favourite and v.daily_rate <= budget
        ]
        if len(recommendations) < MIN_FAVOURITE_MATCHES:
            ceiling = budget * BACKFILL_BUDGET_FACTOR
            for vehicle in available:
                if len(recommendations) >= MAX_RECOMMENDATIONS:
                    break
                if vehicle.category != favourite and vehicle.daily_rate <= ceiling \
                        and vehicle not in recommendations:
                    recommendations.append(vehicle)

        logger.debug(
            f"Recommending {len(recommendations)} vehicles to {customer_id} "
            f"(favourite {favourite.value}, budget {budget})"
        )
        return recommendations[:MAX_RECOMMENDATIONS]

    @staticmethod
    def favourite_category(history: List[Booking]) -> VehicleCategory:
        """Most booked category; ties go to more rental days, then to the first seen"""
        counts: Counter = Counter()
        days: Dict[VehicleCategory, int] = {}
        first_seen: Dict[VehicleCategory, int] = {}
        for position, booking in enumerate(history):
            category = booking.vehicle.category
            counts[category] += 1
            days[category] = days.get(category, 0) + booking.duration_in_days()
            first_seen.setdefault(category, position)
        return min(counts, key=lambda c: (-counts[c], -days[c], first_seen[c]))

    @staticmethod
    def average_daily_spend(history: List[Booking]) -> Decimal:
        """Estimated spend divided by rental days, or the default budget with no days"""
        total_spent = sum((estimate_charge(b).total for b in history), Decimal("0"))
        total_days = sum(b.duration_in_days() for b in history)
        if total_days == 0:
            return DEFAULT_DAILY_BUDGET
        return total_spent / total_days

    def popular_vehicles(self) -> List[Vehicle]:
        """Available vehicles ordered by how often they were booked"""
        booking_counts = Counter(
            b.vehicle.vehicle_id for b in self.catalog.bookings.find_all()
            if b.status != BookingStatus.CANCELLED
        )
        ranked = sorted(
            self.catalog.vehicles.find_all(),
            key=lambda v: -booking_counts[v.vehicle_id]
        )
        return [v for v in ranked if v.is_available()][:MAX_RECOMMENDATIONS]
