"""Read-only reports over the rental catalog"""
import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List

from pydantic import BaseModel

from application.catalog import Catalog
from domain.enums import VehicleCategory, VehicleStatus, BookingStatus
from domain.exceptions import ReferenceNotFoundError
from domain.pricing import estimate_charge, round_money

logger = logging.getLogger(__name__)


def _percent(part: int, whole: int) -> Decimal:
    if whole == 0:
        return Decimal("0.00")
    return (Decimal(part * 100) / whole).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class CategoryRevenue(BaseModel):
    category: VehicleCategory
    bookings: int
    revenue: Decimal
    average_revenue: Decimal


class RevenueReport(BaseModel):
    start_date: date
    end_date: date
    categories: List[CategoryRevenue]
    total_bookings: int
    total_revenue: Decimal
    average_booking_value: Decimal


class CategoryUtilization(BaseModel):
    category: VehicleCategory
    total: int
    available: int
    reserved: int
    maintenance: int
    utilization_percent: Decimal


class UtilizationReport(BaseModel):
    categories: List[CategoryUtilization]
    total_vehicles: int
    utilization_percent: Decimal


class CustomerBookingLine(BaseModel):
    booking_id: str
    vehicle_id: str
    vehicle_model: str
    start_date: date
    end_date: date
    days: int
    status: BookingStatus
    estimated_cost: Decimal


class CustomerReport(BaseModel):
    customer_id: str
    name: str
    bookings: List[CustomerBookingLine]
    total_bookings: int
    total_days: int
    total_spent: Decimal


class SystemSummary(BaseModel):
    total_vehicles: int
    available_vehicles: int
    reserved_vehicles: int
    maintenance_vehicles: int
    total_customers: int
    total_bookings: int
    active_bookings: int
    utilization_percent: Decimal
    vehicles_per_category: Dict[str, int]


class IntegrityReport(BaseModel):
    status: str
    orphaned_bookings: List[str]
    invalid_date_ranges: List[str]
    stranded_vehicles: List[str] = []

    @property
    def healthy(self) -> bool:
        return self.status == "healthy"


class ReportService:
    """Revenue, utilization and customer reports plus the catalog integrity check"""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def revenue_report(self, start_date: date, end_date: date) -> RevenueReport:
        """Estimated revenue of non-cancelled bookings starting within [start_date, end_date]"""
        revenue: Dict[VehicleCategory, Decimal] = {}
        counts: Dict[VehicleCategory, int] = {}
        for booking in self.catalog.bookings.find_all():
            if booking.status == BookingStatus.CANCELLED:
                continue
            if not start_date <= booking.start_date <= end_date:
                continue
            category = booking.vehicle.category
            revenue[category] = revenue.get(category, Decimal("0")) + estimate_charge(booking).total
            counts[category] = counts.get(category, 0) + 1

        categories = [
            CategoryRevenue(
                category=category,
                bookings=counts[category],
                revenue=revenue[category],
                average_revenue=round_money(revenue[category] / counts[category])
            )
            for category in revenue
        ]
        total_bookings = sum(counts.values())
        total_revenue = sum(revenue.values(), Decimal("0"))
        average = total_revenue / total_bookings if total_bookings else Decimal("0")
        return RevenueReport(
            start_date=start_date,
            end_date=end_date,
            categories=categories,
            total_bookings=total_bookings,
            total_revenue=total_revenue,
            average_booking_value=round_money(average)
        )

    def utilization_report(self) -> UtilizationReport:
        """Share of each category that is reserved or under maintenance"""
        by_category: Dict[VehicleCategory, Dict[VehicleStatus, int]] = {}
        for vehicle in self.catalog.vehicles.find_all():
            statuses = by_category.setdefault(vehicle.category, {s: 0 for s in VehicleStatus})
            statuses[vehicle.status] += 1

        categories = []
        busy_total = 0
        vehicle_total = 0
        for category, statuses in by_category.items():
            total = sum(statuses.values())
            busy = statuses[VehicleStatus.RESERVED] + statuses[VehicleStatus.UNDER_MAINTENANCE]
            busy_total += busy
            vehicle_total += total
            categories.append(CategoryUtilization(
                category=category,
                total=total,
                available=statuses[VehicleStatus.AVAILABLE],
                reserved=statuses[VehicleStatus.RESERVED],
                maintenance=statuses[VehicleStatus.UNDER_MAINTENANCE],
                utilization_percent=_percent(busy, total)
            ))
        return UtilizationReport(
            categories=categories,
            total_vehicles=vehicle_total,
            utilization_percent=_percent(busy_total, vehicle_total)
        )

    def customer_report(self, customer_id: str) -> CustomerReport:
        customer = self.catalog.customers.find_by_id(customer_id)
        if customer is None:
            raise ReferenceNotFoundError("Customer", customer_id)

        lines = []
        for booking in self.catalog.bookings.find_by_customer_id(customer_id):
            lines.append(CustomerBookingLine(
                booking_id=booking.booking_id,
                vehicle_id=booking.vehicle.vehicle_id,
                vehicle_model=booking.vehicle.model,
                start_date=booking.start_date,
                end_date=booking.end_date,
                days=booking.duration_in_days(),
                status=booking.status,
                estimated_cost=estimate_charge(booking).total
            ))
        spent = [line.estimated_cost for line in lines if line.status != BookingStatus.CANCELLED]
        return CustomerReport(
            customer_id=customer.customer_id,
            name=customer.name,
            bookings=lines,
            total_bookings=len(lines),
            total_days=sum(line.days for line in lines if line.status != BookingStatus.CANCELLED),
            total_spent=sum(spent, Decimal("0"))
        )

    def system_summary(self) -> SystemSummary:
        vehicles = self.catalog.vehicles.find_all()
        bookings = self.catalog.bookings.find_all()
        per_category: Dict[str, int] = {}
        for vehicle in vehicles:
            per_category[vehicle.category.value] = per_category.get(vehicle.category.value, 0) + 1

        reserved = sum(1 for v in vehicles if v.status == VehicleStatus.RESERVED)
        maintenance = sum(1 for v in vehicles if v.status == VehicleStatus.UNDER_MAINTENANCE)
        return SystemSummary(
            total_vehicles=len(vehicles),
            available_vehicles=sum(1 for v in vehicles if v.is_available()),
            reserved_vehicles=reserved,
            maintenance_vehicles=maintenance,
            total_customers=len(self.catalog.customers.find_all()),
            total_bookings=len(bookings),
            active_bookings=sum(1 for b in bookings if b.is_active()),
            utilization_percent=_percent(reserved + maintenance, len(vehicles)),
            vehicles_per_category=per_category
        )

    def check_integrity(self) -> IntegrityReport:
        """Bookings that point at missing records or have an inverted period,
        and Reserved vehicles that no active booking holds"""
        orphaned = []
        inverted = []
        held = set()
        for booking in self.catalog.bookings.find_all():
            if self.catalog.customers.find_by_id(booking.customer.customer_id) is None \
                    or self.catalog.vehicles.find_by_id(booking.vehicle.vehicle_id) is None:
                orphaned.append(booking.booking_id)
            if booking.start_date > booking.end_date:
                inverted.append(booking.booking_id)
            if booking.is_active():
                held.add(booking.vehicle.vehicle_id)
        stranded = [
            v.vehicle_id for v in self.catalog.vehicles.find_all()
            if v.status == VehicleStatus.RESERVED and v.vehicle_id not in held
        ]

        status = "healthy"
        if orphaned or inverted or stranded:
            status = "degraded"
            logger.warning(
                f"Integrity check found {len(orphaned)} orphaned bookings, "
                f"{len(inverted)} inverted date ranges and {len(stranded)} stranded vehicles"
            )
        return IntegrityReport(
            status=status,
            orphaned_bookings=orphaned,
            invalid_date_ranges=inverted,
            stranded_vehicles=stranded
        )
