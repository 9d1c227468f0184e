"""Domain Entities - Aggregates"""
from pydantic import BaseModel, Field, validator
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional
import random
import string

from domain.enums import VehicleCategory, VehicleStatus, BookingStatus, BookingTimeStatus
from domain.exceptions import InvalidBookingError
from domain.value_objects import DateRange


DEPOSIT = Decimal("5000")
MIN_NOTICE_DAYS = 2       # start must be strictly after today + 2 to book
MODIFY_WINDOW_DAYS = 1    # start must be strictly after today + 1 to change or cancel

# Records are stored one per line with comma separated, unescaped fields
FORBIDDEN_FIELD_CHARS = (",", "\n", "\r")


def check_plain_text(field: str, value: Optional[str]) -> Optional[str]:
    """Reject text that would split a stored record"""
    if value and any(ch in value for ch in FORBIDDEN_FIELD_CHARS):
        raise ValueError(f"{field} must not contain commas or line breaks")
    return value


class Vehicle(BaseModel):
    """Vehicle Entity"""

    vehicle_id: str
    model: str
    category: VehicleCategory
    daily_rate: Decimal = Field(ge=0)
    status: VehicleStatus = VehicleStatus.AVAILABLE

    @validator('vehicle_id', 'model')
    def plain_text_fields(cls, v):
        return check_plain_text("Vehicle details", v)

    class Config:
        from_attributes = True

    def is_available(self) -> bool:
        return self.status == VehicleStatus.AVAILABLE

    def reserve(self) -> None:
        self.status = VehicleStatus.RESERVED

    def release(self) -> None:
        """Return a reserved vehicle to the pool; maintenance status is left alone"""
        if self.status == VehicleStatus.RESERVED:
            self.status = VehicleStatus.AVAILABLE


class Customer(BaseModel):
    """Customer Entity, keyed by NIC or passport number"""

    customer_id: str
    name: str
    contact_number: str = ""
    email: str = ""

    @validator('customer_id', 'name', 'contact_number', 'email')
    def plain_text_fields(cls, v):
        return check_plain_text("Customer details", v)

    class Config:
        from_attributes = True


class Booking(BaseModel):
    """Booking Aggregate Root Entity"""

    # Identity
    booking_id: str

    # References (not owned)
    customer: Customer
    vehicle: Vehicle

    # Rental period, inclusive on both ends
    start_date: date
    end_date: date
    total_distance: int = Field(ge=0, default=0)
    deposit: Decimal = DEPOSIT

    status: BookingStatus = BookingStatus.PROPOSED
    version: int = 1

    @validator('booking_id')
    def plain_booking_id(cls, v):
        return check_plain_text("Booking ID", v)

    class Config:
        from_attributes = True

    # ==================== FACTORY METHOD ====================
    @staticmethod
    def create(
        customer: Customer,
        vehicle: Vehicle,
        start_date: date,
        end_date: date,
        total_distance: int = 0,
        booking_id: Optional[str] = None,
        today: Optional[date] = None
    ) -> "Booking":
        """Create a proposed booking after checking the schedule rules"""
        if not vehicle.is_available():
            raise InvalidBookingError(
                f"Vehicle {vehicle.vehicle_id} is {vehicle.status.value}"
            )
        Booking.validate_schedule(start_date, end_date, today)
        if total_distance < 0:
            raise InvalidBookingError("Distance cannot be negative")
        try:
            check_plain_text("Booking ID", booking_id)
        except ValueError as e:
            raise InvalidBookingError(str(e))

        return Booking(
            booking_id=booking_id or Booking.generate_booking_id(),
            customer=customer,
            vehicle=vehicle,
            start_date=start_date,
            end_date=end_date,
            total_distance=total_distance,
            status=BookingStatus.PROPOSED
        )

    # ==================== STATE TRANSITION METHODS ====================
    def activate(self) -> None:
        """Commit a proposed booking and reserve its vehicle"""
        if self.status != BookingStatus.PROPOSED:
            raise InvalidBookingError(
                f"Cannot activate booking with status {self.status.value}"
            )
        self.status = BookingStatus.ACTIVE
        self.vehicle.reserve()

    def cancel(self) -> None:
        if self.status != BookingStatus.ACTIVE:
            raise InvalidBookingError(
                f"Cannot cancel booking with status {self.status.value}"
            )
        self.status = BookingStatus.CANCELLED
        self.version += 1

    def complete(self) -> None:
        if self.status != BookingStatus.ACTIVE:
            raise InvalidBookingError(
                f"Cannot complete booking with status {self.status.value}"
            )
        self.status = BookingStatus.COMPLETED
        self.version += 1

    def reschedule(
        self,
        customer: Customer,
        vehicle: Vehicle,
        start_date: date,
        end_date: date,
        total_distance: int
    ) -> None:
        """Apply already validated changes"""
        self.customer = customer
        self.vehicle = vehicle
        self.start_date = start_date
        self.end_date = end_date
        self.total_distance = total_distance
        self.version += 1

    # ==================== QUERY METHODS ====================
    @property
    def date_range(self) -> DateRange:
        return DateRange(start_date=self.start_date, end_date=self.end_date)

    def duration_in_days(self) -> int:
        return self.date_range.days()

    def is_active(self) -> bool:
        return self.status == BookingStatus.ACTIVE

    def overlaps(self, start_date: date, end_date: date) -> bool:
        return self.date_range.overlaps(start_date, end_date)

    def covers(self, day: date) -> bool:
        return self.date_range.contains(day)

    def can_modify(self, today: Optional[date] = None) -> bool:
        """More than one day must remain before the start date"""
        today = today or date.today()
        return self.start_date > today + timedelta(days=MODIFY_WINDOW_DAYS)

    def can_cancel(self, today: Optional[date] = None) -> bool:
        return self.can_modify(today)

    def days_until_start(self, today: Optional[date] = None) -> int:
        """Days left before pickup, -1 once the rental has started"""
        today = today or date.today()
        if self.start_date < today:
            return -1
        return (self.start_date - today).days

    def matches_time_status(self, status: BookingTimeStatus, today: Optional[date] = None) -> bool:
        today = today or date.today()
        if status == BookingTimeStatus.UPCOMING:
            return self.start_date > today
        if status == BookingTimeStatus.ACTIVE:
            return self.start_date <= today <= self.end_date
        if status == BookingTimeStatus.COMPLETED:
            return self.end_date < today
        if status == BookingTimeStatus.CANCELABLE:
            return self.can_cancel(today)
        return False

    # ==================== VALIDATION METHODS ====================
    @staticmethod
    def validate_schedule(start_date: date, end_date: date, today: Optional[date] = None) -> None:
        """Advance-notice and ordering rules shared by create and update"""
        today = today or date.today()
        if start_date <= today + timedelta(days=MIN_NOTICE_DAYS):
            raise InvalidBookingError(
                f"Bookings must be made at least {MIN_NOTICE_DAYS + 1} days in advance"
            )
        if start_date > end_date:
            raise InvalidBookingError("Start date must be on or before end date")

    @staticmethod
    def generate_booking_id() -> str:
        """Generate a booking reference"""
        return "B" + "".join(random.choices(string.ascii_uppercase + string.digits, k=8))
