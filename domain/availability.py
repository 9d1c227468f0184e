"""Availability Engine - decides whether a vehicle can be booked for a period"""
from datetime import date
from typing import Iterable, List, Optional

from domain.entities import Booking, Vehicle
from domain.enums import VehicleStatus


def find_conflicts(
    vehicle: Vehicle,
    start_date: date,
    end_date: date,
    existing_bookings: Iterable[Booking],
    exclude_booking_id: Optional[str] = None
) -> List[Booking]:
    """Active bookings on the same vehicle whose period overlaps [start_date, end_date]"""
    return [
        booking for booking in existing_bookings
        if booking.vehicle.vehicle_id == vehicle.vehicle_id
        and booking.is_active()
        and booking.booking_id != exclude_booking_id
        and booking.overlaps(start_date, end_date)
    ]


def _effective_status(
    vehicle: Vehicle,
    existing_bookings: List[Booking],
    exclude_booking_id: Optional[str]
) -> VehicleStatus:
    # A reservation held only by the booking being rescheduled does not block it
    if vehicle.status == VehicleStatus.RESERVED and exclude_booking_id is not None:
        holders = [
            b for b in existing_bookings
            if b.vehicle.vehicle_id == vehicle.vehicle_id and b.is_active()
        ]
        if holders and all(b.booking_id == exclude_booking_id for b in holders):
            return VehicleStatus.AVAILABLE
    return vehicle.status


def is_bookable(
    vehicle: Vehicle,
    start_date: date,
    end_date: date,
    existing_bookings: Iterable[Booking],
    exclude_booking_id: Optional[str] = None
) -> bool:
    """Vehicle is Available and no active booking on it overlaps the period"""
    bookings = list(existing_bookings)
    if _effective_status(vehicle, bookings, exclude_booking_id) != VehicleStatus.AVAILABLE:
        return False
    return not find_conflicts(vehicle, start_date, end_date, bookings, exclude_booking_id)
