"""Domain Enums"""
from enum import Enum
from typing import Optional


def _normalize(label: str) -> str:
    return "".join(ch for ch in label.lower() if ch.isalnum())


class VehicleCategory(str, Enum):
    COMPACT_PETROL = "Compact Petrol"
    HYBRID = "Hybrid"
    ELECTRIC = "Electric"
    LUXURY_SUV = "Luxury SUV"
    RACING = "Racing"
    OFF_ROAD_SUV = "Off road SUV"
    SUPER_LUXURY = "Super luxury"

    @classmethod
    def from_label(cls, label: str) -> Optional["VehicleCategory"]:
        """Match a persisted or user supplied label, ignoring case and spacing"""
        key = _normalize(label)
        for item in cls:
            if key in (_normalize(item.value), _normalize(item.name)):
                return item
        return None


class VehicleStatus(str, Enum):
    AVAILABLE = "Available"
    RESERVED = "Reserved"
    UNDER_MAINTENANCE = "Under Maintenance"

    @classmethod
    def from_label(cls, label: str) -> Optional["VehicleStatus"]:
        key = _normalize(label)
        for item in cls:
            if key in (_normalize(item.value), _normalize(item.name)):
                return item
        return None


class BookingStatus(str, Enum):
    PROPOSED = "PROPOSED"
    ACTIVE = "ACTIVE"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class BookingTimeStatus(str, Enum):
    """Where a booking sits relative to today"""
    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELABLE = "cancelable"


class UserRole(str, Enum):
    CUSTOMER = "Customer"
    ADMIN = "Admin"
