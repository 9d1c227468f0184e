"""Domain Repository Interfaces"""
from abc import ABC, abstractmethod
from typing import Optional, List

from pydantic import BaseModel

from domain.auth import UserInDB
from domain.entities import Vehicle, Customer, Booking


class VehicleRepository(ABC):
    """Repository interface for Vehicle"""

    @abstractmethod
    def save(self, vehicle: Vehicle) -> Vehicle:
        """Save vehicle"""
        pass

    @abstractmethod
    def find_by_id(self, vehicle_id: str) -> Optional[Vehicle]:
        """Find vehicle by ID"""
        pass

    @abstractmethod
    def find_all(self) -> List[Vehicle]:
        """Find all vehicles in catalog order"""
        pass

    @abstractmethod
    def delete(self, vehicle_id: str) -> bool:
        """Delete vehicle"""
        pass


class CustomerRepository(ABC):
    """Repository interface for Customer"""

    @abstractmethod
    def save(self, customer: Customer) -> Customer:
        """Save customer"""
        pass

    @abstractmethod
    def find_by_id(self, customer_id: str) -> Optional[Customer]:
        """Find customer by NIC or passport number"""
        pass

    @abstractmethod
    def find_all(self) -> List[Customer]:
        """Find all customers"""
        pass

    @abstractmethod
    def delete(self, customer_id: str) -> bool:
        """Delete customer"""
        pass


class BookingRepository(ABC):
    """Repository interface for Booking Aggregate"""

    @abstractmethod
    def save(self, booking: Booking) -> Booking:
        """Save or re-index booking"""
        pass

    @abstractmethod
    def find_by_id(self, booking_id: str) -> Optional[Booking]:
        """Find booking by ID"""
        pass

    @abstractmethod
    def find_by_customer_id(self, customer_id: str) -> List[Booking]:
        """Find bookings owned by a customer"""
        pass

    @abstractmethod
    def find_by_vehicle_id(self, vehicle_id: str) -> List[Booking]:
        """Find bookings on a vehicle"""
        pass

    @abstractmethod
    def find_all(self) -> List[Booking]:
        """Find all bookings"""
        pass

    @abstractmethod
    def delete(self, booking_id: str) -> bool:
        """Delete booking"""
        pass


class UserRepository(ABC):
    """Repository interface for login accounts"""

    @abstractmethod
    def save(self, user: UserInDB) -> UserInDB:
        pass

    @abstractmethod
    def find_by_username(self, username: str) -> Optional[UserInDB]:
        pass

    @abstractmethod
    def find_all(self) -> List[UserInDB]:
        pass


class CatalogSnapshot(BaseModel):
    """Full in-memory state handed to and from persistence"""
    vehicles: List[Vehicle] = []
    customers: List[Customer] = []
    bookings: List[Booking] = []
    users: List[UserInDB] = []


class CatalogStore(ABC):
    """Persistence collaborator: loads the catalog once, re-serializes it on change"""

    @abstractmethod
    def load(self) -> CatalogSnapshot:
        """Read every record set"""
        pass

    @abstractmethod
    def save(self, snapshot: CatalogSnapshot) -> bool:
        """Write every record set, returning False when the write failed"""
        pass
