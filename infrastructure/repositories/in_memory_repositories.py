"""In-Memory Repository Implementations"""
from typing import Optional, List, Dict

from domain.auth import UserInDB
from domain.repositories import VehicleRepository, CustomerRepository, BookingRepository, UserRepository
from domain.entities import Vehicle, Customer, Booking


class InMemoryVehicleRepository(VehicleRepository):
    """In-memory implementation of VehicleRepository"""

    def __init__(self):
        self._storage: Dict[str, Vehicle] = {}

    def save(self, vehicle: Vehicle) -> Vehicle:
        """Save vehicle to memory"""
        self._storage[vehicle.vehicle_id] = vehicle
        return vehicle

    def find_by_id(self, vehicle_id: str) -> Optional[Vehicle]:
        """Find vehicle by ID"""
        return self._storage.get(vehicle_id)

    def find_all(self) -> List[Vehicle]:
        """Find all vehicles"""
        return list(self._storage.values())

    def delete(self, vehicle_id: str) -> bool:
        """Delete vehicle"""
        if vehicle_id in self._storage:
            del self._storage[vehicle_id]
            return True
        return False


class InMemoryCustomerRepository(CustomerRepository):
    """In-memory implementation of CustomerRepository"""

    def __init__(self):
        self._storage: Dict[str, Customer] = {}

    def save(self, customer: Customer) -> Customer:
        """Save customer to memory"""
        self._storage[customer.customer_id] = customer
        return customer

    def find_by_id(self, customer_id: str) -> Optional[Customer]:
        """Find customer by ID"""
        return self._storage.get(customer_id)

    def find_all(self) -> List[Customer]:
        """Find all customers"""
        return list(self._storage.values())

    def delete(self, customer_id: str) -> bool:
        """Delete customer"""
        if customer_id in self._storage:
            del self._storage[customer_id]
            return True
        return False


class InMemoryBookingRepository(BookingRepository):
    """In-memory implementation of BookingRepository, indexed by vehicle"""

    def __init__(self):
        self._storage: Dict[str, Booking] = {}
        # vehicle_id -> booking ids, insertion ordered
        self._by_vehicle: Dict[str, Dict[str, None]] = {}
        self._indexed_vehicle: Dict[str, str] = {}

    def _unindex(self, booking_id: str) -> None:
        vehicle_id = self._indexed_vehicle.pop(booking_id, None)
        if vehicle_id is not None:
            self._by_vehicle.get(vehicle_id, {}).pop(booking_id, None)

    def save(self, booking: Booking) -> Booking:
        """Save booking and refresh its vehicle index entry"""
        self._unindex(booking.booking_id)
        self._storage[booking.booking_id] = booking
        vehicle_id = booking.vehicle.vehicle_id
        self._by_vehicle.setdefault(vehicle_id, {})[booking.booking_id] = None
        self._indexed_vehicle[booking.booking_id] = vehicle_id
        return booking

    def find_by_id(self, booking_id: str) -> Optional[Booking]:
        """Find booking by ID"""
        return self._storage.get(booking_id)

    def find_by_customer_id(self, customer_id: str) -> List[Booking]:
        """Find bookings by customer ID"""
        return [b for b in self._storage.values() if b.customer.customer_id == customer_id]

    def find_by_vehicle_id(self, vehicle_id: str) -> List[Booking]:
        """Find bookings on a vehicle through the index"""
        return [self._storage[booking_id] for booking_id in self._by_vehicle.get(vehicle_id, {})]

    def find_all(self) -> List[Booking]:
        """Find all bookings"""
        return list(self._storage.values())

    def delete(self, booking_id: str) -> bool:
        """Delete booking"""
        if booking_id in self._storage:
            self._unindex(booking_id)
            del self._storage[booking_id]
            return True
        return False


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository"""

    def __init__(self):
        self._storage: Dict[str, UserInDB] = {}

    def save(self, user: UserInDB) -> UserInDB:
        self._storage[user.username] = user
        return user

    def find_by_username(self, username: str) -> Optional[UserInDB]:
        return self._storage.get(username)

    def find_all(self) -> List[UserInDB]:
        return list(self._storage.values())
