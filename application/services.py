"""Application Services - Business use cases"""
import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from pydantic import BaseModel

from application.catalog import Catalog
from domain.auth import UserInDB
from domain.availability import is_bookable, find_conflicts
from domain.entities import Vehicle, Customer, Booking, check_plain_text
from domain.enums import VehicleCategory, VehicleStatus, UserRole
from domain.exceptions import InvalidBookingError, ReferenceNotFoundError
from domain.pricing import compute_charge
from domain.value_objects import ChargeBreakdown
from infrastructure.audit import AuditLogger
from infrastructure.security import get_password_hash, verify_password

logger = logging.getLogger(__name__)


class BookingResult(BaseModel):
    """Outcome of a booking mutation; business-rule failures carry a reason"""
    success: bool
    booking: Optional[Booking] = None
    reason: Optional[str] = None


class Invoice(BaseModel):
    """Charge breakdown together with the booking it was issued for"""
    booking_id: str
    customer_id: str
    customer_name: str
    vehicle_id: str
    vehicle_model: str
    category: VehicleCategory
    start_date: date
    end_date: date
    days: int
    charges: ChargeBreakdown

    @property
    def amount_due_now(self) -> Decimal:
        return self.charges.amount_due_now


class VehicleService:
    """Service for vehicle catalog management"""

    def __init__(self, catalog: Catalog, audit: Optional[AuditLogger] = None):
        self.catalog = catalog
        self.audit = audit or AuditLogger()

    def add_vehicle(
        self,
        vehicle_id: str,
        model: str,
        category: VehicleCategory,
        daily_rate: Decimal,
        status: VehicleStatus = VehicleStatus.AVAILABLE,
        actor: str = "SYSTEM"
    ) -> Vehicle:
        """Add a vehicle to the fleet"""
        if self.catalog.vehicles.find_by_id(vehicle_id):
            raise ValueError(f"Vehicle {vehicle_id} already exists")
        if status == VehicleStatus.RESERVED:
            raise ValueError("Vehicles are reserved through bookings only")

        vehicle = Vehicle(
            vehicle_id=vehicle_id,
            model=model,
            category=category,
            daily_rate=daily_rate,
            status=status
        )
        self.catalog.vehicles.save(vehicle)
        self.catalog.save()
        self.audit.vehicle_operation(actor, "add", vehicle_id, f"{model} ({category.value})")
        return vehicle

    def get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        """Get vehicle by ID"""
        return self.catalog.vehicles.find_by_id(vehicle_id)

    def get_all_vehicles(self) -> List[Vehicle]:
        """Get all vehicles"""
        return self.catalog.vehicles.find_all()

    def update_vehicle(
        self,
        vehicle_id: str,
        model: Optional[str] = None,
        category: Optional[VehicleCategory] = None,
        daily_rate: Optional[Decimal] = None,
        status: Optional[VehicleStatus] = None,
        actor: str = "SYSTEM"
    ) -> Optional[Vehicle]:
        """Update vehicle details in place so bookings keep pointing at it"""
        vehicle = self.catalog.vehicles.find_by_id(vehicle_id)
        if not vehicle:
            return None

        check_plain_text("Vehicle details", model)
        if daily_rate is not None and daily_rate < 0:
            raise ValueError("Daily rate cannot be negative")
        if status is not None and status != vehicle.status:
            if status == VehicleStatus.RESERVED:
                raise ValueError("Vehicles are reserved through bookings only")
            holders = [b for b in self.catalog.bookings.find_by_vehicle_id(vehicle_id) if b.is_active()]
            if holders:
                raise ValueError(
                    f"Cannot change status of vehicle {vehicle_id} to {status.value} "
                    f"while booking {holders[0].booking_id} is active"
                )

        if model is not None:
            vehicle.model = model
        if category is not None:
            vehicle.category = category
        if daily_rate is not None:
            vehicle.daily_rate = Decimal(daily_rate)
        if status is not None:
            vehicle.status = status

        self.catalog.save()
        self.audit.vehicle_operation(actor, "update", vehicle_id)
        return vehicle

    def delete_vehicle(self, vehicle_id: str, actor: str = "SYSTEM") -> bool:
        """Remove a vehicle that no active booking holds"""
        if not self.catalog.vehicles.find_by_id(vehicle_id):
            return False

        active = [b for b in self.catalog.bookings.find_by_vehicle_id(vehicle_id) if b.is_active()]
        if active:
            raise ValueError(
                f"Cannot delete vehicle {vehicle_id} while booking {active[0].booking_id} is active"
            )

        self.catalog.vehicles.delete(vehicle_id)
        self.catalog.save()
        self.audit.vehicle_operation(actor, "delete", vehicle_id)
        return True


class CustomerService:
    """Service for customer records"""

    def __init__(self, catalog: Catalog, audit: Optional[AuditLogger] = None):
        self.catalog = catalog
        self.audit = audit or AuditLogger()

    def register_customer(
        self,
        customer_id: str,
        name: str,
        contact_number: str = "",
        email: str = "",
        actor: str = "SYSTEM"
    ) -> Customer:
        """Register a customer under their NIC or passport number"""
        if self.catalog.customers.find_by_id(customer_id):
            raise ValueError(f"Customer {customer_id} already registered")

        customer = Customer(
            customer_id=customer_id,
            name=name,
            contact_number=contact_number,
            email=email
        )
        self.catalog.customers.save(customer)
        self.catalog.save()
        self.audit.customer_operation(actor, "register", customer_id, name)
        return customer

    def get_customer(self, customer_id: str) -> Optional[Customer]:
        """Get customer by ID"""
        return self.catalog.customers.find_by_id(customer_id)

    def get_all_customers(self) -> List[Customer]:
        """Get all customers"""
        return self.catalog.customers.find_all()

    def get_customer_count(self) -> int:
        return len(self.catalog.customers.find_all())

    def update_customer(
        self,
        customer_id: str,
        name: Optional[str] = None,
        contact_number: Optional[str] = None,
        email: Optional[str] = None,
        actor: str = "SYSTEM"
    ) -> Optional[Customer]:
        """Update contact details"""
        customer = self.catalog.customers.find_by_id(customer_id)
        if not customer:
            return None

        for value in (name, contact_number, email):
            check_plain_text("Customer details", value)
        if name is not None:
            customer.name = name
        if contact_number is not None:
            customer.contact_number = contact_number
        if email is not None:
            customer.email = email

        self.catalog.save()
        self.audit.customer_operation(actor, "update", customer_id)
        return customer

    def delete_customer(self, customer_id: str, actor: str = "SYSTEM") -> bool:
        """Remove a customer without active bookings"""
        if not self.catalog.customers.find_by_id(customer_id):
            return False

        active = [b for b in self.catalog.bookings.find_by_customer_id(customer_id) if b.is_active()]
        if active:
            raise ValueError(
                f"Cannot delete customer {customer_id} while booking {active[0].booking_id} is active"
            )

        self.catalog.customers.delete(customer_id)
        self.catalog.save()
        self.audit.customer_operation(actor, "delete", customer_id)
        return True


class BookingService:
    """Booking engine: creates, changes and releases bookings"""

    def __init__(self, catalog: Catalog, audit: Optional[AuditLogger] = None):
        self.catalog = catalog
        self.audit = audit or AuditLogger()

    # ==================== HELPERS ====================
    def _require_customer(self, customer_id: str) -> Customer:
        customer = self.catalog.customers.find_by_id(customer_id)
        if customer is None:
            raise ReferenceNotFoundError("Customer", customer_id)
        return customer

    def _require_vehicle(self, vehicle_id: str) -> Vehicle:
        vehicle = self.catalog.vehicles.find_by_id(vehicle_id)
        if vehicle is None:
            raise ReferenceNotFoundError("Vehicle", vehicle_id)
        return vehicle

    def _reject(self, operation: str, booking_id: str, reason: str, actor: str) -> BookingResult:
        logger.info(f"Booking {operation} rejected for {booking_id}: {reason}")
        self.audit.booking_operation(actor, f"{operation}_rejected", booking_id, reason)
        return BookingResult(success=False, reason=reason)

    def _unavailable_reason(
        self,
        vehicle: Vehicle,
        start_date: date,
        end_date: date,
        exclude_booking_id: Optional[str] = None
    ) -> str:
        conflicts = find_conflicts(
            vehicle, start_date, end_date,
            self.catalog.bookings.find_by_vehicle_id(vehicle.vehicle_id),
            exclude_booking_id
        )
        if conflicts:
            return (
                f"Vehicle {vehicle.vehicle_id} is already booked from "
                f"{conflicts[0].start_date} to {conflicts[0].end_date}"
            )
        return f"Vehicle {vehicle.vehicle_id} is {vehicle.status.value}"

    def _new_booking_id(self) -> str:
        booking_id = Booking.generate_booking_id()
        while self.catalog.bookings.find_by_id(booking_id):
            booking_id = Booking.generate_booking_id()
        return booking_id

    def _release_vehicle(self, vehicle: Vehicle) -> None:
        """Vehicle goes back to Available once no active booking holds it"""
        holders = [b for b in self.catalog.bookings.find_by_vehicle_id(vehicle.vehicle_id) if b.is_active()]
        if not holders:
            vehicle.release()

    # ==================== MUTATIONS ====================
    def create_booking(
        self,
        customer_id: str,
        vehicle_id: str,
        start_date: date,
        end_date: date,
        total_distance: int = 0,
        booking_id: Optional[str] = None,
        actor: str = "SYSTEM",
        today: Optional[date] = None
    ) -> BookingResult:
        """Create and activate a booking, reserving the vehicle"""
        customer = self._require_customer(customer_id)
        vehicle = self._require_vehicle(vehicle_id)

        if booking_id and self.catalog.bookings.find_by_id(booking_id):
            return self._reject("create", booking_id, f"Booking {booking_id} already exists", actor)

        try:
            booking = Booking.create(
                customer=customer,
                vehicle=vehicle,
                start_date=start_date,
                end_date=end_date,
                total_distance=total_distance,
                booking_id=booking_id or self._new_booking_id(),
                today=today
            )
            existing = self.catalog.bookings.find_by_vehicle_id(vehicle.vehicle_id)
            if not is_bookable(vehicle, start_date, end_date, existing):
                raise InvalidBookingError(self._unavailable_reason(vehicle, start_date, end_date))
            booking.activate()
        except InvalidBookingError as e:
            return self._reject("create", booking_id or "-", str(e), actor)

        self.catalog.bookings.save(booking)
        self.catalog.save()
        self.audit.booking_operation(
            actor, "create", booking.booking_id,
            f"Vehicle:{vehicle.vehicle_id} Customer:{customer.customer_id} {start_date}..{end_date}"
        )
        return BookingResult(success=True, booking=booking)

    def update_booking(
        self,
        booking_id: str,
        customer_id: Optional[str] = None,
        vehicle_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        total_distance: Optional[int] = None,
        actor: str = "SYSTEM",
        today: Optional[date] = None
    ) -> Optional[BookingResult]:
        """Change an active booking, re-running the creation checks on the new values"""
        booking = self.catalog.bookings.find_by_id(booking_id)
        if not booking:
            return None

        if not booking.is_active():
            return self._reject("update", booking_id, f"Booking is {booking.status.value}", actor)
        if not booking.can_modify(today):
            return self._reject(
                "update", booking_id, "Bookings can only be changed more than 1 day before the start date", actor
            )

        new_customer = self._require_customer(customer_id) if customer_id else booking.customer
        new_vehicle = self._require_vehicle(vehicle_id) if vehicle_id else booking.vehicle
        new_start = start_date or booking.start_date
        new_end = end_date or booking.end_date
        new_distance = booking.total_distance if total_distance is None else total_distance

        try:
            Booking.validate_schedule(new_start, new_end, today)
            if new_distance < 0:
                raise InvalidBookingError("Distance cannot be negative")
            existing = self.catalog.bookings.find_by_vehicle_id(new_vehicle.vehicle_id)
            if not is_bookable(new_vehicle, new_start, new_end, existing, exclude_booking_id=booking_id):
                raise InvalidBookingError(
                    self._unavailable_reason(new_vehicle, new_start, new_end, booking_id)
                )
        except InvalidBookingError as e:
            return self._reject("update", booking_id, str(e), actor)

        old_vehicle = booking.vehicle
        booking.reschedule(new_customer, new_vehicle, new_start, new_end, new_distance)
        self.catalog.bookings.save(booking)
        if old_vehicle.vehicle_id != new_vehicle.vehicle_id:
            self._release_vehicle(old_vehicle)
            new_vehicle.reserve()

        self.catalog.save()
        self.audit.booking_operation(actor, "update", booking_id, f"{new_start}..{new_end}")
        return BookingResult(success=True, booking=booking)

    def cancel_booking(
        self,
        booking_id: str,
        actor: str = "SYSTEM",
        today: Optional[date] = None
    ) -> Optional[BookingResult]:
        """Cancel an active booking and free its vehicle"""
        booking = self.catalog.bookings.find_by_id(booking_id)
        if not booking:
            return None

        if not booking.can_cancel(today):
            return self._reject(
                "cancel", booking_id, "Bookings can only be cancelled more than 1 day before the start date", actor
            )
        try:
            booking.cancel()
        except InvalidBookingError as e:
            return self._reject("cancel", booking_id, str(e), actor)

        self.catalog.bookings.save(booking)
        self._release_vehicle(booking.vehicle)
        self.catalog.save()
        self.audit.booking_operation(actor, "cancel", booking_id)
        return BookingResult(success=True, booking=booking)

    def delete_booking(
        self,
        booking_id: str,
        actor: str = "SYSTEM",
        today: Optional[date] = None
    ) -> Optional[BookingResult]:
        """Remove a booking record; active bookings follow the cancellation window"""
        booking = self.catalog.bookings.find_by_id(booking_id)
        if not booking:
            return None

        if booking.is_active() and not booking.can_cancel(today):
            return self._reject(
                "delete", booking_id, "Bookings can only be deleted more than 1 day before the start date", actor
            )

        self.catalog.bookings.delete(booking_id)
        self._release_vehicle(booking.vehicle)
        self.catalog.save()
        self.audit.booking_operation(actor, "delete", booking_id)
        return BookingResult(success=True, booking=booking)

    def complete_booking(self, booking_id: str, actor: str = "SYSTEM") -> Optional[BookingResult]:
        """Close a finished rental and free its vehicle"""
        booking = self.catalog.bookings.find_by_id(booking_id)
        if not booking:
            return None

        try:
            booking.complete()
        except InvalidBookingError as e:
            return self._reject("complete", booking_id, str(e), actor)

        self.catalog.bookings.save(booking)
        self._release_vehicle(booking.vehicle)
        self.catalog.save()
        self.audit.booking_operation(actor, "complete", booking_id)
        return BookingResult(success=True, booking=booking)

    # ==================== QUERIES ====================
    def get_booking(self, booking_id: str) -> Optional[Booking]:
        """Get booking by ID"""
        return self.catalog.bookings.find_by_id(booking_id)

    def get_all_bookings(self) -> List[Booking]:
        """Get all bookings"""
        return self.catalog.bookings.find_all()

    def find_by_customer_name(self, name: str) -> List[Booking]:
        """Bookings whose customer name contains ``name``, ignoring case"""
        needle = name.lower()
        return [b for b in self.catalog.bookings.find_all() if needle in b.customer.name.lower()]

    def find_by_date(self, day: date) -> List[Booking]:
        """Bookings whose rental period includes ``day``"""
        return [b for b in self.catalog.bookings.find_all() if b.covers(day)]

    def find_by_customer(self, customer_id: str) -> List[Booking]:
        """Get all bookings for a customer"""
        return self.catalog.bookings.find_by_customer_id(customer_id)

    # ==================== CHARGES ====================
    def compute_charge(self, booking_id: str, actual_distance: int) -> Optional[ChargeBreakdown]:
        booking = self.catalog.bookings.find_by_id(booking_id)
        if not booking:
            return None
        return compute_charge(booking, actual_distance)

    def generate_invoice(self, booking_id: str, actual_distance: Optional[int] = None) -> Optional[Invoice]:
        """Invoice at the driven distance, or at the declared distance when not yet known"""
        booking = self.catalog.bookings.find_by_id(booking_id)
        if not booking:
            return None

        distance = booking.total_distance if actual_distance is None else actual_distance
        return Invoice(
            booking_id=booking.booking_id,
            customer_id=booking.customer.customer_id,
            customer_name=booking.customer.name,
            vehicle_id=booking.vehicle.vehicle_id,
            vehicle_model=booking.vehicle.model,
            category=booking.vehicle.category,
            start_date=booking.start_date,
            end_date=booking.end_date,
            days=booking.duration_in_days(),
            charges=compute_charge(booking, distance)
        )


class AuthService:
    """Service for login accounts and the identities handed to the engine"""

    def __init__(
        self,
        catalog: Catalog,
        customer_service: CustomerService,
        valid_employee_ids: Iterable[str] = (),
        audit: Optional[AuditLogger] = None
    ):
        self.catalog = catalog
        self.customer_service = customer_service
        self.valid_employee_ids = set(valid_employee_ids)
        self.audit = audit or AuditLogger()

    def get_user(self, username: str) -> Optional[UserInDB]:
        return self.catalog.users.find_by_username(username)

    def is_valid_employee_id(self, employee_id: str) -> bool:
        return employee_id in self.valid_employee_ids

    def register_customer(
        self,
        username: str,
        password: str,
        customer_id: str,
        name: str,
        contact_number: str = "",
        email: str = ""
    ) -> UserInDB:
        """Create a customer login together with its customer record"""
        if self.get_user(username):
            raise ValueError(f"Username {username} is taken")
        check_plain_text("Username", username)

        self.customer_service.register_customer(
            customer_id=customer_id,
            name=name,
            contact_number=contact_number,
            email=email,
            actor=username
        )
        user = UserInDB(
            username=username,
            hashed_password=get_password_hash(password),
            role=UserRole.CUSTOMER,
            customer_id=customer_id
        )
        self.catalog.users.save(user)
        self.catalog.save()
        self.audit.log(username, "REGISTER_CUSTOMER", f"CustomerID:{customer_id}")
        return user

    def register_admin(self, username: str, password: str, employee_id: str) -> UserInDB:
        """Create an administrator login; the employee ID must be on file"""
        if self.get_user(username):
            raise ValueError(f"Username {username} is taken")
        check_plain_text("Username", username)
        if not self.is_valid_employee_id(employee_id):
            self.audit.security_violation(username, "INVALID_EMPLOYEE_ID", employee_id)
            raise ValueError(f"Unknown employee ID {employee_id}")

        user = UserInDB(
            username=username,
            hashed_password=get_password_hash(password),
            role=UserRole.ADMIN,
            employee_id=employee_id
        )
        self.catalog.users.save(user)
        self.catalog.save()
        self.audit.log(username, "REGISTER_ADMIN", f"EmployeeID:{employee_id}")
        return user

    def authenticate(self, username: str, password: str) -> Optional[UserInDB]:
        user = self.get_user(username)
        if not user or not verify_password(password, user.hashed_password):
            self.audit.authentication(username, False)
            return None
        self.audit.authentication(username, True)
        return user

    def ensure_default_admin(self, username: str, password: str, employee_id: str) -> bool:
        """Create the configured administrator on first start"""
        if self.get_user(username):
            return False
        self.valid_employee_ids.add(employee_id)
        self.register_admin(username, password, employee_id)
        logger.info(f"Created default administrator '{username}'")
        return True
