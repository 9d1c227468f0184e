"""Flat delimited-text persistence for the rental catalog"""
import logging
import os
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Callable, Dict, List, Optional, TypeVar

from pydantic import ValidationError

from domain.auth import UserInDB
from domain.entities import Vehicle, Customer, Booking
from domain.enums import VehicleCategory, VehicleStatus, BookingStatus, UserRole
from domain.exceptions import MalformedRecordError
from domain.repositories import CatalogStore, CatalogSnapshot
from infrastructure.config import FIELD_DELIMITER

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Tried in order; ISO first
DATE_PATTERNS = ("%Y-%m-%d", "%d/%m/%Y", "%m/%d/%Y")


def parse_date(text: str) -> Optional[date]:
    """Parse a persisted date, or None when no known pattern fits"""
    text = text.strip()
    if not text:
        return None
    for pattern in DATE_PATTERNS:
        try:
            return datetime.strptime(text, pattern).date()
        except ValueError:
            continue
    return None


class FlatFileCatalogStore(CatalogStore):
    """Reads and rewrites one text file per record set under ``data_dir``"""

    VEHICLES_FILE = "vehicles.csv"
    CUSTOMERS_FILE = "customers.csv"
    BOOKINGS_FILE = "bookings.csv"
    USERS_FILE = "users.csv"
    TEMP_SUFFIX = ".tmp"

    def __init__(self, data_dir: str, delimiter: str = FIELD_DELIMITER):
        self.data_dir = Path(data_dir)
        self.delimiter = delimiter

    # ==================== LOADING ====================
    def load(self) -> CatalogSnapshot:
        vehicles = self._load_records(self.VEHICLES_FILE, self.parse_vehicle, lambda v: v.vehicle_id)
        customers = self._load_records(self.CUSTOMERS_FILE, self.parse_customer, lambda c: c.customer_id)
        users = self._load_records(self.USERS_FILE, self.parse_user, lambda u: u.username)

        vehicle_map = {v.vehicle_id: v for v in vehicles}
        customer_map = {c.customer_id: c for c in customers}
        bookings = self._load_records(
            self.BOOKINGS_FILE,
            lambda line: self.parse_booking(line, customer_map, vehicle_map),
            lambda b: b.booking_id
        )

        # Booking presence wins over the vehicle's own persisted status
        held = set()
        for booking in bookings:
            if booking.is_active():
                booking.vehicle.reserve()
                held.add(booking.vehicle.vehicle_id)
        for vehicle in vehicles:
            if vehicle.status == VehicleStatus.RESERVED and vehicle.vehicle_id not in held:
                logger.warning(f"Vehicle {vehicle.vehicle_id} was Reserved without an active booking; releasing")
                vehicle.release()

        logger.info(
            f"Loaded {len(vehicles)} vehicles, {len(customers)} customers, "
            f"{len(bookings)} bookings, {len(users)} users from {self.data_dir}"
        )
        return CatalogSnapshot(vehicles=vehicles, customers=customers, bookings=bookings, users=users)

    def _read_lines(self, filename: str) -> List[str]:
        path = self.data_dir / filename
        if not path.exists():
            return []
        with path.open("r", encoding="utf-8") as handle:
            return [line.rstrip("\r\n") for line in handle if line.strip()]

    def _load_records(
        self,
        filename: str,
        parse: Callable[[str], T],
        key: Callable[[T], str]
    ) -> List[T]:
        records: Dict[str, T] = {}
        for number, line in enumerate(self._read_lines(filename), start=1):
            try:
                record = parse(line)
            except MalformedRecordError as e:
                logger.warning(f"Skipping {filename} line {number}: {e}")
                continue
            if key(record) in records:
                logger.warning(f"Skipping {filename} line {number}: duplicate key {key(record)}")
                continue
            records[key(record)] = record
        return list(records.values())

    def _split(self, line: str, expected: int, optional: int = 0) -> List[str]:
        parts = [part.strip() for part in line.split(self.delimiter)]
        if not expected <= len(parts) <= expected + optional:
            raise MalformedRecordError(f"expected {expected} fields, got {len(parts)}")
        return parts

    def parse_vehicle(self, line: str) -> Vehicle:
        vehicle_id, model, category_label, rate, status_label = self._split(line, 5)
        category = VehicleCategory.from_label(category_label)
        if category is None:
            raise MalformedRecordError(f"unknown category '{category_label}'")
        status = VehicleStatus.from_label(status_label)
        if status is None:
            raise MalformedRecordError(f"unknown status '{status_label}'")
        try:
            return Vehicle(
                vehicle_id=vehicle_id,
                model=model,
                category=category,
                daily_rate=Decimal(rate),
                status=status
            )
        except (InvalidOperation, ValidationError) as e:
            raise MalformedRecordError(f"bad vehicle {vehicle_id}: {e}")

    def parse_customer(self, line: str) -> Customer:
        customer_id, name, contact, email = self._split(line, 4)
        return Customer(customer_id=customer_id, name=name, contact_number=contact, email=email)

    def parse_booking(
        self,
        line: str,
        customers: Dict[str, Customer],
        vehicles: Dict[str, Vehicle]
    ) -> Booking:
        parts = self._split(line, 6, optional=1)
        booking_id, customer_id, vehicle_id, start_text, end_text, distance = parts[:6]

        customer = customers.get(customer_id)
        vehicle = vehicles.get(vehicle_id)
        if customer is None or vehicle is None:
            raise MalformedRecordError(f"booking {booking_id} references missing customer/vehicle")

        start_date = parse_date(start_text)
        end_date = parse_date(end_text)
        if start_date is None or end_date is None:
            raise MalformedRecordError(f"booking {booking_id} has unparsable dates")

        status = BookingStatus.ACTIVE
        if len(parts) == 7 and parts[6]:
            try:
                status = BookingStatus(parts[6].upper())
            except ValueError:
                raise MalformedRecordError(f"booking {booking_id} has unknown status '{parts[6]}'")

        try:
            return Booking(
                booking_id=booking_id,
                customer=customer,
                vehicle=vehicle,
                start_date=start_date,
                end_date=end_date,
                total_distance=int(distance),
                status=status
            )
        except (ValueError, ValidationError) as e:
            raise MalformedRecordError(f"bad booking {booking_id}: {e}")

    def parse_user(self, line: str) -> UserInDB:
        username, hashed_password, role_label, employee_id, customer_id = self._split(line, 5)
        try:
            role = UserRole(role_label)
        except ValueError:
            raise MalformedRecordError(f"unknown role '{role_label}'")
        return UserInDB(
            username=username,
            hashed_password=hashed_password,
            role=role,
            employee_id=employee_id or None,
            customer_id=customer_id or None
        )

    # ==================== SAVING ====================
    def format_vehicle(self, vehicle: Vehicle) -> str:
        return self.delimiter.join([
            vehicle.vehicle_id, vehicle.model, vehicle.category.value,
            str(vehicle.daily_rate), vehicle.status.value
        ])

    def format_customer(self, customer: Customer) -> str:
        return self.delimiter.join([
            customer.customer_id, customer.name, customer.contact_number, customer.email
        ])

    def format_booking(self, booking: Booking) -> str:
        return self.delimiter.join([
            booking.booking_id,
            booking.customer.customer_id,
            booking.vehicle.vehicle_id,
            booking.start_date.isoformat(),
            booking.end_date.isoformat(),
            str(booking.total_distance),
            booking.status.value
        ])

    def format_user(self, user: UserInDB) -> str:
        return self.delimiter.join([
            user.username, user.hashed_password, user.role.value,
            user.employee_id or "", user.customer_id or ""
        ])

    def save(self, snapshot: CatalogSnapshot) -> bool:
        """Stage every file next to its target, then swap them all in.

        A failure while staging leaves the previous files untouched.
        """
        records = {
            self.VEHICLES_FILE: [self.format_vehicle(v) for v in snapshot.vehicles],
            self.CUSTOMERS_FILE: [self.format_customer(c) for c in snapshot.customers],
            self.BOOKINGS_FILE: [self.format_booking(b) for b in snapshot.bookings],
            self.USERS_FILE: [self.format_user(u) for u in snapshot.users],
        }
        staged: List[Path] = []
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            for filename, lines in records.items():
                staged.append(self._stage(filename, lines))
            for temp_path in staged:
                os.replace(temp_path, temp_path.with_suffix(""))
        except OSError as e:
            logger.error(f"Failed to save catalog to {self.data_dir}: {e}")
            for temp_path in staged:
                if temp_path.is_file():
                    temp_path.unlink()
            return False
        return True

    def _stage(self, filename: str, lines: List[str]) -> Path:
        temp_path = self.data_dir / f"{filename}{self.TEMP_SUFFIX}"
        content = "".join(f"{line}\n" for line in lines)
        temp_path.write_text(content, encoding="utf-8")
        return temp_path
