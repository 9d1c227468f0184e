"""Catalog - the in-memory rental state shared by the application services"""
import logging
from decimal import Decimal
from typing import Optional

from domain.entities import Vehicle
from domain.enums import VehicleCategory
from domain.repositories import (
    VehicleRepository, CustomerRepository, BookingRepository, UserRepository,
    CatalogStore, CatalogSnapshot
)

logger = logging.getLogger(__name__)

DEFAULT_FLEET = [
    ("V001", "Toyota Aqua", VehicleCategory.HYBRID, Decimal("7500")),
    ("V002", "Nissan Leaf", VehicleCategory.ELECTRIC, Decimal("10000")),
    ("V003", "BMW X5", VehicleCategory.LUXURY_SUV, Decimal("15000")),
]


class Catalog:
    """Owns the repositories and tells the persistence collaborator when state changed"""

    def __init__(
        self,
        vehicles: VehicleRepository,
        customers: CustomerRepository,
        bookings: BookingRepository,
        users: UserRepository,
        store: Optional[CatalogStore] = None
    ):
        self.vehicles = vehicles
        self.customers = customers
        self.bookings = bookings
        self.users = users
        self.store = store

    def snapshot(self) -> CatalogSnapshot:
        return CatalogSnapshot(
            vehicles=self.vehicles.find_all(),
            customers=self.customers.find_all(),
            bookings=self.bookings.find_all(),
            users=self.users.find_all()
        )

    def load(self) -> CatalogSnapshot:
        """Fill the repositories from the store without triggering a save"""
        if self.store is None:
            return self.snapshot()
        snapshot = self.store.load()
        for vehicle in snapshot.vehicles:
            self.vehicles.save(vehicle)
        for customer in snapshot.customers:
            self.customers.save(customer)
        for booking in snapshot.bookings:
            self.bookings.save(booking)
        for user in snapshot.users:
            self.users.save(user)
        return snapshot

    def save(self) -> bool:
        """Request a full re-serialization after a mutation"""
        if self.store is None:
            return True
        saved = self.store.save(self.snapshot())
        if not saved:
            logger.warning("Catalog changes are held in memory only; save failed")
        return saved

    def seed_default_fleet(self) -> bool:
        """Add the starter vehicles when the catalog has none"""
        if self.vehicles.find_all():
            return False
        for vehicle_id, model, category, rate in DEFAULT_FLEET:
            self.vehicles.save(Vehicle(vehicle_id=vehicle_id, model=model, category=category, daily_rate=rate))
        logger.info(f"Seeded {len(DEFAULT_FLEET)} default vehicles")
        self.save()
        return True
