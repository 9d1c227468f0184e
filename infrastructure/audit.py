"""Audit trail of catalog, booking and login activity"""
import logging
from typing import Optional


class AuditLogger:
    """Writes one audit line per action to the ``rental.audit`` logger.

    Passed into services explicitly so tests can substitute a fake.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("rental.audit")

    def log(self, user: str, action: str, details: str = "") -> None:
        self._logger.info("USER:%s ACTION:%s DETAILS:%s", user, action, details)

    def authentication(self, username: str, success: bool, details: str = "") -> None:
        self.log(username, "LOGIN_SUCCESS" if success else "LOGIN_FAILED", details)

    def booking_operation(self, user: str, operation: str, booking_id: str, details: str = "") -> None:
        self.log(user, f"BOOKING_{operation.upper()}", f"BookingID:{booking_id} {details}".strip())

    def vehicle_operation(self, user: str, operation: str, vehicle_id: str, details: str = "") -> None:
        self.log(user, f"VEHICLE_{operation.upper()}", f"VehicleID:{vehicle_id} {details}".strip())

    def customer_operation(self, user: str, operation: str, customer_id: str, details: str = "") -> None:
        self.log(user, f"CUSTOMER_{operation.upper()}", f"CustomerID:{customer_id} {details}".strip())

    def security_violation(self, user: str, violation: str, details: str = "") -> None:
        self._logger.warning("USER:%s ACTION:SECURITY_VIOLATION DETAILS:%s: %s", user, violation, details)
