"""API Dependencies - Service wiring and authentication"""
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError

from application.catalog import Catalog
from application.reports import ReportService
from application.search import SearchService
from application.services import VehicleService, CustomerService, BookingService, AuthService
from domain.auth import User
from infrastructure.audit import AuditLogger
from infrastructure.config import DATA_DIR, VALID_EMPLOYEE_IDS
from infrastructure.repositories.flat_file_store import FlatFileCatalogStore
from infrastructure.repositories.in_memory_repositories import (
    InMemoryVehicleRepository, InMemoryCustomerRepository,
    InMemoryBookingRepository, InMemoryUserRepository
)
from infrastructure.security import decode_access_token
from api.schemas import TokenData

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")

# Initialize repositories
catalog = Catalog(
    vehicles=InMemoryVehicleRepository(),
    customers=InMemoryCustomerRepository(),
    bookings=InMemoryBookingRepository(),
    users=InMemoryUserRepository(),
    store=FlatFileCatalogStore(DATA_DIR)
)
audit = AuditLogger()

# Dependency injection
def get_vehicle_service() -> VehicleService:
    return VehicleService(catalog, audit)

def get_customer_service() -> CustomerService:
    return CustomerService(catalog, audit)

def get_booking_service() -> BookingService:
    return BookingService(catalog, audit)

def get_search_service() -> SearchService:
    return SearchService(catalog)

def get_report_service() -> ReportService:
    return ReportService(catalog)

def get_auth_service() -> AuthService:
    return AuthService(catalog, CustomerService(catalog, audit), VALID_EMPLOYEE_IDS, audit)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    auth_service: AuthService = Depends(get_auth_service)
):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        username = decode_access_token(token)
        if username is None:
            raise credentials_exception
        token_data = TokenData(username=username)
    except JWTError:
        raise credentials_exception

    user = auth_service.get_user(token_data.username)
    if user is None:
        raise credentials_exception
    return user

async def get_current_active_user(current_user: User = Depends(get_current_user)):
    if current_user.disabled:
        raise HTTPException(status_code=400, detail="Inactive user")
    return current_user

async def require_admin(current_user: User = Depends(get_current_active_user)):
    if not current_user.is_admin():
        audit.security_violation(current_user.username, "ADMIN_REQUIRED")
        raise HTTPException(status_code=403, detail="Administrator access required")
    return current_user
