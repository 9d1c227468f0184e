import logging
from fastapi import FastAPI, HTTPException, Depends
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional
from fastapi.security import OAuth2PasswordRequestForm

from api.schemas import (
    # Vehicles
    CreateVehicleRequest, UpdateVehicleRequest, VehicleResponse,
    # Customers
    CreateCustomerRequest, UpdateCustomerRequest, CustomerResponse,
    # Bookings
    CreateBookingRequest, UpdateBookingRequest, BookingResponse,
    ChargeResponse, InvoiceResponse, PricingRuleResponse,
    # Search
    BestMatchRequest,
    # Auth
    Token, UserResponse, RegisterCustomerRequest, RegisterAdminRequest,
    HealthResponse
)

from api.dependencies import (
    catalog, get_current_active_user, require_admin,
    get_vehicle_service, get_customer_service, get_booking_service,
    get_search_service, get_report_service, get_auth_service
)
from infrastructure.config import (
    ACCESS_TOKEN_EXPIRE_MINUTES, ADMIN_USERNAME, ADMIN_PASSWORD, ADMIN_EMPLOYEE_ID,
    LOG_LEVEL, SEED_DEFAULT_FLEET
)
from infrastructure.security import create_access_token
from domain.auth import User
from domain.entities import Booking
from domain.exceptions import ReferenceNotFoundError
from domain.pricing import PRICING_TABLE, estimate_charge

from application.services import (
    VehicleService, CustomerService, BookingService, AuthService, BookingResult
)
from application.search import SearchService
from application.reports import (
    ReportService, RevenueReport, UtilizationReport, CustomerReport, SystemSummary
)
from domain.enums import VehicleCategory, VehicleStatus, BookingStatus, BookingTimeStatus
from domain.value_objects import ChargeBreakdown

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Vehicle Rental Booking API",
    description="Booking, pricing and search for a short-term vehicle rental fleet",
    version="1.0.0"
)


def bootstrap() -> None:
    """Load persisted state, then seed the starter fleet and administrator"""
    snapshot = catalog.load()
    logger.info(f"Starting with {len(snapshot.vehicles)} vehicles and {len(snapshot.bookings)} bookings")
    if SEED_DEFAULT_FLEET:
        catalog.seed_default_fleet()
    get_auth_service().ensure_default_admin(ADMIN_USERNAME, ADMIN_PASSWORD, ADMIN_EMPLOYEE_ID)


bootstrap()

# ============================================================================
# HELPERS
# ============================================================================

def _ensure_owner(current_user: User, customer_id: str) -> None:
    """Customers may only act on their own records"""
    if current_user.is_admin():
        return
    if current_user.customer_id != customer_id:
        raise HTTPException(status_code=403, detail="Not allowed to access another customer's records")

def _get_booking_or_404(service: BookingService, booking_id: str, current_user: User) -> Booking:
    booking = service.get_booking(booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    _ensure_owner(current_user, booking.customer.customer_id)
    return booking

def _result_to_response(result: Optional[BookingResult]) -> BookingResponse:
    if result is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    if not result.success:
        raise HTTPException(status_code=400, detail=result.reason)
    return _booking_to_response(result.booking)

# ============================================================================
# HEALTH & ENUM REFERENCE ENDPOINTS
# ============================================================================

@app.get("/api/health", response_model=HealthResponse, tags=["Health"])
async def health_check(service: ReportService = Depends(get_report_service)):
    """Health check endpoint with catalog integrity status"""
    integrity = service.check_integrity()
    summary = service.system_summary()
    return HealthResponse(
        status=integrity.status,
        vehicles=summary.total_vehicles,
        customers=summary.total_customers,
        bookings=summary.total_bookings,
        orphaned_bookings=integrity.orphaned_bookings,
        invalid_date_ranges=integrity.invalid_date_ranges,
        stranded_vehicles=integrity.stranded_vehicles
    )

@app.get("/api/enums/vehicle-category", tags=["Enum Reference"])
async def get_vehicle_categories():
    """Get all VehicleCategory enum values"""
    return {
        "values": [item.value for item in VehicleCategory],
        "description": "Vehicle categories; only categories in the pricing table have tariffs"
    }

@app.get("/api/enums/vehicle-status", tags=["Enum Reference"])
async def get_vehicle_statuses():
    """Get all VehicleStatus enum values"""
    return {
        "values": [item.value for item in VehicleStatus],
        "description": "Vehicle status values: Available, Reserved, Under Maintenance"
    }

@app.get("/api/enums/booking-status", tags=["Enum Reference"])
async def get_booking_statuses():
    """Get all BookingStatus enum values"""
    return {
        "values": [item.name for item in BookingStatus],
        "description": "Booking status values: PROPOSED, ACTIVE, CANCELLED, COMPLETED"
    }

@app.get("/api/enums/booking-time-status", tags=["Enum Reference"])
async def get_booking_time_statuses():
    """Get the date-relative status filters accepted by booking search"""
    return {
        "values": [item.value for item in BookingTimeStatus],
        "description": "Search filters: upcoming, active, completed, cancelable"
    }

# ============================================================================
# AUTH ENDPOINTS
# ============================================================================

@app.post("/token", response_model=Token, tags=["Auth"])
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    service: AuthService = Depends(get_auth_service)
):
    user = service.authenticate(form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=401,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token_expires = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": user.username, "role": user.role.value}, expires_delta=access_token_expires
    )
    return {"access_token": access_token, "token_type": "bearer"}

@app.get("/users/me", response_model=UserResponse, tags=["Auth"])
async def read_users_me(current_user: User = Depends(get_current_active_user)):
    return _user_to_response(current_user)

@app.post("/users/register", response_model=UserResponse, status_code=201, tags=["Auth"])
async def register_customer_user(
    request: RegisterCustomerRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Self-registration for customers; creates the customer record too"""
    try:
        user = service.register_customer(
            username=request.username,
            password=request.password,
            customer_id=request.customer_id,
            name=request.name,
            contact_number=request.contact_number,
            email=request.email
        )
        return _user_to_response(user)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@app.post("/users/register-admin", response_model=UserResponse, status_code=201, tags=["Auth"])
async def register_admin_user(
    request: RegisterAdminRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Administrator registration, gated by employee ID"""
    try:
        user = service.register_admin(
            username=request.username,
            password=request.password,
            employee_id=request.employee_id
        )
        return _user_to_response(user)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

# ============================================================================
# VEHICLE ENDPOINTS
# ============================================================================

@app.post("/api/vehicles", response_model=VehicleResponse, status_code=201, tags=["Vehicles"])
async def create_vehicle(
    request: CreateVehicleRequest,
    service: VehicleService = Depends(get_vehicle_service),
    current_user: User = Depends(require_admin)
):
    """Add a vehicle to the fleet"""
    try:
        vehicle = service.add_vehicle(
            vehicle_id=request.vehicle_id,
            model=request.model,
            category=request.category,
            daily_rate=request.daily_rate,
            status=request.status,
            actor=current_user.username
        )
        return _vehicle_to_response(vehicle)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@app.get("/api/vehicles", response_model=List[VehicleResponse], tags=["Vehicles"])
async def get_all_vehicles(
    service: VehicleService = Depends(get_vehicle_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get all vehicles"""
    return [_vehicle_to_response(v) for v in service.get_all_vehicles()]

@app.get("/api/vehicles/{vehicle_id}", response_model=VehicleResponse, tags=["Vehicles"])
async def get_vehicle(
    vehicle_id: str,
    service: VehicleService = Depends(get_vehicle_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get vehicle by ID"""
    vehicle = service.get_vehicle(vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return _vehicle_to_response(vehicle)

@app.put("/api/vehicles/{vehicle_id}", response_model=VehicleResponse, tags=["Vehicles"])
async def update_vehicle(
    vehicle_id: str,
    request: UpdateVehicleRequest,
    service: VehicleService = Depends(get_vehicle_service),
    current_user: User = Depends(require_admin)
):
    """Update vehicle details"""
    try:
        vehicle = service.update_vehicle(
            vehicle_id=vehicle_id,
            model=request.model,
            category=request.category,
            daily_rate=request.daily_rate,
            status=request.status,
            actor=current_user.username
        )
        if not vehicle:
            raise HTTPException(status_code=404, detail="Vehicle not found")
        return _vehicle_to_response(vehicle)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@app.delete("/api/vehicles/{vehicle_id}", status_code=204, tags=["Vehicles"])
async def delete_vehicle(
    vehicle_id: str,
    service: VehicleService = Depends(get_vehicle_service),
    current_user: User = Depends(require_admin)
):
    """Remove a vehicle"""
    try:
        if not service.delete_vehicle(vehicle_id, actor=current_user.username):
            raise HTTPException(status_code=404, detail="Vehicle not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

# ============================================================================
# CUSTOMER ENDPOINTS
# ============================================================================

@app.post("/api/customers", response_model=CustomerResponse, status_code=201, tags=["Customers"])
async def create_customer(
    request: CreateCustomerRequest,
    service: CustomerService = Depends(get_customer_service),
    current_user: User = Depends(require_admin)
):
    """Register a customer"""
    try:
        customer = service.register_customer(
            customer_id=request.customer_id,
            name=request.name,
            contact_number=request.contact_number,
            email=request.email,
            actor=current_user.username
        )
        return _customer_to_response(customer)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@app.get("/api/customers", response_model=List[CustomerResponse], tags=["Customers"])
async def get_all_customers(
    service: CustomerService = Depends(get_customer_service),
    current_user: User = Depends(require_admin)
):
    """Get all customers"""
    return [_customer_to_response(c) for c in service.get_all_customers()]

@app.get("/api/customers/{customer_id}", response_model=CustomerResponse, tags=["Customers"])
async def get_customer(
    customer_id: str,
    service: CustomerService = Depends(get_customer_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get customer by ID"""
    _ensure_owner(current_user, customer_id)
    customer = service.get_customer(customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return _customer_to_response(customer)

@app.put("/api/customers/{customer_id}", response_model=CustomerResponse, tags=["Customers"])
async def update_customer(
    customer_id: str,
    request: UpdateCustomerRequest,
    service: CustomerService = Depends(get_customer_service),
    current_user: User = Depends(get_current_active_user)
):
    """Update contact details"""
    _ensure_owner(current_user, customer_id)
    try:
        customer = service.update_customer(
            customer_id=customer_id,
            name=request.name,
            contact_number=request.contact_number,
            email=request.email,
            actor=current_user.username
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return _customer_to_response(customer)

@app.delete("/api/customers/{customer_id}", status_code=204, tags=["Customers"])
async def delete_customer(
    customer_id: str,
    service: CustomerService = Depends(get_customer_service),
    current_user: User = Depends(require_admin)
):
    """Remove a customer"""
    try:
        if not service.delete_customer(customer_id, actor=current_user.username):
            raise HTTPException(status_code=404, detail="Customer not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

# ============================================================================
# BOOKING ENDPOINTS
# ============================================================================

@app.post("/api/bookings", response_model=BookingResponse, status_code=201, tags=["Bookings"])
async def create_booking(
    request: CreateBookingRequest,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Create new booking"""
    _ensure_owner(current_user, request.customer_id)
    try:
        result = service.create_booking(
            customer_id=request.customer_id,
            vehicle_id=request.vehicle_id,
            start_date=request.start_date,
            end_date=request.end_date,
            total_distance=request.total_distance,
            booking_id=request.booking_id,
            actor=current_user.username
        )
    except ReferenceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _result_to_response(result)

@app.get("/api/bookings", response_model=List[BookingResponse], tags=["Bookings"])
async def get_all_bookings(
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get all bookings; customers see their own"""
    if current_user.is_admin():
        bookings = service.get_all_bookings()
    else:
        bookings = service.find_by_customer(current_user.customer_id or "")
    return [_booking_to_response(b) for b in bookings]

@app.get("/api/bookings/by-date", response_model=List[BookingResponse], tags=["Bookings"])
async def get_bookings_by_date(
    day: date,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(require_admin)
):
    """Get bookings whose rental period includes a date"""
    return [_booking_to_response(b) for b in service.find_by_date(day)]

@app.get("/api/bookings/by-name", response_model=List[BookingResponse], tags=["Bookings"])
async def get_bookings_by_customer_name(
    name: str,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(require_admin)
):
    """Get bookings by (partial) customer name"""
    return [_booking_to_response(b) for b in service.find_by_customer_name(name)]

@app.get("/api/bookings/customer/{customer_id}", response_model=List[BookingResponse], tags=["Bookings"])
async def get_customer_bookings(
    customer_id: str,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get all bookings for a customer"""
    _ensure_owner(current_user, customer_id)
    return [_booking_to_response(b) for b in service.find_by_customer(customer_id)]

@app.get("/api/bookings/{booking_id}", response_model=BookingResponse, tags=["Bookings"])
async def get_booking(
    booking_id: str,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get booking by ID"""
    return _booking_to_response(_get_booking_or_404(service, booking_id, current_user))

@app.put("/api/bookings/{booking_id}", response_model=BookingResponse, tags=["Bookings"])
async def update_booking(
    booking_id: str,
    request: UpdateBookingRequest,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Change dates, vehicle or distance of an active booking"""
    _get_booking_or_404(service, booking_id, current_user)
    if request.customer_id:
        _ensure_owner(current_user, request.customer_id)
    try:
        result = service.update_booking(
            booking_id=booking_id,
            customer_id=request.customer_id,
            vehicle_id=request.vehicle_id,
            start_date=request.start_date,
            end_date=request.end_date,
            total_distance=request.total_distance,
            actor=current_user.username
        )
    except ReferenceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _result_to_response(result)

@app.post("/api/bookings/{booking_id}/cancel", response_model=BookingResponse, tags=["Bookings"])
async def cancel_booking(
    booking_id: str,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Cancel booking"""
    _get_booking_or_404(service, booking_id, current_user)
    return _result_to_response(service.cancel_booking(booking_id, actor=current_user.username))

@app.post("/api/bookings/{booking_id}/complete", response_model=BookingResponse, tags=["Bookings"])
async def complete_booking(
    booking_id: str,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(require_admin)
):
    """Close a finished rental"""
    return _result_to_response(service.complete_booking(booking_id, actor=current_user.username))

@app.delete("/api/bookings/{booking_id}", status_code=204, tags=["Bookings"])
async def delete_booking(
    booking_id: str,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Delete booking record"""
    _get_booking_or_404(service, booking_id, current_user)
    _result_to_response(service.delete_booking(booking_id, actor=current_user.username))

@app.get("/api/bookings/{booking_id}/invoice", response_model=InvoiceResponse, tags=["Bookings"])
async def get_invoice(
    booking_id: str,
    actual_distance: Optional[int] = None,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Invoice at the driven distance, or the declared distance when omitted"""
    _get_booking_or_404(service, booking_id, current_user)
    if actual_distance is not None and actual_distance < 0:
        raise HTTPException(status_code=400, detail="Distance cannot be negative")
    invoice = service.generate_invoice(booking_id, actual_distance)
    return InvoiceResponse(
        booking_id=invoice.booking_id,
        customer_id=invoice.customer_id,
        customer_name=invoice.customer_name,
        vehicle_id=invoice.vehicle_id,
        vehicle_model=invoice.vehicle_model,
        start_date=invoice.start_date,
        end_date=invoice.end_date,
        charges=_charge_to_response(invoice.charges)
    )

# ============================================================================
# PRICING & SEARCH ENDPOINTS
# ============================================================================

@app.get("/api/pricing", response_model=List[PricingRuleResponse], tags=["Pricing"])
async def get_pricing_table():
    """Tariffs per vehicle category"""
    return [
        PricingRuleResponse(
            category=category.value,
            daily_rate=rule.daily_rate,
            free_distance_per_day=rule.free_distance_per_day,
            extra_distance_rate=rule.extra_distance_rate,
            tax_rate=rule.tax_rate
        )
        for category, rule in PRICING_TABLE.items()
    ]

@app.get("/api/search/vehicles", response_model=List[VehicleResponse], tags=["Search"])
async def search_vehicles(
    category: Optional[str] = None,
    max_price: Optional[Decimal] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[str] = None,
    model: Optional[str] = None,
    service: SearchService = Depends(get_search_service),
    current_user: User = Depends(get_current_active_user)
):
    """Filter vehicles; a date range also requires the vehicle to be bookable"""
    vehicles = service.search_vehicles(
        category=category,
        max_price=max_price,
        start_date=start_date,
        end_date=end_date,
        status=status,
        model_keyword=model
    )
    return [_vehicle_to_response(v) for v in vehicles]

@app.get("/api/search/bookings", response_model=List[BookingResponse], tags=["Search"])
async def search_bookings(
    customer_name: Optional[str] = None,
    vehicle_model: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    booking_id: Optional[str] = None,
    status: Optional[str] = None,
    service: SearchService = Depends(get_search_service),
    current_user: User = Depends(require_admin)
):
    """Filter bookings"""
    bookings = service.search_bookings(
        customer_name=customer_name,
        vehicle_model=vehicle_model,
        start_date=start_date,
        end_date=end_date,
        booking_id=booking_id,
        status=status
    )
    return [_booking_to_response(b) for b in bookings]

@app.post("/api/search/best-matches", response_model=List[VehicleResponse], tags=["Search"])
async def find_best_matches(
    request: BestMatchRequest,
    service: SearchService = Depends(get_search_service),
    current_user: User = Depends(get_current_active_user)
):
    """Bookable vehicles within budget, preferred category first"""
    if request.start_date > request.end_date:
        raise HTTPException(status_code=400, detail="Start date must be on or before end date")
    vehicles = service.find_best_matches(
        start_date=request.start_date,
        end_date=request.end_date,
        max_budget=request.max_budget,
        preferred_category=request.preferred_category
    )
    return [_vehicle_to_response(v) for v in vehicles]

@app.get("/api/recommendations/{customer_id}", response_model=List[VehicleResponse], tags=["Search"])
async def get_recommendations(
    customer_id: str,
    service: SearchService = Depends(get_search_service),
    current_user: User = Depends(get_current_active_user)
):
    """Vehicles suited to the customer's rental history"""
    _ensure_owner(current_user, customer_id)
    try:
        vehicles = service.recommend(customer_id)
    except ReferenceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return [_vehicle_to_response(v) for v in vehicles]

# ============================================================================
# REPORT ENDPOINTS
# ============================================================================

@app.get("/api/reports/revenue", response_model=RevenueReport, tags=["Reports"])
async def get_revenue_report(
    start_date: date,
    end_date: date,
    service: ReportService = Depends(get_report_service),
    current_user: User = Depends(require_admin)
):
    """Estimated revenue of bookings starting in a period"""
    return service.revenue_report(start_date, end_date)

@app.get("/api/reports/utilization", response_model=UtilizationReport, tags=["Reports"])
async def get_utilization_report(
    service: ReportService = Depends(get_report_service),
    current_user: User = Depends(require_admin)
):
    """Fleet utilization per category"""
    return service.utilization_report()

@app.get("/api/reports/customers/{customer_id}", response_model=CustomerReport, tags=["Reports"])
async def get_customer_report(
    customer_id: str,
    service: ReportService = Depends(get_report_service),
    current_user: User = Depends(require_admin)
):
    """Booking history of a customer"""
    try:
        return service.customer_report(customer_id)
    except ReferenceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

@app.get("/api/reports/summary", response_model=SystemSummary, tags=["Reports"])
async def get_system_summary(
    service: ReportService = Depends(get_report_service),
    current_user: User = Depends(require_admin)
):
    """Counts of vehicles, customers and bookings"""
    return service.system_summary()

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _vehicle_to_response(vehicle) -> VehicleResponse:
    """Convert Vehicle entity to VehicleResponse"""
    return VehicleResponse(
        vehicle_id=vehicle.vehicle_id,
        model=vehicle.model,
        category=vehicle.category.value,
        daily_rate=vehicle.daily_rate,
        status=vehicle.status.value
    )

def _customer_to_response(customer) -> CustomerResponse:
    """Convert Customer entity to CustomerResponse"""
    return CustomerResponse(
        customer_id=customer.customer_id,
        name=customer.name,
        contact_number=customer.contact_number,
        email=customer.email
    )

def _booking_to_response(booking) -> BookingResponse:
    """Convert Booking entity to BookingResponse"""
    return BookingResponse(
        booking_id=booking.booking_id,
        customer_id=booking.customer.customer_id,
        customer_name=booking.customer.name,
        vehicle_id=booking.vehicle.vehicle_id,
        vehicle_model=booking.vehicle.model,
        category=booking.vehicle.category.value,
        start_date=booking.start_date,
        end_date=booking.end_date,
        days=booking.duration_in_days(),
        total_distance=booking.total_distance,
        deposit=booking.deposit,
        estimated_total=estimate_charge(booking).total,
        status=booking.status.name,
        version=booking.version
    )

def _charge_to_response(charge: ChargeBreakdown) -> ChargeResponse:
    """Convert ChargeBreakdown to ChargeResponse"""
    return ChargeResponse(
        category=charge.category.value if charge.category else "",
        pricing_configured=charge.pricing_configured,
        days=charge.days,
        daily_rate=charge.daily_rate,
        base_price=charge.base_price,
        discount=charge.discount,
        free_distance=charge.free_distance,
        actual_distance=charge.actual_distance,
        extra_distance=charge.extra_distance,
        extra_charge=charge.extra_charge,
        subtotal=charge.subtotal,
        tax=charge.tax,
        deposit=charge.deposit,
        total=charge.total,
        amount_due_now=charge.amount_due_now,
        currency=charge.currency
    )

def _user_to_response(user) -> UserResponse:
    """Convert User to UserResponse"""
    return UserResponse(
        username=user.username,
        role=user.role.value,
        employee_id=user.employee_id,
        customer_id=user.customer_id,
        disabled=user.disabled
    )

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
