"""API Schemas - Request and Response DTOs"""
from pydantic import BaseModel, Field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from domain.enums import VehicleCategory, VehicleStatus


# ============================================================================
# VEHICLE SCHEMAS
# ============================================================================

class CreateVehicleRequest(BaseModel):
    """Create vehicle request DTO"""
    vehicle_id: str = Field(min_length=1)
    model: str = Field(min_length=1)
    category: VehicleCategory
    daily_rate: Decimal = Field(ge=0)
    status: VehicleStatus = VehicleStatus.AVAILABLE


class UpdateVehicleRequest(BaseModel):
    """Update vehicle request DTO"""
    model: Optional[str] = None
    category: Optional[VehicleCategory] = None
    daily_rate: Optional[Decimal] = Field(None, ge=0)
    status: Optional[VehicleStatus] = None


class VehicleResponse(BaseModel):
    """Vehicle response DTO"""
    vehicle_id: str
    model: str
    category: str
    daily_rate: Decimal
    status: str


# ============================================================================
# CUSTOMER SCHEMAS
# ============================================================================

class CreateCustomerRequest(BaseModel):
    """Create customer request DTO"""
    customer_id: str = Field(min_length=1, description="NIC or passport number")
    name: str = Field(min_length=1)
    contact_number: str = ""
    email: str = ""


class UpdateCustomerRequest(BaseModel):
    """Update customer request DTO"""
    name: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[str] = None


class CustomerResponse(BaseModel):
    """Customer response DTO"""
    customer_id: str
    name: str
    contact_number: str
    email: str


# ============================================================================
# BOOKING SCHEMAS
# ============================================================================

class CreateBookingRequest(BaseModel):
    """Create booking request DTO"""
    customer_id: str
    vehicle_id: str
    start_date: date
    end_date: date
    total_distance: int = Field(ge=0, default=0)
    booking_id: Optional[str] = None


class UpdateBookingRequest(BaseModel):
    """Update booking request DTO"""
    customer_id: Optional[str] = None
    vehicle_id: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_distance: Optional[int] = Field(None, ge=0)


class BookingResponse(BaseModel):
    """Booking response DTO"""
    booking_id: str
    customer_id: str
    customer_name: str
    vehicle_id: str
    vehicle_model: str
    category: str
    start_date: date
    end_date: date
    days: int
    total_distance: int
    deposit: Decimal
    estimated_total: Decimal
    status: str
    version: int


class ChargeResponse(BaseModel):
    """Itemized charge response DTO"""
    category: str
    pricing_configured: bool
    days: int
    daily_rate: Decimal
    base_price: Decimal
    discount: Decimal
    free_distance: int
    actual_distance: int
    extra_distance: int
    extra_charge: Decimal
    subtotal: Decimal
    tax: Decimal
    deposit: Decimal
    total: Decimal
    amount_due_now: Decimal
    currency: str


class InvoiceResponse(BaseModel):
    """Invoice response DTO"""
    booking_id: str
    customer_id: str
    customer_name: str
    vehicle_id: str
    vehicle_model: str
    start_date: date
    end_date: date
    charges: ChargeResponse


class PricingRuleResponse(BaseModel):
    """Pricing table row DTO"""
    category: str
    daily_rate: Decimal
    free_distance_per_day: int
    extra_distance_rate: Decimal
    tax_rate: Decimal


# ============================================================================
# SEARCH SCHEMAS
# ============================================================================

class BestMatchRequest(BaseModel):
    """Best match request DTO"""
    start_date: date
    end_date: date
    max_budget: Decimal = Field(ge=0)
    preferred_category: Optional[VehicleCategory] = None


# ============================================================================
# AUTH SCHEMAS
# ============================================================================

class Token(BaseModel):
    """Token response DTO"""
    access_token: str
    token_type: str

class TokenData(BaseModel):
    """Token payload DTO"""
    username: Optional[str] = None

class RegisterCustomerRequest(BaseModel):
    """Customer self-registration DTO"""
    username: str = Field(min_length=3)
    password: str = Field(min_length=6)
    customer_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    contact_number: str = ""
    email: str = ""

class RegisterAdminRequest(BaseModel):
    """Administrator registration DTO"""
    username: str = Field(min_length=3)
    password: str = Field(min_length=6)
    employee_id: str

class UserResponse(BaseModel):
    """User response DTO"""
    username: str
    role: str
    employee_id: Optional[str] = None
    customer_id: Optional[str] = None
    disabled: bool


class HealthResponse(BaseModel):
    """Health check DTO"""
    status: str
    vehicles: int
    customers: int
    bookings: int
    orphaned_bookings: List[str] = []
    invalid_date_ranges: List[str] = []
    stranded_vehicles: List[str] = []
