"""Domain Entities - Auth"""
from pydantic import BaseModel, validator
from typing import Optional

from domain.entities import check_plain_text
from domain.enums import UserRole


class User(BaseModel):
    """User Entity - the caller identity handed to the engine"""
    username: str
    role: UserRole = UserRole.CUSTOMER
    employee_id: Optional[str] = None
    customer_id: Optional[str] = None
    disabled: bool = False

    @validator('username', 'employee_id', 'customer_id')
    def plain_text_fields(cls, v):
        return check_plain_text("User details", v)

    class Config:
        from_attributes = True

    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class UserInDB(User):
    """User with hashed password for storage"""
    hashed_password: str
