from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    CUSTOMER = "customer"
    RESELLER = "reseller"
    ADMIN = "admin"


class ResellerStage(str, Enum):
    BROWN = "brown"
    SILVER = "silver"
    GOLD = "gold"


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.CUSTOMER   # customer | reseller


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserInDB(BaseModel):
    id: str
    email: EmailStr
    password_hash: str
    role: UserRole

    # reseller lifecycle
    approved: bool
    reseller_stage: Optional[ResellerStage] = None

    created_at: datetime
    updated_at: datetime


class ApprovalUpdate(BaseModel):
    approved: bool


class StageUpdate(BaseModel):
    stage: ResellerStage
