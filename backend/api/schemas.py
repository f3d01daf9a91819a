# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the /api endpoints."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from auth.schemas import EMAIL_PATTERN, UserPublic


# -- Users -----------------------------------------------------------------


class UserCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6)
    role: Literal["admin", "user"] = "user"


class UserListResponse(BaseModel):
    success: bool = True
    data: List[UserPublic]
    count: int


class UserResponse(BaseModel):
    success: bool = True
    data: UserPublic
    message: Optional[str] = None


# -- Products --------------------------------------------------------------


class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    price: float = Field(ge=0)
    category: str = Field(min_length=1)
    stock: int = Field(ge=0)


class ProductUpdate(BaseModel):
    # Only the fields that are sent are changed
    name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = Field(default=None, min_length=1)
    stock: Optional[int] = Field(default=None, ge=0)


class ProductOut(BaseModel):
    id: int
    name: str
    price: float
    category: str
    stock: int

    model_config = {"from_attributes": True}


class ProductListResponse(BaseModel):
    success: bool = True
    data: List[ProductOut]
    count: int
    total: int


class ProductResponse(BaseModel):
    success: bool = True
    data: ProductOut
    message: Optional[str] = None
