# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
General resource endpoints – the user directory and product CRUD.

Reads are public.  Every write requires a bearer token; products have no
owner, so being authenticated is enough to change them.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from api.schemas import (
    ProductCreate,
    ProductListResponse,
    ProductOut,
    ProductResponse,
    ProductUpdate,
    UserCreate,
    UserListResponse,
    UserResponse,
)
from auth.credentials import CredentialStore
from auth.schemas import UserPublic
from core.container import get_credential_store, get_product_repository
from core.errors import ForbiddenError, ProductNotFound, RecordNotFoundError
from core.logger import logger
from core.policy import can_assign_role, ensure_can_mutate_global
from core.security import TokenClaims, get_current_user
from models.product import Product
from repositories.base import Repository

router = APIRouter(prefix="/api", tags=["api"])


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@router.get("/users", response_model=UserListResponse)
def list_users(credentials: CredentialStore = Depends(get_credential_store)):
    users = [UserPublic.model_validate(u) for u in credentials.list()]
    return UserListResponse(data=users, count=len(users))


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(user_id: int, credentials: CredentialStore = Depends(get_credential_store)):
    return UserResponse(data=UserPublic.model_validate(credentials.get(user_id)))


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    current_user: TokenClaims = Depends(get_current_user),
    credentials: CredentialStore = Depends(get_credential_store),
):
    """Create an account on someone else's behalf.  Only admins may create admins."""
    ensure_can_mutate_global(current_user)
    if not can_assign_role(current_user, body.role):
        raise ForbiddenError("Admin access required to create an admin")

    user = credentials.register(
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role,
    )
    return UserResponse(
        data=UserPublic.model_validate(user),
        message="User created successfully",
    )


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


def _get_product(product_id: int, products: Repository) -> Product:
    product = products.get(product_id)
    if product is None:
        raise ProductNotFound()
    return product


@router.get("/products", response_model=ProductListResponse)
def list_products(
    category: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=0),
    products: Repository = Depends(get_product_repository),
):
    """List products, optionally filtered by category substring and truncated."""
    everything = products.list()
    selected = everything
    if category:
        needle = category.lower()
        selected = [p for p in selected if needle in p.category.lower()]
    if limit is not None:
        selected = selected[:limit]
    return ProductListResponse(
        data=[ProductOut.model_validate(p) for p in selected],
        count=len(selected),
        total=len(everything),
    )


@router.get("/products/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, products: Repository = Depends(get_product_repository)):
    return ProductResponse(data=ProductOut.model_validate(_get_product(product_id, products)))


@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    body: ProductCreate,
    current_user: TokenClaims = Depends(get_current_user),
    products: Repository = Depends(get_product_repository),
):
    ensure_can_mutate_global(current_user)
    product = products.put(Product(**body.model_dump()))
    logger.info("Product created: %s (id=%s) by user %s", product.name, product.id, current_user.id)
    return ProductResponse(
        data=ProductOut.model_validate(product),
        message="Product created successfully",
    )


@router.put("/products/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    body: ProductUpdate,
    current_user: TokenClaims = Depends(get_current_user),
    products: Repository = Depends(get_product_repository),
):
    """Partial update.  Fields left out (or null) keep their value; the id never changes."""
    ensure_can_mutate_global(current_user)
    current = _get_product(product_id, products)

    values = ProductOut.model_validate(current).model_dump()
    values.update(body.model_dump(exclude_none=True))
    values["id"] = product_id
    product = products.put(Product(**values))

    logger.info("Product updated: %s (id=%s) by user %s", product.name, product_id, current_user.id)
    return ProductResponse(
        data=ProductOut.model_validate(product),
        message="Product updated successfully",
    )


@router.delete("/products/{product_id}")
def delete_product(
    product_id: int,
    current_user: TokenClaims = Depends(get_current_user),
    products: Repository = Depends(get_product_repository),
):
    ensure_can_mutate_global(current_user)
    try:
        product = products.delete(product_id)
    except RecordNotFoundError as exc:
        raise ProductNotFound() from exc
    logger.info("Product deleted: %s (id=%s) by user %s", product.name, product_id, current_user.id)
    return {"success": True, "message": "Product deleted successfully"}
