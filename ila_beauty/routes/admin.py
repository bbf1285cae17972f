from fastapi import APIRouter, Depends, HTTPException
from datetime import datetime
from typing import Optional

from ila_beauty.config.constants import USERS, PRODUCTS, CATEGORIES
from ila_beauty.database import get_db
from ila_beauty.models.product import (
    CategoryCreate,
    CategoryUpdate,
    ProductCreate,
    ProductUpdate,
)
from ila_beauty.models.user import ApprovalUpdate, StageUpdate, UserRole
from ila_beauty.utils import catalog
from ila_beauty.utils.resellers import list_resellers, set_approval, set_stage
from ila_beauty.utils.security import get_current_admin
from ila_beauty.utils.serializers import serialize_user


router = APIRouter(prefix="/admin", tags=["Admin"])


# =====================================================
# DASHBOARD
# =====================================================

@router.get("/dashboard")
async def dashboard(
    admin=Depends(get_current_admin),
    db=Depends(get_db),
):
    customers = await db.query(USERS, {"role": UserRole.CUSTOMER.value})
    resellers = await db.query(USERS, {"role": UserRole.RESELLER.value})
    products = await db.query(PRODUCTS)
    categories = await db.query(CATEGORIES)

    return {
        "summary": {
            "customers": len(customers),
            "resellers_pending": sum(1 for r in resellers if not r.get("approved")),
            "resellers_approved": sum(1 for r in resellers if r.get("approved")),
            "products": len(products),
            "categories": len(categories),
        },
        "generated_at": datetime.utcnow(),
    }


# =====================================================
# USERS
# =====================================================

@router.get("/users")
async def list_users(
    role: Optional[UserRole] = None,
    admin=Depends(get_current_admin),
    db=Depends(get_db),
):
    query = {"role": role.value} if role else {}
    users = await db.query(USERS, query, sort=[("created_at", 1)])

    return {
        "count": len(users),
        "users": [serialize_user(u) for u in users],
    }


# =====================================================
# RESELLER MANAGEMENT
# =====================================================

@router.get("/resellers")
async def resellers(
    status: Optional[str] = None,
    admin=Depends(get_current_admin),
    db=Depends(get_db),
):
    rows = await list_resellers(db, status)

    return {
        "count": len(rows),
        "resellers": [serialize_user(r) for r in rows],
    }


@router.post("/resellers/{user_id}/approval")
async def update_approval(
    user_id: str,
    data: ApprovalUpdate,
    admin=Depends(get_current_admin),
    db=Depends(get_db),
):
    user = await set_approval(db, user_id, data.approved, admin)

    return {
        "message": "Reseller approved" if data.approved else "Reseller approval revoked",
        "user": serialize_user(user),
    }


@router.post("/resellers/{user_id}/stage")
async def update_stage(
    user_id: str,
    data: StageUpdate,
    admin=Depends(get_current_admin),
    db=Depends(get_db),
):
    user = await set_stage(db, user_id, data.stage, admin)

    return {
        "message": f"Reseller updated to {user['reseller_stage']} level",
        "user": serialize_user(user),
    }


# =====================================================
# CATEGORIES
# =====================================================

@router.get("/categories")
async def admin_categories(
    admin=Depends(get_current_admin),
    db=Depends(get_db),
):
    return await catalog.list_categories(db)


@router.post("/categories", status_code=201)
async def create_category(
    data: CategoryCreate,
    admin=Depends(get_current_admin),
    db=Depends(get_db),
):
    return await catalog.create_category(db, data, admin)


@router.put("/categories/{category_id}")
async def update_category(
    category_id: str,
    data: CategoryUpdate,
    admin=Depends(get_current_admin),
    db=Depends(get_db),
):
    return await catalog.update_category(db, category_id, data, admin)


@router.delete("/categories/{category_id}")
async def delete_category(
    category_id: str,
    admin=Depends(get_current_admin),
    db=Depends(get_db),
):
    return await catalog.delete_category(db, category_id, admin)


# =====================================================
# PRODUCTS
# =====================================================

@router.get("/products")
async def admin_products(
    category_id: Optional[str] = None,
    admin=Depends(get_current_admin),
    db=Depends(get_db),
):
    return await catalog.list_products(db, category_id=category_id)


@router.post("/products", status_code=201)
async def create_product(
    data: ProductCreate,
    admin=Depends(get_current_admin),
    db=Depends(get_db),
):
    return await catalog.create_product(db, data, admin)


@router.put("/products/{product_id}")
async def update_product(
    product_id: str,
    data: ProductUpdate,
    admin=Depends(get_current_admin),
    db=Depends(get_db),
):
    if not data.model_dump(exclude_unset=True):
        raise HTTPException(400, "Nothing to update")

    return await catalog.update_product(db, product_id, data, admin)


@router.delete("/products/{product_id}")
async def delete_product(
    product_id: str,
    admin=Depends(get_current_admin),
    db=Depends(get_db),
):
    return await catalog.delete_product(db, product_id, admin)
