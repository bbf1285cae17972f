from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr

from ila_beauty.config.constants import NEWSLETTER_SUBSCRIBERS, FEATURED_PRODUCTS_LIMIT
from ila_beauty.config.content import HERO, ABOUT, NEWSLETTER
from ila_beauty.database import get_db
from ila_beauty.utils import catalog
from ila_beauty.utils.resellers import programme_tiers
from ila_beauty.utils.validators import normalize_email

router = APIRouter(
    prefix="/public",
    tags=["Public"]
)


class NewsletterSignup(BaseModel):
    email: EmailStr


# ============================================================
# HOME PAGE SECTIONS
# ============================================================

@router.get("/home")
async def home(db=Depends(get_db)):
    return {
        "hero": HERO,
        "categories": await catalog.list_categories(db),
        "featured_products": await catalog.list_products(db, limit=FEATURED_PRODUCTS_LIMIT),
        "about": ABOUT,
        "reseller_program": programme_tiers(),
        "newsletter": NEWSLETTER,
    }


@router.get("/reseller-program")
async def reseller_program():
    return {
        "tiers": programme_tiers(),
        "requires_approval": True,
        "starting_stage": programme_tiers()[0]["stage"],
    }


# ============================================================
# CATALOGUE
# ============================================================

@router.get("/categories")
async def get_categories(db=Depends(get_db)):
    return await catalog.list_categories(db)


@router.get("/products")
async def get_products(
    category_id: Optional[str] = None,
    q: Optional[str] = None,
    db=Depends(get_db),
):
    return await catalog.list_products(db, category_id=category_id, q=q)


@router.get("/products/{product_id}")
async def get_product(product_id: str, db=Depends(get_db)):
    return await catalog.product_detail(db, product_id)


# ============================================================
# NEWSLETTER
# ============================================================

@router.post("/newsletter")
async def subscribe(data: NewsletterSignup, db=Depends(get_db)):
    email = normalize_email(data.email)

    if not await db.get(NEWSLETTER_SUBSCRIBERS, email):
        await db.put(NEWSLETTER_SUBSCRIBERS, email, {
            "email": email,
            "created_at": datetime.utcnow(),
        })

    return {"message": f"You'll receive our newsletter at {email}"}
