# ila_beauty/routes/uploads.py

from fastapi import APIRouter, Depends, UploadFile, File, HTTPException, status

from ila_beauty.utils.cloudinary import upload_image
from ila_beauty.utils.security import get_current_admin

router = APIRouter(prefix="/uploads", tags=["Uploads"])


def _require_image(file: UploadFile):
    if not file.content_type or not file.content_type.startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only image files are allowed",
        )


# =========================
# UPLOAD PRODUCT IMAGE
# =========================
@router.post("/product-image")
async def upload_product_image(
    file: UploadFile = File(...),
    admin=Depends(get_current_admin),
):
    _require_image(file)

    # nothing is stored here; the admin client sends the URL with the product
    image_url = upload_image(file.file, folder="products")

    return {
        "message": "Product image uploaded",
        "image_url": image_url,
    }


# =========================
# UPLOAD CATEGORY IMAGE
# =========================
@router.post("/category-image")
async def upload_category_image(
    file: UploadFile = File(...),
    admin=Depends(get_current_admin),
):
    _require_image(file)

    image_url = upload_image(file.file, folder="categories")

    return {
        "message": "Category image uploaded",
        "image_url": image_url,
    }
