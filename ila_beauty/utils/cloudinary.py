import logging

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from fastapi import HTTPException, status

from ila_beauty.config.env import (
    CLOUDINARY_CLOUD_NAME,
    CLOUDINARY_API_KEY,
    CLOUDINARY_API_SECRET,
)

logger = logging.getLogger(__name__)

cloudinary.config(
    cloud_name=CLOUDINARY_CLOUD_NAME,
    api_key=CLOUDINARY_API_KEY,
    api_secret=CLOUDINARY_API_SECRET,
    secure=True,
)

IMAGE_FOLDER = "ila-beauty"


def upload_image(file, folder: str) -> str:
    """Upload to Cloudinary and return the secure URL."""
    if not CLOUDINARY_CLOUD_NAME:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Image uploads are not configured",
        )

    try:
        result = cloudinary.uploader.upload(
            file,
            folder=f"{IMAGE_FOLDER}/{folder}",
            resource_type="image",
        )
    except CloudinaryError:
        logger.exception("IMAGE_UPLOAD_ERROR folder=%s", folder)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Image upload failed",
        )

    url = result.get("secure_url")
    if not url:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Image upload failed",
        )
    return url
