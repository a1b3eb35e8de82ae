"""Image router for uploading post images."""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File

from blog_api.auth import AuthenticatedIdentity, get_current_identity
from blog_api.schemas import ImageUploadResponse
from blog_api import storage

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/post", tags=["Images"])


@router.post("/upload-image", response_model=ImageUploadResponse)
def upload_image(
    image: Optional[UploadFile] = File(None),
    identity: AuthenticatedIdentity = Depends(get_current_identity)
):
    """
    Upload an image to the image host and return its public URL.

    Args:
        image: Uploaded image file (multipart field ``image``)
        identity: Authenticated caller

    Returns:
        ImageUploadResponse: Public URL of the stored image

    Raises:
        HTTPException: If no image is attached or the upload fails
    """
    if image is None or not image.filename:
        logger.warning(f"Image upload without file by user {identity.id}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No image file provided"
        )

    if image.content_type and not image.content_type.startswith("image/"):
        logger.warning(f"Invalid file type uploaded: {image.filename} ({image.content_type})")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded file must be an image"
        )

    logger.info(f"Image upload by user {identity.id}: {image.filename}")
    try:
        url = storage.upload_image(image.file, image.filename)
    except storage.UploadError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload image"
        )

    return {"url": url, "message": "Image uploaded successfully"}
