"""Image relay to Cloudinary."""

import os
import logging
from typing import BinaryIO
import cloudinary
import cloudinary.uploader
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Configure logging
logger = logging.getLogger(__name__)

UPLOAD_FOLDER = "blog_posts"
ALLOWED_FORMATS = ["jpg", "png", "jpeg"]
TRANSFORMATION = [{"width": 1000, "crop": "limit"}]

cloudinary.config(
    cloud_name=os.getenv("CLOUDINARY_CLOUD_NAME"),
    api_key=os.getenv("CLOUDINARY_API_KEY"),
    api_secret=os.getenv("CLOUDINARY_API_SECRET"),
    secure=True
)


class UploadError(Exception):
    """Raised when the image host rejects or fails an upload."""


def upload_image(file: BinaryIO, filename: str) -> str:
    """
    Upload an image to the blog folder on Cloudinary.

    Images are limited to jpg/png/jpeg and scaled down to at most 1000px wide.

    Args:
        file: Open binary file with the image content
        filename: Original filename, used for logging only

    Returns:
        str: Public HTTPS URL of the uploaded image

    Raises:
        UploadError: If the upload fails
    """
    logger.info(f"Uploading image to Cloudinary: {filename}")
    try:
        result = cloudinary.uploader.upload(
            file,
            folder=UPLOAD_FOLDER,
            allowed_formats=ALLOWED_FORMATS,
            transformation=TRANSFORMATION
        )
    except Exception as e:
        logger.error(f"Cloudinary upload failed for {filename}: {e}")
        raise UploadError(str(e)) from e

    url = result.get("secure_url") or result.get("url")
    if not url:
        logger.error(f"Cloudinary response without URL for {filename}")
        raise UploadError("Upload response did not contain a URL")

    logger.info(f"Image uploaded: {url}")
    return url
