import os
import time
import uuid
import logging
import aiofiles
from fastapi import HTTPException, UploadFile

from core.config import UPLOAD_DIR, MAX_UPLOAD_BYTES

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
PUBLIC_PREFIX = "/uploads/"


async def read_image(file: UploadFile) -> bytes:
    """Read an uploaded image, rejecting it before anything is stored."""
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type: {file.content_type}. Only images are allowed.",
        )

    # One byte past the limit is enough to know the file is too big
    content = await file.read(MAX_UPLOAD_BYTES + 1)
    if len(content) > MAX_UPLOAD_BYTES:
        logger.info("Rejected upload %s (over %d bytes)", file.filename, MAX_UPLOAD_BYTES)
        raise HTTPException(
            status_code=400,
            detail=f"Image size should be less than {MAX_UPLOAD_BYTES // (1024 * 1024)}MB",
        )
    return content


def _safe_name(filename: str | None) -> str:
    name = os.path.basename(filename or "")
    name = name.replace(" ", "_")
    return name or f"{uuid.uuid4()}.img"


def build_image_path(owner_id: uuid.UUID, filename: str | None) -> str:
    # complaints/<owner>/<epoch ms>_<name>
    return f"complaints/{owner_id}/{int(time.time() * 1000)}_{_safe_name(filename)}"


async def store_image(owner_id: uuid.UUID, filename: str | None, content: bytes) -> str:
    """Write the image under UPLOAD_DIR and return its public URL."""
    relative_path = build_image_path(owner_id, filename)
    full_path = os.path.join(UPLOAD_DIR, relative_path)
    os.makedirs(os.path.dirname(full_path), exist_ok=True)

    async with aiofiles.open(full_path, "wb") as out_file:
        await out_file.write(content)

    logger.info("Stored complaint image %s", relative_path)
    return PUBLIC_PREFIX + relative_path


def delete_image(url: str | None) -> None:
    if not url or not url.startswith(PUBLIC_PREFIX):
        return
    full_path = os.path.join(UPLOAD_DIR, url[len(PUBLIC_PREFIX):])
    try:
        if os.path.exists(full_path):
            os.remove(full_path)
    except OSError as e:
        # The record is already gone; an orphaned file is not worth failing the request
        logger.warning("Could not delete image %s: %s", full_path, e)
