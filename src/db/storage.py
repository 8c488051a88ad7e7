# object storage for product images; files on disk, addressed by file:// URLs
from __future__ import annotations

import asyncio
import base64
import mimetypes
import os
import re
import time
from pathlib import Path
from typing import Optional, Tuple, Union

from db.documents import RemoteError
from utils import config
from utils.logger import get_logger
from utils.validation import ValidationError

_logger = get_logger(__name__)

STORAGE_DIR = config.STORAGE_DIR
MAX_IMAGE_BYTES = 5 * 1024 * 1024

_DATA_URL_RE = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<b64>;base64)?,(?P<body>.*)$", re.S
)


def sanitize_name(name: str) -> str:
    stem = re.sub(r"[^A-Za-z0-9._-]+", "-", name).strip("-.")
    return stem.lower() or "image"


def decode_data_url(data_url: str) -> Tuple[bytes, Optional[str]]:
    """Split a `data:` URL into (payload bytes, mime type)."""
    match = _DATA_URL_RE.match(data_url)
    if not match:
        raise ValueError("Not a data URL")
    body = match.group("body")
    if match.group("b64"):
        return base64.b64decode(body, validate=True), match.group("mime")
    return body.encode("utf-8"), match.group("mime")


def object_path(
    product_id: Optional[str], filename: Optional[str], ext: str, now_ms: int
) -> str:
    """Storage key: per-product folder when the id is known, else a named file."""
    if product_id:
        return f"products/{product_id}/{now_ms}"
    name = os.path.splitext(os.path.basename(filename or "image"))[0]
    return f"products/{now_ms}-{sanitize_name(name)}.{ext}"


def validate_image_file(path: str) -> None:
    """Reject anything that isn't an existing image file of at most 5MB."""
    if not os.path.isfile(path):
        raise ValidationError(f"File not found: {path}")
    mime, _ = mimetypes.guess_type(path)
    if not mime or not mime.startswith("image/"):
        raise ValidationError("Please upload only image files.")
    if os.path.getsize(path) > MAX_IMAGE_BYTES:
        raise ValidationError("Image size should be less than 5MB.")


def _write(key: str, payload: bytes) -> str:
    target = Path(STORAGE_DIR, *key.split("/")).resolve()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(payload)
    return target.as_uri()


async def upload_image(
    content: Union[bytes, str],
    product_id: Optional[str] = None,
    filename: Optional[str] = None,
) -> str:
    """
    Store an image given as raw bytes or a data URL; return its public URL.

    The object lands at products/{product_id}/{timestamp} when the product
    is known, otherwise at products/{timestamp}-{name}.{ext}.
    """
    try:
        if isinstance(content, str):
            payload, mime = decode_data_url(content)
        else:
            payload, mime = content, None
        if mime is None and filename:
            mime, _ = mimetypes.guess_type(filename)
        ext = (mimetypes.guess_extension(mime or "") or ".bin").lstrip(".")
        if ext == "jpe":
            ext = "jpg"
        key = object_path(product_id, filename, ext, int(time.time() * 1000))
        url = await asyncio.to_thread(_write, key, payload)
    except (ValueError, OSError) as e:
        _logger.error(f"Error uploading image: {e}")
        raise RemoteError("Failed to upload image") from e
    _logger.info(f"Uploaded image to {key}")
    return url


async def upload_image_file(path: str, product_id: Optional[str] = None) -> str:
    validate_image_file(path)
    try:
        payload = await asyncio.to_thread(Path(path).read_bytes)
    except OSError as e:
        _logger.error(f"Error reading {path}: {e}")
        raise RemoteError("Failed to upload image") from e
    return await upload_image(payload, product_id=product_id, filename=path)
