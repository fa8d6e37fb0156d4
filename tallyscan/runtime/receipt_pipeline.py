"""Runtime helpers for the receipt OCR service (the only I/O boundary)."""

import io
import json
import time
from pathlib import Path
from typing import Any

import httpx

from tallyscan.runtime.logging import get_logger
from tallyscan.runtime.paths import get_paths

logger = get_logger(__name__)

MAX_IMAGE_DIMENSION = 3000  # Resize if either dimension exceeds this
OCR_TIMEOUT_SECONDS = 60.0


class RecognitionFailed(RuntimeError):
    """Raised when the OCR collaborator cannot produce a recognition result."""


def prepare_image_bytes(image_bytes: bytes, max_dimension: int = MAX_IMAGE_DIMENSION) -> bytes:
    """
    Normalize an image for OCR upload.

    Applies EXIF orientation and shrinks the image when either side exceeds
    max_dimension, keeping the aspect ratio.

    Args:
        image_bytes: Image data as bytes
        max_dimension: Maximum allowed dimension (width or height)

    Returns:
        JPEG bytes
    """
    from PIL import Image, ImageOps

    img = Image.open(io.BytesIO(image_bytes))

    # Apply EXIF orientation so fragment coordinates match what the user sees
    img = ImageOps.exif_transpose(img)

    width, height = img.size
    if width > max_dimension or height > max_dimension:
        if width > height:
            new_width = max_dimension
            new_height = int(height * (max_dimension / width))
        else:
            new_height = max_dimension
            new_width = int(width * (max_dimension / height))
        img = img.resize((new_width, new_height), Image.Resampling.LANCZOS)

    buffer = io.BytesIO()
    img.convert("RGB").save(buffer, format="JPEG", quality=95)
    return buffer.getvalue()


async def recognize_receipt(
    image_path: Path,
    ocr_url: str,
    *,
    client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
    """
    Send a receipt image to the OCR service and return its decoded payload.

    Failures are not retried.

    Args:
        image_path: Receipt image on disk
        ocr_url: Base URL of the OCR service (POST {ocr_url}/ocr)
        client: Optional shared client; a short-lived one is used otherwise

    Returns:
        OCR payload as returned by the service

    Raises:
        RecognitionFailed: If the image cannot be read, the service cannot be
            reached, or it answers with an error or a non-JSON body.
    """
    ocr_url = ocr_url.rstrip("/")
    logger.info("Sending receipt to OCR service at %s...", ocr_url)

    try:
        upload_bytes = prepare_image_bytes(image_path.read_bytes())
    except OSError as e:
        raise RecognitionFailed(f"Cannot read receipt image {image_path}: {e}") from e

    files = {"file": (f"{image_path.stem}.jpg", upload_bytes, "image/jpeg")}
    start_time = time.monotonic()
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=OCR_TIMEOUT_SECONDS) as own_client:
                response = await own_client.post(f"{ocr_url}/ocr", files=files)
        else:
            response = await client.post(f"{ocr_url}/ocr", files=files)
    except httpx.RequestError as e:
        logger.error("Failed to connect to OCR service: %s", e)
        raise RecognitionFailed(f"Failed to connect to OCR service: {e}") from e

    logger.info("OCR service returned in %.2f seconds", time.monotonic() - start_time)

    if response.status_code != 200:
        # Response body may hold receipt text; keep it out of the log
        logger.error("OCR service error: %s", response.status_code)
        raise RecognitionFailed(f"OCR service error: {response.status_code}")

    try:
        payload = response.json()
    except ValueError as e:
        raise RecognitionFailed("OCR service returned a non-JSON body") from e
    if not isinstance(payload, dict):
        raise RecognitionFailed("OCR service returned an unexpected payload")
    return payload


def save_ocr_json(ocr_result: dict[str, Any], receipt_path: Path) -> Path:
    """Save OCR result JSON for debugging."""
    ocr_json_dir = get_paths().receipts_ocr_json
    ocr_json_dir.mkdir(parents=True, exist_ok=True)
    ocr_json_path = ocr_json_dir / f"{receipt_path.stem}.json"
    ocr_json_path.write_text(json.dumps(ocr_result, indent=2))
    logger.debug("OCR JSON saved to: %s", ocr_json_path)
    return ocr_json_path
