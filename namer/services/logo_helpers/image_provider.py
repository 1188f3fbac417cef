# /namer/services/logo_helpers/image_provider.py

"""
DALL-E 3 client for logo images.

`generate_image` returns the downloaded bytes plus metadata, or raises a
LogoGenerationError whose `permanent` flag tells the pipeline whether to
stop the whole generation or just skip this logo. No retries are made.
"""

import io
import logging
import time
from typing import Dict, Optional, Tuple

import httpx
from PIL import Image, UnidentifiedImageError

from ...core import config
from ...core.exceptions import LogoGenerationError

logger = logging.getLogger(__name__)

IMAGES_URL = "https://api.openai.com/v1/images/generations"
IMAGE_MODEL = "dall-e-3"
IMAGE_SIZE = "1024x1024"
# $0.04 per standard 1024x1024 image.
COST_CENTS_PER_IMAGE = 4

_EXTENSION_BY_CONTENT_TYPE = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/svg+xml": "svg",
}


def _error_message(response: httpx.Response) -> str:
    try:
        error = response.json().get("error") or {}
        return error.get("message") or response.text
    except ValueError:
        return response.text


def _raise_for_api_error(response: httpx.Response) -> None:
    message = _error_message(response)
    if response.status_code == 429:
        if "quota" in message.lower():
            raise LogoGenerationError.quota_exceeded()
        retry_after = response.headers.get("retry-after")
        raise LogoGenerationError.rate_limited(int(retry_after) if retry_after and retry_after.isdigit() else 60)
    if response.status_code == 401:
        raise LogoGenerationError.authentication_failed()
    if "insufficient_quota" in message.lower() or "insufficient quota" in message.lower():
        raise LogoGenerationError.quota_exceeded()
    raise LogoGenerationError.invalid_response(f"HTTP {response.status_code}: {message}")


def image_dimensions(data: bytes) -> Tuple[Optional[int], Optional[int]]:
    """Width and height read with Pillow; (None, None) for non-raster data."""
    try:
        with Image.open(io.BytesIO(data)) as image:
            return image.width, image.height
    except (UnidentifiedImageError, OSError):
        return None, None


def extension_for(content_type: Optional[str]) -> str:
    media_type = (content_type or "").split(";")[0].strip().lower()
    return _EXTENSION_BY_CONTENT_TYPE.get(media_type, "png")


async def generate_image(prompt: str) -> Dict:
    """
    Requests one image and downloads it.

    Returns {data, extension, image_url, width, height, generation_time_ms,
    cost_cents}.
    """
    if not config.OPENAI_API_KEY:
        raise LogoGenerationError.authentication_failed()

    started = time.perf_counter()
    try:
        async with httpx.AsyncClient(timeout=config.LOGO_REQUEST_TIMEOUT_SECONDS) as client:
            response = await client.post(
                IMAGES_URL,
                headers={
                    "Authorization": f"Bearer {config.OPENAI_API_KEY}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": IMAGE_MODEL,
                    "prompt": prompt,
                    "size": IMAGE_SIZE,
                    "quality": "standard",
                    "n": 1,
                },
            )
            if response.status_code >= 400:
                _raise_for_api_error(response)

            try:
                items = response.json().get("data") or []
            except ValueError as e:
                raise LogoGenerationError.invalid_response("response was not JSON") from e
            if not items or not items[0].get("url"):
                raise LogoGenerationError.invalid_response("no image URL in response")
            image_url = items[0]["url"]

            try:
                image_response = await client.get(image_url)
                image_response.raise_for_status()
            except httpx.HTTPError as e:
                logger.warning("Downloading generated image failed: %s", e)
                raise LogoGenerationError.download_failed(image_url) from e
    except httpx.TransportError as e:
        raise LogoGenerationError.connection_failed(str(e)) from e

    data = image_response.content
    width, height = image_dimensions(data)
    return {
        "data": data,
        "extension": extension_for(image_response.headers.get("content-type")),
        "image_url": image_url,
        "width": width,
        "height": height,
        "generation_time_ms": int((time.perf_counter() - started) * 1000),
        "cost_cents": COST_CENTS_PER_IMAGE,
    }
